"""Tests for proposal request models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from multisig_core.ledger.programs import SYSTEM_PROGRAM_ID
from multisig_core.models.client import ProposalRequest

from .test_utils import make_key


def request_dict(**overrides) -> dict:
    data = {
        "program_id": SYSTEM_PROGRAM_ID.payload.hex(),
        "accounts": [
            {"pubkey": make_key("src").payload.hex(), "is_signer": True, "is_writable": True},
            {"pubkey": make_key("dst").payload.hex(), "is_writable": True},
        ],
        "payload": (5).to_bytes(8, "little").hex(),
    }
    data.update(overrides)
    return data


class TestProposalRequest:
    def test_to_target_action(self) -> None:
        action = ProposalRequest.model_validate(request_dict()).to_target_action()

        assert action.program_id == SYSTEM_PROGRAM_ID
        assert action.accounts[0].pubkey == make_key("src")
        assert action.accounts[0].is_signer
        assert not action.accounts[1].is_signer
        assert action.payload == (5).to_bytes(8, "little")

    def test_defaults(self) -> None:
        request = ProposalRequest.model_validate(
            {"program_id": make_key("target").payload.hex()}
        )
        action = request.to_target_action()
        assert action.accounts == []
        assert action.payload == b""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"program_id": "abcd"},
            {"program_id": "zz" * 32},
            {"payload": "abc"},
            {"accounts": [{"pubkey": "00" * 31}]},
            {"unexpected": 1},
        ],
    )
    def test_rejects_invalid(self, overrides: dict) -> None:
        with pytest.raises(ValidationError):
            ProposalRequest.model_validate(request_dict(**overrides))

    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "request.json"
        path.write_text(json.dumps(request_dict()))
        request = ProposalRequest.from_file(path)
        assert len(request.accounts) == 2
