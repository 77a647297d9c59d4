"""Request models for building proposals from JSON files."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from multisig_core.models.account_metas import AccountMeta, TargetAction
from multisig_core.models.base import KEY_SIZE, PublicKey


def _parse_hex(value: Any, size: int | None = None) -> str:
    if not isinstance(value, str):
        raise ValueError("must be a hex string")
    try:
        raw = bytes.fromhex(value)
    except ValueError as e:
        raise ValueError(f"invalid hex: {value!r}") from e
    if size is not None and len(raw) != size:
        raise ValueError(f"must be {size} bytes, got {len(raw)}")
    return value.lower()


class AccountMetaModel(BaseModel):
    """Account reference in a proposal request"""

    pubkey: str = Field(..., description="Hex-encoded 32-byte account key")
    is_signer: bool = Field(False, description="Account must authorize the action")
    is_writable: bool = Field(False, description="Account may be modified")

    @field_validator("pubkey", mode="before")
    @classmethod
    def check_pubkey(cls, value: Any) -> str:
        return _parse_hex(value, KEY_SIZE)

    def to_account_meta(self) -> AccountMeta:
        return AccountMeta(
            pubkey=PublicKey.from_hex(self.pubkey),
            is_signer=self.is_signer,
            is_writable=self.is_writable,
        )


class ProposalRequest(BaseModel):
    """Target action a signer wants the group to authorize"""

    model_config = ConfigDict(extra="forbid")

    program_id: str = Field(..., description="Hex-encoded target program id")
    accounts: list[AccountMetaModel] = Field(default_factory=list)
    payload: str = Field("", description="Hex-encoded opaque payload")

    @field_validator("program_id", mode="before")
    @classmethod
    def check_program_id(cls, value: Any) -> str:
        return _parse_hex(value, KEY_SIZE)

    @field_validator("payload", mode="before")
    @classmethod
    def check_payload(cls, value: Any) -> str:
        return _parse_hex(value)

    def to_target_action(self) -> TargetAction:
        return TargetAction(
            program_id=PublicKey.from_hex(self.program_id),
            accounts=[meta.to_account_meta() for meta in self.accounts],
            payload=bytes.fromhex(self.payload),
        )

    @classmethod
    def from_file(cls, path: Path | str) -> "ProposalRequest":
        with Path(path).open("r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))
