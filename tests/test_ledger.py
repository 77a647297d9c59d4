"""Tests for the in-memory host ledger."""

import json
from pathlib import Path

import pytest

from multisig_core.ledger.clock import FixedClock
from multisig_core.ledger.exceptions import (
    AccountExistsError,
    AccountNotFoundError,
    InsufficientFundsError,
    MissingSignatureError,
    OwnershipError,
    ProgramError,
    ProgramNotFoundError,
    StoreError,
)
from multisig_core.ledger.programs import SYSTEM_PROGRAM_ID, SystemTransferProgram
from multisig_core.ledger.state import Ledger
from multisig_core.ledger.store import LedgerStore
from multisig_core.models.account_metas import AccountMeta

from .test_utils import START_TIME, make_key


class TestLedger:
    def setup_method(self, method) -> None:
        self.ledger = Ledger(clock=FixedClock(START_TIME))
        self.ledger.register_program(SystemTransferProgram())
        self.alice = make_key("alice")
        self.bob = make_key("bob")
        self.owner = make_key("owner-program")

    def test_clock(self) -> None:
        assert self.ledger.now() == START_TIME
        self.ledger.clock.advance(10)
        assert self.ledger.now() == START_TIME + 10

    def test_create_and_read(self) -> None:
        self.ledger.create_account(self.alice, self.owner, b"data", balance=5)
        record = self.ledger.get_account(self.alice)
        assert record.owner == self.owner
        assert record.data == b"data"
        assert self.ledger.balance(self.alice) == 5

    def test_create_twice_fails(self) -> None:
        self.ledger.create_account(self.alice, self.owner)
        with pytest.raises(AccountExistsError):
            self.ledger.create_account(self.alice, self.owner)

    def test_missing_account(self) -> None:
        with pytest.raises(AccountNotFoundError):
            self.ledger.read_data(self.alice)
        assert self.ledger.balance(self.alice) == 0

    def test_write_requires_owner(self) -> None:
        self.ledger.create_account(self.alice, self.owner, b"v1")
        with pytest.raises(OwnershipError):
            self.ledger.write_data(self.alice, b"v2", make_key("intruder"))
        self.ledger.write_data(self.alice, b"v2", self.owner)
        assert self.ledger.read_data(self.alice) == b"v2"

    def test_transfer(self) -> None:
        self.ledger.airdrop(self.alice, 100)
        self.ledger.transfer(self.alice, self.bob, 40)
        assert self.ledger.balance(self.alice) == 60
        assert self.ledger.balance(self.bob) == 40
        assert self.ledger.get_account(self.bob).owner == SYSTEM_PROGRAM_ID

    def test_transfer_insufficient_funds(self) -> None:
        self.ledger.airdrop(self.alice, 10)
        with pytest.raises(InsufficientFundsError):
            self.ledger.transfer(self.alice, self.bob, 11)
        assert self.ledger.balance(self.alice) == 10

    def test_atomic_rolls_back_on_error(self) -> None:
        self.ledger.airdrop(self.alice, 100)
        with pytest.raises(RuntimeError):
            with self.ledger.atomic():
                self.ledger.transfer(self.alice, self.bob, 50)
                self.ledger.create_account(make_key("new"), self.owner)
                raise RuntimeError("abort")

        assert self.ledger.balance(self.alice) == 100
        assert not self.ledger.has_account(self.bob)
        assert not self.ledger.has_account(make_key("new"))

    def test_nested_atomic_keeps_outer_changes_when_inner_error_is_handled(self) -> None:
        self.ledger.airdrop(self.alice, 100)
        with self.ledger.atomic():
            self.ledger.transfer(self.alice, self.bob, 30)
            try:
                with self.ledger.atomic():
                    self.ledger.transfer(self.alice, self.bob, 30)
                    raise RuntimeError("inner")
            except RuntimeError:
                pass

        assert self.ledger.balance(self.alice) == 70
        assert self.ledger.balance(self.bob) == 30

    def test_close_account_releases_balance(self) -> None:
        self.ledger.create_account(self.alice, self.owner, balance=25)
        released = self.ledger.close_account(self.alice, self.bob, self.owner)
        assert released == 25
        assert self.ledger.balance(self.bob) == 25
        assert not self.ledger.has_account(self.alice)

    def test_close_account_into_itself_keeps_balance(self) -> None:
        self.ledger.create_account(self.alice, self.owner, b"data", balance=25)
        released = self.ledger.close_account(self.alice, self.alice, self.owner)

        assert released == 25
        assert self.ledger.balance(self.alice) == 25
        record = self.ledger.get_account(self.alice)
        assert record.owner == SYSTEM_PROGRAM_ID
        assert record.data == b""

    def test_accounts_owned_by(self) -> None:
        self.ledger.create_account(self.alice, self.owner)
        self.ledger.create_account(self.bob, make_key("other"))
        owned = self.ledger.accounts_owned_by(self.owner)
        assert [address for address, _ in owned] == [self.alice]


class TestInvoke:
    def setup_method(self, method) -> None:
        self.ledger = Ledger(clock=FixedClock(START_TIME))
        self.ledger.register_program(SystemTransferProgram())
        self.alice = make_key("alice")
        self.bob = make_key("bob")
        self.ledger.airdrop(self.alice, 100)

    def test_transfer_program(self) -> None:
        action = SystemTransferProgram.transfer_action(self.alice, self.bob, 60)
        self.ledger.invoke(
            action.program_id, action.accounts, action.payload, signers={self.alice}
        )
        assert self.ledger.balance(self.alice) == 40
        assert self.ledger.balance(self.bob) == 60

    def test_signer_meta_requires_authority(self) -> None:
        action = SystemTransferProgram.transfer_action(self.alice, self.bob, 60)
        with pytest.raises(MissingSignatureError):
            self.ledger.invoke(
                action.program_id, action.accounts, action.payload, signers={self.bob}
            )
        assert self.ledger.balance(self.alice) == 100

    def test_unknown_program(self) -> None:
        with pytest.raises(ProgramNotFoundError):
            self.ledger.invoke(make_key("nowhere"), [], b"", signers=set())

    def test_transfer_rejects_bad_payload(self) -> None:
        metas = [
            AccountMeta(self.alice, is_signer=True, is_writable=True),
            AccountMeta(self.bob, is_writable=True),
        ]
        with pytest.raises(ProgramError):
            self.ledger.invoke(SYSTEM_PROGRAM_ID, metas, b"\x01", signers={self.alice})

    def test_transfer_rejects_readonly_destination(self) -> None:
        metas = [
            AccountMeta(self.alice, is_signer=True, is_writable=True),
            AccountMeta(self.bob),
        ]
        with pytest.raises(ProgramError):
            self.ledger.invoke(
                SYSTEM_PROGRAM_ID, metas, (1).to_bytes(8, "little"), signers={self.alice}
            )

    def test_call_stack_is_empty_after_invoke(self) -> None:
        action = SystemTransferProgram.transfer_action(self.alice, self.bob, 1)
        self.ledger.invoke(
            action.program_id, action.accounts, action.payload, signers={self.alice}
        )
        assert self.ledger.call_stack == ()


class TestLedgerStore:
    def test_save_and_load(self, tmp_path: Path) -> None:
        ledger = Ledger(clock=FixedClock(START_TIME))
        ledger.create_account(make_key("a"), make_key("owner"), b"\x01\x02", balance=9)

        store = LedgerStore(tmp_path / "ledger.json")
        store.save(ledger)
        restored = store.load(clock=FixedClock(START_TIME))

        record = restored.get_account(make_key("a"))
        assert record.data == b"\x01\x02"
        assert record.balance == 9
        assert record.owner == make_key("owner")

    def test_missing_file_gives_empty_ledger(self, tmp_path: Path) -> None:
        ledger = LedgerStore(tmp_path / "absent.json").load()
        assert ledger.to_dict() == {}

    def test_rejects_unknown_version(self, tmp_path: Path) -> None:
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps({"version": 99, "accounts": {}}))
        with pytest.raises(StoreError):
            LedgerStore(path).load()

    def test_rejects_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "ledger.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            LedgerStore(path).load()
