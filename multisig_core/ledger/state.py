"""In-memory host ledger: account storage, atomic steps and program dispatch."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any

from multisig_core.ledger.clock import Clock, SystemClock
from multisig_core.ledger.exceptions import (
    AccountExistsError,
    AccountNotFoundError,
    InsufficientFundsError,
    MissingSignatureError,
    OwnershipError,
    ProgramNotFoundError,
)
from multisig_core.ledger.programs import SYSTEM_PROGRAM_ID, Program
from multisig_core.models.account_metas import AccountMeta
from multisig_core.models.base import PosixTime, PublicKey

logger = logging.getLogger(__name__)


@dataclass
class AccountRecord:
    """Balance and raw data held at one address"""

    owner: PublicKey
    balance: int = 0
    data: bytes = b""

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner": self.owner.payload.hex(),
            "balance": self.balance,
            "data": self.data.hex(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccountRecord":
        return cls(
            owner=PublicKey.from_hex(data["owner"]),
            balance=int(data.get("balance", 0)),
            data=bytes.fromhex(data.get("data", "")),
        )


class Ledger:
    """Serialized, all-or-nothing account store shared by registered programs.

    Every mutating call runs inside :meth:`atomic`. Nested steps each keep
    their own snapshot, so a failing inner dispatch rolls back only what it
    touched unless the error keeps propagating.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self.clock = clock or SystemClock()
        self._accounts: dict[bytes, AccountRecord] = {}
        self._programs: dict[bytes, Program] = {}
        self._lock = threading.RLock()
        self._call_stack: list[PublicKey] = []

    def now(self) -> PosixTime:
        return self.clock.now()

    @contextmanager
    def atomic(self) -> Iterator["Ledger"]:
        """Run a step under the ledger lock, restoring all accounts on error."""
        with self._lock:
            snapshot = {addr: replace(rec) for addr, rec in self._accounts.items()}
            try:
                yield self
            except BaseException:
                logger.debug("Rolling back ledger step")
                self._accounts = snapshot
                raise

    # Programs

    def register_program(self, program: Program) -> None:
        self._programs[program.program_id.payload] = program
        logger.debug("Registered program %s", program.program_id)

    def get_program(self, program_id: PublicKey) -> Program:
        try:
            return self._programs[program_id.payload]
        except KeyError as e:
            raise ProgramNotFoundError(f"Program not found: {program_id}") from e

    @property
    def call_stack(self) -> tuple[PublicKey, ...]:
        return tuple(self._call_stack)

    def invoke(
        self,
        program_id: PublicKey,
        accounts: list[AccountMeta],
        payload: bytes,
        signers: set[PublicKey] | frozenset[PublicKey],
    ) -> None:
        """Dispatch an instruction to a registered program.

        Args:
            program_id: Program to run
            accounts: Account metas passed to the program
            payload: Opaque instruction data
            signers: Keys that authorized this invocation

        Raises:
            ProgramNotFoundError: If the program is not registered
            MissingSignatureError: If a signer meta has no matching authority
        """
        program = self.get_program(program_id)
        authorized = frozenset(signers)
        for meta in accounts:
            if meta.is_signer and meta.pubkey not in authorized:
                raise MissingSignatureError(f"Missing signature for {meta.pubkey}")

        with self.atomic():
            self._call_stack.append(program_id)
            try:
                logger.debug(
                    "Invoking %s with %d accounts (depth %d)",
                    program_id,
                    len(accounts),
                    len(self._call_stack),
                )
                program.process(self, accounts, payload, authorized)
            finally:
                self._call_stack.pop()

    # Accounts

    def has_account(self, address: PublicKey) -> bool:
        return address.payload in self._accounts

    def _record(self, address: PublicKey) -> AccountRecord:
        try:
            return self._accounts[address.payload]
        except KeyError as e:
            raise AccountNotFoundError(f"Account not found: {address}") from e

    def get_account(self, address: PublicKey) -> AccountRecord:
        return replace(self._record(address))

    def read_data(self, address: PublicKey) -> bytes:
        return self._record(address).data

    def balance(self, address: PublicKey) -> int:
        if not self.has_account(address):
            return 0
        return self._record(address).balance

    def create_account(
        self,
        address: PublicKey,
        owner: PublicKey,
        data: bytes = b"",
        balance: int = 0,
    ) -> None:
        with self.atomic():
            if self.has_account(address):
                raise AccountExistsError(f"Account already exists: {address}")
            self._accounts[address.payload] = AccountRecord(owner, balance, data)

    def write_data(self, address: PublicKey, data: bytes, program_id: PublicKey) -> None:
        with self.atomic():
            record = self._record(address)
            if record.owner != program_id:
                raise OwnershipError(f"{program_id} does not own account {address}")
            record.data = data

    def airdrop(self, address: PublicKey, amount: int) -> None:
        if amount < 0:
            raise ValueError("Airdrop amount must not be negative")
        with self.atomic():
            if not self.has_account(address):
                self._accounts[address.payload] = AccountRecord(SYSTEM_PROGRAM_ID)
            self._record(address).balance += amount

    def transfer(self, source: PublicKey, destination: PublicKey, amount: int) -> None:
        if amount < 0:
            raise ValueError("Transfer amount must not be negative")
        with self.atomic():
            src = self._record(source)
            if src.balance < amount:
                raise InsufficientFundsError(
                    f"Account {source} holds {src.balance}, needs {amount}"
                )
            if not self.has_account(destination):
                self._accounts[destination.payload] = AccountRecord(SYSTEM_PROGRAM_ID)
            src.balance -= amount
            self._record(destination).balance += amount

    def close_account(
        self, address: PublicKey, receiver: PublicKey, program_id: PublicKey
    ) -> int:
        """Delete an account and move its balance to the receiver.

        Returns:
            int: Amount released to the receiver
        """
        with self.atomic():
            record = self._record(address)
            if record.owner != program_id:
                raise OwnershipError(f"{program_id} does not own account {address}")
            released = record.balance
            del self._accounts[address.payload]
            self.airdrop(receiver, released)
            return released

    def accounts_owned_by(
        self, program_id: PublicKey
    ) -> list[tuple[PublicKey, AccountRecord]]:
        return [
            (PublicKey(addr), replace(rec))
            for addr, rec in self._accounts.items()
            if rec.owner == program_id
        ]

    # Persistence

    def to_dict(self) -> dict[str, Any]:
        return {addr.hex(): rec.to_dict() for addr, rec in self._accounts.items()}

    def load_dict(self, data: dict[str, Any]) -> None:
        with self.atomic():
            self._accounts = {
                bytes.fromhex(addr): AccountRecord.from_dict(rec)
                for addr, rec in data.items()
            }
