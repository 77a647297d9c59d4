"""Program interface for opaque target actions and the built-in transfer program."""

import logging
from typing import TYPE_CHECKING, Protocol

from multisig_core.ledger.exceptions import ProgramError
from multisig_core.models.account_metas import AccountMeta, TargetAction
from multisig_core.models.base import KEY_SIZE, PublicKey

if TYPE_CHECKING:
    from multisig_core.ledger.state import Ledger

logger = logging.getLogger(__name__)

SYSTEM_PROGRAM_ID = PublicKey(bytes(KEY_SIZE))

TRANSFER_PAYLOAD_SIZE = 8


class Program(Protocol):
    """Anything the ledger can dispatch an instruction to."""

    program_id: PublicKey

    def process(
        self,
        ledger: "Ledger",
        accounts: list[AccountMeta],
        payload: bytes,
        signers: frozenset[PublicKey],
    ) -> None: ...


class SystemTransferProgram:
    """Moves balance from a writable signer account to a writable account.

    Payload is the amount as an unsigned 64-bit little-endian integer.
    """

    program_id = SYSTEM_PROGRAM_ID

    def process(
        self,
        ledger: "Ledger",
        accounts: list[AccountMeta],
        payload: bytes,
        signers: frozenset[PublicKey],
    ) -> None:
        if len(payload) != TRANSFER_PAYLOAD_SIZE:
            raise ProgramError(
                f"Transfer payload must be {TRANSFER_PAYLOAD_SIZE} bytes, got {len(payload)}"
            )
        if len(accounts) < 2:
            raise ProgramError("Transfer needs a source and a destination account")

        source, destination = accounts[0], accounts[1]
        if not (source.is_signer and source.is_writable):
            raise ProgramError("Transfer source must be a writable signer")
        if not destination.is_writable:
            raise ProgramError("Transfer destination must be writable")

        amount = int.from_bytes(payload, "little")
        ledger.transfer(source.pubkey, destination.pubkey, amount)
        logger.info(
            "Transferred %d from %s to %s", amount, source.pubkey, destination.pubkey
        )

    @staticmethod
    def transfer_action(
        source: PublicKey, destination: PublicKey, amount: int
    ) -> TargetAction:
        """Build the target action for a transfer."""
        return TargetAction(
            program_id=SYSTEM_PROGRAM_ID,
            accounts=[
                AccountMeta(source, is_signer=True, is_writable=True),
                AccountMeta(destination, is_signer=False, is_writable=True),
            ],
            payload=amount.to_bytes(TRANSFER_PAYLOAD_SIZE, "little"),
        )
