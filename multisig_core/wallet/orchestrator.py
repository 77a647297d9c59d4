"""Multisig wallet orchestrator"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from multisig_core.constants.status import ProcessStatus
from multisig_core.ledger.exceptions import LedgerError
from multisig_core.models.account_metas import (
    AccountMeta,
    TargetAction,
    decode_account_metas,
)
from multisig_core.models.base import PosixTime, PublicKey
from multisig_core.models.wallet_datums import GroupConfigDatum, ProposalDatum
from multisig_core.wallet.exceptions import MultisigError
from multisig_core.wallet.program import MultisigProgram

logger = logging.getLogger(__name__)


@dataclass
class WalletResult:
    """Result of a wallet operation"""

    status: ProcessStatus
    address: PublicKey | None = None
    group: GroupConfigDatum | None = None
    proposal: ProposalDatum | None = None
    released: int | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status != ProcessStatus.FAILED


class WalletOrchestrator:
    """Coordinates multisig operations and reports progress to a callback."""

    def __init__(
        self,
        program: MultisigProgram,
        status_callback: Callable[[ProcessStatus, str], None] | None = None,
    ) -> None:
        self.program = program
        self.status_callback = status_callback
        self.current_status = ProcessStatus.NOT_STARTED

    def _update_status(self, status: ProcessStatus, message: str = "") -> None:
        """Update process status and notify callback."""
        self.current_status = status
        if self.status_callback:
            self.status_callback(status, message)

    def _failed(self, operation: str, error: Exception) -> WalletResult:
        logger.error("%s failed: %s", operation, error)
        self._update_status(ProcessStatus.FAILED, f"{type(error).__name__}: {error}")
        return WalletResult(status=ProcessStatus.FAILED, error=error)

    def configure_group(
        self,
        creator: PublicKey,
        signers: list[PublicKey],
        threshold: int,
        expiration: PosixTime | None = None,
        seed: bytes = b"",
        deposit: int = 0,
    ) -> WalletResult:
        try:
            self._update_status(
                ProcessStatus.VALIDATING,
                f"Configuring {threshold}-of-{len(signers)} group",
            )
            address = self.program.configure(
                creator, signers, threshold, expiration, seed, deposit
            )
            group = self.program.get_group(address)
            self._update_status(
                ProcessStatus.GROUP_CONFIGURED, f"Group created at {address}"
            )
            return WalletResult(
                status=ProcessStatus.GROUP_CONFIGURED, address=address, group=group
            )
        except (MultisigError, LedgerError) as e:
            return self._failed("Configure group", e)

    def create_proposal(
        self, group: PublicKey, action: TargetAction, proposer: PublicKey
    ) -> WalletResult:
        try:
            self._update_status(ProcessStatus.LOADING_GROUP, f"Loading group {group}")
            address = self.program.propose_action(group, action, proposer)
            proposal = self.program.get_proposal(address)
            self._update_status(
                ProcessStatus.PROPOSAL_CREATED,
                f"Proposal {proposal.sequence} created at {address}",
            )
            return WalletResult(
                status=ProcessStatus.PROPOSAL_CREATED,
                address=address,
                proposal=proposal,
            )
        except (MultisigError, LedgerError) as e:
            return self._failed("Create proposal", e)

    def approve_proposal(self, proposal: PublicKey, signer: PublicKey) -> WalletResult:
        try:
            count = self.program.approve(proposal, signer)
            datum = self.program.get_proposal(proposal)
            self._update_status(
                ProcessStatus.APPROVAL_RECORDED,
                f"Proposal {datum.sequence} now has {count} approval(s)",
            )
            return WalletResult(
                status=ProcessStatus.APPROVAL_RECORDED,
                address=proposal,
                proposal=datum,
            )
        except (MultisigError, LedgerError) as e:
            return self._failed("Approve proposal", e)

    def execute_proposal(
        self,
        proposal: PublicKey,
        resolved_accounts: list[AccountMeta] | None = None,
    ) -> WalletResult:
        """Execute a proposal.

        Without ``resolved_accounts`` the stored account list is resolved
        as-is, which is what a client reconstructing the instruction does.
        """
        try:
            if resolved_accounts is None:
                stored = self.program.get_proposal(proposal)
                resolved_accounts = decode_account_metas(stored.accounts)

            self._update_status(
                ProcessStatus.DISPATCHING,
                f"Dispatching with {len(resolved_accounts)} account(s)",
            )
            self.program.execute(proposal, resolved_accounts)
            datum = self.program.get_proposal(proposal)
            self._update_status(
                ProcessStatus.EXECUTED, f"Proposal {datum.sequence} executed"
            )
            return WalletResult(
                status=ProcessStatus.EXECUTED, address=proposal, proposal=datum
            )
        except (MultisigError, LedgerError) as e:
            return self._failed("Execute proposal", e)

    def reconfigure_group(
        self,
        group: PublicKey,
        consenters: list[PublicKey],
        new_signers: list[PublicKey] | None = None,
        new_threshold: int | None = None,
        new_expiration: PosixTime | None = None,
        clear_expiration: bool = False,
    ) -> WalletResult:
        try:
            self._update_status(
                ProcessStatus.VALIDATING,
                f"Checking consent of {len(consenters)} signer(s)",
            )
            config = self.program.reconfigure(
                group,
                consenters,
                new_signers=new_signers,
                new_threshold=new_threshold,
                new_expiration=new_expiration,
                clear_expiration=clear_expiration,
            )
            self._update_status(
                ProcessStatus.GROUP_RECONFIGURED,
                f"Group now {config.threshold}-of-{len(config.signers)}",
            )
            return WalletResult(
                status=ProcessStatus.GROUP_RECONFIGURED, address=group, group=config
            )
        except (MultisigError, LedgerError) as e:
            return self._failed("Reconfigure group", e)

    def close_group(
        self, group: PublicKey, consenters: list[PublicKey], receiver: PublicKey
    ) -> WalletResult:
        try:
            released = self.program.close(group, consenters, receiver)
            self._update_status(
                ProcessStatus.GROUP_CLOSED, f"Released {released} to {receiver}"
            )
            return WalletResult(
                status=ProcessStatus.GROUP_CLOSED, address=group, released=released
            )
        except (MultisigError, LedgerError) as e:
            return self._failed("Close group", e)
