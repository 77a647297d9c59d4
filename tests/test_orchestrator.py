"""Tests for the wallet orchestrator."""

from multisig_core.constants.status import ProcessStatus
from multisig_core.wallet.exceptions import InsufficientApprovals, SignerNotFound
from multisig_core.wallet.orchestrator import WalletOrchestrator

from .base import GROUP_DEPOSIT, TestBase
from .test_utils import make_key


class TestWalletOrchestrator(TestBase):
    def setup_method(self, method) -> None:
        super().setup_method(method)
        self.updates: list[tuple[ProcessStatus, str]] = []
        self.orchestrator = WalletOrchestrator(
            self.program,
            status_callback=lambda status, message: self.updates.append(
                (status, message)
            ),
        )

    def statuses(self) -> list[ProcessStatus]:
        return [status for status, _ in self.updates]

    def test_configure_group(self) -> None:
        result = self.orchestrator.configure_group(
            self.creator, self.signers, 3, seed=b"orchestrated"
        )
        assert result.ok
        assert result.status == ProcessStatus.GROUP_CONFIGURED
        assert result.group.threshold == 3
        assert self.statuses() == [
            ProcessStatus.VALIDATING,
            ProcessStatus.GROUP_CONFIGURED,
        ]

    def test_full_lifecycle(self) -> None:
        created = self.orchestrator.create_proposal(
            self.group, self.transfer_action(300), self.signer_a
        )
        assert created.status == ProcessStatus.PROPOSAL_CREATED
        assert created.proposal.sequence == 0

        approved = self.orchestrator.approve_proposal(created.address, self.signer_c)
        assert approved.status == ProcessStatus.APPROVAL_RECORDED
        assert len(approved.proposal.approvals) == 2

        executed = self.orchestrator.execute_proposal(created.address)
        assert executed.status == ProcessStatus.EXECUTED
        assert executed.proposal.executed
        assert self.ledger.balance(self.recipient) == 300
        assert self.orchestrator.current_status == ProcessStatus.EXECUTED

    def test_failure_is_reported(self) -> None:
        result = self.orchestrator.create_proposal(
            self.group, self.transfer_action(), self.outsider
        )
        assert not result.ok
        assert result.status == ProcessStatus.FAILED
        assert isinstance(result.error, SignerNotFound)
        assert self.statuses()[-1] == ProcessStatus.FAILED
        assert "SignerNotFound" in self.updates[-1][1]

    def test_execute_without_threshold(self) -> None:
        created = self.orchestrator.create_proposal(
            self.group, self.transfer_action(), self.signer_a
        )
        result = self.orchestrator.execute_proposal(created.address)
        assert isinstance(result.error, InsufficientApprovals)

    def test_reconfigure_and_close(self) -> None:
        reconfigured = self.orchestrator.reconfigure_group(
            self.group, self.signers, new_threshold=1
        )
        assert reconfigured.status == ProcessStatus.GROUP_RECONFIGURED
        assert reconfigured.group.threshold == 1

        closed = self.orchestrator.close_group(self.group, self.signers, self.recipient)
        assert closed.status == ProcessStatus.GROUP_CLOSED
        assert closed.released == GROUP_DEPOSIT

    def test_close_unknown_group(self) -> None:
        result = self.orchestrator.close_group(
            make_key("nowhere"), self.signers, self.recipient
        )
        assert result.status == ProcessStatus.FAILED

    def test_without_callback(self) -> None:
        orchestrator = WalletOrchestrator(self.program)
        result = orchestrator.create_proposal(
            self.group, self.transfer_action(), self.signer_b
        )
        assert result.ok
