"""Tests for group configuration."""

import pytest

from multisig_core.ledger.exceptions import InsufficientFundsError
from multisig_core.models.wallet_datums import NoDatum
from multisig_core.wallet.exceptions import (
    AlreadyInitialized,
    DuplicateSigners,
    GroupNotFound,
    InvalidExpiration,
    InvalidThreshold,
)

from .base import CREATOR_FUNDS, GROUP_DEPOSIT, TestBase
from .test_utils import START_TIME, logger, make_key


class TestConfigure(TestBase):
    def test_initial_state(self) -> None:
        group = self.program.get_group(self.group)
        assert group.signer_keys == self.signers
        assert group.threshold == self.THRESHOLD
        assert group.nonce == 0
        assert isinstance(group.expiration, NoDatum)
        assert group.expiration_time is None

    def test_group_address_is_derived(self) -> None:
        address, bump = self.program.group_address(self.creator)
        assert address == self.group
        assert self.program.get_group(self.group).bump == bump

    def test_deposit_moves_funds(self) -> None:
        assert self.ledger.balance(self.group) == GROUP_DEPOSIT
        assert self.ledger.balance(self.creator) == CREATOR_FUNDS - GROUP_DEPOSIT

    def test_group_account_owned_by_program(self) -> None:
        record = self.ledger.get_account(self.group)
        assert record.owner == self.program.program_id

    @pytest.mark.parametrize("threshold", [0, -1, 4])
    def test_invalid_threshold(self, threshold: int) -> None:
        with pytest.raises(InvalidThreshold):
            self.program.configure(self.creator, self.signers, threshold, seed=b"x")
        address, _ = self.program.group_address(self.creator, b"x")
        assert not self.ledger.has_account(address)

    def test_empty_signers(self) -> None:
        with pytest.raises(InvalidThreshold):
            self.program.configure(self.creator, [], 1, seed=b"empty")

    def test_duplicate_signers(self) -> None:
        with pytest.raises(DuplicateSigners):
            self.program.configure(
                self.creator, [self.signer_a, self.signer_b, self.signer_a], 2, seed=b"dup"
            )

    def test_negative_expiration(self) -> None:
        with pytest.raises(InvalidExpiration):
            self.program.configure(self.creator, self.signers, 2, expiration=-1, seed=b"neg")

    def test_already_initialized(self) -> None:
        with pytest.raises(AlreadyInitialized):
            self.program.configure(self.creator, [self.signer_a], 1)
        assert self.program.get_group(self.group).signer_keys == self.signers

    def test_seed_allows_second_group(self) -> None:
        second = self.program.configure(
            self.creator, [self.signer_a], 1, expiration=START_TIME + 60, seed=b"second"
        )
        logger.info("Second group at %s", second)
        assert second != self.group
        assert self.program.get_group(second).expiration_time == START_TIME + 60

    def test_single_signer_group(self) -> None:
        address = self.program.configure(make_key("solo"), [self.signer_a], 1)
        group = self.program.get_group(address)
        assert group.threshold == 1
        assert group.signer_keys == [self.signer_a]

    def test_deposit_failure_leaves_no_group(self) -> None:
        with pytest.raises(InsufficientFundsError):
            self.program.configure(
                self.creator, self.signers, 2, seed=b"rich", deposit=CREATOR_FUNDS * 2
            )
        address, _ = self.program.group_address(self.creator, b"rich")
        assert not self.ledger.has_account(address)

    def test_unknown_group(self) -> None:
        with pytest.raises(GroupNotFound):
            self.program.get_group(make_key("nowhere"))
