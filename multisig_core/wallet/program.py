"""Multisig authorization state machine.

A group of signers controls one program-derived account. Proposals collect
approvals and execute once the threshold is met; changing the signer set or
closing the group requires every current signer.
"""

import hashlib
import logging
from collections.abc import Iterator

from multisig_core.ledger.address import find_program_address
from multisig_core.ledger.state import Ledger
from multisig_core.models.account_metas import (
    AccountMeta,
    TargetAction,
    decode_account_metas,
)
from multisig_core.models.base import U64_MAX, PosixTime, PublicKey
from multisig_core.models.wallet_datums import (
    GROUP_LAYOUT_VERSION,
    Executed,
    GroupConfigDatum,
    NoDatum,
    Pending,
    ProposalDatum,
    SomePosixTime,
    expiration_from_optional,
)
from multisig_core.wallet.exceptions import (
    AccountDataError,
    AlreadyInitialized,
    GroupNotFound,
    InvalidExpiration,
    InvalidReceiver,
    ProposalNotFound,
    RecursiveCallNotAllowed,
    SequenceOverflow,
)
from multisig_core.wallet.validations import (
    count_valid_approvals,
    match_account_metas,
    require_not_approved,
    require_not_expired,
    require_pending,
    require_signer,
    require_threshold,
    require_unanimous,
    validate_expiration,
    validate_signers,
    validate_threshold,
)

logger = logging.getLogger(__name__)

MULTISIG_PROGRAM_ID = PublicKey(hashlib.sha256(b"multisig_core.program.v1").digest())

GROUP_SEED = b"multisig"
PROPOSAL_SEED = b"proposal"


class MultisigProgram:
    """Configure, propose, approve, execute, reconfigure and close operations.

    Each operation runs as one atomic ledger step: a failed check leaves no
    trace in storage.
    """

    def __init__(
        self,
        ledger: Ledger,
        program_id: PublicKey = MULTISIG_PROGRAM_ID,
        revalidate_approvals: bool = False,
    ) -> None:
        self.ledger = ledger
        self.program_id = program_id
        self.revalidate_approvals = revalidate_approvals

    # Addresses

    def group_address(
        self, creator: PublicKey, seed: bytes = b""
    ) -> tuple[PublicKey, int]:
        return find_program_address([GROUP_SEED, creator.payload, seed], self.program_id)

    def proposal_address(
        self, group: PublicKey, sequence: int
    ) -> tuple[PublicKey, int]:
        return find_program_address(
            [PROPOSAL_SEED, group.payload, sequence.to_bytes(8, "little")],
            self.program_id,
        )

    # Records

    def _read_owned(self, address: PublicKey) -> bytes:
        record = self.ledger.get_account(address)
        if record.owner != self.program_id:
            raise AccountDataError(f"Account {address} is not owned by the multisig")
        return record.data

    def get_group(self, group: PublicKey) -> GroupConfigDatum:
        if not self.ledger.has_account(group):
            raise GroupNotFound(f"No multisig group at {group}")
        return GroupConfigDatum.from_record(self._read_owned(group))

    def get_proposal(self, proposal: PublicKey) -> ProposalDatum:
        if not self.ledger.has_account(proposal):
            raise ProposalNotFound(f"No proposal at {proposal}")
        datum = ProposalDatum.from_record(self._read_owned(proposal))

        expected, _ = self.proposal_address(PublicKey(datum.group), datum.sequence)
        if expected != proposal:
            raise AccountDataError(
                f"Proposal {datum.sequence} is stored at {proposal}, expected {expected}"
            )
        return datum

    def list_proposals(
        self, group: PublicKey
    ) -> Iterator[tuple[PublicKey, ProposalDatum]]:
        """Yield every proposal of a group in sequence order."""
        config = self.get_group(group)
        for sequence in range(config.nonce):
            address, _ = self.proposal_address(group, sequence)
            if self.ledger.has_account(address):
                yield address, self.get_proposal(address)

    def _write(self, address: PublicKey, datum: GroupConfigDatum | ProposalDatum) -> None:
        self.ledger.write_data(address, datum.to_record(), self.program_id)

    # Operations

    def configure(
        self,
        creator: PublicKey,
        signers: list[PublicKey],
        threshold: int,
        expiration: PosixTime | None = None,
        seed: bytes = b"",
        deposit: int = 0,
    ) -> PublicKey:
        """Create a new group.

        Args:
            creator: Key the group address is derived from
            signers: Initial signer set, unique and non-empty
            threshold: Approvals required to execute a proposal
            expiration: Optional unix timestamp after which approvals and
                executions are rejected
            seed: Extra derivation seed so one creator can own several groups
            deposit: Amount moved from the creator's account into the group

        Returns:
            PublicKey: Address of the group account

        Raises:
            DuplicateSigners: If a signer is listed twice
            InvalidThreshold: If threshold is not in [1, len(signers)]
            AlreadyInitialized: If the group address is already in use, or a
                closed group at that address left proposals behind
        """
        validate_signers(signers)
        validate_threshold(threshold, len(signers))
        validate_expiration(expiration)

        address, bump = self.group_address(creator, seed)
        with self.ledger.atomic():
            if self.ledger.has_account(address):
                raise AlreadyInitialized(f"Multisig group already exists at {address}")

            # Proposals are never deleted, so a closed group that proposed
            # anything keeps its address
            first_proposal, _ = self.proposal_address(address, 0)
            if self.ledger.has_account(first_proposal):
                raise AlreadyInitialized(
                    f"Address {address} still holds proposals of a closed group"
                )

            datum = GroupConfigDatum(
                version=GROUP_LAYOUT_VERSION,
                signers=[s.payload for s in signers],
                threshold=threshold,
                expiration=expiration_from_optional(expiration),
                nonce=0,
                bump=bump,
            )
            self.ledger.create_account(address, self.program_id, datum.to_record())
            if deposit:
                self.ledger.transfer(creator, address, deposit)

        logger.info(
            "Configured group %s: %d-of-%d signers", address, threshold, len(signers)
        )
        return address

    def propose(
        self,
        group: PublicKey,
        program_id: PublicKey,
        accounts: bytes,
        payload: bytes,
        proposer: PublicKey,
    ) -> PublicKey:
        """Record a new proposal under the group's next sequence number.

        The proposer's approval is recorded at creation.

        Returns:
            PublicKey: Address of the proposal account
        """
        with self.ledger.atomic():
            config = self.get_group(group)
            require_signer(config, proposer)
            decode_account_metas(accounts)

            if config.nonce >= U64_MAX:
                raise SequenceOverflow(f"Group {group} has exhausted its nonce")

            sequence = config.nonce
            address, bump = self.proposal_address(group, sequence)
            proposal = ProposalDatum(
                group=group.payload,
                proposer=proposer.payload,
                sequence=sequence,
                program_id=program_id.payload,
                accounts=accounts,
                payload=payload,
                approvals=[proposer.payload],
                status=Pending(),
                bump=bump,
            )
            self.ledger.create_account(address, self.program_id, proposal.to_record())

            config.nonce = sequence + 1
            self._write(group, config)

        logger.info("Proposal %d created at %s by %s", sequence, address, proposer)
        return address

    def propose_action(
        self, group: PublicKey, action: TargetAction, proposer: PublicKey
    ) -> PublicKey:
        return self.propose(
            group, action.program_id, action.encoded_accounts, action.payload, proposer
        )

    def approve(self, proposal: PublicKey, signer: PublicKey) -> int:
        """Add a signer's approval to a pending proposal.

        Returns:
            int: Number of approvals after this one
        """
        with self.ledger.atomic():
            datum = self.get_proposal(proposal)
            config = self.get_group(PublicKey(datum.group))

            require_signer(config, signer)
            require_not_expired(config, self.ledger.now())
            require_not_approved(datum, signer)
            require_pending(datum)

            datum.approvals = list(datum.approvals) + [signer.payload]
            self._write(proposal, datum)

        logger.info(
            "Proposal %d approved by %s (%d/%d)",
            datum.sequence,
            signer,
            len(datum.approvals),
            config.threshold,
        )
        return len(datum.approvals)

    def execute(self, proposal: PublicKey, resolved_accounts: list[AccountMeta]) -> None:
        """Dispatch the proposal's target action with the group as authority.

        The proposal is marked executed before dispatch, so a re-entrant
        call from the target sees it as already executed. A failing dispatch
        rolls the whole step back, including that mark.

        Raises:
            TransactionAlreadyExecuted: If the proposal ran before
            InsufficientApprovals: If approvals are below the current threshold
            TransactionExpired: If the group's expiration has passed
            MalformedAccountList: If resolved accounts differ from the stored list
            RecursiveCallNotAllowed: If the target is the multisig program
        """
        with self.ledger.atomic():
            datum = self.get_proposal(proposal)
            group = PublicKey(datum.group)
            config = self.get_group(group)

            require_pending(datum)
            require_threshold(
                count_valid_approvals(datum, config, self.revalidate_approvals),
                config.threshold,
            )
            require_not_expired(config, self.ledger.now())
            metas = match_account_metas(datum.accounts, resolved_accounts)

            target = PublicKey(datum.program_id)
            if target == self.program_id:
                raise RecursiveCallNotAllowed("Proposals may not target the multisig")

            datum.status = Executed()
            self._write(proposal, datum)

            logger.info("Executing proposal %d against %s", datum.sequence, target)
            self.ledger.invoke(target, metas, datum.payload, signers={group})

        logger.info("Proposal %d executed", datum.sequence)

    def reconfigure(
        self,
        group: PublicKey,
        consenters: list[PublicKey],
        new_signers: list[PublicKey] | None = None,
        new_threshold: int | None = None,
        new_expiration: PosixTime | None = None,
        clear_expiration: bool = False,
    ) -> GroupConfigDatum:
        """Replace signers, threshold or expiration with unanimous consent.

        Fields left as None keep their current value. Pending proposals keep
        their sequence numbers and are checked against the new configuration
        from now on.

        Raises:
            NotAllSignersApproved: If any current signer did not consent
            DuplicateSigners: If the new signer list repeats a key
            InvalidThreshold: If the resulting threshold does not fit the
                resulting signer set
            InvalidExpiration: If both clearing and setting expiration
        """
        if clear_expiration and new_expiration is not None:
            raise InvalidExpiration("Cannot set and clear expiration at once")
        validate_expiration(new_expiration)

        with self.ledger.atomic():
            config = self.get_group(group)
            require_unanimous(config, consenters)

            signers = config.signer_keys if new_signers is None else list(new_signers)
            threshold = config.threshold if new_threshold is None else new_threshold
            validate_signers(signers)
            validate_threshold(threshold, len(signers))

            config.signers = [s.payload for s in signers]
            config.threshold = threshold
            if clear_expiration:
                config.expiration = NoDatum()
            elif new_expiration is not None:
                config.expiration = SomePosixTime(new_expiration)
            self._write(group, config)

        logger.info(
            "Reconfigured group %s: %d-of-%d signers, expiration %s",
            group,
            config.threshold,
            len(config.signers),
            config.expiration_time,
        )
        return config

    def close(
        self, group: PublicKey, consenters: list[PublicKey], receiver: PublicKey
    ) -> int:
        """Delete the group with unanimous consent, releasing its balance.

        Returns:
            int: Amount released to the receiver

        Raises:
            NotAllSignersApproved: If any current signer did not consent
            InvalidReceiver: If the receiver is the group account itself
        """
        with self.ledger.atomic():
            config = self.get_group(group)
            require_unanimous(config, consenters)
            if receiver == group:
                raise InvalidReceiver(f"Group {group} cannot release funds to itself")
            released = self.ledger.close_account(group, receiver, self.program_id)

        logger.info("Closed group %s, released %d to %s", group, released, receiver)
        return released
