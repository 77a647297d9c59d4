"""Precondition checks shared by the multisig operations."""

import logging

from multisig_core.models.account_metas import AccountMeta, decode_account_metas
from multisig_core.models.base import PosixTime, PublicKey, ValidityWindow
from multisig_core.models.wallet_datums import GroupConfigDatum, ProposalDatum
from multisig_core.wallet.exceptions import (
    AccountListMismatch,
    AlreadyApproved,
    DuplicateSigners,
    InsufficientAccounts,
    InsufficientApprovals,
    InvalidExpiration,
    InvalidThreshold,
    NotAllSignersApproved,
    SignerNotFound,
    TransactionAlreadyExecuted,
    TransactionExpired,
)

logger = logging.getLogger(__name__)


def validate_signers(signers: list[PublicKey]) -> None:
    """Check a signer list is duplicate-free.

    An empty list is left to :func:`validate_threshold`, which rejects it.

    Raises:
        DuplicateSigners: If any key appears more than once
    """
    seen: set[PublicKey] = set()
    duplicates = []
    for signer in signers:
        if signer in seen:
            duplicates.append(str(signer))
        seen.add(signer)
    if duplicates:
        raise DuplicateSigners(f"Duplicate signers: {', '.join(duplicates)}")


def validate_threshold(threshold: int, signer_count: int) -> None:
    """Raises InvalidThreshold unless 1 <= threshold <= signer_count."""
    if threshold < 1 or threshold > signer_count:
        raise InvalidThreshold(
            f"Threshold {threshold} must be between 1 and the number of signers "
            f"({signer_count})"
        )


def validate_expiration(expiration: PosixTime | None) -> None:
    if expiration is not None and expiration < 0:
        raise InvalidExpiration("Expiration timestamp cannot be negative")


def require_signer(group: GroupConfigDatum, key: PublicKey) -> None:
    if not group.is_signer(key):
        logger.warning("Rejected %s: not a signer of this group", key)
        raise SignerNotFound(f"Signer not found in multisig: {key}")


def require_not_expired(group: GroupConfigDatum, now: PosixTime) -> None:
    window = ValidityWindow(now=now, expiration=group.expiration_time)
    if window.expired:
        raise TransactionExpired(
            f"Group expired at {window.expiration}, current time is {window.now}"
        )


def require_not_approved(proposal: ProposalDatum, key: PublicKey) -> None:
    if proposal.has_approved(key):
        raise AlreadyApproved(f"Transaction already approved by {key}")


def require_pending(proposal: ProposalDatum) -> None:
    if proposal.executed:
        raise TransactionAlreadyExecuted(
            f"Transaction {proposal.sequence} has already been executed"
        )


def count_valid_approvals(
    proposal: ProposalDatum, group: GroupConfigDatum, revalidate: bool = False
) -> int:
    """Count approvals toward the threshold.

    With ``revalidate`` set, approvals from keys that are no longer signers
    are ignored.
    """
    if not revalidate:
        return len(proposal.approvals)
    return sum(1 for key in proposal.approvals if key in group.signers)


def require_threshold(approvals: int, threshold: int) -> None:
    if approvals < threshold:
        raise InsufficientApprovals(
            f"Not enough approvals to execute transaction: {approvals}/{threshold}"
        )


def require_unanimous(group: GroupConfigDatum, consenters: list[PublicKey]) -> None:
    """Every current signer must be among the consenters.

    Raises:
        NotAllSignersApproved: If any current signer is missing
    """
    consenting = {c.payload for c in consenters}
    missing = [PublicKey(s) for s in group.signers if s not in consenting]
    if missing:
        logger.warning("Unanimous consent missing %d signer(s)", len(missing))
        raise NotAllSignersApproved(
            "Not all current signers have approved: missing "
            + ", ".join(str(m) for m in missing)
        )


def match_account_metas(
    encoded: bytes, resolved: list[AccountMeta]
) -> list[AccountMeta]:
    """Check caller-resolved accounts against the list stored in a proposal.

    Returns:
        list[AccountMeta]: The decoded stored list

    Raises:
        MalformedAccountList: If the stored list cannot be decoded
        InsufficientAccounts: If fewer accounts were resolved than stored
        AccountListMismatch: If any entry, its flags or the count differ
    """
    expected = decode_account_metas(encoded)
    if len(resolved) < len(expected):
        raise InsufficientAccounts(
            f"Insufficient accounts provided: {len(resolved)}/{len(expected)}"
        )
    if len(resolved) > len(expected):
        raise AccountListMismatch(
            f"Unexpected extra accounts: {len(resolved)}/{len(expected)}"
        )
    for index, (want, got) in enumerate(zip(expected, resolved)):
        if want != got:
            raise AccountListMismatch(
                f"Account {index} mismatch: expected {want.pubkey} "
                f"(flags {want.flags}), got {got.pubkey} (flags {got.flags})"
            )
    return expected
