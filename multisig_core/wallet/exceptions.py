"""Custom exceptions for multisig wallet operations and validation."""


class MultisigError(Exception):
    """Base exception for all multisig-related errors."""

    pass


class ValidationError(MultisigError):
    """Base exception for rejected preconditions."""

    pass


# Configuration Errors
class InvalidThreshold(ValidationError):  # noqa
    """Raised when threshold is outside [1, number of signers]."""

    pass


class DuplicateSigners(ValidationError):  # noqa
    """Raised when a signer list contains the same key twice."""

    pass


class InvalidExpiration(ValidationError):  # noqa
    """Raised when an expiration update is contradictory or out of range."""

    pass


# Signer Errors
class SignerNotFound(ValidationError):  # noqa
    """Raised when the asserted identity is not a current signer."""

    pass


class AlreadyApproved(ValidationError):  # noqa
    """Raised when a signer approves the same proposal twice."""

    pass


class NotAllSignersApproved(ValidationError):  # noqa
    """Raised when a governance change lacks consent from a current signer."""

    pass


# Proposal Lifecycle Errors
class TransactionExpired(ValidationError):  # noqa
    """Raised when the group's expiration policy has passed."""

    pass


class InsufficientApprovals(ValidationError):  # noqa
    """Raised when approvals are below the threshold at execution time."""

    pass


class TransactionAlreadyExecuted(ValidationError):  # noqa
    """Raised when a proposal has already been executed."""

    pass


class RecursiveCallNotAllowed(ValidationError):  # noqa
    """Raised when a proposal targets the multisig program itself."""

    pass


class InvalidReceiver(ValidationError):  # noqa
    """Raised when a closing group would release its balance to itself."""

    pass


# Account List Errors
class MalformedAccountList(ValidationError):  # noqa
    """Raised when the encoded account list is corrupt or does not match."""

    pass


class InsufficientAccounts(MalformedAccountList):  # noqa
    """Raised when fewer accounts are supplied than the proposal encodes."""

    pass


class AccountListMismatch(MalformedAccountList):  # noqa
    """Raised when supplied accounts differ from the encoded list."""

    pass


# State Errors
class StateError(MultisigError):
    """Base exception for record state errors."""

    pass


class AlreadyInitialized(StateError):  # noqa
    """Raised when configuring an address that already holds a group."""

    pass


class GroupNotFound(StateError):  # noqa
    """Raised when no group exists at the given address."""

    pass


class ProposalNotFound(StateError):  # noqa
    """Raised when no proposal exists at the given address."""

    pass


class AccountDataError(StateError):
    """Raised when stored account data cannot be decoded as expected."""

    pass


class SequenceOverflow(StateError):  # noqa
    """Raised when the group nonce cannot be incremented further."""

    pass
