"""Custom exceptions for host ledger operations."""


class LedgerError(Exception):
    """Base exception for ledger errors."""

    pass


class AccountNotFoundError(LedgerError):
    """Raised when an account does not exist."""

    pass


class AccountExistsError(LedgerError):
    """Raised when creating an account at an occupied address."""

    pass


class InsufficientFundsError(LedgerError):
    """Raised when a transfer exceeds the source balance."""

    pass


class OwnershipError(LedgerError):
    """Raised when a program writes to an account it does not own."""

    pass


class ProgramNotFoundError(LedgerError):
    """Raised when invoking an unregistered program."""

    pass


class MissingSignatureError(LedgerError):
    """Raised when a signer account meta is not backed by an authorized key."""

    pass


class ProgramError(LedgerError):
    """Raised by a program when its instruction is invalid."""

    pass


class AddressDerivationError(LedgerError):
    """Raised when no program-derived address can be found for given seeds."""

    pass


class StoreError(LedgerError):
    """Raised when persisted ledger state cannot be read or written."""

    pass
