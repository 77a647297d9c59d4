"""Stored records for the multisig program: group configuration and proposals"""

from dataclasses import dataclass
from typing import List, Union

from pycardano import PlutusData

from multisig_core.models.base import KEY_SIZE, U8_MAX, U64_MAX, PosixTime, PublicKey
from multisig_core.wallet.exceptions import AccountDataError

GROUP_LAYOUT_VERSION: int = 1


@dataclass
class NoDatum(PlutusData):
    """Universal None type for PlutusData"""

    CONSTR_ID = 1


@dataclass
class SomePosixTime(PlutusData):
    """Represents a Posix time in a wrapper"""

    CONSTR_ID = 0
    value: PosixTime


Expiration = Union[SomePosixTime, NoDatum]


def expiration_from_optional(value: PosixTime | None) -> Expiration:
    return NoDatum() if value is None else SomePosixTime(value)


@dataclass
class Pending(PlutusData):
    """Proposal is collecting approvals"""

    CONSTR_ID = 0


@dataclass
class Executed(PlutusData):
    """Proposal target action was dispatched"""

    CONSTR_ID = 1


ProposalStatus = Union[Pending, Executed]


def _check_keys(keys: list[bytes], label: str) -> None:
    for key in keys:
        if len(key) != KEY_SIZE:
            raise ValueError(f"{label} must be {KEY_SIZE} bytes long")


@dataclass
class GroupConfigDatum(PlutusData):
    """Signer set, approval threshold and proposal counter of a group"""

    CONSTR_ID = 0
    version: int
    signers: List[bytes]
    threshold: int
    expiration: Expiration
    nonce: int
    bump: int

    def __post_init__(self) -> None:
        _check_keys(self.signers, "Signer key")

        if not 1 <= self.threshold <= len(self.signers):
            raise ValueError("Group Config Validator: Must not break multisig")

        if not 0 <= self.nonce <= U64_MAX:
            raise ValueError("Group Config Validator: Nonce out of range")

        if not 0 <= self.bump <= U8_MAX:
            raise ValueError("Group Config Validator: Bump out of range")

    @property
    def signer_keys(self) -> list[PublicKey]:
        return [PublicKey(s) for s in self.signers]

    @property
    def expiration_time(self) -> PosixTime | None:
        if isinstance(self.expiration, SomePosixTime):
            return self.expiration.value
        return None

    def is_signer(self, key: PublicKey) -> bool:
        return key.payload in self.signers

    def to_record(self) -> bytes:
        return self.to_cbor()

    @classmethod
    def from_record(cls, data: bytes) -> "GroupConfigDatum":
        return _decode(cls, data)


@dataclass
class ProposalDatum(PlutusData):
    """A pending or resolved action and the approvals collected for it"""

    CONSTR_ID = 1
    group: bytes
    proposer: bytes
    sequence: int
    program_id: bytes
    accounts: bytes
    payload: bytes
    approvals: List[bytes]
    status: ProposalStatus
    bump: int

    def __post_init__(self) -> None:
        _check_keys([self.group, self.proposer, self.program_id], "Proposal key")
        _check_keys(self.approvals, "Approval key")

        if not 0 <= self.sequence <= U64_MAX:
            raise ValueError("Proposal Validator: Sequence out of range")

    @property
    def executed(self) -> bool:
        return isinstance(self.status, Executed)

    @property
    def approval_keys(self) -> list[PublicKey]:
        return [PublicKey(a) for a in self.approvals]

    def has_approved(self, key: PublicKey) -> bool:
        return key.payload in self.approvals

    def to_record(self) -> bytes:
        return self.to_cbor()

    @classmethod
    def from_record(cls, data: bytes) -> "ProposalDatum":
        return _decode(cls, data)


def _decode(cls: type, data: bytes):
    try:
        return cls.from_cbor(data)
    except Exception as e:
        raise AccountDataError(f"Account data is not a valid {cls.__name__}") from e
