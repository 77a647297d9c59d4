"""Account-access list codec and the opaque target action descriptor.

Each entry is exactly 33 bytes: the 32-byte account key followed by a flags
byte where bit 0 marks a signer and bit 1 marks a writable account. The
remaining bits are reserved and must be zero.
"""

from dataclasses import dataclass, field

from multisig_core.models.base import KEY_SIZE, PublicKey
from multisig_core.wallet.exceptions import MalformedAccountList

ACCOUNT_META_SIZE = KEY_SIZE + 1

FLAG_SIGNER = 0x01
FLAG_WRITABLE = 0x02
RESERVED_FLAGS = 0xFF & ~(FLAG_SIGNER | FLAG_WRITABLE)


@dataclass(frozen=True)
class AccountMeta:
    """Reference to an account together with its access flags"""

    pubkey: PublicKey
    is_signer: bool = False
    is_writable: bool = False

    @property
    def flags(self) -> int:
        return (FLAG_SIGNER if self.is_signer else 0) | (
            FLAG_WRITABLE if self.is_writable else 0
        )

    def to_bytes(self) -> bytes:
        return self.pubkey.payload + bytes([self.flags])

    @classmethod
    def from_bytes(cls, chunk: bytes) -> "AccountMeta":
        if len(chunk) != ACCOUNT_META_SIZE:
            raise MalformedAccountList(
                f"Account meta must be {ACCOUNT_META_SIZE} bytes, got {len(chunk)}"
            )
        flags = chunk[KEY_SIZE]
        if flags & RESERVED_FLAGS:
            raise MalformedAccountList(f"Reserved flag bits set: {flags:#04x}")
        return cls(
            pubkey=PublicKey(chunk[:KEY_SIZE]),
            is_signer=bool(flags & FLAG_SIGNER),
            is_writable=bool(flags & FLAG_WRITABLE),
        )


def encode_account_metas(metas: list[AccountMeta]) -> bytes:
    """Serialize account metas into the flat 33-byte-per-entry format."""
    return b"".join(meta.to_bytes() for meta in metas)


def decode_account_metas(data: bytes) -> list[AccountMeta]:
    """Parse a flat account-meta byte sequence.

    Raises:
        MalformedAccountList: If the length is not a multiple of 33 or a
            flags byte has reserved bits set
    """
    if len(data) % ACCOUNT_META_SIZE != 0:
        raise MalformedAccountList(
            f"Account list length {len(data)} is not a multiple of {ACCOUNT_META_SIZE}"
        )
    return [
        AccountMeta.from_bytes(data[i : i + ACCOUNT_META_SIZE])
        for i in range(0, len(data), ACCOUNT_META_SIZE)
    ]


@dataclass
class TargetAction:
    """Opaque action a proposal authorizes once executed"""

    program_id: PublicKey
    accounts: list[AccountMeta] = field(default_factory=list)
    payload: bytes = b""

    @property
    def encoded_accounts(self) -> bytes:
        return encode_account_metas(self.accounts)
