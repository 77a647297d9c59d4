"""Base types used in the models."""

from pycardano import ConstrainedBytes, VerificationKey
from pycardano.exception import InvalidDataException
from pydantic import BaseModel, Field

PosixTime = int

KEY_SIZE = 32
U8_MAX = (1 << 8) - 1
U64_MAX = (1 << 64) - 1


class PublicKey(ConstrainedBytes):
    """Ed25519 public key, signer identity or account address (32 bytes)."""

    MAX_SIZE = MIN_SIZE = KEY_SIZE

    @classmethod
    def from_hex(cls, hex_str: str) -> "PublicKey":
        """Create key from hex string."""
        try:
            return cls.from_primitive(hex_str)
        except (ValueError, AssertionError, TypeError, InvalidDataException) as err:
            raise ValueError(f"Invalid public key: {hex_str!r}") from err

    @classmethod
    def from_verification_key(cls, key: VerificationKey) -> "PublicKey":
        """Use the raw 32-byte payload of a pycardano verification key."""
        return cls(key.payload[:KEY_SIZE])

    def __str__(self) -> str:
        return self.payload.hex()


class ValidityWindow(BaseModel):
    """Expiration policy as seen at a given instant"""

    now: PosixTime = Field(..., description="Current host time in seconds")
    expiration: PosixTime | None = Field(
        None, description="Absolute expiration timestamp in seconds"
    )

    @property
    def expired(self) -> bool:
        return self.expiration is not None and self.now > self.expiration
