"""Deterministic program-derived addresses."""

import hashlib
import logging

from nacl.bindings import crypto_core_ed25519_is_valid_point

from multisig_core.ledger.exceptions import AddressDerivationError
from multisig_core.models.base import U8_MAX, PublicKey

logger = logging.getLogger(__name__)

MAX_SEED_LENGTH = 32
MAX_SEEDS = 16
PDA_MARKER = b"ProgramDerivedAddress"


def _validate_seeds(seeds: list[bytes]) -> None:
    if len(seeds) > MAX_SEEDS:
        raise AddressDerivationError(f"At most {MAX_SEEDS} seeds are allowed")
    for seed in seeds:
        if len(seed) > MAX_SEED_LENGTH:
            raise AddressDerivationError(
                f"Seed exceeds {MAX_SEED_LENGTH} bytes: {seed.hex()}"
            )


def _hash_seeds(seeds: list[bytes], program_id: PublicKey) -> bytes:
    return hashlib.sha256(b"".join(seeds) + program_id.payload + PDA_MARKER).digest()


def create_program_address(seeds: list[bytes], program_id: PublicKey) -> PublicKey:
    """Hash seeds into an address that has no ed25519 private key.

    Raises:
        AddressDerivationError: If seeds are invalid or the digest lands on
            the curve
    """
    _validate_seeds(seeds)
    digest = _hash_seeds(seeds, program_id)
    if crypto_core_ed25519_is_valid_point(digest):
        raise AddressDerivationError("Derived address is a valid curve point")
    return PublicKey(digest)


def find_program_address(
    seeds: list[bytes], program_id: PublicKey
) -> tuple[PublicKey, int]:
    """Find the first off-curve address, trying bump seeds from 255 down to 0.

    Returns:
        Tuple of (derived address, bump seed)
    """
    _validate_seeds(seeds + [b""])
    for bump in range(U8_MAX, -1, -1):
        digest = _hash_seeds(seeds + [bytes([bump])], program_id)
        if not crypto_core_ed25519_is_valid_point(digest):
            return PublicKey(digest), bump
        logger.debug("Bump %d is on curve, trying next", bump)

    raise AddressDerivationError("Unable to find a viable program address bump")
