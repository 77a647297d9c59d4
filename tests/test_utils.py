"""Shared utilities for multisig tests."""

import hashlib
import logging

from multisig_core.models.account_metas import AccountMeta
from multisig_core.models.base import PublicKey

# Configure shared logger for all test modules
logger = logging.getLogger("multisig_tests")

START_TIME = 1_700_000_000


def make_key(label: str) -> PublicKey:
    """Deterministic 32-byte identity for a label."""
    return PublicKey(hashlib.sha256(f"multisig-test:{label}".encode()).digest())


def flip_flags(meta: AccountMeta, writable: bool | None = None) -> AccountMeta:
    """Copy of an account meta with a different writable flag."""
    return AccountMeta(
        pubkey=meta.pubkey,
        is_signer=meta.is_signer,
        is_writable=(not meta.is_writable) if writable is None else writable,
    )
