"""Identity key loading for CLI operations."""

from dataclasses import dataclass
from pathlib import Path

from pycardano import PaymentKeyPair, PaymentSigningKey, PaymentVerificationKey

from multisig_core.models.base import PublicKey

KEY_FILE_SUFFIXES = (".vkey", ".skey")


@dataclass
class WalletConfig:
    """Configuration for the acting identity."""

    signing_key_path: str | None = None

    @classmethod
    def from_dict(cls, config: dict) -> "WalletConfig":
        """Create wallet config from dictionary."""
        return cls(signing_key_path=config.get("signing_key_path"))


class KeyManager:
    """Loads signer identities from pycardano key files or hex strings."""

    @staticmethod
    def load_signing_key(path: Path | str) -> tuple[PaymentSigningKey, PublicKey]:
        """Load a signing key file.

        Returns:
            Tuple of (signing key, 32-byte identity derived from its
                     verification key)
        """
        signing_key = PaymentSigningKey.load(str(path))
        verification_key = PaymentVerificationKey.from_signing_key(signing_key)
        return signing_key, PublicKey.from_verification_key(verification_key)

    @staticmethod
    def load_identity(value: str) -> PublicKey:
        """Resolve a party entry: a verification/signing key file or a hex key."""
        path = Path(value)
        if path.suffix in KEY_FILE_SUFFIXES or path.exists():
            if not path.exists():
                raise FileNotFoundError(f"Key file not found: {path}")
            if path.suffix == ".skey":
                return KeyManager.load_signing_key(path)[1]
            return PublicKey.from_verification_key(
                PaymentVerificationKey.load(str(path))
            )
        return PublicKey.from_hex(value)

    @staticmethod
    def load_from_config(config: WalletConfig) -> tuple[PaymentSigningKey, PublicKey]:
        if not config.signing_key_path:
            raise ValueError("wallet.signing_key_path is not configured")
        return KeyManager.load_signing_key(config.signing_key_path)

    @staticmethod
    def generate(output_dir: Path, name: str) -> PublicKey:
        """Generate and save a key pair as <name>.skey / <name>.vkey."""
        output_dir.mkdir(parents=True, exist_ok=True)
        key_pair = PaymentKeyPair.generate()
        key_pair.signing_key.save(str(output_dir / f"{name}.skey"))
        key_pair.verification_key.save(str(output_dir / f"{name}.vkey"))
        return PublicKey.from_verification_key(key_pair.verification_key)
