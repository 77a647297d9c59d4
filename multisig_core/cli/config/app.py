from dataclasses import dataclass
from pathlib import Path

from .keys import KEY_FILE_SUFFIXES, WalletConfig
from .ledger import LedgerConfig
from .multisig import MultisigConfig
from .utils import load_yaml_config


def resolve_relative(base: Path, value: str) -> str:
    """Resolve a relative file path against the config directory."""
    path = Path(value)
    if path.is_absolute():
        return value
    return str(base / path)


def resolve_party(base: Path, value: str) -> str:
    """Resolve a party entry that names a key file; hex keys pass through."""
    path = Path(value)
    if path.suffix in KEY_FILE_SUFFIXES or (base / path).exists():
        return resolve_relative(base, value)
    return value


@dataclass
class AppConfig:
    """Configuration for the multisig CLI."""

    ledger: LedgerConfig
    multisig: MultisigConfig
    wallet: WalletConfig

    @classmethod
    def from_yaml(cls, path: Path | str) -> "AppConfig":
        """Load multisig CLI configuration from YAML.

        Relative file paths (ledger store, party key files and the wallet
        signing key) are resolved against the config file location.
        """
        data = load_yaml_config(path)
        config = cls.from_dict(data)
        base = Path(path).parent

        config.ledger.path = resolve_relative(base, config.ledger.path)
        config.multisig.parties = [
            resolve_party(base, party) for party in config.multisig.parties
        ]
        if config.wallet.signing_key_path:
            config.wallet.signing_key_path = resolve_relative(
                base, config.wallet.signing_key_path
            )
        return config

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        return cls(
            ledger=LedgerConfig.from_dict(data.get("ledger", {})),
            multisig=MultisigConfig.from_dict(data.get("multisig", {})),
            wallet=WalletConfig.from_dict(data.get("wallet", {})),
        )
