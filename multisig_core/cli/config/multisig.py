from dataclasses import dataclass, field

from multisig_core.models.base import PublicKey

from .keys import KeyManager


@dataclass
class MultisigConfig:
    """Configuration for multisig authorization."""

    threshold: int
    parties: list[str] = field(default_factory=list)
    expiration: int | None = None
    seed: str = ""
    deposit: int = 0
    revalidate_approvals: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "MultisigConfig":
        return cls(
            threshold=data.get("threshold", 1),
            parties=data.get("parties", []),
            expiration=data.get("expiration"),
            seed=data.get("seed", ""),
            deposit=data.get("deposit", 0),
            revalidate_approvals=data.get("revalidate_approvals", False),
        )

    @property
    def seed_bytes(self) -> bytes:
        return self.seed.encode("utf-8")

    def signer_keys(self) -> list[PublicKey]:
        return [KeyManager.load_identity(party) for party in self.parties]
