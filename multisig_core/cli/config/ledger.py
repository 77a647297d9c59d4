from dataclasses import dataclass

from .utils import ConfigFromDict


@dataclass
class LedgerConfig(ConfigFromDict):
    """Host ledger backend configuration."""

    path: str = "ledger.json"
    fixed_time: int | None = None
