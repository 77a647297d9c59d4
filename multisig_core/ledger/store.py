"""JSON persistence for the host ledger."""

import json
import logging
from pathlib import Path

from multisig_core.ledger.clock import Clock
from multisig_core.ledger.exceptions import StoreError
from multisig_core.ledger.state import Ledger

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1


class LedgerStore:
    """Loads and saves ledger accounts to a JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self, ledger: Ledger | None = None, clock: Clock | None = None) -> Ledger:
        """Load accounts into a ledger; a missing file yields an empty ledger."""
        ledger = ledger or Ledger(clock=clock)
        if not self.path.exists():
            logger.info("Ledger file %s not found, starting empty", self.path)
            return ledger

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if data.get("version") != STORE_FORMAT_VERSION:
                raise StoreError(f"Unsupported ledger format: {data.get('version')}")
            ledger.load_dict(data.get("accounts", {}))
        except (OSError, ValueError, KeyError, AttributeError) as e:
            raise StoreError(f"Failed to load ledger from {self.path}: {e}") from e

        logger.debug("Loaded ledger from %s", self.path)
        return ledger

    def save(self, ledger: Ledger) -> None:
        """Write all accounts, replacing the file atomically."""
        payload = {"version": STORE_FORMAT_VERSION, "accounts": ledger.to_dict()}
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, sort_keys=True)
            tmp_path.replace(self.path)
        except OSError as e:
            raise StoreError(f"Failed to save ledger to {self.path}: {e}") from e

        logger.debug("Saved ledger to %s", self.path)
