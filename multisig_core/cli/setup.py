from pathlib import Path
from typing import NamedTuple

from multisig_core.cli.config.formatting import format_status_update
from multisig_core.ledger.clock import FixedClock, SystemClock
from multisig_core.ledger.programs import SystemTransferProgram
from multisig_core.ledger.state import Ledger
from multisig_core.ledger.store import LedgerStore
from multisig_core.wallet.orchestrator import WalletOrchestrator
from multisig_core.wallet.program import MultisigProgram

from .config.app import AppConfig


class WalletSetup(NamedTuple):
    config: AppConfig
    ledger: Ledger
    store: LedgerStore
    program: MultisigProgram
    orchestrator: WalletOrchestrator


def create_ledger(config: AppConfig) -> tuple[Ledger, LedgerStore]:
    """Load the persisted ledger and register the built-in programs."""
    clock = (
        FixedClock(config.ledger.fixed_time)
        if config.ledger.fixed_time is not None
        else SystemClock()
    )
    store = LedgerStore(config.ledger.path)
    ledger = store.load(clock=clock)
    ledger.register_program(SystemTransferProgram())
    return ledger, store


def setup_wallet_from_config(config: Path) -> WalletSetup:
    """Set up all required modules that are common across wallet commands from config file."""
    app_config = AppConfig.from_yaml(config)
    ledger, store = create_ledger(app_config)

    program = MultisigProgram(
        ledger, revalidate_approvals=app_config.multisig.revalidate_approvals
    )
    orchestrator = WalletOrchestrator(program, status_callback=format_status_update)
    return WalletSetup(app_config, ledger, store, program, orchestrator)
