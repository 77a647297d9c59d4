"""CLI commands for the local host ledger."""

import logging
from pathlib import Path

import click

from .config.app import AppConfig
from .config.formatting import print_address_info, print_hash_info, print_status
from .config.keys import KeyManager
from .setup import create_ledger

logger = logging.getLogger(__name__)


@click.group()
def ledger() -> None:
    """Local ledger commands."""
    pass


@ledger.command()
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to multisig configuration YAML",
)
@click.option("--to", "recipient", required=True, help="Account key (hex or key file)")
@click.option("--amount", type=click.IntRange(min=1), required=True)
def airdrop(config: Path, recipient: str, amount: int) -> None:
    """Credit an account on the local ledger."""
    try:
        app_config = AppConfig.from_yaml(config)
        host, store = create_ledger(app_config)
        address = KeyManager.load_identity(recipient)

        host.airdrop(address, amount)
        store.save(host)

        print_status("Airdrop", f"{amount} credited", success=True)
        print_address_info("Account", str(address))
        print_hash_info("Balance", str(host.balance(address)))

    except Exception as e:
        logger.error("Airdrop failed", exc_info=e)
        raise click.ClickException(str(e)) from e


@ledger.command()
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to multisig configuration YAML",
)
@click.option("--account", required=True, help="Account key (hex or key file)")
def balance(config: Path, account: str) -> None:
    """Show an account balance on the local ledger."""
    try:
        host, _ = create_ledger(AppConfig.from_yaml(config))
        address = KeyManager.load_identity(account)
        print_address_info("Account", str(address))
        print_hash_info("Balance", str(host.balance(address)))

    except Exception as e:
        logger.error("Balance query failed", exc_info=e)
        raise click.ClickException(str(e)) from e
