"""Main CLI entry point for multisig tools."""

import click

from multisig_core.cli.config.utils import setup_logging
from multisig_core.cli.keys import generate_keys_command
from multisig_core.cli.ledger import ledger
from multisig_core.cli.wallet import wallet


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """Multisig authorization CLI tools."""
    setup_logging(verbose)


# Add command groups
cli.add_command(wallet)
cli.add_command(ledger)
cli.add_command(generate_keys_command, name="generate-keys")


if __name__ == "__main__":
    cli()
