"""CLI command for generating signer keys."""

import logging
from pathlib import Path

import click

from .config.formatting import print_hash_info, print_header, print_status
from .config.keys import KeyManager

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("keys"),
    show_default=True,
    help="Directory for the generated key files",
)
@click.option("--count", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--prefix", default="signer", show_default=True)
def generate_keys_command(output_dir: Path, count: int, prefix: str) -> None:
    """Generate signer key pairs (.skey/.vkey)."""
    print_header("Generate Signer Keys")
    for i in range(1, count + 1):
        name = f"{prefix}{i}"
        if (output_dir / f"{name}.skey").exists():
            raise click.ClickException(f"Key file already exists: {output_dir / name}.skey")
        identity = KeyManager.generate(output_dir, name)
        logger.debug("Generated %s in %s", name, output_dir)
        print_hash_info(name, str(identity))

    print_status("Keys", f"{count} key pair(s) written to {output_dir}", success=True)
