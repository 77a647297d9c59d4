"""CLI commands for multisig group and proposal management."""

import logging
from pathlib import Path

import click

from multisig_core.models.base import PublicKey
from multisig_core.models.client import ProposalRequest

from .config.formatting import (
    print_address_info,
    print_group_summary,
    print_hash_info,
    print_header,
    print_proposal_summary,
    print_signers_table,
    print_status,
)
from .config.keys import KeyManager
from .setup import WalletSetup, setup_wallet_from_config

logger = logging.getLogger(__name__)

config_option = click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to multisig configuration YAML",
)
group_option = click.option(
    "--group",
    type=str,
    help="Group address (hex). Defaults to the address derived from the wallet key and seed",
)


def _wallet_identity(setup: WalletSetup) -> PublicKey:
    try:
        _, identity = KeyManager.load_from_config(setup.config.wallet)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Failed to load wallet key: {e}") from e
    return identity


def _resolve_group(setup: WalletSetup, group: str | None) -> PublicKey:
    if group:
        return PublicKey.from_hex(group)
    address, _ = setup.program.group_address(
        _wallet_identity(setup), setup.config.multisig.seed_bytes
    )
    return address


def _resolve_proposal(
    setup: WalletSetup, group: str | None, proposal: str | None, sequence: int | None
) -> PublicKey:
    if proposal:
        return PublicKey.from_hex(proposal)
    if sequence is None:
        raise click.UsageError("Either --proposal or --sequence is required")
    address, _ = setup.program.proposal_address(
        _resolve_group(setup, group), sequence
    )
    return address


def _consenters(setup: WalletSetup, consent_keys: tuple[Path, ...]) -> list[PublicKey]:
    """The wallet key plus every extra signing key supplied on the command line."""
    keys = [_wallet_identity(setup)]
    for path in consent_keys:
        _, identity = KeyManager.load_signing_key(path)
        keys.append(identity)
    return keys


def _finish(setup: WalletSetup, result, operation: str) -> None:
    if not result.ok:
        raise click.ClickException(f"{operation} failed: {result.error}") from result.error
    setup.store.save(setup.ledger)


proposal_options = [
    click.option("--proposal", type=str, help="Proposal address (hex)"),
    click.option("--sequence", type=int, help="Proposal sequence number in the group"),
]


def with_proposal_options(f):
    for option in reversed(proposal_options):
        f = option(f)
    return f


@click.group()
def wallet() -> None:
    """Multisig wallet commands."""
    pass


@wallet.command()
@config_option
def init(config: Path) -> None:
    """Configure a new multisig group from the YAML settings."""
    try:
        print_header("Configure Multisig")
        setup = setup_wallet_from_config(config)
        ms = setup.config.multisig
        creator = _wallet_identity(setup)

        result = setup.orchestrator.configure_group(
            creator=creator,
            signers=ms.signer_keys(),
            threshold=ms.threshold,
            expiration=ms.expiration,
            seed=ms.seed_bytes,
            deposit=ms.deposit,
        )
        _finish(setup, result, "Configure")

        print_status("Multisig", "group configured", success=True)
        print_address_info("Group Address", str(result.address))
        print_signers_table(result.group.signer_keys)

    except click.ClickException:
        raise
    except Exception as e:
        logger.error("Configure failed", exc_info=e)
        raise click.ClickException(str(e)) from e


@wallet.command()
@config_option
@group_option
@click.option(
    "--request",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="JSON file describing the target action",
)
def propose(config: Path, group: str | None, request: Path) -> None:
    """Propose a target action for the group."""
    try:
        print_header("Propose Transaction")
        setup = setup_wallet_from_config(config)
        action = ProposalRequest.from_file(request).to_target_action()

        result = setup.orchestrator.create_proposal(
            _resolve_group(setup, group), action, _wallet_identity(setup)
        )
        _finish(setup, result, "Propose")

        print_status("Proposal", f"sequence {result.proposal.sequence}", success=True)
        print_address_info("Proposal Address", str(result.address))

    except click.ClickException:
        raise
    except Exception as e:
        logger.error("Propose failed", exc_info=e)
        raise click.ClickException(str(e)) from e


@wallet.command()
@config_option
@group_option
@with_proposal_options
def approve(
    config: Path, group: str | None, proposal: str | None, sequence: int | None
) -> None:
    """Approve a pending proposal with the wallet key."""
    try:
        print_header("Approve Transaction")
        setup = setup_wallet_from_config(config)
        address = _resolve_proposal(setup, group, proposal, sequence)

        result = setup.orchestrator.approve_proposal(address, _wallet_identity(setup))
        _finish(setup, result, "Approve")

        group_config = setup.program.get_group(PublicKey(result.proposal.group))
        print_status(
            "Approvals",
            f"{len(result.proposal.approvals)} of {group_config.threshold} required",
            success=True,
        )
        print_signers_table(group_config.signer_keys, result.proposal.approval_keys)

    except click.ClickException:
        raise
    except Exception as e:
        logger.error("Approve failed", exc_info=e)
        raise click.ClickException(str(e)) from e


@wallet.command()
@config_option
@group_option
@with_proposal_options
def execute(
    config: Path, group: str | None, proposal: str | None, sequence: int | None
) -> None:
    """Execute a proposal that has collected enough approvals."""
    try:
        print_header("Execute Transaction")
        setup = setup_wallet_from_config(config)
        address = _resolve_proposal(setup, group, proposal, sequence)

        result = setup.orchestrator.execute_proposal(address)
        _finish(setup, result, "Execute")

        print_status("Proposal", "executed successfully", success=True)
        print_hash_info("Sequence", str(result.proposal.sequence))

    except click.ClickException:
        raise
    except Exception as e:
        logger.error("Execute failed", exc_info=e)
        raise click.ClickException(str(e)) from e


@wallet.command()
@config_option
@group_option
@click.option(
    "--consent-key",
    "consent_keys",
    type=click.Path(exists=True, path_type=Path),
    multiple=True,
    help="Signing key of another consenting signer (repeatable)",
)
@click.option(
    "--signer",
    "signers",
    type=str,
    multiple=True,
    help="New signer set: hex key or key file (repeatable)",
)
@click.option("--threshold", type=int, help="New approval threshold")
@click.option("--expiration", type=int, help="New expiration unix timestamp")
@click.option(
    "--clear-expiration", is_flag=True, help="Remove the expiration policy"
)
def reconfigure(
    config: Path,
    group: str | None,
    consent_keys: tuple[Path, ...],
    signers: tuple[str, ...],
    threshold: int | None,
    expiration: int | None,
    clear_expiration: bool,
) -> None:
    """Change signers, threshold or expiration with every signer's consent."""
    try:
        print_header("Reconfigure Multisig")
        setup = setup_wallet_from_config(config)
        group_address = _resolve_group(setup, group)

        result = setup.orchestrator.reconfigure_group(
            group_address,
            _consenters(setup, consent_keys),
            new_signers=(
                [KeyManager.load_identity(s) for s in signers] if signers else None
            ),
            new_threshold=threshold,
            new_expiration=expiration,
            clear_expiration=clear_expiration,
        )
        _finish(setup, result, "Reconfigure")

        print_status("Multisig", "group reconfigured", success=True)
        print_group_summary(
            group_address, result.group, setup.ledger.balance(group_address)
        )

    except click.ClickException:
        raise
    except Exception as e:
        logger.error("Reconfigure failed", exc_info=e)
        raise click.ClickException(str(e)) from e


@wallet.command()
@config_option
@group_option
@click.option(
    "--consent-key",
    "consent_keys",
    type=click.Path(exists=True, path_type=Path),
    multiple=True,
    help="Signing key of another consenting signer (repeatable)",
)
@click.option("--receiver", type=str, required=True, help="Receiver key (hex or key file)")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
def close(
    config: Path,
    group: str | None,
    consent_keys: tuple[Path, ...],
    receiver: str,
    yes: bool,
) -> None:
    """Close the group and release its balance to a receiver."""
    try:
        print_header("Close Multisig")
        setup = setup_wallet_from_config(config)
        group_address = _resolve_group(setup, group)

        if not yes and not click.confirm(f"Close group {group_address}?"):
            raise click.Abort()

        result = setup.orchestrator.close_group(
            group_address,
            _consenters(setup, consent_keys),
            KeyManager.load_identity(receiver),
        )
        _finish(setup, result, "Close")

        print_status("Multisig", "group closed", success=True)
        print_hash_info("Released", str(result.released))

    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        logger.error("Close failed", exc_info=e)
        raise click.ClickException(str(e)) from e


@wallet.command()
@config_option
@group_option
def show(config: Path, group: str | None) -> None:
    """Show the group configuration and its proposals."""
    try:
        setup = setup_wallet_from_config(config)
        group_address = _resolve_group(setup, group)

        print_group_summary(
            group_address,
            setup.program.get_group(group_address),
            setup.ledger.balance(group_address),
        )
        for address, datum in setup.program.list_proposals(group_address):
            click.echo()
            print_proposal_summary(address, datum)

    except click.ClickException:
        raise
    except Exception as e:
        logger.error("Show failed", exc_info=e)
        raise click.ClickException(str(e)) from e
