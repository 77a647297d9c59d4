"""CLI output enhancements for multisig operations."""

import click
from tabulate import tabulate

from ...constants.colors import CliColor
from ...constants.status import ProcessStatus
from ...models.account_metas import decode_account_metas
from ...models.base import PublicKey
from ...models.wallet_datums import GroupConfigDatum, ProposalDatum


def print_header(text: str) -> None:
    """Print styled header text."""
    click.echo()
    click.secho(f"=== {text} ===", fg=CliColor.HEADER, bold=True)
    click.echo()


def print_title(text: str) -> None:
    """Print styled title text."""
    click.secho(f"=== {text} ===", fg=CliColor.TITLE, bold=True)


def print_address_info(label: str, address: str) -> None:
    """Print formatted address information."""
    click.echo(
        f"{click.style(label, fg=CliColor.INFO)}: "
        f"{click.style(address, fg=CliColor.ADDRESS)}"
    )


def print_hash_info(label: str, hash_value: str) -> None:
    """Print formatted hash information."""
    click.echo(
        f"{click.style(label, fg=CliColor.INFO)}: "
        f"{click.style(hash_value, fg=CliColor.HASH)}"
    )


def print_status(status: str, message: str, success: bool = True) -> None:
    """Print status message with appropriate styling."""
    icon = "✓" if success else "✗"
    color = CliColor.SUCCESS if success else CliColor.ERROR
    click.secho(f"{icon} {status}: {message}", fg=color)


def format_status_update(status: ProcessStatus, message: str) -> None:
    """Format and display wallet status updates."""
    colors = {
        ProcessStatus.NOT_STARTED: CliColor.INFO,
        ProcessStatus.LOADING_GROUP: CliColor.INFO,
        ProcessStatus.VALIDATING: CliColor.WARNING,
        ProcessStatus.DISPATCHING: CliColor.WARNING,
        ProcessStatus.GROUP_CONFIGURED: CliColor.SUCCESS,
        ProcessStatus.PROPOSAL_CREATED: CliColor.SUCCESS,
        ProcessStatus.APPROVAL_RECORDED: CliColor.SUCCESS,
        ProcessStatus.EXECUTED: CliColor.SUCCESS,
        ProcessStatus.GROUP_RECONFIGURED: CliColor.SUCCESS,
        ProcessStatus.GROUP_CLOSED: CliColor.SUCCESS,
        ProcessStatus.COMPLETED: CliColor.SUCCESS,
        ProcessStatus.FAILED: CliColor.ERROR,
    }

    click.secho(f"\n[{status.value}]", fg=colors.get(status, CliColor.INFO), bold=True)
    click.secho(message, fg=colors.get(status, CliColor.INFO))


def print_signers_table(
    signers: list[PublicKey], approvals: list[PublicKey] | None = None
) -> None:
    """Print signers, optionally marking which of them approved."""
    headers = ["Signer #", "Identity Key"]
    if approvals is not None:
        headers.append("Approved")

    approved = set(approvals or [])
    table_data = []
    for i, signer in enumerate(signers, 1):
        row = [f"{i}", str(signer)]
        if approvals is not None:
            row.append("yes" if signer in approved else "")
        table_data.append(row)

    click.echo(
        tabulate(
            table_data,
            headers=headers,
            tablefmt="rst",
            stralign="center",
            numalign="center",
        )
    )


def print_group_summary(address: PublicKey, group: GroupConfigDatum, balance: int) -> None:
    print_header("Multisig Group")
    print_address_info("Address", str(address))
    print_hash_info("Threshold", f"{group.threshold} of {len(group.signers)}")
    print_hash_info("Nonce", str(group.nonce))
    print_hash_info(
        "Expiration",
        "none" if group.expiration_time is None else str(group.expiration_time),
    )
    print_hash_info("Balance", str(balance))
    click.echo()
    print_signers_table(group.signer_keys)


def print_proposal_summary(address: PublicKey, proposal: ProposalDatum) -> None:
    print_title(f"Proposal {proposal.sequence}")
    print_address_info("Address", str(address))
    print_hash_info("Proposer", proposal.proposer.hex())
    print_hash_info("Program", proposal.program_id.hex())
    print_hash_info("Payload", proposal.payload.hex() or "-")
    print_hash_info("Status", "executed" if proposal.executed else "pending")

    metas = decode_account_metas(proposal.accounts)
    if metas:
        click.echo(
            tabulate(
                [
                    [str(m.pubkey), "x" if m.is_signer else "", "x" if m.is_writable else ""]
                    for m in metas
                ],
                headers=["Account", "Signer", "Writable"],
                tablefmt="rst",
            )
        )
    print_hash_info("Approvals", str(len(proposal.approvals)))
    for key in proposal.approval_keys:
        click.echo(f"  - {key}")
