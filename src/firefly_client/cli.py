"""Command line interface for the Firefly client."""

import dataclasses
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .api_clients import FireflyAPIClient, PolicyStatus
from .config import load_config
from .exceptions import FireflyClientError, NotFoundError, TransportError

console = Console()

PACKAGE_LOGGER = "firefly_client"


def _create_client(ctx: click.Context) -> FireflyAPIClient:
    config = load_config(ctx.obj.get("config_path"))
    level = logging.DEBUG if ctx.obj.get("verbose") else config.log_level.upper()
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    if ctx.obj.get("endpoint"):
        config = dataclasses.replace(config, api_url=ctx.obj["endpoint"])
    return FireflyAPIClient.from_config(config, http_client=ctx.obj.get("http_client"))


def _fail(error: FireflyClientError) -> None:
    console.print(f"❌ {error}", style="red")
    if isinstance(error, TransportError) and error.user_guidance:
        console.print(error.user_guidance, style="yellow")
    sys.exit(2 if isinstance(error, NotFoundError) else 1)


@click.group()
@click.option("--config", "-c", type=click.Path(exists=False), help="Config file path")
@click.option("--endpoint", "-e", help="Firefly API URL (overrides configuration)")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(version=__version__, prog_name="firefly")
@click.pass_context
def cli(ctx, config: Optional[str], endpoint: Optional[str], verbose: bool):
    """Firefly - manage Firefly cloud-governance resources."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["endpoint"] = endpoint
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


@cli.group()
def auth():
    """Authentication commands."""


@auth.command("check")
@click.pass_context
def auth_check(ctx):
    """Log in with the configured credentials."""
    try:
        with _create_client(ctx) as client:
            token = client.credentials.ensure_authenticated()
    except FireflyClientError as e:
        _fail(e)
        return
    console.print(
        f"✅ Authenticated, token valid until {token.expires_at.isoformat()}",
        style="green",
    )


@cli.group()
def projects():
    """Workflow project commands."""


@projects.command("list")
@click.option("--page-size", default=10, show_default=True, help="Projects per page")
@click.option("--offset", default=0, show_default=True, help="Projects to skip")
@click.option("--search", default="", help="Filter projects by name")
@click.pass_context
def projects_list(ctx, page_size: int, offset: int, search: str):
    """List workflow projects."""
    try:
        with _create_client(ctx) as client:
            page = client.projects.list(page_size=page_size, offset=offset, search_query=search)
    except FireflyClientError as e:
        _fail(e)
        return

    table = Table(title=f"Projects ({page.total_count} total)")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Labels", style="magenta")
    table.add_column("Members", justify="right")
    for project in page.data:
        table.add_row(
            project.id, project.name, ", ".join(project.labels), str(project.members_count)
        )
    console.print(table)


@cli.group()
def guardrails():
    """Guardrail commands."""


@guardrails.command("list")
@click.option("--page", default=0, show_default=True, help="Zero-based page number")
@click.option("--page-size", default=100, show_default=True, help="Rules per page")
@click.pass_context
def guardrails_list(ctx, page: int, page_size: int):
    """List guardrail rules."""
    try:
        with _create_client(ctx) as client:
            rules = client.guardrails.list(page=page, page_size=page_size)
    except FireflyClientError as e:
        _fail(e)
        return

    table = Table(title="Guardrails")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Type", style="yellow")
    table.add_column("Enabled")
    for rule in rules:
        table.add_row(rule.id, rule.name, rule.type.value, "yes" if rule.is_enabled else "no")
    console.print(table)


@cli.group()
def governance():
    """Governance policy commands."""


@governance.command("get")
@click.argument("policy_id")
@click.pass_context
def governance_get(ctx, policy_id: str):
    """Show one governance policy."""
    try:
        with _create_client(ctx) as client:
            policy = client.governance_policies.get(policy_id)
    except FireflyClientError as e:
        _fail(e)
        return

    console.print(f"[bold]{policy.name}[/bold] ({policy.id})")
    if policy.description:
        console.print(policy.description)
    console.print(f"Category: {policy.category or '-'}")
    console.print(f"Labels: {', '.join(policy.labels) or '-'}")
    console.print(f"Frameworks: {', '.join(policy.frameworks) or '-'}")


@cli.group("backup-policies")
def backup_policies():
    """Backup and disaster-recovery policy commands."""


@backup_policies.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in PolicyStatus]),
    help="Only show policies in this state",
)
@click.pass_context
def backup_policies_list(ctx, status: Optional[str]):
    """List backup policies."""
    try:
        with _create_client(ctx) as client:
            result = client.backup_and_dr.list(status=status)
    except FireflyClientError as e:
        _fail(e)
        return

    table = Table(title=f"Backup Policies ({result.pagination.total} total)")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Provider", style="yellow")
    table.add_column("Region")
    table.add_column("Status", style="magenta")
    for policy in result.data:
        table.add_row(
            policy.policy_id,
            policy.policy_name,
            policy.provider_type,
            policy.region,
            policy.status,
        )
    console.print(table)


@backup_policies.command("set-status")
@click.argument("policy_id")
@click.argument("status", type=click.Choice([s.value for s in PolicyStatus]))
@click.pass_context
def backup_policies_set_status(ctx, policy_id: str, status: str):
    """Activate or deactivate a backup policy."""
    try:
        with _create_client(ctx) as client:
            client.backup_and_dr.set_status(policy_id, PolicyStatus(status))
    except FireflyClientError as e:
        _fail(e)
        return
    console.print(f"✅ Backup policy {policy_id} is now {status}", style="green")


if __name__ == "__main__":
    cli()
