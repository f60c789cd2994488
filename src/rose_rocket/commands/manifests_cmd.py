"""CLI commands for manifests."""

from __future__ import annotations

from typing import Annotated, Any, Callable

import typer
from rich.console import Console

from rose_rocket.auth import AuthManager
from rose_rocket.client import RoseRocketClient
from rose_rocket.config import get_config
from rose_rocket.services.manifests import TRAILER, VEHICLE, ManifestService, equipment_name
from rose_rocket.utils.errors import RoseRocketError, handle_error
from rose_rocket.utils.inputs import load_json_input
from rose_rocket.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="manifests", help="Inspect manifests and update carrier payments.")

ManifestArg = Annotated[str, typer.Argument(help="Manifest ID")]
TenantOpt = Annotated[str, typer.Option("--tenant", "-t", help="Tenant name")]
OutputOpt = Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")]


def _build_client(verbose: bool = False) -> tuple[RoseRocketClient, ManifestService]:
    try:
        config = get_config()
        client = RoseRocketClient(config, AuthManager(config), verbose=verbose)
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    return client, ManifestService(client)


def _run(
    fetch: Callable[[ManifestService], Any],
    output: OutputFormat,
    verbose: bool,
    title: str,
    columns: list[str] | None = None,
) -> None:
    client, service = _build_client(verbose)
    try:
        result = fetch(service)
        print_output(result, output, columns=columns if output == OutputFormat.TABLE else None, title=title)
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("get")
def get_manifest(
    manifest_id: ManifestArg, tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.JSON, verbose: VerboseOpt = False,
) -> None:
    """Show a manifest."""
    _run(lambda s: s.get(tenant, manifest_id), output, verbose, "Manifest")


@app.command("equipment")
def equipment(
    manifest_id: ManifestArg, tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE, verbose: VerboseOpt = False,
) -> None:
    """List equipment on a manifest, with truck and trailer numbers."""
    def fetch(service: ManifestService) -> dict[str, Any]:
        items = service.get_equipment(tenant, manifest_id)
        return {
            "manifest_id": manifest_id,
            "truck": equipment_name(items, VEHICLE),
            "trailer": equipment_name(items, TRAILER),
            "equipment": items,
        }

    _run(fetch, output, verbose, "Equipment", columns=["manifest_id", "truck", "trailer"])


@app.command("stops")
def stops(
    manifest_id: ManifestArg, tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE, verbose: VerboseOpt = False,
) -> None:
    """List the stops of a manifest."""
    _run(lambda s: s.get_stops(tenant, manifest_id), output, verbose, "Stops",
         columns=["id", "type", "status", "sequence"])


@app.command("assignees")
def assignees(
    manifest_id: ManifestArg, tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE, verbose: VerboseOpt = False,
) -> None:
    """List the drivers and carriers assigned to a manifest."""
    _run(lambda s: s.get_assignees(tenant, manifest_id), output, verbose, "Assignees")


@app.command("tags")
def tags(
    manifest_id: ManifestArg, tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE, verbose: VerboseOpt = False,
) -> None:
    """List the tags on a manifest."""
    _run(lambda s: s.get_tags(tenant, manifest_id), output, verbose, "Tags")


@app.command("payment")
def payment(
    manifest_id: ManifestArg, tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.JSON, verbose: VerboseOpt = False,
) -> None:
    """Show the carrier payment of a manifest."""
    _run(lambda s: s.get_payment(tenant, manifest_id), output, verbose, "Payment")


@app.command("upsert-payment")
def upsert_payment(
    manifest_id: ManifestArg,
    tenant: TenantOpt = ...,
    body: Annotated[str, typer.Option("--body", "-b", help='Path to {"payment_items": [...]} JSON ("-" for stdin)')] = ...,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be sent without executing")] = False,
    output: OutputOpt = OutputFormat.JSON,
    verbose: VerboseOpt = False,
) -> None:
    """Create or update payment line items on a manifest."""
    if dry_run:
        try:
            payload = load_json_input(body)
        except RoseRocketError as e:
            handle_error(e)
            raise typer.Exit(1)
        console.print(f"[yellow]DRY RUN:[/yellow] Would upsert payment items on manifest {manifest_id}:")
        print_output(payload, OutputFormat.JSON)
        return

    _run(
        lambda s: s.upsert_payment_items(tenant, manifest_id, load_json_input(body)),
        output, verbose, "Payment Updated",
    )
