"""CLI commands for orders."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from rose_rocket.auth import AuthManager
from rose_rocket.client import RoseRocketClient
from rose_rocket.config import get_config
from rose_rocket.services.orders import OrderService
from rose_rocket.utils.errors import RoseRocketError, handle_error
from rose_rocket.utils.inputs import load_json_input
from rose_rocket.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="orders", help="Search, inspect and create orders.")

TenantOpt = Annotated[str, typer.Option("--tenant", "-t", help="Tenant name")]
OutputOpt = Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")]

ORDER_COLUMNS = ["id", "public_id", "status", "customer", "origin", "destination"]
LEG_COLUMNS = ["id", "type", "status", "manifest_id"]


def _build_client(verbose: bool = False) -> tuple[RoseRocketClient, OrderService]:
    try:
        config = get_config()
        client = RoseRocketClient(config, AuthManager(config), verbose=verbose)
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    return client, OrderService(client)


def _summary(order: dict) -> dict:
    """Flatten nested order fields for table display."""
    return {
        **order,
        "customer": (order.get("customer") or {}).get("short_code", ""),
        "origin": (order.get("origin") or {}).get("city", ""),
        "destination": (order.get("destination") or {}).get("city", ""),
    }


@app.command("search")
def search_orders(
    tenant: TenantOpt = ...,
    query: Annotated[str, typer.Option("--query", "-q", help='Query string, e.g. "in_status_ids=delivered"')] = "",
    limit: Annotated[int | None, typer.Option("--limit", help="Page size")] = None,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """Fetch every order matching a query, following all pages."""
    client, service = _build_client(verbose)
    try:
        orders = service.search(tenant, query, limit=limit)
        console.print(f"[dim]Found {len(orders)} orders[/dim]")
        if output == OutputFormat.TABLE:
            print_output([_summary(o) for o in orders], output, columns=ORDER_COLUMNS, title=f"Orders ({tenant})")
        else:
            print_output(orders, output)
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("get")
def get_order(
    order_id: Annotated[str, typer.Argument(help="Order ID (or ext:<id>)")],
    tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.JSON,
    verbose: VerboseOpt = False,
) -> None:
    """Show a single order."""
    client, service = _build_client(verbose)
    try:
        print_output(service.get(tenant, order_id), output, title="Order")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("legs")
def order_legs(
    order_id: Annotated[str, typer.Argument(help="Order ID")],
    tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """List the legs of an order."""
    client, service = _build_client(verbose)
    try:
        legs = service.get_legs(tenant, order_id)
        print_output(legs, output, columns=LEG_COLUMNS if output == OutputFormat.TABLE else None, title="Legs")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("in-transit-manifest")
def in_transit_manifest(
    order_id: Annotated[str, typer.Argument(help="Order ID")],
    tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """Show the manifest carrying an in-transit order."""
    client, service = _build_client(verbose)
    try:
        manifest_id = service.get_in_transit_manifest_id(tenant, order_id)
        print_output({"order_id": order_id, "manifest_id": manifest_id}, output, title="In-Transit Manifest")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("find-container")
def find_container(
    container_id: Annotated[str, typer.Argument(help="Container number")],
    tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """Find orders referencing a container number."""
    client, service = _build_client(verbose)
    try:
        orders = service.find_by_container(tenant, container_id)
        console.print(f"[dim]Found {len(orders)} orders[/dim]")
        print_output(orders, output, columns=["id", "public_id", "status"] if output == OutputFormat.TABLE else None)
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


def _create(kind: str, tenant: str, customer_id: str, body: str, dry_run: bool,
            output: OutputFormat, verbose: bool) -> None:
    client, service = _build_client(verbose)
    try:
        order = load_json_input(body)
        if dry_run:
            console.print(f"[yellow]DRY RUN:[/yellow] Would create {kind} order for customer {customer_id}:")
            print_output(order, OutputFormat.JSON)
            return
        creators = {
            "standard": service.create,
            "booked": service.create_booked,
            "multi-stop": service.create_multi_stop,
        }
        result = creators[kind](tenant, customer_id, order)
        print_output(result, output, title="Order Created")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


CustomerOpt = Annotated[str, typer.Option("--customer-id", "-c", help="Customer ID")]
BodyOpt = Annotated[str, typer.Option("--body", "-b", help="Path to order JSON ('-' for stdin)")]
DryRunOpt = Annotated[bool, typer.Option("--dry-run", help="Show what would be sent without executing")]


@app.command("create")
def create_order(
    tenant: TenantOpt = ..., customer_id: CustomerOpt = ..., body: BodyOpt = ...,
    dry_run: DryRunOpt = False, output: OutputOpt = OutputFormat.JSON, verbose: VerboseOpt = False,
) -> None:
    """Create an order for a customer."""
    _create("standard", tenant, customer_id, body, dry_run, output, verbose)


@app.command("create-booked")
def create_booked_order(
    tenant: TenantOpt = ..., customer_id: CustomerOpt = ..., body: BodyOpt = ...,
    dry_run: DryRunOpt = False, output: OutputOpt = OutputFormat.JSON, verbose: VerboseOpt = False,
) -> None:
    """Create an order directly in the booked state."""
    _create("booked", tenant, customer_id, body, dry_run, output, verbose)


@app.command("create-multi-stop")
def create_multi_stop_order(
    tenant: TenantOpt = ..., customer_id: CustomerOpt = ..., body: BodyOpt = ...,
    dry_run: DryRunOpt = False, output: OutputOpt = OutputFormat.JSON, verbose: VerboseOpt = False,
) -> None:
    """Create a multi-stop order."""
    _create("multi-stop", tenant, customer_id, body, dry_run, output, verbose)


@app.command("note")
def post_note(
    order_id: Annotated[str, typer.Argument(help="Order ID")],
    message: Annotated[str, typer.Option("--message", "-m", help="Note text")] = ...,
    tenant: TenantOpt = ...,
    verbose: VerboseOpt = False,
) -> None:
    """Post an internal note on an order."""
    client, service = _build_client(verbose)
    try:
        service.post_internal_note(tenant, order_id, message)
        console.print(f"[green]Note posted on order {order_id}[/green]")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("upload-file")
def upload_file(
    order_id: Annotated[str, typer.Argument(help="Order ID")],
    path: Annotated[str, typer.Option("--file", "-f", help="File to upload")] = ...,
    file_type: Annotated[str, typer.Option("--type", help="Document type")] = "other",
    description: Annotated[str | None, typer.Option("--description", "-d", help="Defaults to the file name")] = None,
    tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.JSON,
    verbose: VerboseOpt = False,
) -> None:
    """Attach a document to an order."""
    client, service = _build_client(verbose)
    try:
        result = service.upload_file(tenant, order_id, path, file_type=file_type, description=description)
        print_output(result, output, title="File Uploaded")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("delete-file")
def delete_file(
    order_id: Annotated[str, typer.Argument(help="Order ID")],
    file_id: Annotated[str, typer.Option("--file-id", help="File ID to delete")] = ...,
    tenant: TenantOpt = ...,
    verbose: VerboseOpt = False,
) -> None:
    """Delete a document from an order."""
    client, service = _build_client(verbose)
    try:
        service.delete_file(tenant, order_id, file_id)
        console.print(f"[green]Deleted file {file_id} from order {order_id}[/green]")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
