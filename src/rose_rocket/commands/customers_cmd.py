"""CLI commands for customers and address books."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from rose_rocket.auth import AuthManager
from rose_rocket.client import RoseRocketClient
from rose_rocket.config import get_config
from rose_rocket.services.address_books import AddressBookService, org_names
from rose_rocket.services.customers import CustomerService
from rose_rocket.utils.errors import RoseRocketError, handle_error
from rose_rocket.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="customers", help="Look up customers.")
address_books_app = typer.Typer(name="address-books", help="Search location address books.")

TenantOpt = Annotated[str, typer.Option("--tenant", "-t", help="Tenant name")]
OutputOpt = Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")]


def _build_client(verbose: bool = False) -> RoseRocketClient:
    try:
        config = get_config()
        return RoseRocketClient(config, AuthManager(config), verbose=verbose)
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("get")
def get_customer(
    customer_id: Annotated[str, typer.Argument(help="Customer ID")],
    tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.JSON,
    verbose: VerboseOpt = False,
) -> None:
    """Show a customer."""
    client = _build_client(verbose)
    try:
        print_output(CustomerService(client).get(tenant, customer_id), output, title="Customer")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@address_books_app.command("search")
def search_address_book(
    location_id: Annotated[str, typer.Argument(help="Location ID")],
    term: Annotated[str, typer.Option("--term", "-s", help="Search term (empty = all)")] = "",
    names_only: Annotated[bool, typer.Option("--names-only", help="Only list organization names")] = False,
    tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """Search a location's address book."""
    client = _build_client(verbose)
    try:
        entries = AddressBookService(client).search(tenant, location_id, term)
        console.print(f"[dim]Found {len(entries)} address book entries[/dim]")
        if names_only:
            print_output([{"org_name": name} for name in org_names(entries)], output, title="Organizations")
        else:
            columns = ["id", "org_name", "city", "state", "country"] if output == OutputFormat.TABLE else None
            print_output(entries, output, columns=columns, title="Address Book")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@address_books_app.command("org-names")
def address_book_org_names(
    location_id: Annotated[str, typer.Argument(help="Location ID")],
    term: Annotated[str, typer.Option("--term", "-s", help="Search term (empty = all)")] = "",
    tenant: TenantOpt = ...,
    output: OutputOpt = OutputFormat.TABLE,
    verbose: VerboseOpt = False,
) -> None:
    """List the organization names in a location's address book."""
    client = _build_client(verbose)
    try:
        names = org_names(AddressBookService(client).search(tenant, location_id, term))
        print_output([{"org_name": name} for name in names], output, title="Organizations")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
