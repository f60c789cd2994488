"""CLI commands for authentication management."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from rose_rocket.auth import AuthManager
from rose_rocket.config import get_config
from rose_rocket.utils.errors import RoseRocketError, handle_error
from rose_rocket.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Manage per-tenant access tokens.")


def _build_auth() -> AuthManager:
    try:
        return AuthManager(get_config())
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)


def _token_result(auth: AuthManager, tenant: str, status_label: str) -> dict:
    status = auth.get_status(tenant)
    return {
        "tenant": tenant,
        "status": status_label,
        "expires_at": str(status.expires_at),
        "seconds_remaining": status.seconds_remaining,
    }


@app.command()
def login(
    tenant: Annotated[str, typer.Option("--tenant", "-t", help="Tenant to authenticate")] = ...,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Exchange the tenant's credentials and display token status."""
    auth = _build_auth()
    try:
        console.print(f"Authenticating tenant [bold]{tenant}[/bold]...", style="yellow")
        auth.get_access_token(tenant)
        print_output(_token_result(auth, tenant, "authenticated"), output, title="Authentication")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        auth.close()


@app.command()
def status(
    tenant: Annotated[str, typer.Option("--tenant", "-t", help="Tenant to inspect")] = ...,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show the cached token status for a tenant."""
    auth = _build_auth()
    try:
        token_status = auth.get_status(tenant)
        result = {
            "tenant": tenant,
            "has_token": token_status.has_token,
            "is_expired": token_status.is_expired,
            "expires_at": str(token_status.expires_at) if token_status.expires_at else "N/A",
            "seconds_remaining": token_status.seconds_remaining or 0,
        }
        print_output(result, output, title="Token Status")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        auth.close()


@app.command()
def refresh(
    tenant: Annotated[str, typer.Option("--tenant", "-t", help="Tenant to re-authenticate")] = ...,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Force a new token exchange for a tenant."""
    auth = _build_auth()
    try:
        console.print(f"Force refreshing token for [bold]{tenant}[/bold]...", style="yellow")
        auth.get_access_token(tenant, force_refresh=True)
        print_output(_token_result(auth, tenant, "refreshed"), output, title="Token Refreshed")
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        auth.close()
