"""CLI commands for inspecting configured tenants."""

from __future__ import annotations

from typing import Annotated

import typer

from rose_rocket.config import get_config
from rose_rocket.utils.errors import RoseRocketError, handle_error
from rose_rocket.utils.output import OutputFormat, print_output

app = typer.Typer(name="tenants", help="Inspect configured tenants.")


@app.command("list")
def list_tenants(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """List tenants and the API host each one uses. Secrets are never shown."""
    try:
        config = get_config()
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)

    rows = [
        {
            "tenant": name,
            "username": config.tenants[name].username,
            "base_url": config.base_url(name),
        }
        for name in config.all_tenants
    ]
    print_output(rows, output, columns=["tenant", "username", "base_url"], title="Tenants")
