"""CLI commands for exercising the status-update webhook offline."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

from rose_rocket.config import load_settings
from rose_rocket.utils.errors import RoseRocketError, handle_error
from rose_rocket.utils.output import print_json
from rose_rocket.webhook import handle_status_update

app = typer.Typer(name="webhook", help="Validate status-update webhook payloads.")


@app.command("check")
def check(
    payload: Annotated[str, typer.Argument(help="Path to the JSON delivery ('-' for stdin)")] = "-",
    status: Annotated[str | None, typer.Option("--status", help="Watched order status")] = None,
) -> None:
    """Print the response the webhook would give for a delivery."""
    if payload == "-":
        raw = sys.stdin.read()
    else:
        path = Path(payload)
        raw = path.read_text() if path.is_file() else ""

    try:
        watched = status or load_settings().webhook_status
    except RoseRocketError as e:
        handle_error(e)
        raise typer.Exit(1)

    result = handle_status_update(raw, watched)
    print_json(result)
    if not result["success"]:
        raise typer.Exit(1)
