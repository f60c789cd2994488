"""Rose Rocket CLI — entry point.

Multi-tenant command line client for the Rose Rocket logistics API.
"""

from __future__ import annotations

import logging

import typer

from rose_rocket.commands.auth_cmd import app as auth_app
from rose_rocket.commands.customers_cmd import address_books_app
from rose_rocket.commands.customers_cmd import app as customers_app
from rose_rocket.commands.manifests_cmd import app as manifests_app
from rose_rocket.commands.orders_cmd import app as orders_app
from rose_rocket.commands.tenants_cmd import app as tenants_app
from rose_rocket.commands.webhook_cmd import app as webhook_app

app = typer.Typer(
    name="rose-rocket",
    help="CLI tool for orders, manifests and payments across Rose Rocket tenants.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(auth_app, name="auth")
app.add_typer(tenants_app, name="tenants")
app.add_typer(orders_app, name="orders")
app.add_typer(manifests_app, name="manifests")
app.add_typer(customers_app, name="customers")
app.add_typer(address_books_app, name="address-books")
app.add_typer(webhook_app, name="webhook")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Rose Rocket CLI — orders, manifests, payments and files."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
