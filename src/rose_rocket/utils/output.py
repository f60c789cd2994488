"""Output formatting utilities for CLI output."""

from __future__ import annotations

import csv
import json
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def flatten_record(obj: Any, parent_key: str = "", result: dict[str, Any] | None = None) -> dict[str, Any]:
    """Flatten nested dicts/lists into one level.

    {"origin": {"city": "Nogales"}, "tags": ["a"]} -> {"origin.city": "Nogales", "tags[0]": "a"}
    """
    if result is None:
        result = {}

    if isinstance(obj, dict):
        if not obj and parent_key:
            result[parent_key] = ""
        for key, value in obj.items():
            new_key = f"{parent_key}.{key}" if parent_key else str(key)
            flatten_record(value, new_key, result)
    elif isinstance(obj, list):
        if not obj and parent_key:
            result[parent_key] = ""
        for index, element in enumerate(obj):
            flatten_record(element, f"{parent_key}[{index}]", result)
    else:
        result[parent_key] = obj

    return result


def collect_columns(rows: list[dict[str, Any]]) -> list[str]:
    """Union of keys across rows, in first-seen order."""
    columns: dict[str, None] = {}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)


def print_output(
    data: list[dict[str, Any]] | dict[str, Any] | Any,
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Render API records (orders, legs, stops...) as a table, JSON or CSV.

    Tables and CSV show ``columns`` only, or every key when None. Table
    output goes to stderr so piping JSON/CSV stays clean.
    """
    if fmt == OutputFormat.JSON:
        print_json(data)
    elif fmt == OutputFormat.CSV:
        print_csv(data, columns)
    else:
        print_table(data, columns, title)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def _as_rows(data: Any) -> list[dict[str, Any]]:
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [row if isinstance(row, dict) else {"value": row} for row in data]
    return [{"value": data}]


def print_table(
    data: list[dict[str, Any]] | dict[str, Any] | Any,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print data as a Rich table."""
    rows = _as_rows(data)

    if not rows:
        console.print("[dim]No results.[/dim]")
        return

    if columns is None:
        columns = list(rows[0].keys())

    table = Table(title=title, show_lines=False)
    for col in columns:
        table.add_column(col, overflow="fold")

    for row in rows:
        table.add_row(*[_cell(row.get(col, "")) for col in columns])

    console.print(table)


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    if value is None:
        return ""
    return str(value)


def print_csv(
    data: list[dict[str, Any]] | dict[str, Any] | Any,
    columns: list[str] | None = None,
) -> None:
    """Print data as CSV to stdout, flattening nested records into dotted columns."""
    rows = [flatten_record(row) for row in _as_rows(data)]

    if not rows:
        return

    if columns is None:
        columns = collect_columns(rows)

    writer = csv.DictWriter(sys.stdout, fieldnames=columns, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({k: row.get(k, "") for k in columns})
