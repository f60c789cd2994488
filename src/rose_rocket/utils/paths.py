"""URL path helpers."""

from __future__ import annotations

from urllib.parse import quote


def seg(value: str) -> str:
    """Percent-encode one path segment (IDs may look like "ext:ABC-1")."""
    return quote(str(value), safe=":")
