"""Response envelope contracts.

The API wraps logically similar payloads differently ({"order": {...}},
{"data": {"payment": {...}}}, bare objects, bare {"data": [...]}), so each
endpoint declares its own envelope here instead of guessing a universal one.
"""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

from rose_rocket.utils.errors import ParseError

logger = logging.getLogger(__name__)


class Envelope(NamedTuple):
    path: tuple[str, ...]
    expect: type
    bare_fallback: bool = False
    empty_on_miss: bool = False


ENVELOPES: dict[str, Envelope] = {
    "orders.get": Envelope(("order",), dict),
    "orders.legs": Envelope(("legs",), list),
    "orders.two_stage": Envelope(("data", "orders"), list, empty_on_miss=True),
    "orders.create": Envelope(("order",), dict, bare_fallback=True),
    "orders.file": Envelope(("order_file",), dict, bare_fallback=True),
    "manifests.get": Envelope(("manifest",), dict, bare_fallback=True),
    "manifests.equipment": Envelope((), list),
    "manifests.stops": Envelope(("data", "stops"), list, empty_on_miss=True),
    "manifests.assignees": Envelope(("data",), list),
    "manifests.tags": Envelope(("data",), list),
    "manifests.payment": Envelope(("data", "payment"), dict, bare_fallback=True),
    "customers.get": Envelope(("customer",), dict),
}


def dig(payload: Any, path: tuple[str, ...]) -> Any:
    """Follow ``path`` through nested dicts, returning None on any miss."""
    current = payload
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def unwrap(payload: Any, endpoint: str) -> Any:
    """Extract the resource from ``payload`` per the endpoint's contract.

    Raises:
        ParseError: The envelope is absent and no bare fallback is declared,
            or the extracted value has the wrong shape.
    """
    envelope = ENVELOPES[endpoint]
    value = dig(payload, envelope.path)

    if isinstance(value, envelope.expect):
        return value

    if envelope.bare_fallback and isinstance(payload, dict):
        logger.debug(f"{endpoint}: no {'.'.join(envelope.path)} envelope, using bare object")
        return payload

    if envelope.empty_on_miss and value is None:
        logger.warning(f"{endpoint}: no {'.'.join(envelope.path)} in response, treating as empty")
        return envelope.expect()

    raise ParseError(
        f"{endpoint}: expected {envelope.expect.__name__} at '{'.'.join(envelope.path)}'"
    )
