"""Failure taxonomy and structured error output.

Every failure raised by the client, auth, pagination and service layers is a
``RoseRocketError`` subclass carrying a stable ``code`` tag. CLI commands
catch the base class and hand it to :func:`handle_error`.
"""

from __future__ import annotations

import json
import sys

from rich.console import Console

console = Console(stderr=True)


class RoseRocketError(Exception):
    """Base class for all tagged failures."""

    code = "RUNTIME_ERROR"


class UnknownTenant(RoseRocketError):
    code = "UNKNOWN_TENANT"

    def __init__(self, tenant: str, available: list[str] | None = None) -> None:
        self.tenant = tenant
        message = f"Unknown tenant '{tenant}'"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)


class ConfigMissing(RoseRocketError):
    code = "CONFIG_MISSING"


class InvalidInput(RoseRocketError):
    code = "INVALID_INPUT"


class TokenExchangeFailed(RoseRocketError):
    code = "TOKEN_EXCHANGE_FAILED"

    def __init__(self, tenant: str, status_code: int | None, body: str) -> None:
        self.tenant = tenant
        self.status_code = status_code
        self.body = body
        status = f"HTTP {status_code}" if status_code is not None else "network error"
        super().__init__(f"Token exchange failed for '{tenant}' ({status}): {body}")


class MalformedTokenResponse(RoseRocketError):
    code = "MALFORMED_TOKEN_RESPONSE"


class RequestFailed(RoseRocketError):
    """A request ended with a non-2xx status.

    ``retryable`` is True when the final status was a server error that
    exhausted the retry budget, False for client errors.
    """

    code = "REQUEST_FAILED"

    def __init__(self, status_code: int, body: str, url: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        self.retryable = status_code >= 500
        super().__init__(f"API error (HTTP {status_code}): {body}")


class PageFetchFailed(RoseRocketError):
    code = "PAGE_FETCH_FAILED"

    def __init__(self, status_code: int | None, offset: int, detail: str = "") -> None:
        self.status_code = status_code
        self.offset = offset
        status = f"HTTP {status_code}" if status_code is not None else "network error"
        message = f"Page fetch failed at offset {offset} ({status})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class ParseError(RoseRocketError):
    code = "PARSE_ERROR"


class NetworkError(RoseRocketError):
    code = "NETWORK_ERROR"


# Actionable hints keyed by error code
_ERROR_HINTS: dict[str, str] = {
    "UNKNOWN_TENANT": "Tenant not configured — check config/tenants.yaml or run `rose-rocket tenants list`",
    "CONFIG_MISSING": "Credentials incomplete — check config/tenants.yaml and your .env file",
    "TOKEN_EXCHANGE_FAILED": "Token exchange rejected — verify username, password and client credentials",
    "MALFORMED_TOKEN_RESPONSE": "Identity endpoint returned an unexpected body — check ROSE_ROCKET_TOKEN_ENDPOINT",
    "NETWORK_ERROR": "Connection error — check network connectivity",
    "PARSE_ERROR": "Response was not valid JSON — retry or inspect with --verbose",
    "INVALID_INPUT": "Invalid argument — check parameter values",
}

_STATUS_HINTS: dict[int, str] = {
    400: "Bad request — verify the JSON body and IDs",
    401: "Token rejected — run `rose-rocket auth refresh`",
    403: "Forbidden — the tenant user lacks permission for this resource",
    404: "Not found — verify the ID and tenant",
    429: "Rate limited — wait a moment and retry",
}


def _get_hint(error: Exception) -> str | None:
    """Match an error to an actionable hint."""
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        if status_code in _STATUS_HINTS:
            return _STATUS_HINTS[status_code]
        if status_code >= 500:
            return "Server error persisted after retries — try again later"
    return _ERROR_HINTS.get(getattr(error, "code", ""))


def handle_error(error: Exception) -> None:
    """Emit a structured JSON error to stdout and a readable one to stderr.

    {"error": true, "code": "REQUEST_FAILED", "message": "...", "status_code": 404, "hint": "..."}
    """
    message = str(error)
    hint = _get_hint(error)

    error_obj: dict[str, object] = {
        "error": True,
        "code": getattr(error, "code", "RUNTIME_ERROR"),
        "message": message,
    }
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        error_obj["status_code"] = status_code
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
