"""Webhook receiver for order status-update events.

The endpoint always answers HTTP 200; the outcome is carried in the body's
``success`` flag so the sender never retries a delivery we chose to ignore.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from http import HTTPStatus
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from rose_rocket.config import Settings, load_settings
from rose_rocket.utils.errors import RoseRocketError

logger = logging.getLogger(__name__)

STATUS_UPDATED_EVENT = "order.status_updated"
DEFAULT_WATCHED_STATUS = "in-transit"
REQUIRED_FIELDS = ("event", "current_status", "order_id")


def _failure(error: str, **extra: Any) -> dict[str, Any]:
    return {"success": False, "error": error, **extra}


def handle_status_update(raw: bytes | str | None, watched_status: str = DEFAULT_WATCHED_STATUS) -> dict[str, Any]:
    """Validate a status-update delivery and echo the order it refers to."""
    try:
        if not raw:
            logger.error("Webhook request is missing a body")
            return _failure("Missing postData")

        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.error(f"Failed to parse webhook JSON payload: {e}")
            return _failure("Invalid JSON payload")

        if not isinstance(payload, dict) or not all(payload.get(f) for f in REQUIRED_FIELDS):
            logger.error(f"Webhook payload is missing required fields: {payload}")
            return _failure("Missing required fields")

        if payload["event"] != STATUS_UPDATED_EVENT:
            logger.info(f"Ignoring webhook event {payload['event']}")
            return _failure("Incorrect event type", event=payload["event"])

        if payload["current_status"] != watched_status:
            logger.info(f"Ignoring order {payload['order_id']} in status {payload['current_status']}")
            return _failure("Incorrect status", status=payload["current_status"])

        return {
            "success": True,
            "data": {"current_status": payload["current_status"], "order_id": payload["order_id"]},
        }
    except Exception:
        logger.exception("Unexpected error while handling webhook")
        return _failure("Internal server error")


@lru_cache()
def _settings_singleton() -> Settings:
    """Read settings once per process, on the first delivery."""
    return load_settings()


def get_watched_status() -> str:
    """FastAPI dependency returning the configured watched status."""
    return _settings_singleton().webhook_status


def create_app(watched_status: str | None = None) -> FastAPI:
    """Factory for the webhook FastAPI application.

    Without ``watched_status`` the status comes from ROSE_ROCKET_WEBHOOK_STATUS
    (or .env) when the first delivery arrives.
    """
    app = FastAPI(
        title="Rose Rocket webhook receiver",
        description="Validates and echoes order status-update events.",
    )

    def resolve_status() -> str:
        return watched_status or get_watched_status()

    @app.exception_handler(RoseRocketError)
    async def configuration_error(request: Request, exc: RoseRocketError) -> JSONResponse:
        logger.error(f"Webhook cannot load its configuration: {exc}")
        return JSONResponse(status_code=HTTPStatus.OK, content=_failure("Internal server error"))

    @app.post("/webhooks/status-update", status_code=HTTPStatus.OK)
    async def status_update(request: Request, status: str = Depends(resolve_status)) -> dict:
        return handle_status_update(await request.body(), status)

    return app


app = create_app()

__all__ = ["app", "create_app", "get_watched_status", "handle_status_update"]
