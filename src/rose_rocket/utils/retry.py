"""Bounded exponential-backoff retry for a single HTTP call."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable

import httpx

from rose_rocket.utils.errors import NetworkError, RequestFailed

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def backoff_delay(attempt: int, retry_delay: float = 1.0, jitter: float = 1.0) -> float:
    """Seconds to wait after failed attempt ``attempt`` (1-based): delay * 2^n + U(0, jitter)."""
    return retry_delay * (2 ** attempt) + random.uniform(0, jitter)


def call_with_retry(
    send: Callable[[], httpx.Response],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    retry_delay: float = 1.0,
    jitter: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    label: str = "request",
) -> httpx.Response:
    """Issue ``send()`` until it succeeds, fails with a client error, or the budget runs out.

    Args:
        send: Zero-argument callable performing one HTTP call.
        max_attempts: Upper bound on the number of calls.
        retry_delay: Backoff base in seconds.
        jitter: Upper bound of the random term added to each wait.
        sleep: Sleep function, replaceable in tests.
        label: Human-readable description used in log lines.

    Returns:
        The first 2xx response.

    Raises:
        RequestFailed: A 4xx (never retried), any other non-2xx, or the last
            5xx once attempts are exhausted.
        NetworkError: The last attempt raised an httpx transport error.
    """
    max_attempts = max(1, max_attempts)

    for attempt in range(1, max_attempts + 1):
        try:
            response = send()
        except httpx.HTTPError as e:
            if attempt == max_attempts:
                raise NetworkError(f"{label} failed after {max_attempts} attempts: {e}") from e
            wait = backoff_delay(attempt, retry_delay, jitter)
            logger.warning(f"HTTP error on {label}: {e}. Retrying in {wait:.1f}s...")
            sleep(wait)
            continue

        status = response.status_code
        logger.info(f"[Attempt {attempt}/{max_attempts}] {label} -> {status}")

        if 200 <= status < 300:
            return response

        if 500 <= status < 600 and attempt < max_attempts:
            wait = backoff_delay(attempt, retry_delay, jitter)
            logger.warning(f"Server error ({status}) on {label}. Waiting {wait:.1f}s...")
            sleep(wait)
            continue

        raise RequestFailed(status, response.text, label)

    raise NetworkError(f"{label} failed after {max_attempts} attempts")
