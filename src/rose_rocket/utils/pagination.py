"""Offset/limit pagination helpers for the Rose Rocket API."""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

import httpx

from rose_rocket.utils.errors import NetworkError, PageFetchFailed, ParseError, RequestFailed

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


def normalize_params(params: Any) -> list[tuple[str, str]]:
    """Turn a mapping, list of pairs or raw query string into ordered pairs.

    Any existing limit/offset is dropped; the paginator owns those.
    """
    if params is None:
        return []
    if isinstance(params, str):
        params = params.lstrip("?")
    items = httpx.QueryParams(params).multi_items()
    return [(k, v) for k, v in items if k not in ("limit", "offset")]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def paginate(
    fetch_page: Callable[[list[tuple[str, str]]], Any],
    params: Any,
    results_key: str,
    limit: int = DEFAULT_LIMIT,
    container_key: str | None = None,
) -> list[dict[str, Any]]:
    """Fetch every record from a limit/offset endpoint that reports ``total``.

    Args:
        fetch_page: Callable taking the page's query pairs and returning the
            decoded JSON body. Raises RequestFailed/NetworkError on failure.
        params: Caller's query (mapping, list of pairs, or query string).
        results_key: Key of the records array (e.g. "orders").
        limit: Page size.
        container_key: Optional key of the object holding the records array
            and ``total`` (e.g. "data" for {"data": {"address_books": [...]}}).

    Returns:
        All records in server order. An empty page ends pagination even if
        ``total`` claims more records remain.

    Raises:
        PageFetchFailed: A page request failed; partial results are discarded.
    """
    base = normalize_params(params)
    offset = 0
    total: float = math.inf
    all_results: list[dict[str, Any]] = []
    calls = 0

    while True:
        page_params = base + [("limit", str(limit)), ("offset", str(offset))]
        try:
            response = fetch_page(page_params)
        except RequestFailed as e:
            raise PageFetchFailed(e.status_code, offset, e.body) from e
        except (NetworkError, ParseError) as e:
            raise PageFetchFailed(None, offset, str(e)) from e
        calls += 1

        page = response if isinstance(response, dict) else {}
        if container_key is not None:
            page = page.get(container_key) or {}
            if not isinstance(page, dict):
                page = {}

        items = page.get(results_key)
        if not items or not isinstance(items, list):
            logger.info(f"No more {results_key} at offset {offset}, stopping")
            break

        reported = page.get("total")
        if _is_number(reported):
            total = reported
        else:
            logger.warning(f'"total" missing or not a number at offset {offset}; keeping {total}')

        room = total - len(all_results)
        if room < len(items):
            logger.warning(f"Page at offset {offset} overshoots reported total {total}; truncating")
            items = items[: max(0, int(room))]
        all_results.extend(items)

        if len(all_results) >= total or offset + limit >= total:
            break
        offset += limit

    logger.info(f"Fetched {len(all_results)} {results_key} in {calls} call(s)")
    return all_results
