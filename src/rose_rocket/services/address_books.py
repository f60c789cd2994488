"""Address book service."""

from __future__ import annotations

import logging
from typing import Any

from rose_rocket.client import RoseRocketClient
from rose_rocket.utils.envelope import dig
from rose_rocket.utils.pagination import paginate
from rose_rocket.utils.paths import seg

logger = logging.getLogger(__name__)

UNKNOWN_ORG = "Unknown Organization"


def org_names(entries: Any) -> list[str]:
    """Organization names of address book entries.

    Accepts either the entries list or a raw {"data": {"address_books": [...]}}
    response; any other shape yields an empty list.
    """
    if isinstance(entries, dict):
        entries = dig(entries, ("data", "address_books"))
    if not isinstance(entries, list):
        logger.warning("Address book payload has an unexpected shape")
        return []
    return [
        (entry.get("org_name") if isinstance(entry, dict) else None) or UNKNOWN_ORG
        for entry in entries
    ]


class AddressBookService:
    """Service for a location's address book."""

    def __init__(self, client: RoseRocketClient) -> None:
        self._client = client

    def search(self, tenant: str, location_id: str, search_term: str = "") -> list[dict[str, Any]]:
        """Search a location's address book, following all pages."""
        limit = self._client.config.settings.page_limit

        def fetch(page_params: list[tuple[str, str]]) -> Any:
            return self._client.get(
                f"/locations/{seg(location_id)}/address_books", tenant, params=page_params,
            )

        return paginate(
            fetch, [("searchTerm", search_term)], "address_books",
            limit=limit, container_key="data",
        )
