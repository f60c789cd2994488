"""Customer service."""

from __future__ import annotations

from typing import Any

from rose_rocket.client import RoseRocketClient
from rose_rocket.utils.envelope import unwrap
from rose_rocket.utils.paths import seg


class CustomerService:
    """Service for customer lookups."""

    def __init__(self, client: RoseRocketClient) -> None:
        self._client = client

    def get(self, tenant: str, customer_id: str) -> dict[str, Any]:
        """Get a customer by ID."""
        return unwrap(self._client.get(f"/customers/{seg(customer_id)}", tenant), "customers.get")
