"""Order service: search, lookup, legs, creation, notes and files."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Any

from rose_rocket.client import RoseRocketClient
from rose_rocket.utils.envelope import dig, unwrap
from rose_rocket.utils.errors import InvalidInput, ParseError
from rose_rocket.utils.files import is_valid_filename
from rose_rocket.utils.pagination import paginate
from rose_rocket.utils.paths import seg

logger = logging.getLogger(__name__)


def in_transit_manifest_id(legs: list[dict[str, Any]]) -> str | None:
    """Pick the manifest carrying an order that is on the road.

    The first leg that is "loaded", or "dispatched" on a line haul, is the
    one on the road. An "available" line-haul leg means the order moves but
    has no manifest yet.
    """
    legs = [leg for leg in legs if isinstance(leg, dict)]

    for leg in legs:
        if leg.get("status") == "loaded":
            return leg.get("manifest_id")
        if leg.get("status") == "dispatched" and leg.get("type") == "line_haul":
            return leg.get("manifest_id")

    for leg in legs:
        if leg.get("type") == "line_haul" and leg.get("status") == "available":
            logger.info("Order is in transit (line haul available) but no manifest is assigned yet")
            return None

    logger.info("Order is not in transit")
    return None


class OrderService:
    """Service for order operations."""

    def __init__(self, client: RoseRocketClient) -> None:
        self._client = client

    def search(self, tenant: str, query: Any = None, limit: int | None = None) -> list[dict[str, Any]]:
        """Fetch every order matching ``query`` across all pages.

        ``query`` may be a mapping, ordered pairs, or a raw query string such
        as "in_status_ids=delivered&created_start_at=2025-02-14 00:00:00".
        """
        page_limit = limit or self._client.config.settings.page_limit

        def fetch(page_params: list[tuple[str, str]]) -> Any:
            return self._client.get("/orders", tenant, params=page_params)

        return paginate(fetch, query, "orders", limit=page_limit)

    def get(self, tenant: str, order_id: str) -> dict[str, Any]:
        """Get a single order by ID."""
        return unwrap(self._client.get(f"/orders/{seg(order_id)}", tenant), "orders.get")

    def get_legs(self, tenant: str, order_id: str) -> list[dict[str, Any]]:
        """Get the legs (shipment segments) of an order."""
        legs = unwrap(self._client.get(f"/orders/{seg(order_id)}/legs", tenant), "orders.legs")
        logger.info(f"Retrieved {len(legs)} leg(s) for order {order_id}")
        return legs

    def get_in_transit_manifest_id(self, tenant: str, order_id: str) -> str | None:
        """Manifest ID of the order's in-transit leg, or None."""
        return in_transit_manifest_id(self.get_legs(tenant, order_id))

    def find_by_container(self, tenant: str, container_id: str) -> list[dict[str, Any]]:
        """Find orders by container number (two-stage search)."""
        payload = self._client.get(
            "/orders/two_stage", tenant, params={"search_term": container_id},
        )
        total = dig(payload, ("data", "total"))
        if isinstance(total, (int, float)) and total <= 0:
            return []
        return unwrap(payload, "orders.two_stage")

    def create(self, tenant: str, customer_id: str, order: dict[str, Any]) -> dict[str, Any]:
        """Create an order for a customer."""
        return self._create(tenant, customer_id, "orders", order)

    def create_booked(self, tenant: str, customer_id: str, order: dict[str, Any]) -> dict[str, Any]:
        """Create an order directly in the booked state."""
        return self._create(tenant, customer_id, "create_booked_order", order)

    def create_multi_stop(self, tenant: str, customer_id: str, order: dict[str, Any]) -> dict[str, Any]:
        """Create a multi-stop order."""
        return self._create(tenant, customer_id, "multistop_orders", order)

    def _create(self, tenant: str, customer_id: str, endpoint: str, order: dict[str, Any]) -> dict[str, Any]:
        if not isinstance(order, dict) or not order:
            raise InvalidInput("Order body must be a non-empty JSON object")
        payload = self._client.post(f"/customers/{seg(customer_id)}/{endpoint}", tenant, body=order)
        result = unwrap(payload, "orders.create")
        logger.info(f"Created order {result.get('public_id') or result.get('id')} for customer {customer_id}")
        return result

    def post_internal_note(self, tenant: str, order_id: str, message: str) -> bool:
        """Post an internal note on an order, authored by the tenant's API user."""
        author = self._client.config.get_tenant(tenant).username
        self._client.post(
            f"/orders/{seg(order_id)}/internal_events",
            tenant,
            body={"author": author, "type": "order-note", "text": message},
        )
        logger.info(f"Posted internal note on order {order_id}")
        return True

    def upload_file(
        self,
        tenant: str,
        order_id: str,
        path: str | Path,
        file_type: str = "other",
        description: str | None = None,
    ) -> dict[str, Any]:
        """Upload a document to an order. ``description`` defaults to the file name."""
        path = Path(path)
        description = description if description is not None else path.name
        if not is_valid_filename(description):
            raise InvalidInput(f"Invalid filename in description: {description!r}")
        if not path.is_file():
            raise InvalidInput(f"File not found: {path}")

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        with open(path, "rb") as f:
            payload = self._client.post(
                f"/orders/{seg(order_id)}/files/upload_file",
                tenant,
                files={"file": (path.name, f, content_type)},
                data={"type": file_type, "description": description},
            )
        return unwrap(payload, "orders.file")

    def delete_file(self, tenant: str, order_id: str, file_id: str) -> bool:
        """Delete a file from an order. The owning customer is looked up first."""
        order = self.get(tenant, order_id)
        customer_id = dig(order, ("customer", "id"))
        if not customer_id:
            raise ParseError(f"Order {order_id} has no customer.id")
        self._client.delete(
            f"/customers/{seg(customer_id)}/orders/{seg(order_id)}/files/{seg(file_id)}",
            tenant,
        )
        logger.info(f"Deleted file {file_id} from order {order_id}")
        return True
