"""Manifest (master trip) service."""

from __future__ import annotations

import logging
from typing import Any

from rose_rocket.client import RoseRocketClient
from rose_rocket.utils.envelope import unwrap
from rose_rocket.utils.errors import InvalidInput, RequestFailed
from rose_rocket.utils.paths import seg

logger = logging.getLogger(__name__)

VEHICLE = "Vehicle"
TRAILER = "Trailer"


def equipment_name(equipment: list[dict[str, Any]], equipment_type: str) -> str | None:
    """Name of the first equipment entry of the given type ("Vehicle", "Trailer")."""
    for entry in equipment:
        if not isinstance(entry, dict):
            continue
        kind = (entry.get("equipment_type") or {}).get("name")
        name = (entry.get("equipment") or {}).get("name")
        if kind == equipment_type and name:
            return name
    return None


class ManifestService:
    """Service for manifest lookups and payment updates."""

    def __init__(self, client: RoseRocketClient) -> None:
        self._client = client

    def get(self, tenant: str, manifest_id: str) -> dict[str, Any]:
        """Get a manifest by ID."""
        return unwrap(self._client.get(f"/manifests/{seg(manifest_id)}", tenant), "manifests.get")

    def get_equipment(self, tenant: str, manifest_id: str) -> list[dict[str, Any]]:
        """List equipment (trucks, trailers) assigned to a manifest."""
        return unwrap(
            self._client.get(f"/manifests/{seg(manifest_id)}/equipment", tenant), "manifests.equipment",
        )

    def get_truck_number(self, tenant: str, manifest_id: str) -> str | None:
        return equipment_name(self.get_equipment(tenant, manifest_id), VEHICLE)

    def get_trailer_number(self, tenant: str, manifest_id: str) -> str | None:
        return equipment_name(self.get_equipment(tenant, manifest_id), TRAILER)

    def get_stops(self, tenant: str, manifest_id: str) -> list[dict[str, Any]]:
        """List the stops of a manifest. An unknown manifest has no stops."""
        try:
            payload = self._client.get(f"/master_trips/{seg(manifest_id)}/stops", tenant)
        except RequestFailed as e:
            if e.status_code == 404:
                logger.info(f"Manifest {manifest_id} not found; returning no stops")
                return []
            raise
        return unwrap(payload, "manifests.stops")

    def get_assignees(self, tenant: str, manifest_id: str) -> list[dict[str, Any]]:
        """List drivers/carriers assigned to a manifest."""
        assignees = unwrap(
            self._client.get(f"/master_trips/{seg(manifest_id)}/assignees", tenant), "manifests.assignees",
        )
        logger.info(f"Retrieved {len(assignees)} assignee(s) for manifest {manifest_id}")
        return assignees

    def get_tags(self, tenant: str, manifest_id: str) -> list[dict[str, Any]]:
        return unwrap(self._client.get(f"/master_trips/{seg(manifest_id)}/tags", tenant), "manifests.tags")

    def get_payment(self, tenant: str, manifest_id: str) -> dict[str, Any]:
        """Get the carrier payment attached to a manifest."""
        return unwrap(
            self._client.get(f"/master_trips/{seg(manifest_id)}/payment", tenant), "manifests.payment",
        )

    def upsert_payment_items(self, tenant: str, manifest_id: str, payment: dict[str, Any]) -> Any:
        """Create or update payment line items ({"payment_items": [...]}).

        Items carrying an "id" are updated, the rest are created.
        """
        items = payment.get("payment_items") if isinstance(payment, dict) else None
        if not isinstance(items, list):
            raise InvalidInput('Payment body must contain a "payment_items" list')
        result = self._client.put(
            f"/manifests/{seg(manifest_id)}/payment/items/upsert", tenant, body=payment,
        )
        logger.info(f"Upserted {len(items)} payment item(s) on manifest {manifest_id}")
        return result
