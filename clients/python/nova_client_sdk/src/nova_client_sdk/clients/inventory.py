from __future__ import annotations

from typing import Any

from .bulk import BulkEntityClient


class InventoryClient(BulkEntityClient):
    entity = "inventory"
    batch_label = "Inventory"

    def list(self, location_id: str | None = None, product_id: str | None = None) -> dict[str, Any]:
        params = {key: value for key, value in {"locationId": location_id, "productId": product_id}.items() if value}
        return self._request("GET", "/api/inventory", params=params or None) or {}

    def get(self, location_id: str, product_id: str) -> dict[str, Any]:
        return self._request("GET", f"/api/inventory/{location_id}/{product_id}") or {}
