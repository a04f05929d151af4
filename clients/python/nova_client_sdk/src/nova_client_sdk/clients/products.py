from __future__ import annotations

from typing import Any

from .bulk import BulkEntityClient


class ProductsClient(BulkEntityClient):
    entity = "products"
    batch_label = "Products"

    def list(self, sku: str | None = None, product_id: str | None = None) -> dict[str, Any]:
        params = {key: value for key, value in {"sku": sku, "productId": product_id}.items() if value}
        return self._request("GET", "/api/products", params=params or None) or {}

    def get(self, identifier: str, id_type: str = "ProductID") -> dict[str, Any]:
        return self._request("GET", f"/api/products/{id_type}/{identifier}") or {}
