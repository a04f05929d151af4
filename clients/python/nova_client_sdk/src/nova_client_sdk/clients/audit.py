from __future__ import annotations

from typing import Any

from ..models import BatchDetailResponse, BatchListResponse, RollbackResponse
from .base import BaseClient


class AuditClient(BaseClient):
    def list_batches(self, limit: int = 50) -> BatchListResponse:
        data = self._request("GET", "/api/audit", params={"limit": limit})
        return BatchListResponse.model_validate(data)

    def get_batch(self, batch_id: str) -> BatchDetailResponse:
        data = self._request("GET", f"/api/audit/batch/{batch_id}")
        return BatchDetailResponse.model_validate(data)

    def rollback(self, batch_id: str) -> RollbackResponse:
        data = self._request("POST", f"/api/audit/rollback/{batch_id}")
        return RollbackResponse.model_validate(data)

    def transactions(self, product_id: str | None = None, limit: int | None = None) -> dict[str, Any]:
        params = {"limit": limit} if limit is not None else None
        path = f"/api/transactions/product/{product_id}" if product_id else "/api/transactions"
        return self._request("GET", path, params=params) or {}
