from __future__ import annotations

import time
from typing import Any, Mapping, Sequence

from ..bulk_validation import ClientValidationError, ValidationIssue
from ..idempotency import idempotency_headers
from ..models import BulkOptions, BulkResponse, DiffResponse, ValidateResponse
from .base import BaseClient


def default_batch_name(label: str) -> str:
    return f"{label}-{int(time.time() * 1000)}"


class BulkEntityClient(BaseClient):
    """Shared parse/validate/diff/apply calls; subclasses pin the entity."""

    entity: str = ""
    batch_label: str = ""

    def schema(self) -> dict[str, Any]:
        return self._request("GET", f"/api/schemas/{self.entity}") or {}

    def sample_csv(self) -> str:
        return self._request("GET", f"/api/schemas/{self.entity}/sample.csv") or ""

    def parse(self, content: bytes, filename: str = "upload.csv") -> dict[str, Any]:
        files = {"file": (filename, content, "text/csv")}
        return self._request("POST", f"/api/{self.entity}/parse", files=files) or {}

    def validate(self, rows: Sequence[Mapping[str, Any]]) -> ValidateResponse:
        data = self._request("POST", f"/api/{self.entity}/validate", json_body={"rows": list(rows)})
        return ValidateResponse.model_validate(data)

    def diff(self, rows: Sequence[Mapping[str, Any]], upsert: bool = True) -> DiffResponse:
        body = {"rows": list(rows), "options": {"upsert": upsert}}
        data = self._request("POST", f"/api/{self.entity}/diff", json_body=body)
        return DiffResponse.model_validate(data)

    def bulk_update(
        self,
        rows: Sequence[Mapping[str, Any]],
        options: BulkOptions | None = None,
        idempotency_key: str | None = None,
    ) -> BulkResponse:
        if not rows:
            raise ClientValidationError([ValidationIssue(idx=0, row=0, field="rows", type="err", msg="No rows")])
        options = options or BulkOptions()
        if not options.batch_name:
            options = options.model_copy(update={"batch_name": default_batch_name(self.batch_label)})
        body = {"rows": list(rows), "options": options.model_dump(by_alias=True, exclude_none=True)}
        data = self._request(
            "POST",
            f"/api/{self.entity}/bulk",
            json_body=body,
            headers=idempotency_headers(idempotency_key),
            retry_mutation=True,
        )
        return BulkResponse.model_validate(data)
