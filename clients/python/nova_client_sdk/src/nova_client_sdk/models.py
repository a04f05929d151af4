from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class LoginResponse(ApiModel):
    success: bool
    message: str | None = None
    token: str
    token_type: str = "bearer"
    trace_id: str | None = None


class VerifyResponse(ApiModel):
    valid: bool
    account_name: str
    employee_id: int | None = None


class BulkOptions(ApiModel):
    upsert: bool = True
    transactional: bool = True
    dry_run: bool = False
    batch_name: str | None = None
    employee_id: int | None = None
    reason: str | None = None


class Issue(ApiModel):
    idx: int
    row: int
    field: str
    type: str
    msg: str


class IssueCounts(ApiModel):
    err: int = 0
    warn: int = 0
    info: int = 0


class ValidateResponse(ApiModel):
    issues: list[Issue] = Field(default_factory=list)
    valid: bool
    counts: IssueCounts = Field(default_factory=IssueCounts)


class FieldChange(ApiModel):
    field: str
    old_val: str | None = None
    new_val: str | None = None


class DiffRow(ApiModel):
    idx: int
    key: str
    display: str | None = None
    action: str
    changes: list[FieldChange] = Field(default_factory=list)
    message: str | None = None


class DiffTotals(ApiModel):
    create: int = 0
    update: int = 0
    unchanged: int = 0
    skip: int = 0


class DiffResponse(ApiModel):
    rows: list[DiffRow] = Field(default_factory=list)
    totals: DiffTotals = Field(default_factory=DiffTotals)


class BulkRowResult(ApiModel):
    idx: int
    key: str
    action: str
    changes: list[FieldChange] = Field(default_factory=list)
    message: str | None = None


class BulkResponse(ApiModel):
    success: bool
    batch_id: str
    batch_name: str | None = None
    dry_run: bool = False
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    message: str | None = None
    results: list[BulkRowResult] = Field(default_factory=list)
    trace_id: str | None = None


class BatchSummary(ApiModel):
    batch_id: str
    name: str
    entity: str
    user: str
    when: datetime
    mode: str
    summary: str
    status: str


class BatchListResponse(ApiModel):
    batches: list[BatchSummary] = Field(default_factory=list)


class AuditChange(ApiModel):
    audit_id: int
    entity_key: str
    product_id: str | None = None
    location_id: str | None = None
    action: str
    field: str
    old_value: str | None = None
    new_value: str | None = None
    created_at: datetime


class BatchDetailResponse(ApiModel):
    batch: dict[str, Any]
    changes: list[AuditChange] = Field(default_factory=list)


class RollbackResponse(ApiModel):
    success: bool
    batch_id: str
    status: str
    restored: int = 0
    deleted: int = 0
    transactions: int = 0
    message: str | None = None
    trace_id: str | None = None
