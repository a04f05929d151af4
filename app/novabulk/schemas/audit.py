from datetime import datetime

from app.novabulk.schemas.common import CamelModel


class BatchSummary(CamelModel):
    batch_id: str
    name: str
    entity: str
    user: str
    when: datetime
    mode: str
    summary: str
    status: str


class BatchListResponse(CamelModel):
    batches: list[BatchSummary]


class AuditChange(CamelModel):
    audit_id: int
    entity_key: str
    product_id: str | None
    location_id: str | None
    action: str
    field: str
    old_value: str | None
    new_value: str | None
    created_at: datetime


class BatchDetail(BatchSummary):
    upsert: bool
    transactional: bool
    employee_id: int | None
    reason: str | None
    created: int
    updated: int
    unchanged: int
    skipped: int
    trace_id: str | None
    rolled_back_at: datetime | None
    rolled_back_by: str | None


class BatchDetailResponse(CamelModel):
    batch: BatchDetail
    changes: list[AuditChange]


class RollbackResponse(CamelModel):
    success: bool
    batch_id: str
    status: str
    restored: int
    deleted: int
    transactions: int
    message: str
    trace_id: str
