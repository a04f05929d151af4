from typing import Any, Literal

from pydantic import Field

from app.novabulk.schemas.common import CamelModel


class BulkOptions(CamelModel):
    upsert: bool = True
    transactional: bool = True
    dry_run: bool = False
    batch_name: str | None = Field(default=None, max_length=200)
    employee_id: int | None = None
    reason: str | None = Field(default=None, max_length=200)


class RowsRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "rows": [
                    {"LocationID": "MIAMI", "SKU": "A100", "Quantity": "12", "MinimumQuantity": "5"},
                ]
            }
        }
    }

    rows: list[dict[str, Any]]


class BulkRequest(RowsRequest):
    model_config = {
        "json_schema_extra": {
            "example": {
                "rows": [{"ProductID": "11111111-1111-1111-1111-111111111111", "ProductMarkupPrice": "44.99"}],
                "options": {"upsert": True, "transactional": True, "dryRun": True, "batchName": "Spring prices"},
            }
        }
    }

    options: BulkOptions = Field(default_factory=BulkOptions)


class Issue(CamelModel):
    idx: int
    row: int
    field: str
    type: Literal["err", "warn", "info"]
    msg: str


class IssueCounts(CamelModel):
    err: int = 0
    warn: int = 0
    info: int = 0


class ValidateResponse(CamelModel):
    issues: list[Issue]
    valid: bool
    counts: IssueCounts


class ParseResponse(CamelModel):
    rows: list[dict[str, Any]]
    headers: list[str]
    ignored_columns: list[str]
    issues: list[Issue]
    counts: IssueCounts


class FieldChange(CamelModel):
    field: str
    old_val: str | None
    new_val: str | None


class DiffRow(CamelModel):
    idx: int
    key: str
    display: str
    action: Literal["create", "update", "unchanged", "skip"]
    changes: list[FieldChange]
    message: str | None = None


class DiffTotals(CamelModel):
    create: int = 0
    update: int = 0
    unchanged: int = 0
    skip: int = 0


class DiffResponse(CamelModel):
    rows: list[DiffRow]
    totals: DiffTotals


class BulkRowResult(CamelModel):
    idx: int
    key: str
    action: Literal["CREATED", "UPDATED", "UNCHANGED", "SKIPPED"]
    changes: list[FieldChange]
    message: str | None = None


class BulkResponse(CamelModel):
    success: bool
    batch_id: str
    batch_name: str
    dry_run: bool
    created: int
    updated: int
    unchanged: int
    skipped: int
    message: str
    results: list[BulkRowResult]
    trace_id: str


class EntitySchemaResponse(CamelModel):
    entity: str
    label: str
    key_fields: list[str]
    columns: list[str]
    numeric: list[str]
    integer: list[str]
    boolean: list[str]
    guid: list[str]
    datetime: list[str]
    sample: str
