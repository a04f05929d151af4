from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.novabulk.core.config import settings
from app.novabulk.core.deps import require_account
from app.novabulk.core.context import get_request_context
from app.novabulk.core.error_catalog import AppError, ErrorCatalog
from app.novabulk.db.session import get_db
from app.novabulk.schemas.bulk import (
    BulkRequest,
    BulkResponse,
    DiffResponse,
    ParseResponse,
    RowsRequest,
    ValidateResponse,
)
from app.novabulk.schemas.errors import ErrorResponse
from app.novabulk.services.audit import AuditEventPayload, AuditService
from app.novabulk.services.bulk_apply import BulkApplyService
from app.novabulk.services.bulk_diff import diff_rows
from app.novabulk.services.bulk_schemas import get_schema
from app.novabulk.services.bulk_validation import validate_rows
from app.novabulk.services.csv_parser import decode_upload, parse_for_schema
from app.novabulk.services.idempotency import IdempotencyService, extract_idempotency_key

router = APIRouter(dependencies=[Depends(require_account)])

ERROR_RESPONSES = {
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


def _ensure_row_limit(rows: list[dict]) -> None:
    if len(rows) > settings.BULK_MAX_ROWS:
        raise AppError(
            ErrorCatalog.VALIDATION_ERROR,
            details={"rows": f"At most {settings.BULK_MAX_ROWS} rows per request", "maxRows": settings.BULK_MAX_ROWS},
        )


@router.post("/api/{entity}/parse", response_model=ParseResponse, responses=ERROR_RESPONSES)
async def parse_upload(entity: str, file: UploadFile = File(...)):
    schema = get_schema(entity)
    text = decode_upload(await file.read())
    parsed = parse_for_schema(text, schema)
    _ensure_row_limit(parsed.rows)
    validation = validate_rows(parsed.rows, schema)
    return ParseResponse(
        rows=parsed.rows,
        headers=parsed.headers,
        ignored_columns=parsed.ignored_columns,
        issues=validation.issues,
        counts=validation.counts,
    )


@router.post("/api/{entity}/validate", response_model=ValidateResponse, responses=ERROR_RESPONSES)
async def validate(entity: str, payload: RowsRequest):
    schema = get_schema(entity)
    _ensure_row_limit(payload.rows)
    validation = validate_rows(payload.rows, schema)
    return ValidateResponse(issues=validation.issues, valid=validation.valid, counts=validation.counts)


@router.post("/api/{entity}/diff", response_model=DiffResponse, responses=ERROR_RESPONSES)
def diff(entity: str, payload: BulkRequest, db=Depends(get_db)):
    schema = get_schema(entity)
    _ensure_row_limit(payload.rows)
    return DiffResponse(**diff_rows(db, schema, payload.rows, upsert=payload.options.upsert))


@router.post("/api/{entity}/bulk", response_model=BulkResponse, responses=ERROR_RESPONSES)
def bulk_apply(entity: str, request: Request, payload: BulkRequest, db=Depends(get_db)):
    schema = get_schema(entity)
    context = get_request_context(request)
    idempotency_key = extract_idempotency_key(request.headers)
    idempotency_context = None
    if idempotency_key:
        request_hash = IdempotencyService.fingerprint(payload.model_dump(mode="json", by_alias=True))
        idempotency_context, replay = IdempotencyService(db).start(
            account_name=context.account_name,
            endpoint=str(request.url.path),
            method=request.method,
            idempotency_key=idempotency_key,
            request_hash=request_hash,
        )
        if replay:
            return replay.to_response()
        request.state.idempotency = idempotency_context

    audit = AuditService(db)
    action = f"{schema.name}.bulk"
    try:
        result = BulkApplyService(db, context).apply(schema, payload.rows, payload.options)
    except AppError as exc:
        if not payload.options.dry_run:
            audit.record_event(
                AuditEventPayload(
                    account_name=context.account_name,
                    trace_id=context.trace_id or None,
                    action=action,
                    entity_type=schema.name,
                    entity_id=None,
                    metadata={"error_code": exc.error.code, "rows": len(payload.rows)},
                    result="failure",
                )
            )
        raise

    response = BulkResponse(**result)
    if idempotency_context is not None:
        idempotency_context.record_success(status_code=200, response_body=response.model_dump(mode="json", by_alias=True))
    if not payload.options.dry_run:
        audit.record_event(
            AuditEventPayload(
                account_name=context.account_name,
                trace_id=context.trace_id or None,
                action=action,
                entity_type=schema.name,
                entity_id=response.batch_id,
                metadata={
                    "created": response.created,
                    "updated": response.updated,
                    "unchanged": response.unchanged,
                    "skipped": response.skipped,
                    "transactional": payload.options.transactional,
                    "upsert": payload.options.upsert,
                },
                result="success",
            )
        )
    return response
