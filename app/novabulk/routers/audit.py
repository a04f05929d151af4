from fastapi import APIRouter, Depends, Query, Request

from app.novabulk.core.context import get_request_context
from app.novabulk.core.deps import require_account
from app.novabulk.core.error_catalog import AppError
from app.novabulk.db.session import get_db
from app.novabulk.schemas.audit import BatchDetailResponse, BatchListResponse, RollbackResponse
from app.novabulk.schemas.errors import ErrorResponse
from app.novabulk.services.audit import AuditEventPayload, AuditService
from app.novabulk.services.change_audit import ChangeAuditService

router = APIRouter(dependencies=[Depends(require_account)])


@router.get("/api/audit", response_model=BatchListResponse)
async def list_batches(limit: int = Query(default=50, ge=1, le=500), db=Depends(get_db)):
    return BatchListResponse(batches=ChangeAuditService(db).list_batches(limit=limit))


@router.get(
    "/api/audit/batch/{batch_id}",
    response_model=BatchDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_batch(batch_id: str, db=Depends(get_db)):
    return BatchDetailResponse(**ChangeAuditService(db).batch_detail(batch_id))


@router.post(
    "/api/audit/rollback/{batch_id}",
    response_model=RollbackResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def rollback_batch(batch_id: str, request: Request, db=Depends(get_db)):
    context = get_request_context(request)
    audit = AuditService(db)
    try:
        result = ChangeAuditService(db).rollback(batch_id, context)
    except AppError as exc:
        audit.record_event(
            AuditEventPayload(
                account_name=context.account_name,
                trace_id=context.trace_id or None,
                action="audit.rollback",
                entity_type="change_batch",
                entity_id=batch_id,
                metadata={"error_code": exc.error.code},
                result="failure",
            )
        )
        raise

    audit.record_event(
        AuditEventPayload(
            account_name=context.account_name,
            trace_id=context.trace_id or None,
            action="audit.rollback",
            entity_type="change_batch",
            entity_id=batch_id,
            metadata={"restored": result["restored"], "deleted": result["deleted"]},
            result="success",
        )
    )
    return RollbackResponse(**result)
