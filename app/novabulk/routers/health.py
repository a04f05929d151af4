from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.novabulk.core.error_catalog import ErrorCatalog
from app.novabulk.core.errors import error_response
from app.novabulk.db.session import get_db

router = APIRouter()


def _database_ok(db) -> tuple[bool, str | None]:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return False, str(exc)
    return True, None


@router.get("/health")
async def health(request: Request, db=Depends(get_db)):
    database, _ = _database_ok(db)
    return {"status": "ok", "database": database, "traceId": getattr(request.state, "trace_id", "")}


@router.get("/ready")
async def ready(request: Request, db=Depends(get_db)):
    trace_id = getattr(request.state, "trace_id", "")
    database, error = _database_ok(db)
    if not database:
        return error_response(
            code=ErrorCatalog.DB_UNAVAILABLE.code,
            message=ErrorCatalog.DB_UNAVAILABLE.message,
            details=error,
            trace_id=trace_id,
            status_code=ErrorCatalog.DB_UNAVAILABLE.status_code,
        )
    return {"status": "ready", "traceId": trace_id}
