from fastapi import APIRouter, Depends, Request

from app.novabulk.core.deps import require_account
from app.novabulk.core.error_catalog import AppError
from app.novabulk.db.session import get_db
from app.novabulk.schemas.auth import LoginRequest, LoginResponse, LogoutResponse, VerifyResponse
from app.novabulk.services.audit import AuditEventPayload, AuditService
from app.novabulk.services.auth import AccountAuthService

router = APIRouter()


@router.post("/login", response_model=LoginResponse, summary="Login with account name and key")
async def login(request: Request, payload: LoginRequest, db=Depends(get_db)):
    trace_id = getattr(request.state, "trace_id", "")
    audit = AuditService(db)
    try:
        account, token = AccountAuthService(db).login(payload.account_name, payload.account_key)
    except AppError as exc:
        audit.record_event(
            AuditEventPayload(
                account_name=payload.account_name,
                trace_id=trace_id or None,
                action="auth.login.failed",
                entity_type="account",
                entity_id=payload.account_name,
                metadata={"error_code": exc.error.code},
                result="failure",
            )
        )
        raise

    request.state.account_name = account.account_name
    audit.record_event(
        AuditEventPayload(
            account_name=account.account_name,
            trace_id=trace_id or None,
            action="auth.login",
            entity_type="account",
            entity_id=str(account.id),
            metadata=None,
            result="success",
        )
    )
    return LoginResponse(success=True, message="Login successful", token=token, trace_id=trace_id)


@router.api_route("/verify", methods=["GET", "POST"], response_model=VerifyResponse, summary="Verify the presented credentials")
async def verify(account=Depends(require_account)):
    return VerifyResponse(valid=True, account_name=account.account_name, employee_id=account.employee_id)


@router.post("/logout", response_model=LogoutResponse, summary="Logout")
async def logout(account=Depends(require_account)):
    # Tokens are stateless; clients discard them.
    return LogoutResponse(success=True, message="Logged out")
