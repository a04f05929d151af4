from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError

from app.novabulk.core.context import RequestContext, build_request_context, get_request_context
from app.novabulk.core.error_catalog import AppError, ErrorCatalog
from app.novabulk.core.security import (
    TokenData,
    account_key_scheme,
    account_name_scheme,
    bearer_scheme,
    decode_token,
)
from app.novabulk.db.session import get_db
from app.novabulk.services.auth import AccountAuthService


def get_token_data(token: str) -> TokenData:
    try:
        return TokenData(**decode_token(token))
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc


def require_account(
    request: Request,
    account_name: str | None = Depends(account_name_scheme),
    account_key: str | None = Depends(account_key_scheme),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db=Depends(get_db),
):
    service = AccountAuthService(db)
    if account_name or account_key:
        account = service.authenticate(account_name, account_key)
    elif credentials is not None and credentials.credentials:
        token_data = get_token_data(credentials.credentials)
        account = service.get_active(token_data.sub)
    else:
        raise AppError(ErrorCatalog.AUTHENTICATION_REQUIRED)

    request.state.account_name = account.account_name
    request.state.context = build_request_context(
        account_name=account.account_name,
        employee_id=account.employee_id,
        trace_id=getattr(request.state, "trace_id", ""),
    )
    return account


def require_request_context(request: Request, account=Depends(require_account)) -> RequestContext:
    return get_request_context(request)


__all__ = [
    "get_token_data",
    "require_account",
    "require_request_context",
    "get_request_context",
]
