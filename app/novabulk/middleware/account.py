from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.novabulk.core.context import build_request_context
from app.novabulk.core.security import ACCOUNT_NAME_HEADER, decode_token


class AccountContextMiddleware(BaseHTTPMiddleware):
    """Best-effort account attribution for logs; authorization happens in deps."""

    async def dispatch(self, request: Request, call_next):
        request.state.account_name = request.headers.get(ACCOUNT_NAME_HEADER) or None
        request.state.employee_id = None

        auth_header = request.headers.get("Authorization")
        if request.state.account_name is None and auth_header and auth_header.lower().startswith("bearer "):
            try:
                payload = decode_token(auth_header.split(" ", 1)[1])
                request.state.account_name = payload.get("sub")
                request.state.employee_id = payload.get("employee_id")
            except JWTError:
                request.state.account_name = None

        request.state.context = build_request_context(
            account_name=request.state.account_name,
            employee_id=request.state.employee_id,
            trace_id=getattr(request.state, "trace_id", ""),
        )

        return await call_next(request)
