from dataclasses import dataclass

from fastapi import Request


@dataclass(frozen=True)
class RequestContext:
    account_name: str | None
    employee_id: int | None
    trace_id: str


def build_request_context(
    *,
    account_name: str | None,
    employee_id: int | None,
    trace_id: str,
) -> RequestContext:
    return RequestContext(account_name=account_name, employee_id=employee_id, trace_id=trace_id)


def get_request_context(request: Request) -> RequestContext:
    context = getattr(request.state, "context", None)
    if isinstance(context, RequestContext):
        return context
    return build_request_context(
        account_name=getattr(request.state, "account_name", None),
        employee_id=None,
        trace_id=getattr(request.state, "trace_id", ""),
    )
