from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "trace_id": self.trace_id,
            "status_code": self.status_code,
        }


class AuthError(ApiError):
    """Missing, wrong or expired credentials."""


class PermissionError(ApiError):
    """Account is known but not allowed to act."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class ConflictError(ApiError):
    """409 responses: failed transactional batches, rollback conflicts, idempotency clashes."""


class ServerError(ApiError):
    pass


class TransportError(ApiError):
    """Network failure before an HTTP response was returned."""
