import logging
from dataclasses import dataclass
from datetime import datetime

from app.novabulk.db.models import AuditEvent
from app.novabulk.repos.audit import AuditRepository

logger = logging.getLogger(__name__)


@dataclass
class AuditEventPayload:
    account_name: str
    trace_id: str | None
    action: str
    entity_type: str | None
    entity_id: str | None
    metadata: dict | None
    result: str


class AuditService:
    """Best-effort request audit.

    Failures are logged and swallowed so a broken audit table never fails a
    bulk apply or rollback that already committed.
    """

    def __init__(self, db):
        self.repo = AuditRepository(db)

    def record_event(self, payload: AuditEventPayload) -> None:
        try:
            event = AuditEvent(
                account_name=payload.account_name,
                trace_id=payload.trace_id,
                action=payload.action,
                entity_type=payload.entity_type or "unknown",
                entity_id=payload.entity_id,
                event_metadata=dict(payload.metadata or {}),
                result=payload.result,
                created_at=datetime.utcnow(),
            )
            self.repo.create(event)
        except Exception:
            self.repo.db.rollback()
            logger.exception(
                "Failed to write audit event",
                extra={
                    "action": payload.action,
                    "trace_id": payload.trace_id,
                    "account_name": payload.account_name,
                    "entity_id": payload.entity_id,
                },
            )
