from sqlalchemy import select

from app.novabulk.db.models import AuditEvent


class AuditRepository:
    def __init__(self, db):
        self.db = db

    def create(self, event: AuditEvent) -> AuditEvent:
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def list_by_action(self, action: str, *, account_name: str | None = None, limit: int = 50):
        stmt = select(AuditEvent).where(AuditEvent.action == action)
        if account_name:
            stmt = stmt.where(AuditEvent.account_name == account_name)
        stmt = stmt.order_by(AuditEvent.created_at.desc()).limit(limit)
        return self.db.execute(stmt).scalars().all()
