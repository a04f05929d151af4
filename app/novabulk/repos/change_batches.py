from sqlalchemy import select

from app.novabulk.db.models import ChangeAudit, ChangeBatch


class ChangeBatchRepository:
    def __init__(self, db):
        self.db = db

    def get(self, batch_id: str):
        return self.db.get(ChangeBatch, batch_id)

    def list_recent(self, *, limit: int = 50):
        stmt = select(ChangeBatch).order_by(ChangeBatch.created_at.desc(), ChangeBatch.batch_id.desc()).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def list_changes(self, batch_id: str):
        stmt = select(ChangeAudit).where(ChangeAudit.batch_id == batch_id).order_by(ChangeAudit.audit_id)
        return self.db.execute(stmt).scalars().all()

    def add(self, batch: ChangeBatch) -> ChangeBatch:
        self.db.add(batch)
        self.db.flush()
        return batch

    def add_changes(self, changes: list[ChangeAudit]) -> None:
        self.db.add_all(changes)
        self.db.flush()
