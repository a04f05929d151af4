from __future__ import annotations

import logging
from datetime import datetime

from app.novabulk.core.context import RequestContext
from app.novabulk.core.error_catalog import AppError, ErrorCatalog
from app.novabulk.core.logging import log_json
from app.novabulk.db.models import ChangeBatch, InventoryTransaction
from app.novabulk.repos.change_batches import ChangeBatchRepository
from app.novabulk.repos.inventory import InventoryRepository
from app.novabulk.repos.products import ProductRepository
from app.novabulk.repos.transactions import TransactionRepository
from app.novabulk.services.bulk_apply import ADJUST, CREATED, UPDATED
from app.novabulk.services.bulk_schemas import INVENTORY, SCHEMAS
from app.novabulk.services.field_values import parse_stored_value, values_equal

logger = logging.getLogger(__name__)

ROLLED_BACK = "rolled_back"


def batch_mode(batch: ChangeBatch) -> str:
    return " • ".join(
        [
            "Live",
            "Txn" if batch.transactional else "Row",
            "Upsert" if batch.upsert else "Update-only",
        ]
    )


def batch_summary(batch: ChangeBatch) -> str:
    return f"{batch.updated_count} updated, {batch.created_count} inserted, {batch.skipped_count} skipped"


def summarize_batch(batch: ChangeBatch) -> dict:
    return {
        "batch_id": batch.batch_id,
        "name": batch.batch_name,
        "entity": batch.entity,
        "user": batch.account_name,
        "when": batch.created_at,
        "mode": batch_mode(batch),
        "summary": batch_summary(batch),
        "status": batch.status,
    }


class ChangeAuditService:
    def __init__(self, db):
        self.db = db
        self.batches = ChangeBatchRepository(db)
        self.products = ProductRepository(db)
        self.inventory = InventoryRepository(db)
        self.transactions = TransactionRepository(db)

    def list_batches(self, *, limit: int = 50) -> list[dict]:
        return [summarize_batch(batch) for batch in self.batches.list_recent(limit=limit)]

    def get_batch(self, batch_id: str) -> ChangeBatch:
        batch = self.batches.get(batch_id)
        if batch is None:
            raise AppError(ErrorCatalog.BATCH_NOT_FOUND, details={"batchId": batch_id})
        return batch

    def batch_detail(self, batch_id: str) -> dict:
        batch = self.get_batch(batch_id)
        detail = summarize_batch(batch)
        detail.update(
            {
                "upsert": batch.upsert,
                "transactional": batch.transactional,
                "employee_id": batch.employee_id,
                "reason": batch.reason,
                "created": batch.created_count,
                "updated": batch.updated_count,
                "unchanged": batch.unchanged_count,
                "skipped": batch.skipped_count,
                "trace_id": batch.trace_id,
                "rolled_back_at": batch.rolled_back_at,
                "rolled_back_by": batch.rolled_back_by,
            }
        )
        changes = [
            {
                "audit_id": change.audit_id,
                "entity_key": change.entity_key,
                "product_id": str(change.product_id) if change.product_id else None,
                "location_id": change.location_id,
                "action": change.action,
                "field": change.field,
                "old_value": change.old_value,
                "new_value": change.new_value,
                "created_at": change.created_at,
            }
            for change in self.batches.list_changes(batch_id)
        ]
        return {"batch": detail, "changes": changes}

    def rollback(self, batch_id: str, context: RequestContext) -> dict:
        """Undo a batch: restore audited fields and delete created records.

        Every check runs before anything is committed, so a conflict leaves the
        data untouched.
        """
        batch = self.get_batch(batch_id)
        if batch.status == ROLLED_BACK:
            raise AppError(ErrorCatalog.BATCH_ALREADY_ROLLED_BACK, details={"batchId": batch_id})

        schema = SCHEMAS[batch.entity]
        restored = 0
        created_targets: dict[str, object] = {}
        adjustments = []
        try:
            for change in reversed(self.batches.list_changes(batch_id)):
                target = self._load_target(batch.entity, change)
                if target is None:
                    raise AppError(
                        ErrorCatalog.BATCH_ROLLBACK_CONFLICT,
                        details={"entityKey": change.entity_key, "reason": "record no longer exists"},
                    )
                if change.action not in (CREATED, UPDATED):
                    continue
                if change.action == CREATED:
                    created_targets.setdefault(change.entity_key, target)
                spec = schema.field_for(change.field)
                if spec is None or spec.attribute is None:
                    continue
                current = getattr(target, spec.attribute)
                if not values_equal(spec.kind, current, change.new_value):
                    raise AppError(
                        ErrorCatalog.BATCH_ROLLBACK_CONFLICT,
                        details={"entityKey": change.entity_key, "field": change.field, "expected": change.new_value},
                    )
                if change.action == CREATED:
                    continue
                old_value = parse_stored_value(spec.kind, change.old_value)
                if batch.entity == INVENTORY and change.field == "Quantity" and old_value != current:
                    adjustments.append((target, old_value - current))
                setattr(target, spec.attribute, old_value)
                restored += 1
            self.db.flush()

            deleted = 0
            for key, target in created_targets.items():
                if batch.entity == INVENTORY:
                    if target.quantity:
                        adjustments.append((target, -target.quantity))
                elif self.products.has_inventory(target.product_id):
                    raise AppError(
                        ErrorCatalog.BATCH_ROLLBACK_CONFLICT,
                        details={"entityKey": key, "reason": "product is referenced by inventory"},
                    )

            for target, delta in adjustments:
                self.transactions.add(
                    InventoryTransaction(
                        product_id=target.product_id,
                        quantity=delta,
                        timestamp=datetime.utcnow(),
                        dst_location_id=target.location_id,
                        employee_id=context.employee_id,
                        comment=f"Rollback of batch {batch_id}",
                        transaction_type=ADJUST,
                        type_refer_id=batch_id,
                        cost_price=self._cost_price(target.product_id),
                        version=target.version,
                    )
                )

            for target in created_targets.values():
                if batch.entity == INVENTORY:
                    self.inventory.delete(target)
                else:
                    self.products.delete(target)
                deleted += 1

            batch.status = ROLLED_BACK
            batch.rolled_back_at = datetime.utcnow()
            batch.rolled_back_by = context.account_name
            self.db.add(batch)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        log_json(
            logger,
            {
                "event": "batch_rollback",
                "trace_id": context.trace_id,
                "account_name": context.account_name,
                "batch_id": batch_id,
                "entity": batch.entity,
                "restored": restored,
                "deleted": deleted,
                "transactions": len(adjustments),
            },
        )
        return {
            "success": True,
            "batch_id": batch_id,
            "status": ROLLED_BACK,
            "restored": restored,
            "deleted": deleted,
            "transactions": len(adjustments),
            "message": f"Rolled back batch {batch_id}",
            "trace_id": context.trace_id,
        }

    def _load_target(self, entity: str, change):
        if entity == INVENTORY:
            return self.inventory.get(product_id=change.product_id, location_id=change.location_id)
        return self.products.get_by_id(change.product_id)

    def _cost_price(self, product_id):
        product = self.products.get_by_id(product_id)
        return product.product_cost_price if product is not None else None
