from __future__ import annotations

import logging
import secrets
import time
import uuid
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from app.novabulk.core.config import settings
from app.novabulk.core.context import RequestContext
from app.novabulk.core.error_catalog import AppError, ErrorCatalog
from app.novabulk.core.logging import log_json
from app.novabulk.core.metrics import metrics
from app.novabulk.db.models import ChangeAudit, ChangeBatch, Inventory, InventoryTransaction, Product
from app.novabulk.repos.change_batches import ChangeBatchRepository
from app.novabulk.repos.inventory import InventoryRepository
from app.novabulk.repos.products import ProductRepository
from app.novabulk.repos.transactions import TransactionRepository
from app.novabulk.schemas.bulk import BulkOptions
from app.novabulk.services.bulk_diff import CREATE, SKIP, UNCHANGED, BulkPlanner, RowPlan
from app.novabulk.services.bulk_schemas import INVENTORY, PRODUCTS, SCHEMAS, EntitySchema
from app.novabulk.services.bulk_validation import row_key, validate_rows
from app.novabulk.services.field_values import format_value

logger = logging.getLogger(__name__)

CREATED = "CREATED"
UPDATED = "UPDATED"
UNCHANGED_RESULT = "UNCHANGED"
SKIPPED = "SKIPPED"

BATCH_PREFIXES = {PRODUCTS: "PROD", INVENTORY: "INV"}
BATCH_NAME_PREFIXES = {PRODUCTS: "Products", INVENTORY: "Inventory"}
ENTITY_NOUNS = {PRODUCTS: "products", INVENTORY: "inventory items"}
ADJUST = "adjust"


def new_batch_id(entity: str) -> str:
    return f"{BATCH_PREFIXES[entity]}-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def default_batch_name(entity: str, now: datetime) -> str:
    return f"{BATCH_NAME_PREFIXES[entity]}-{now:%Y-%m-%d}"


def entity_key(product_id, location_id: str | None = None) -> str:
    if location_id is None:
        return f"ProductID={product_id}"
    return f"ProductID={product_id}; LocationID={location_id}"


def _row_result(idx: int, key: str, action: str, changes: list[dict] | None = None, message: str | None = None) -> dict:
    return {"idx": idx, "key": key, "action": action, "changes": changes or [], "message": message}


class BulkApplyService:
    """Apply validated rows to Products or Inventory and record a change batch.

    Every row runs inside its own SAVEPOINT. Transactional requests keep all rows
    in one database transaction and fail as a whole on the first row error. Row
    mode commits each row on its own and reports failing rows as skipped; only the
    failing row is rolled back. Dry runs always end in a rollback.
    """

    def __init__(self, db, context: RequestContext):
        self.db = db
        self.context = context
        self.batches = ChangeBatchRepository(db)
        self.products = ProductRepository(db)
        self.inventory = InventoryRepository(db)
        self.transactions = TransactionRepository(db)

    def _check_rows(self, schema: EntitySchema, rows: list[dict]) -> None:
        if not rows:
            raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"rows": "At least one row is required"})
        if len(rows) > settings.BULK_MAX_ROWS:
            raise AppError(
                ErrorCatalog.VALIDATION_ERROR,
                details={"rows": f"At most {settings.BULK_MAX_ROWS} rows per request", "maxRows": settings.BULK_MAX_ROWS},
            )
        result = validate_rows(rows, schema)
        if not result.valid:
            raise AppError(ErrorCatalog.VALIDATION_ERROR, details={"issues": result.issues, "counts": result.counts})

    def apply(self, schema: EntitySchema, rows: list[dict], options: BulkOptions) -> dict:
        self._check_rows(schema, rows)
        now = datetime.utcnow()
        batch_id = new_batch_id(schema.name)
        batch_name = (options.batch_name or "").strip() or default_batch_name(schema.name, now)
        planner = BulkPlanner(self.db, schema)

        batch = None
        if not options.dry_run:
            batch = self.batches.add(
                ChangeBatch(
                    batch_id=batch_id,
                    batch_name=batch_name,
                    entity=schema.name,
                    account_name=self.context.account_name or "unknown",
                    created_at=now,
                    upsert=options.upsert,
                    transactional=options.transactional,
                    employee_id=self._employee_id(options),
                    reason=options.reason,
                    status="applied",
                    trace_id=self.context.trace_id or None,
                )
            )
            if not options.transactional:
                self.db.commit()

        counts = {CREATED: 0, UPDATED: 0, UNCHANGED_RESULT: 0, SKIPPED: 0}
        results = []
        for idx, row in enumerate(rows):
            try:
                with self.db.begin_nested():
                    result = self._apply_row(planner, batch_id if batch else None, idx, row, options)
                if batch is not None and not options.transactional:
                    self.db.commit()
            except (SQLAlchemyError, ValueError, ArithmeticError) as exc:
                logger.exception("Bulk %s row %s failed in batch %s", schema.name, idx, batch_id)
                if options.transactional:
                    self.db.rollback()
                    metrics.record_bulk_batch(entity=schema.name, result="failed")
                    raise AppError(
                        ErrorCatalog.BULK_ROW_FAILED,
                        details={"idx": idx, "row": idx + 2, "key": row_key(row, schema), "error": exc.__class__.__name__},
                    ) from exc
                if not self.db.is_active:
                    self.db.rollback()
                result = _row_result(idx, row_key(row, schema), SKIPPED, message=f"Row failed: {exc.__class__.__name__}")
            counts[result["action"]] += 1
            results.append(result)

        if batch is None:
            self.db.rollback()
        else:
            batch.created_count = counts[CREATED]
            batch.updated_count = counts[UPDATED]
            batch.unchanged_count = counts[UNCHANGED_RESULT]
            batch.skipped_count = counts[SKIPPED]
            self.db.add(batch)
            self.db.commit()

        metrics.record_bulk_rows(entity=schema.name, counts=counts, dry_run=options.dry_run)
        metrics.record_bulk_batch(entity=schema.name, result="dry_run" if options.dry_run else "applied")
        log_json(
            logger,
            {
                "event": "bulk_apply",
                "trace_id": self.context.trace_id,
                "account_name": self.context.account_name,
                "entity": schema.name,
                "batch_id": batch_id,
                "dry_run": options.dry_run,
                "transactional": options.transactional,
                "upsert": options.upsert,
                "rows": len(rows),
                "created": counts[CREATED],
                "updated": counts[UPDATED],
                "unchanged": counts[UNCHANGED_RESULT],
                "skipped": counts[SKIPPED],
            },
        )

        if options.dry_run:
            message = f"Dry run complete: {counts[UPDATED]} would be updated, {counts[CREATED]} would be created"
        else:
            message = f"Successfully processed {len(rows)} {ENTITY_NOUNS[schema.name]}"
        return {
            "success": True,
            "batch_id": batch_id,
            "batch_name": batch_name,
            "dry_run": options.dry_run,
            "created": counts[CREATED],
            "updated": counts[UPDATED],
            "unchanged": counts[UNCHANGED_RESULT],
            "skipped": counts[SKIPPED],
            "message": message,
            "results": results,
            "trace_id": self.context.trace_id,
        }

    def _employee_id(self, options: BulkOptions) -> int | None:
        if options.employee_id is not None:
            return options.employee_id
        return self.context.employee_id

    def _apply_row(self, planner: BulkPlanner, batch_id: str | None, idx: int, row: dict, options: BulkOptions) -> dict:
        plan = planner.plan(idx, row, upsert=options.upsert)
        if plan.action == SKIP:
            return _row_result(idx, plan.key, SKIPPED, message=plan.message)
        if plan.action == UNCHANGED:
            return _row_result(idx, plan.key, UNCHANGED_RESULT)

        if planner.schema.name == INVENTORY:
            audit_key = self._write_inventory(plan, options, batch_id)
        else:
            audit_key = self._write_product(plan)

        action = CREATED if plan.action == CREATE else UPDATED
        if batch_id is not None:
            self.batches.add_changes(
                [
                    ChangeAudit(
                        batch_id=batch_id,
                        entity=planner.schema.name,
                        entity_key=audit_key,
                        product_id=plan.product.product_id,
                        location_id=plan.location_id if planner.schema.name == INVENTORY else None,
                        action=action,
                        field=change["field"],
                        old_value=change["oldVal"],
                        new_value=change["newVal"],
                        created_at=datetime.utcnow(),
                    )
                    for change in plan.changes
                ]
            )
        return _row_result(idx, plan.key, action, plan.changes)

    def _write_product(self, plan: RowPlan) -> str:
        schema = SCHEMAS[PRODUCTS]
        if plan.action == CREATE:
            product = Product()
            for column, value in plan.values.items():
                setattr(product, schema.field_for(column).attribute, value)
            if product.product_id is None:
                product.product_id = uuid.uuid4()
                plan.changes.insert(0, {"field": "ProductID", "oldVal": None, "newVal": format_value(product.product_id)})
            plan.product = self.products.add(product)
        else:
            for change in plan.changes:
                column = change["field"]
                setattr(plan.product, schema.field_for(column).attribute, plan.values[column])
            self.db.flush()
        return entity_key(plan.product.product_id)

    def _write_inventory(self, plan: RowPlan, options: BulkOptions, batch_id: str | None) -> str:
        values = plan.values
        if plan.action == CREATE:
            item = self.inventory.add(
                Inventory(
                    product_id=plan.product.product_id,
                    location_id=plan.location_id,
                    quantity=values["Quantity"],
                    desired_quantity=values["DesiredQuantity"],
                    minimum_quantity=values["MinimumQuantity"],
                    version=values["Version"],
                )
            )
            delta = values["Quantity"]
        else:
            item = plan.inventory
            previous_quantity = item.quantity
            schema = SCHEMAS[INVENTORY]
            for change in plan.changes:
                column = change["field"]
                setattr(item, schema.field_for(column).attribute, values[column])
            self.db.flush()
            delta = item.quantity - previous_quantity

        if delta:
            self.transactions.add(
                InventoryTransaction(
                    product_id=plan.product.product_id,
                    quantity=delta,
                    timestamp=datetime.utcnow(),
                    dst_location_id=plan.location_id,
                    employee_id=self._employee_id(options),
                    comment=(options.reason or "").strip() or settings.DEFAULT_ADJUST_COMMENT,
                    transaction_type=ADJUST,
                    type_refer_id=batch_id,
                    cost_price=plan.product.product_cost_price,
                    version=item.version,
                )
            )
        return entity_key(plan.product.product_id, plan.location_id)
