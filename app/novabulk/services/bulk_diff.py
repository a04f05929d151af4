"""Row matching and change planning shared by the diff preview and bulk apply."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from app.novabulk.db.models import Inventory, Product
from app.novabulk.repos.inventory import InventoryRepository
from app.novabulk.repos.products import ProductRepository
from app.novabulk.services.bulk_schemas import INVENTORY, EntitySchema
from app.novabulk.services.field_values import CoercionError, coerce_value, format_value, is_blank

CREATE = "create"
UPDATE = "update"
UNCHANGED = "unchanged"
SKIP = "skip"

INVENTORY_DEFAULTS = {"Quantity": Decimal("0"), "DesiredQuantity": Decimal("0"), "MinimumQuantity": Decimal("0"), "Version": 1}
INVENTORY_NON_UPDATABLE = {"InventoryID", "LocationID", "ProductID", "SKU"}


@dataclass
class RowPlan:
    idx: int
    key: str
    display: str
    action: str
    changes: list[dict] = field(default_factory=list)
    values: dict = field(default_factory=dict)
    product: Product | None = None
    inventory: Inventory | None = None
    location_id: str | None = None
    message: str | None = None


def coerce_row(row: dict, schema: EntitySchema) -> tuple[dict, list[str]]:
    values: dict = {}
    errors: list[str] = []
    for spec in schema.fields:
        raw = row.get(spec.column)
        if is_blank(raw):
            continue
        try:
            values[spec.column] = coerce_value(spec.kind, raw, spec.scale)
        except CoercionError as exc:
            errors.append(f"{spec.column}: {exc.message}")
    return values, errors


def _change(column: str, old, new) -> dict:
    return {"field": column, "oldVal": format_value(old), "newVal": format_value(new)}


def _update_changes(target, values: dict, schema: EntitySchema, skip: set[str]) -> list[dict]:
    changes = []
    for spec in schema.fields:
        if spec.column in skip or spec.attribute is None or spec.column not in values:
            continue
        current = getattr(target, spec.attribute)
        if current != values[spec.column]:
            changes.append(_change(spec.column, current, values[spec.column]))
    return changes


class BulkPlanner:
    def __init__(self, db, schema: EntitySchema):
        self.schema = schema
        self.products = ProductRepository(db)
        self.inventory = InventoryRepository(db)

    def plan(self, idx: int, row: dict, *, upsert: bool) -> RowPlan:
        if self.schema.name == INVENTORY:
            return self._plan_inventory(idx, row, upsert=upsert)
        return self._plan_product(idx, row, upsert=upsert)

    def plan_all(self, rows: list[dict], *, upsert: bool) -> list[RowPlan]:
        return [self.plan(idx, row, upsert=upsert) for idx, row in enumerate(rows)]

    def _plan_product(self, idx: int, row: dict, *, upsert: bool) -> RowPlan:
        raw_id = "" if is_blank(row.get("ProductID")) else str(row["ProductID"]).strip()
        raw_sku = "" if is_blank(row.get("SKU")) else str(row["SKU"]).strip()
        key = raw_id or raw_sku
        display = str(row.get("ProductName") or "").strip() or raw_sku or raw_id
        plan = RowPlan(idx=idx, key=key, display=display, action=SKIP)

        values, errors = coerce_row(row, self.schema)
        plan.values = values
        if errors:
            plan.message = "Invalid values: " + "; ".join(errors)
            return plan
        if "ProductID" not in values and "SKU" not in values:
            plan.message = "At least one key must be provided"
            return plan

        product = None
        if "ProductID" in values:
            product = self.products.get_by_id(values["ProductID"])
            skip = {"ProductID"}
        if product is None and "SKU" in values:
            # SKU is unique, so an unknown ProductID with a known SKU still matches
            product = self.products.get_by_sku(values["SKU"])
            skip = {"ProductID", "SKU"}

        if product is None:
            if not upsert:
                plan.message = "No matching product and upsert is off"
                return plan
            plan.action = CREATE
            plan.changes = [_change(column, None, value) for column, value in values.items()]
            return plan

        plan.product = product
        plan.changes = _update_changes(product, values, self.schema, skip)
        plan.action = UPDATE if plan.changes else UNCHANGED
        return plan

    def _resolve_inventory_product(self, values: dict) -> Product | None:
        if "ProductID" in values:
            return self.products.get_by_id(values["ProductID"])
        if "SKU" in values:
            return self.products.get_by_sku(values["SKU"])
        return None

    def _plan_inventory(self, idx: int, row: dict, *, upsert: bool) -> RowPlan:
        raw_id = "" if is_blank(row.get("ProductID")) else str(row["ProductID"]).strip()
        raw_sku = "" if is_blank(row.get("SKU")) else str(row["SKU"]).strip()
        location_id = "" if is_blank(row.get("LocationID")) else str(row["LocationID"]).strip()
        display = f"{raw_sku + ' • ' if raw_sku else ''}{location_id} ({raw_id or 'resolve via SKU'})"
        plan = RowPlan(
            idx=idx,
            key=f"{raw_id or 'PID?'}__{location_id or 'LOC?'}",
            display=display,
            action=SKIP,
            location_id=location_id or None,
        )

        values, errors = coerce_row(row, self.schema)
        plan.values = values
        if errors:
            plan.message = "Invalid values: " + "; ".join(errors)
            return plan
        if not location_id:
            plan.message = "LocationID required"
            return plan

        product = self._resolve_inventory_product(values)
        if product is None:
            plan.message = "Product not found for ProductID/SKU"
            return plan
        plan.product = product
        plan.key = f"{product.product_id}__{location_id}"

        item = self.inventory.get(product_id=product.product_id, location_id=location_id)
        if item is None:
            if not upsert:
                plan.message = "No matching inventory record and upsert is off"
                return plan
            plan.action = CREATE
            for column, default in INVENTORY_DEFAULTS.items():
                plan.values.setdefault(column, default)
            plan.changes = [_change(column, None, plan.values[column]) for column in INVENTORY_DEFAULTS]
            return plan

        plan.inventory = item
        plan.changes = _update_changes(item, values, self.schema, INVENTORY_NON_UPDATABLE)
        plan.action = UPDATE if plan.changes else UNCHANGED
        return plan


def diff_rows(db, schema: EntitySchema, rows: list[dict], *, upsert: bool = True) -> dict:
    plans = BulkPlanner(db, schema).plan_all(rows, upsert=upsert)
    totals = {CREATE: 0, UPDATE: 0, UNCHANGED: 0, SKIP: 0}
    for plan in plans:
        totals[plan.action] += 1
    return {
        "rows": [
            {
                "idx": plan.idx,
                "key": plan.key,
                "display": plan.display,
                "action": plan.action,
                "changes": plan.changes,
                "message": plan.message,
            }
            for plan in plans
        ],
        "totals": totals,
    }
