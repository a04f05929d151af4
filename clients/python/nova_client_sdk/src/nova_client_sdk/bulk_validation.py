"""Offline checks for bulk CSV files, matching the server's parse and validate rules."""

from __future__ import annotations

import csv
import io
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Sequence

BOM = "\ufeff"

PRODUCTS = "products"
INVENTORY = "inventory"


@dataclass(frozen=True)
class EntityColumns:
    key_fields: tuple[str, ...]
    columns: tuple[str, ...]
    decimal: tuple[str, ...] = ()
    integer: tuple[str, ...] = ()
    boolean: tuple[str, ...] = ()
    guid: tuple[str, ...] = ()
    datetime: tuple[str, ...] = ()


ENTITIES: dict[str, EntityColumns] = {
    PRODUCTS: EntityColumns(
        key_fields=("ProductID", "SKU"),
        columns=(
            "ProductID", "ProductName", "ProductPhoto", "ProductDescription", "ProductCostPrice",
            "ProductMinPrice", "ProductMarkupPrice", "ProductIsAvailable", "BarcodeNumber",
            "BarcodeNumber2", "Color", "WholesalerID", "ProductComission", "Product_CategoryID",
            "IsFixedPrice", "Size", "Attr", "IsDiffTaxRate", "DiffTaxRate", "IsLockProductMarkupPrice",
            "IsTaxIncluded", "SKU", "LastPurchaseCostPrice", "IsLockProductMinimumPrice",
            "CommissionType", "Version", "IsTracked", "VariantName1", "VariantName2",
            "ProductFamilyId", "CreatedBy", "CreatedOn", "ShopifyId",
        ),
        decimal=(
            "ProductCostPrice", "ProductMinPrice", "ProductMarkupPrice", "ProductComission",
            "DiffTaxRate", "LastPurchaseCostPrice",
        ),
        integer=("WholesalerID", "Product_CategoryID", "Version", "ProductFamilyId", "ShopifyId"),
        boolean=(
            "ProductIsAvailable", "IsFixedPrice", "IsDiffTaxRate", "IsLockProductMarkupPrice",
            "IsTaxIncluded", "IsLockProductMinimumPrice", "IsTracked",
        ),
        guid=("ProductID",),
        datetime=("CreatedOn",),
    ),
    INVENTORY: EntityColumns(
        key_fields=("LocationID", "ProductID", "SKU"),
        columns=(
            "InventoryID", "LocationID", "ProductID", "SKU", "Quantity", "DesiredQuantity",
            "MinimumQuantity", "Version",
        ),
        decimal=("Quantity", "DesiredQuantity", "MinimumQuantity"),
        integer=("InventoryID", "Version"),
        guid=("ProductID",),
    ),
}


@dataclass(frozen=True)
class ValidationIssue:
    idx: int
    row: int
    field: str
    type: str
    msg: str


@dataclass
class ParsedFile:
    headers: list[str]
    rows: list[dict[str, str | None]]
    ignored_columns: list[str] = field(default_factory=list)


@dataclass
class LocalValidation:
    issues: list[ValidationIssue]
    counts: dict[str, int]

    @property
    def valid(self) -> bool:
        return self.counts["err"] == 0

    def to_dict(self) -> dict[str, Any]:
        return {"issues": [asdict(issue) for issue in self.issues], "valid": self.valid, "counts": self.counts}


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        return f"row {issue.row} {issue.field}: {issue.msg}"


def entity_columns(entity: str) -> EntityColumns:
    columns = ENTITIES.get((entity or "").strip().lower())
    if columns is None:
        raise ValueError(f"Unknown entity {entity!r}; expected one of {', '.join(sorted(ENTITIES))}")
    return columns


def parse_csv(text: str, entity: str | None = None) -> ParsedFile:
    if text.startswith(BOM):
        text = text[len(BOM):]
    headers: list[str] | None = None
    rows: list[dict[str, str | None]] = []
    for cells in csv.reader(io.StringIO(text)):
        if not any(cell.strip() for cell in cells):
            continue
        if headers is None:
            headers = [cell.strip() for cell in cells]
            continue
        rows.append(
            {
                header: cells[position] if position < len(cells) else None
                for position, header in enumerate(headers)
                if header
            }
        )
    parsed = ParsedFile(headers=[header for header in headers or [] if header], rows=rows)
    if entity is not None:
        known = set(entity_columns(entity).columns)
        parsed.ignored_columns = [header for header in parsed.headers if header not in known]
    return parsed


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _decimal(value: object) -> Decimal | None:
    if isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


def _cell_error(kind: str, value: object) -> str | None:
    if kind in {"decimal", "integer"}:
        number = _decimal(value)
        if number is None:
            return "Must be numeric"
        if kind == "integer" and number != number.to_integral_value():
            return "Must be a whole number"
        return None
    if kind == "boolean":
        if isinstance(value, bool) or str(value).strip().lower() in {"true", "false", "1", "0"}:
            return None
        return "Bool expected (TRUE/FALSE)"
    if kind == "guid":
        try:
            uuid.UUID(str(value).strip())
        except ValueError:
            return "Must be a GUID"
        return None
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        datetime.fromisoformat(text)
    except ValueError:
        return "Must be an ISO date"
    return None


def _warnings(entity: str, row: Mapping[str, Any]) -> list[tuple[str, str]]:
    if entity == PRODUCTS:
        low, high = _decimal_or_none(row.get("ProductMinPrice")), _decimal_or_none(row.get("ProductMarkupPrice"))
        if low is not None and high is not None and low > high:
            return [("ProductMinPrice", "Min price exceeds markup price")]
        return []
    quantity, minimum = _decimal_or_none(row.get("Quantity")), _decimal_or_none(row.get("MinimumQuantity"))
    if quantity is not None and minimum is not None and quantity < minimum:
        return [("Quantity", "Quantity below minimum")]
    return []


def _decimal_or_none(value: object) -> Decimal | None:
    return None if _blank(value) else _decimal(value)


def validate_rows(rows: Sequence[Mapping[str, Any]], entity: str) -> LocalValidation:
    """Validate rows without contacting the API.

    Issues come out in the same order and with the same messages as the
    server's validate endpoint, so a clean local run predicts a clean remote one.
    """
    name = (entity or "").strip().lower()
    columns = entity_columns(name)
    key_label = "/".join(columns.key_fields)
    issues: list[ValidationIssue] = []
    seen: set[str] = set()

    def add(idx: int, column: str, issue_type: str, msg: str) -> None:
        issues.append(ValidationIssue(idx=idx, row=idx + 2, field=column, type=issue_type, msg=msg))

    for idx, row in enumerate(rows):
        if name == INVENTORY:
            if _blank(row.get("LocationID")):
                add(idx, "LocationID", "err", "LocationID required")
            if _blank(row.get("ProductID")) and _blank(row.get("SKU")):
                add(idx, "ProductID/SKU", "err", "Provide ProductID or SKU")
        elif all(_blank(row.get(column)) for column in columns.key_fields):
            add(idx, key_label, "err", "At least one key must be provided")

        key = "__".join(str(row.get(column)).strip() for column in columns.key_fields if not _blank(row.get(column)))
        if key and key in seen:
            add(idx, key_label, "warn", "Duplicate key in file")
        if key:
            seen.add(key)

        # numeric checks run before booleans, then guids, then dates
        for group in (("decimal", "integer"), ("boolean",), ("guid",), ("datetime",)):
            for column in columns.columns:
                kind = next((k for k in group if column in getattr(columns, k)), None)
                if kind is None or _blank(row.get(column)):
                    continue
                message = _cell_error(kind, row[column])
                if message:
                    add(idx, column, "err", message)

        for column, message in _warnings(name, row):
            add(idx, column, "warn", message)

    counts = {"err": 0, "warn": 0, "info": 0}
    for issue in issues:
        counts[issue.type] += 1
    return LocalValidation(issues=issues, counts=counts)
