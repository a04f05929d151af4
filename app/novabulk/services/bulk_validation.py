from __future__ import annotations

from dataclasses import dataclass

from app.novabulk.services.bulk_schemas import BOOLEAN, DATETIME, DECIMAL, GUID, INTEGER, INVENTORY, EntitySchema
from app.novabulk.services.field_values import CoercionError, coerce_value, is_blank

ERR = "err"
WARN = "warn"
INFO = "info"


@dataclass
class ValidationResult:
    issues: list[dict]
    counts: dict[str, int]

    @property
    def valid(self) -> bool:
        return self.counts[ERR] == 0


def _issue(idx: int, field: str, issue_type: str, msg: str) -> dict:
    return {"idx": idx, "row": idx + 2, "field": field, "type": issue_type, "msg": msg}


def row_key(row: dict, schema: EntitySchema) -> str:
    parts = [str(row.get(field)).strip() for field in schema.key_fields if not is_blank(row.get(field))]
    return "__".join(parts)


def _key_issues(idx: int, row: dict, schema: EntitySchema) -> list[dict]:
    if schema.name == INVENTORY:
        issues = []
        if is_blank(row.get("LocationID")):
            issues.append(_issue(idx, "LocationID", ERR, "LocationID required"))
        if is_blank(row.get("ProductID")) and is_blank(row.get("SKU")):
            issues.append(_issue(idx, "ProductID/SKU", ERR, "Provide ProductID or SKU"))
        return issues
    if all(is_blank(row.get(field)) for field in schema.key_fields):
        return [_issue(idx, "/".join(schema.key_fields), ERR, "At least one key must be provided")]
    return []


def _value_issues(idx: int, row: dict, schema: EntitySchema) -> list[dict]:
    issues = []
    for kinds in ((DECIMAL, INTEGER), (BOOLEAN,), (GUID,), (DATETIME,)):
        for spec in schema.fields:
            if spec.kind not in kinds or is_blank(row.get(spec.column)):
                continue
            try:
                coerce_value(spec.kind, row[spec.column])
            except CoercionError as exc:
                issues.append(_issue(idx, spec.column, ERR, exc.message))
    return issues


def validate_rows(rows: list[dict], schema: EntitySchema) -> ValidationResult:
    issues: list[dict] = []
    seen: set[str] = set()
    for idx, row in enumerate(rows):
        issues.extend(_key_issues(idx, row, schema))

        key = row_key(row, schema)
        if key and key in seen:
            issues.append(_issue(idx, "/".join(schema.key_fields), WARN, "Duplicate key in file"))
        if key:
            seen.add(key)

        issues.extend(_value_issues(idx, row, schema))

        for rule in schema.warnings:
            if rule.check(row):
                issues.append(_issue(idx, rule.field, WARN, rule.message))

    counts = {ERR: 0, WARN: 0, INFO: 0}
    for issue in issues:
        counts[issue["type"]] += 1
    return ValidationResult(issues=issues, counts=counts)
