"""Conversion between CSV cells, column values and audit text."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from app.novabulk.services.bulk_schemas import BOOLEAN, DATETIME, DECIMAL, GUID, INTEGER

TRUE_VALUES = {"true", "1"}
FALSE_VALUES = {"false", "0"}

MSG_NUMERIC = "Must be numeric"
MSG_WHOLE_NUMBER = "Must be a whole number"
MSG_BOOLEAN = "Bool expected (TRUE/FALSE)"
MSG_GUID = "Must be a GUID"
MSG_DATETIME = "Must be an ISO date"


class CoercionError(ValueError):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def _to_decimal(raw) -> Decimal:
    if isinstance(raw, bool):
        raise CoercionError(MSG_NUMERIC)
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as exc:
        raise CoercionError(MSG_NUMERIC) from exc
    if not value.is_finite():
        raise CoercionError(MSG_NUMERIC)
    return value


def _to_integer(raw) -> int:
    value = _to_decimal(raw)
    if value != value.to_integral_value():
        raise CoercionError(MSG_WHOLE_NUMBER)
    return int(value)


def _to_boolean(raw) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise CoercionError(MSG_BOOLEAN)


def _to_guid(raw) -> uuid.UUID:
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw).strip())
    except ValueError as exc:
        raise CoercionError(MSG_GUID) from exc


def _to_datetime(raw) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime(raw.year, raw.month, raw.day)
    else:
        text = str(raw).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise CoercionError(MSG_DATETIME) from exc
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


_COERCERS = {
    DECIMAL: _to_decimal,
    INTEGER: _to_integer,
    BOOLEAN: _to_boolean,
    GUID: _to_guid,
    DATETIME: _to_datetime,
}


def round_to_scale(value: Decimal, scale: int) -> Decimal:
    """Round half up to the column scale; values already within it are kept as given."""
    if value.as_tuple().exponent >= -scale:
        return value
    try:
        return value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise CoercionError(MSG_NUMERIC) from exc


def coerce_value(kind: str, raw, scale: int | None = None):
    """Convert a non-blank cell to the column type, raising CoercionError."""
    if is_blank(raw):
        return None
    coercer = _COERCERS.get(kind)
    if coercer is None:
        return str(raw).strip()
    value = coercer(raw)
    if kind == DECIMAL and scale is not None:
        value = round_to_scale(value, scale)
    return value


def format_value(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        return format(Decimal(str(value)), "f")
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def parse_stored_value(kind: str, text: str | None):
    if text is None:
        return None
    return coerce_value(kind, text)


def values_equal(kind: str, left, right) -> bool:
    if left is None or right is None:
        return left is None and right is None
    try:
        return coerce_value(kind, left) == coerce_value(kind, right)
    except CoercionError:
        return format_value(left) == format_value(right)
