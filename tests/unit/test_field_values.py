import uuid
from datetime import datetime
from decimal import Decimal

import pytest

from app.novabulk.services.bulk_schemas import BOOLEAN, DATETIME, DECIMAL, GUID, INTEGER, TEXT
from app.novabulk.services.field_values import (
    CoercionError,
    coerce_value,
    format_value,
    is_blank,
    parse_stored_value,
    values_equal,
)


@pytest.mark.parametrize("value", [None, "", "   ", "\t"])
def test_blank_values(value):
    assert is_blank(value)
    assert coerce_value(DECIMAL, value) is None


def test_decimal_coercion():
    assert coerce_value(DECIMAL, " 25.50 ") == Decimal("25.50")
    assert coerce_value(DECIMAL, 3) == Decimal("3")


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", "-inf", True])
def test_decimal_rejects_non_finite(value):
    with pytest.raises(CoercionError) as exc:
        coerce_value(DECIMAL, value)
    assert exc.value.message == "Must be numeric"


def test_whole_number_rejects_fraction():
    assert coerce_value(INTEGER, "5.0") == 5
    with pytest.raises(CoercionError) as exc:
        coerce_value(INTEGER, "5.5")
    assert exc.value.message == "Must be a whole number"


@pytest.mark.parametrize("value,expected", [("TRUE", True), ("false", False), ("1", True), ("0", False), (True, True)])
def test_boolean_coercion(value, expected):
    assert coerce_value(BOOLEAN, value) is expected


def test_boolean_rejects_other_text():
    with pytest.raises(CoercionError) as exc:
        coerce_value(BOOLEAN, "yes")
    assert exc.value.message == "Bool expected (TRUE/FALSE)"


def test_guid_and_datetime():
    assert coerce_value(GUID, "11111111-1111-1111-1111-111111111111") == uuid.UUID(int=0x11111111111111111111111111111111)
    with pytest.raises(CoercionError):
        coerce_value(GUID, "not-a-guid")
    assert coerce_value(DATETIME, "2024-03-01") == datetime(2024, 3, 1)
    assert coerce_value(DATETIME, "2024-03-01T10:00:00Z") == datetime(2024, 3, 1, 10, 0, 0)
    with pytest.raises(CoercionError) as exc:
        coerce_value(DATETIME, "03/01/2024")
    assert exc.value.message == "Must be an ISO date"


def test_text_is_trimmed():
    assert coerce_value(TEXT, "  Black ") == "Black"


def test_format_value():
    assert format_value(None) is None
    assert format_value(True) == "true"
    assert format_value(Decimal("41.990")) == "41.990"
    assert format_value(7) == "7"
    assert format_value(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"


def test_parse_stored_value_and_equality():
    assert parse_stored_value(DECIMAL, "12.50") == Decimal("12.5")
    assert parse_stored_value(BOOLEAN, None) is None
    assert values_equal(DECIMAL, Decimal("25.00"), "25")
    assert not values_equal(DECIMAL, Decimal("25.00"), "26")
    assert values_equal(TEXT, None, None)
    assert not values_equal(TEXT, "a", None)
