import pytest

from app.novabulk.core.error_catalog import AppError
from app.novabulk.services.bulk_schemas import get_schema
from app.novabulk.services.bulk_validation import validate_rows


def _messages(result):
    return [(issue["idx"], issue["field"], issue["type"], issue["msg"]) for issue in result.issues]


def test_inventory_key_rules():
    result = validate_rows([{"Quantity": "3"}], get_schema("inventory"))
    assert _messages(result) == [
        (0, "LocationID", "err", "LocationID required"),
        (0, "ProductID/SKU", "err", "Provide ProductID or SKU"),
    ]
    assert result.issues[0]["row"] == 2
    assert not result.valid


def test_products_need_a_key():
    result = validate_rows([{"ProductName": "Cable"}], get_schema("products"))
    assert _messages(result) == [(0, "ProductID/SKU", "err", "At least one key must be provided")]


def test_duplicate_key_warning():
    rows = [{"SKU": "A100"}, {"SKU": "A100"}]
    result = validate_rows(rows, get_schema("products"))
    assert _messages(result) == [(1, "ProductID/SKU", "warn", "Duplicate key in file")]
    assert result.valid
    assert result.counts == {"err": 0, "warn": 1, "info": 0}


def test_value_rules():
    rows = [
        {
            "SKU": "A100",
            "ProductCostPrice": "abc",
            "WholesalerID": "1.5",
            "IsTracked": "yes",
            "ProductID": "nope",
            "CreatedOn": "yesterday",
        }
    ]
    result = validate_rows(rows, get_schema("products"))
    assert _messages(result) == [
        (0, "ProductCostPrice", "err", "Must be numeric"),
        (0, "WholesalerID", "err", "Must be a whole number"),
        (0, "IsTracked", "err", "Bool expected (TRUE/FALSE)"),
        (0, "ProductID", "err", "Must be a GUID"),
        (0, "CreatedOn", "err", "Must be an ISO date"),
    ]
    assert result.counts["err"] == 5


def test_schema_warning_rules():
    products = validate_rows(
        [{"SKU": "A100", "ProductMinPrice": "50", "ProductMarkupPrice": "41.99"}], get_schema("products")
    )
    assert _messages(products) == [(0, "ProductMinPrice", "warn", "Min price exceeds markup price")]

    inventory = validate_rows(
        [{"LocationID": "MIAMI", "SKU": "A100", "Quantity": "2", "MinimumQuantity": "5"}], get_schema("inventory")
    )
    assert _messages(inventory) == [(0, "Quantity", "warn", "Quantity below minimum")]


def test_sample_files_are_valid():
    from app.novabulk.services.csv_parser import parse_csv

    for entity in ("products", "inventory"):
        schema = get_schema(entity)
        assert validate_rows(parse_csv(schema.sample).rows, schema).valid


def test_unknown_entity():
    with pytest.raises(AppError) as exc:
        get_schema("customers")
    assert exc.value.error.code == "UNKNOWN_ENTITY"
