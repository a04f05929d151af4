import pytest

from app.novabulk.core.error_catalog import AppError
from app.novabulk.services.bulk_schemas import get_schema
from app.novabulk.services.csv_parser import decode_upload, parse_csv, parse_for_schema


def test_parse_csv_basic():
    parsed = parse_csv("LocationID,SKU,Quantity\nMIAMI,A100,12\nNYC,B200,8\n")
    assert parsed.headers == ["LocationID", "SKU", "Quantity"]
    assert parsed.rows == [
        {"LocationID": "MIAMI", "SKU": "A100", "Quantity": "12"},
        {"LocationID": "NYC", "SKU": "B200", "Quantity": "8"},
    ]


def test_parse_csv_quotes_bom_and_blank_lines():
    text = '\ufeff\n SKU , ProductName \n\nA100,"Charger, 30W"\n\n'
    parsed = parse_csv(text)
    assert parsed.headers == ["SKU", "ProductName"]
    assert parsed.rows == [{"SKU": "A100", "ProductName": "Charger, 30W"}]


def test_missing_trailing_cells_are_none():
    parsed = parse_csv("LocationID,SKU,Quantity\nMIAMI,A100\n")
    assert parsed.rows == [{"LocationID": "MIAMI", "SKU": "A100", "Quantity": None}]


def test_unknown_columns_are_kept_and_reported():
    parsed = parse_for_schema("LocationID,SKU,Quantity,Aisle\nMIAMI,A100,3,7\n", get_schema("inventory"))
    assert parsed.ignored_columns == ["Aisle"]
    assert parsed.rows[0]["Aisle"] == "7"


def test_decode_upload_rejects_empty_and_binary():
    with pytest.raises(AppError) as empty:
        decode_upload(b"   ")
    assert empty.value.error.code == "UNSUPPORTED_FILE"
    with pytest.raises(AppError):
        decode_upload(b"\xff\xfe\x00\x00")
    assert decode_upload("SKU\nA100\n".encode("utf-8")) == "SKU\nA100\n"
