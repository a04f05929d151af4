from decimal import Decimal

from tests.bulk_helpers import CHARGER_ID, create_inventory, create_product


def test_list_and_filter_products(client, auth_headers, db_session):
    create_product(db_session, product_id=CHARGER_ID)
    create_product(db_session, sku="B200", product_name="Braided cable")

    payload = client.get("/api/products", headers=auth_headers).json()
    assert [product["ProductName"] for product in payload["products"]] == ["Braided cable", "USB-C Wall Charger 30W"]
    charger = payload["products"][1]
    assert charger["ProductMarkupPrice"] == "41.99"
    assert charger["ProductIsAvailable"] is True
    assert "ProductDescription" not in charger

    filtered = client.get("/api/products", headers=auth_headers, params={"sku": "B200"}).json()
    assert [product["SKU"] for product in filtered["products"]] == ["B200"]


def test_product_detail(client, auth_headers, db_session):
    create_product(db_session, product_id=CHARGER_ID)

    by_id = client.get(f"/api/products/ProductID/{CHARGER_ID}", headers=auth_headers)
    assert by_id.status_code == 200
    product = by_id.json()["product"]
    assert product["ProductID"] == str(CHARGER_ID)
    assert product["ProductCostPrice"] == "25.00"
    assert len(product) == 33

    by_sku = client.get("/api/products/SKU/A100", headers=auth_headers)
    assert by_sku.json()["product"]["ProductID"] == str(CHARGER_ID)

    missing = client.get("/api/products/SKU/NOPE", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json()["code"] == "PRODUCT_NOT_FOUND"

    bad_type = client.get("/api/products/Barcode/123", headers=auth_headers)
    assert bad_type.status_code == 422


def test_invalid_product_id_filter(client, auth_headers):
    response = client.get("/api/products", headers=auth_headers, params={"productId": "xyz"})
    assert response.status_code == 422
    assert response.json()["details"]["field"] == "productId"


def test_inventory_reads(client, auth_headers, db_session):
    product = create_product(db_session, product_id=CHARGER_ID)
    create_inventory(db_session, product, location_id="NYC", quantity=Decimal("3"))
    create_inventory(db_session, product, location_id="MIAMI")

    listing = client.get("/api/inventory", headers=auth_headers).json()
    assert [item["LocationID"] for item in listing["inventory"]] == ["MIAMI", "NYC"]
    assert listing["inventory"][0]["SKU"] == "A100"

    by_location = client.get("/api/inventory", headers=auth_headers, params={"locationId": "NYC"}).json()
    assert [item["Quantity"] for item in by_location["inventory"]] == ["3.00"]

    item = client.get(f"/api/inventory/MIAMI/{CHARGER_ID}", headers=auth_headers).json()["item"]
    assert item["ProductName"] == "USB-C Wall Charger 30W"

    missing = client.get(f"/api/inventory/LA/{CHARGER_ID}", headers=auth_headers)
    assert missing.status_code == 404
    assert missing.json()["code"] == "INVENTORY_NOT_FOUND"


def test_transactions_listing(client, auth_headers, db_session):
    product = create_product(db_session, product_id=CHARGER_ID)
    create_inventory(db_session, product)
    for quantity in ("11", "14"):
        client.post(
            "/api/inventory/bulk",
            headers=auth_headers,
            json={"rows": [{"LocationID": "MIAMI", "ProductID": str(CHARGER_ID), "Quantity": quantity}]},
        )

    payload = client.get("/api/transactions", headers=auth_headers, params={"limit": 10}).json()
    assert [row["Quantity"] for row in payload["transactions"]] == ["3.00", "1.00"]
    assert payload["transactions"][0]["SKU"] == "A100"
    assert payload["transactions"][0]["TransactionType"] == "adjust"

    by_product = client.get(f"/api/transactions/product/{CHARGER_ID}", headers=auth_headers).json()
    assert len(by_product["transactions"]) == 2
