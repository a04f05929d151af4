from decimal import Decimal

from sqlalchemy import select

from app.novabulk.db.models import ChangeBatch, Inventory, InventoryTransaction, Product

from tests.bulk_helpers import CHARGER_ID, create_inventory, create_product


def _apply(client, headers, entity, rows, **options):
    response = client.post(f"/api/{entity}/bulk", headers=headers, json={"rows": rows, "options": options})
    assert response.status_code == 200
    return response.json()


def test_audit_list_and_detail(client, auth_headers, db_session):
    create_product(db_session, product_id=CHARGER_ID)
    batch = _apply(
        client,
        auth_headers,
        "products",
        [{"ProductID": str(CHARGER_ID), "Color": "White"}, {"SKU": "NEW-9"}],
        transactional=False,
    )

    listing = client.get("/api/audit", headers=auth_headers).json()
    [summary] = listing["batches"]
    assert summary["batchId"] == batch["batchId"]
    assert summary["user"] == "admin"
    assert summary["mode"] == "Live • Row • Upsert"
    assert summary["summary"] == "1 updated, 1 inserted, 0 skipped"
    assert summary["status"] == "applied"

    detail = client.get(f"/api/audit/batch/{batch['batchId']}", headers=auth_headers).json()
    assert detail["batch"]["transactional"] is False
    color = [change for change in detail["changes"] if change["field"] == "Color"]
    assert color[0]["oldValue"] == "Black"
    assert color[0]["newValue"] == "White"
    assert color[0]["action"] == "UPDATED"


def test_batch_not_found(client, auth_headers):
    response = client.get("/api/audit/batch/PROD-0-missing", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "BATCH_NOT_FOUND"


def test_rollback_products_batch(client, auth_headers, db_session):
    create_product(db_session, product_id=CHARGER_ID)
    batch = _apply(
        client,
        auth_headers,
        "products",
        [{"ProductID": str(CHARGER_ID), "ProductMarkupPrice": "45", "Color": "White"}, {"SKU": "NEW-9"}],
    )

    response = client.post(f"/api/audit/rollback/{batch['batchId']}", headers=auth_headers)
    assert response.status_code == 200
    payload = response.json()
    assert payload["restored"] == 2
    assert payload["deleted"] == 1

    db_session.expire_all()
    product = db_session.get(Product, CHARGER_ID)
    assert product.product_markup_price == Decimal("41.99")
    assert product.color == "Black"
    assert db_session.execute(select(Product).where(Product.sku == "NEW-9")).first() is None
    assert db_session.get(ChangeBatch, batch["batchId"]).status == "rolled_back"

    again = client.post(f"/api/audit/rollback/{batch['batchId']}", headers=auth_headers)
    assert again.status_code == 409
    assert again.json()["code"] == "BATCH_ALREADY_ROLLED_BACK"


def test_rollback_inventory_writes_compensating_transactions(client, auth_headers, db_session):
    product = create_product(db_session, product_id=CHARGER_ID)
    create_inventory(db_session, product)

    batch = _apply(
        client,
        auth_headers,
        "inventory",
        [
            {"LocationID": "MIAMI", "ProductID": str(CHARGER_ID), "Quantity": "15"},
            {"LocationID": "NYC", "ProductID": str(CHARGER_ID), "Quantity": "4"},
        ],
    )
    response = client.post(f"/api/audit/rollback/{batch['batchId']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["transactions"] == 2

    db_session.expire_all()
    items = db_session.execute(select(Inventory)).scalars().all()
    assert [(item.location_id, item.quantity) for item in items] == [("MIAMI", Decimal("10.00"))]

    rollback_rows = db_session.execute(
        select(InventoryTransaction).where(InventoryTransaction.comment == f"Rollback of batch {batch['batchId']}")
    ).scalars().all()
    assert sorted(row.quantity for row in rollback_rows) == [Decimal("-5"), Decimal("-4")]


def test_rollback_conflict_when_value_changed_later(client, auth_headers, db_session):
    create_product(db_session, product_id=CHARGER_ID)
    first = _apply(client, auth_headers, "products", [{"ProductID": str(CHARGER_ID), "Color": "White"}])
    _apply(client, auth_headers, "products", [{"ProductID": str(CHARGER_ID), "Color": "Red"}])

    response = client.post(f"/api/audit/rollback/{first['batchId']}", headers=auth_headers)
    assert response.status_code == 409
    payload = response.json()
    assert payload["code"] == "BATCH_ROLLBACK_CONFLICT"
    assert payload["details"]["field"] == "Color"

    db_session.expire_all()
    assert db_session.get(Product, CHARGER_ID).color == "Red"
    assert db_session.get(ChangeBatch, first["batchId"]).status == "applied"


def test_rollback_conflict_when_created_product_has_inventory(client, auth_headers, db_session):
    batch = _apply(client, auth_headers, "products", [{"SKU": "NEW-5"}])
    _apply(client, auth_headers, "inventory", [{"LocationID": "MIAMI", "SKU": "NEW-5", "Quantity": "1"}])

    response = client.post(f"/api/audit/rollback/{batch['batchId']}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "BATCH_ROLLBACK_CONFLICT"


def test_rollback_conflict_when_created_product_changed_later(client, auth_headers, db_session):
    created = _apply(client, auth_headers, "products", [{"SKU": "NEW-1", "ProductName": "Widget"}])
    _apply(client, auth_headers, "products", [{"SKU": "NEW-1", "ProductName": "Widget Renamed"}])

    response = client.post(f"/api/audit/rollback/{created['batchId']}", headers=auth_headers)
    assert response.status_code == 409
    payload = response.json()
    assert payload["code"] == "BATCH_ROLLBACK_CONFLICT"
    assert payload["details"]["field"] == "ProductName"
    assert payload["details"]["expected"] == "Widget"

    db_session.expire_all()
    product = db_session.execute(select(Product).where(Product.sku == "NEW-1")).scalars().one()
    assert product.product_name == "Widget Renamed"
    assert db_session.get(ChangeBatch, created["batchId"]).status == "applied"


def test_rollback_inventory_conflict_when_created_quantity_moved(client, auth_headers, db_session):
    create_product(db_session, product_id=CHARGER_ID)
    created = _apply(client, auth_headers, "inventory", [{"LocationID": "NYC", "ProductID": str(CHARGER_ID), "Quantity": "4"}])
    _apply(client, auth_headers, "inventory", [{"LocationID": "NYC", "ProductID": str(CHARGER_ID), "Quantity": "9"}])

    response = client.post(f"/api/audit/rollback/{created['batchId']}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["details"]["field"] == "Quantity"

    db_session.expire_all()
    item = db_session.execute(select(Inventory).where(Inventory.location_id == "NYC")).scalars().one()
    assert item.quantity == Decimal("9")
