from __future__ import annotations

import json

import pytest
import responses
from responses import matchers

from nova_client_sdk.bulk_validation import ClientValidationError
from nova_client_sdk.clients import AuditClient, AuthClient, InventoryClient, ProductsClient
from nova_client_sdk.clients import bulk as bulk_module
from nova_client_sdk.config import load_config
from nova_client_sdk.exceptions import AuthError, ConflictError
from nova_client_sdk.http_client import HttpClient
from nova_client_sdk.models import BulkOptions

BULK_RESULT = {
    "success": True,
    "batchId": "PROD-1700000000000-abc123",
    "batchName": "Products-1700000000000",
    "dryRun": False,
    "created": 0,
    "updated": 1,
    "unchanged": 0,
    "skipped": 0,
    "message": "Bulk update complete",
    "results": [
        {
            "idx": 0,
            "key": "A100",
            "action": "UPDATED",
            "changes": [{"field": "ProductMarkupPrice", "oldVal": "41.99", "newVal": "44.99"}],
            "message": None,
        }
    ],
    "traceId": "trace-bulk",
}


def _http() -> HttpClient:
    return HttpClient(load_config())


@responses.activate
def test_login_stores_token_and_verify_uses_bearer(sdk_env: str) -> None:
    def login_callback(request):
        assert json.loads(request.body) == {"accountName": "admin", "accountKey": "secret"}
        body = {"success": True, "message": "Login successful", "token": "jwt-1", "traceId": "t"}
        return (200, {"Content-Type": "application/json"}, json.dumps(body))

    def verify_callback(request):
        assert request.headers["Authorization"] == "Bearer jwt-1"
        assert "X-Account-Key" not in request.headers
        return (200, {"Content-Type": "application/json"}, json.dumps({"valid": True, "accountName": "admin"}))

    responses.add_callback(responses.POST, f"{sdk_env}/api/auth/login", callback=login_callback, content_type="application/json")
    responses.add_callback(responses.POST, f"{sdk_env}/api/auth/verify", callback=verify_callback, content_type="application/json")

    client = AuthClient(http=_http())
    token = client.login("admin", "secret")
    assert token.token == "jwt-1"
    assert client.verify().account_name == "admin"


@responses.activate
def test_login_failure_raises_auth_error(sdk_env: str) -> None:
    responses.add(
        responses.POST,
        f"{sdk_env}/api/auth/login",
        json={"code": "INVALID_CREDENTIALS", "message": "Invalid account name or key", "details": None, "trace_id": "t"},
        status=401,
    )
    with pytest.raises(AuthError) as exc_info:
        AuthClient(http=_http()).login("admin", "wrong")
    assert exc_info.value.code == "INVALID_CREDENTIALS"


@responses.activate
def test_bulk_update_defaults_and_headers(sdk_env: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(bulk_module, "default_batch_name", lambda label: f"{label}-1700000000000")

    def callback(request):
        payload = json.loads(request.body)
        assert payload["rows"] == [{"SKU": "A100", "ProductMarkupPrice": "44.99"}]
        assert payload["options"] == {
            "upsert": True,
            "transactional": True,
            "dryRun": False,
            "batchName": "Products-1700000000000",
        }
        assert request.headers["X-Account-Name"] == "admin"
        assert request.headers["X-Account-Key"] == "secret"
        assert request.headers["Idempotency-Key"] == "idem-1"
        return (200, {"Content-Type": "application/json"}, json.dumps(BULK_RESULT))

    responses.add_callback(responses.POST, f"{sdk_env}/api/products/bulk", callback=callback, content_type="application/json")
    client = ProductsClient(http=_http(), account_name="admin", account_key="secret")
    result = client.bulk_update([{"SKU": "A100", "ProductMarkupPrice": "44.99"}], idempotency_key="idem-1")
    assert result.batch_id == "PROD-1700000000000-abc123"
    assert result.results[0].changes[0].new_val == "44.99"


def test_bulk_update_rejects_empty_rows(sdk_env: str) -> None:
    with pytest.raises(ClientValidationError):
        InventoryClient(http=_http()).bulk_update([])


@responses.activate
def test_bulk_failure_maps_to_conflict(sdk_env: str) -> None:
    responses.add(
        responses.POST,
        f"{sdk_env}/api/inventory/bulk",
        json={
            "code": "BULK_ROW_FAILED",
            "message": "Bulk update failed; no changes were saved",
            "details": {"idx": 0, "row": 2, "key": "PID?__MIAMI", "error": "boom"},
            "trace_id": "trace-fail",
        },
        status=409,
    )
    client = InventoryClient(http=_http(), account_name="admin", account_key="secret")
    with pytest.raises(ConflictError) as exc_info:
        client.bulk_update([{"LocationID": "MIAMI", "SKU": "A100", "Quantity": "3"}], BulkOptions(batch_name="x"))
    assert exc_info.value.details["row"] == 2
    assert exc_info.value.trace_id == "trace-fail"


@responses.activate
def test_diff_posts_upsert_flag(sdk_env: str) -> None:
    def callback(request):
        assert json.loads(request.body)["options"] == {"upsert": False}
        body = {
            "rows": [
                {
                    "idx": 0,
                    "key": "A100",
                    "display": "A100",
                    "action": "skip",
                    "changes": [],
                    "message": "No matching product and upsert is off",
                }
            ],
            "totals": {"create": 0, "update": 0, "unchanged": 0, "skip": 1},
        }
        return (200, {"Content-Type": "application/json"}, json.dumps(body))

    responses.add_callback(responses.POST, f"{sdk_env}/api/products/diff", callback=callback, content_type="application/json")
    diff = ProductsClient(http=_http()).diff([{"SKU": "A100"}], upsert=False)
    assert diff.totals.skip == 1
    assert diff.rows[0].message == "No matching product and upsert is off"


@responses.activate
def test_parse_uploads_multipart(sdk_env: str) -> None:
    def callback(request):
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b"LocationID" in request.body
        body = {"rows": [], "headers": ["LocationID"], "ignoredColumns": [], "issues": [], "counts": {}}
        return (200, {"Content-Type": "application/json"}, json.dumps(body))

    responses.add_callback(responses.POST, f"{sdk_env}/api/inventory/parse", callback=callback, content_type="application/json")
    parsed = InventoryClient(http=_http()).parse(b"LocationID,SKU\nMIAMI,A100\n")
    assert parsed["headers"] == ["LocationID"]


@responses.activate
def test_catalog_reads_send_query_params(sdk_env: str) -> None:
    responses.add(
        responses.GET,
        f"{sdk_env}/api/inventory",
        json={"inventory": []},
        match=[matchers.query_param_matcher({"locationId": "MIAMI"})],
    )
    responses.add(responses.GET, f"{sdk_env}/api/products/SKU/A100", json={"product": {"SKU": "A100"}})
    assert InventoryClient(http=_http()).list(location_id="MIAMI") == {"inventory": []}
    assert ProductsClient(http=_http()).get("A100", id_type="SKU")["product"]["SKU"] == "A100"


@responses.activate
def test_audit_client_round(sdk_env: str) -> None:
    responses.add(
        responses.GET,
        f"{sdk_env}/api/audit",
        json={
            "batches": [
                {
                    "batchId": "INV-1-aaaaaa",
                    "name": "Inventory-1",
                    "entity": "inventory",
                    "user": "admin",
                    "when": "2024-05-01T10:00:00",
                    "mode": "Transactional + Upsert",
                    "summary": "0 created, 1 updated, 0 unchanged, 0 skipped",
                    "status": "applied",
                }
            ]
        },
    )
    responses.add(
        responses.POST,
        f"{sdk_env}/api/audit/rollback/INV-1-aaaaaa",
        json={
            "success": True,
            "batchId": "INV-1-aaaaaa",
            "status": "rolled_back",
            "restored": 1,
            "deleted": 0,
            "transactions": 1,
            "message": "Batch rolled back",
            "traceId": "t",
        },
    )
    responses.add(responses.GET, f"{sdk_env}/api/transactions", json={"transactions": []})

    client = AuditClient(http=_http(), access_token="jwt")
    batches = client.list_batches(limit=10)
    assert batches.batches[0].batch_id == "INV-1-aaaaaa"
    assert responses.calls[0].request.url.endswith("limit=10")
    rollback = client.rollback("INV-1-aaaaaa")
    assert rollback.status == "rolled_back"
    assert rollback.transactions == 1
    assert client.transactions() == {"transactions": []}
