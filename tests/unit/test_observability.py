from types import SimpleNamespace

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from starlette.requests import Request
from starlette.responses import Response

from app.novabulk.core.db_timing import DbUsage
from app.novabulk.core.errors import setup_exception_handlers
from app.novabulk.core.metrics import metrics
from app.novabulk.middleware.observability import build_request_log_payload


def test_build_request_log_payload():
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/products/bulk",
        "headers": [],
        "route": SimpleNamespace(path="/api/{entity}/bulk"),
    }
    request = Request(scope)
    request.state.trace_id = "trace-1"
    request.state.account_name = "admin"
    request.state.error_code = None
    response = Response(status_code=200)

    payload = build_request_log_payload(
        request=request,
        response=response,
        latency_ms=12.3456,
        db_usage=DbUsage(time_ms=4.5678, queries=3),
    )

    assert payload["event"] == "http_request"
    assert payload["trace_id"] == "trace-1"
    assert payload["account_name"] == "admin"
    assert payload["route"] == "/api/{entity}/bulk"
    assert payload["status_code"] == 200
    assert payload["latency_ms"] == 12.35
    assert payload["db_time_ms"] == 4.57
    assert payload["db_queries"] == 3


def test_lock_timeout_maps_to_conflict_and_metric():
    metrics.reset()
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/lock-timeout")
    def lock_timeout():
        raise OperationalError("UPDATE Inventory", {}, Exception("database is locked"))

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/lock-timeout")

    assert response.status_code == 409
    assert response.json()["code"] == "LOCK_TIMEOUT"

    content = metrics.render().content.decode("utf-8")
    if metrics.enabled:
        assert "lock_wait_timeout_total" in content
    else:
        assert "metrics_disabled" in content


def test_unexpected_error_is_internal_error():
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/boom")
    def boom():
        raise RuntimeError("boom")

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
    assert response.json()["details"] == {"type": "RuntimeError"}


def test_bulk_metrics_render():
    metrics.reset()
    metrics.record_bulk_rows(entity="products", counts={"CREATED": 2, "SKIPPED": 0}, dry_run=False)
    metrics.record_bulk_batch(entity="products", result="applied")
    content = metrics.render().content.decode("utf-8")
    if metrics.enabled:
        assert 'bulk_rows_total{entity="products",action="CREATED",dry_run="false"} 2.0' in content
        assert "bulk_batches_total" in content
