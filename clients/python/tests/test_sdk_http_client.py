from __future__ import annotations

import pytest
import requests
import responses

from nova_client_sdk.config import load_config
from nova_client_sdk.error_mapper import map_error
from nova_client_sdk.exceptions import (
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionError,
    ServerError,
    TransportError,
    ValidationError,
)
from nova_client_sdk.http_client import HttpClient
from nova_client_sdk.tracing import TRACE_HEADER, TraceContext


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, AuthError),
        (403, PermissionError),
        (404, NotFoundError),
        (422, ValidationError),
        (409, ConflictError),
        (503, ServerError),
    ],
)
def test_map_error_by_status(status: int, expected) -> None:
    error = map_error(status, {"code": "X", "message": "boom", "trace_id": "t-1"}, None)
    assert isinstance(error, expected)
    assert error.trace_id == "t-1"
    assert error.status_code == status


def test_map_error_falls_back_to_header_trace() -> None:
    error = map_error(418, None, "trace-from-header")
    assert error.code == "HTTP_ERROR"
    assert error.trace_id == "trace-from-header"


@responses.activate
def test_request_sends_trace_header_and_adopts_response_trace(sdk_env: str) -> None:
    trace = TraceContext(trace_id="client-trace")

    def callback(request):
        assert request.headers[TRACE_HEADER] == "client-trace"
        return (200, {TRACE_HEADER: "server-trace", "Content-Type": "application/json"}, '{"status": "ok"}')

    responses.add_callback(responses.GET, f"{sdk_env}/health", callback=callback, content_type="application/json")
    http = HttpClient(load_config(), trace=trace)
    assert http.request("GET", "/health") == {"status": "ok"}
    assert trace.trace_id == "server-trace"
    assert http.last_operation is not None
    assert http.last_operation.status_code == 200


@responses.activate
def test_get_retries_on_server_error(sdk_env: str) -> None:
    responses.add(responses.GET, f"{sdk_env}/health", json={"code": "INTERNAL_ERROR", "message": "x"}, status=500)
    responses.add(responses.GET, f"{sdk_env}/health", json={"status": "ok"}, status=200)
    http = HttpClient(load_config())
    assert http.request("GET", "/health") == {"status": "ok"}
    assert len(responses.calls) == 2


@responses.activate
def test_post_is_not_retried_without_flag(sdk_env: str) -> None:
    responses.add(
        responses.POST,
        f"{sdk_env}/api/audit/rollback/B1",
        json={"code": "INTERNAL_ERROR", "message": "x", "details": None, "trace_id": "t"},
        status=500,
    )
    http = HttpClient(load_config())
    with pytest.raises(ServerError) as exc_info:
        http.request("POST", "/api/audit/rollback/B1")
    assert exc_info.value.code == "INTERNAL_ERROR"
    assert len(responses.calls) == 1


@responses.activate
def test_transport_error_after_retries(sdk_env: str) -> None:
    responses.add(responses.GET, f"{sdk_env}/health", body=requests.ConnectionError("refused"))
    responses.add(responses.GET, f"{sdk_env}/health", body=requests.ConnectionError("refused"))
    responses.add(responses.GET, f"{sdk_env}/health", body=requests.ConnectionError("refused"))
    http = HttpClient(load_config())
    with pytest.raises(TransportError) as exc_info:
        http.request("GET", "/health")
    assert exc_info.value.status_code == 0
    assert exc_info.value.details == {"type": "ConnectionError"}


@responses.activate
def test_text_responses_are_returned_as_text(sdk_env: str) -> None:
    responses.add(
        responses.GET,
        f"{sdk_env}/api/schemas/inventory/sample.csv",
        body="LocationID,SKU\nMIAMI,A100\n",
        content_type="text/csv",
    )
    http = HttpClient(load_config())
    assert http.request("GET", "/api/schemas/inventory/sample.csv").startswith("LocationID,SKU")
