def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["database"] is True
    assert payload["traceId"]
    assert response.headers["X-Trace-ID"] == payload["traceId"]


def test_ready(client):
    response = client.get("/ready")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ready"
    assert payload["traceId"]


def test_incoming_trace_id_is_echoed(client):
    response = client.get("/health", headers={"X-Trace-ID": "trace-abc"})
    assert response.headers["X-Trace-ID"] == "trace-abc"
    assert response.json()["traceId"] == "trace-abc"


def test_oversized_trace_id_is_replaced(client):
    response = client.get("/health", headers={"X-Trace-ID": "x" * 200})
    assert response.headers["X-Trace-ID"] != "x" * 200
