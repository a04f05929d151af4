from __future__ import annotations

import json

import pytest
import responses

from nova_client_sdk import cli

GOOD_INVENTORY = "LocationID,SKU,Quantity\nMIAMI,A100,12\n"


def _write(tmp_path, text: str):
    path = tmp_path / "upload.csv"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_validate_offline_success(tmp_path, capsys) -> None:
    cli.main(["validate", "inventory", _write(tmp_path, GOOD_INVENTORY)])
    payload = json.loads(capsys.readouterr().out)
    assert payload["valid"] is True
    assert payload["rows"] == 1


def test_validate_offline_failure_exits_non_zero(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["validate", "inventory", _write(tmp_path, "LocationID,SKU,Quantity\n,A100,abc\n")])
    assert exc_info.value.code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["counts"]["err"] == 2


def test_missing_base_url_is_config_error(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("NOVA_API_BASE_URL", raising=False)
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["diff", "inventory", _write(tmp_path, GOOD_INVENTORY)])
    assert exc_info.value.code == 2
    assert json.loads(capsys.readouterr().out)["error"] == "CONFIG_ERROR"


@responses.activate
def test_apply_is_dry_run_unless_live(tmp_path, sdk_env: str, capsys) -> None:
    seen = []

    def callback(request):
        options = json.loads(request.body)["options"]
        seen.append(options)
        body = {
            "success": True,
            "batchId": "INV-1-abcdef",
            "batchName": options["batchName"],
            "dryRun": options["dryRun"],
            "created": 0,
            "updated": 1,
            "unchanged": 0,
            "skipped": 0,
            "message": "ok",
            "results": [],
            "traceId": "t",
        }
        return (200, {"Content-Type": "application/json"}, json.dumps(body))

    responses.add_callback(responses.POST, f"{sdk_env}/api/inventory/bulk", callback=callback, content_type="application/json")
    csv_path = _write(tmp_path, GOOD_INVENTORY)

    cli.main(["apply", "inventory", csv_path, "--batch-name", "Counts"])
    cli.main(["apply", "inventory", csv_path, "--live", "--row-mode"])

    assert seen[0]["dryRun"] is True
    assert seen[0]["batchName"] == "Counts"
    assert seen[1]["dryRun"] is False
    assert seen[1]["transactional"] is False
    assert seen[1]["batchName"].startswith("Inventory-")
    out = capsys.readouterr().out
    assert "INV-1-abcdef" in out


@responses.activate
def test_api_error_exits_non_zero(sdk_env: str, capsys) -> None:
    responses.add(
        responses.POST,
        f"{sdk_env}/api/audit/rollback/PROD-1-000000",
        json={
            "code": "BATCH_ROLLBACK_CONFLICT",
            "message": "Rollback blocked by later changes",
            "details": {"conflicts": []},
            "trace_id": "trace-9",
        },
        status=409,
    )
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["rollback", "PROD-1-000000"])
    assert exc_info.value.code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["error"] == "BATCH_ROLLBACK_CONFLICT"
    assert payload["trace_id"] == "trace-9"
