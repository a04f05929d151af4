from __future__ import annotations

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SDK_SRC = BASE_DIR / "nova_client_sdk" / "src"

sys.path.insert(0, str(SDK_SRC))

BASE_URL = "https://nova.example.com"


@pytest.fixture
def sdk_env(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("NOVA_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("NOVA_ACCOUNT_NAME", "admin")
    monkeypatch.setenv("NOVA_ACCOUNT_KEY", "secret")
    monkeypatch.setenv("NOVA_RETRY_BACKOFF_SECONDS", "0")
    return BASE_URL
