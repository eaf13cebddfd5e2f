# tests/conftest.py
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Mapping

import pytest
from starlette.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from talkback.main import create_app  # noqa: E402

_ENV_KEYS = (
    "DOCUMENT_ROOT",
    "DOMAIN",
    "SETTINGS_FILE",
    "SETTINGS_STRICT",
    "SETTINGS_AUDIT_PATH",
    "ADMIN_UI_TOKEN",
    "ADMIN_UI_USER",
    "ADMIN_UI_PASS",
)


@pytest.fixture(autouse=True)
def install_root(tmp_path, monkeypatch) -> Path:
    """Each test gets its own install root; settings live under it."""
    root = tmp_path / "install"
    root.mkdir()
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ROOT_DIRECTORY", str(root))
    return root


@pytest.fixture()
def write_settings(install_root) -> Callable[[Any], Path]:
    def _write(data: Any) -> Path:
        path = install_root / "config" / "settings.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def app():
    # Function scope: new app for each test to pick up monkeypatched env.
    return create_app()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def admin_headers(monkeypatch) -> Mapping[str, str]:
    monkeypatch.setenv("ADMIN_UI_TOKEN", "secret")
    return {"Authorization": "Bearer secret"}
