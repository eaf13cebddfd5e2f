from __future__ import annotations

import json
from pathlib import Path

from talkback.cli import main


def _write(tmp_path: Path, data) -> Path:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_prints_effective_settings(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, {"allows-login": False, "theme": 1})
    assert main([str(path)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["settings"]["allowsLogin"] is False
    assert out["settings"]["usesAutoLogin"] is False
    assert out["settings"]["theme"] == "default"
    assert [r["key"] for r in out["rejected"]] == ["theme"]


def test_safe_scope(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, {"server-timezone": "Asia/Tokyo"})
    assert main([str(path), "--scope", "safe"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert "serverTimezone" not in out["settings"]
    assert out["rejected"][0]["reason"] == "not_permitted"


def test_strict_exit_code(tmp_path: Path, capsys) -> None:
    path = _write(tmp_path, {"bogus": True})
    assert main([str(path), "--strict"]) == 1
    out = json.loads(capsys.readouterr().out)
    assert out["rejected"][0]["key"] == "bogus"


def test_missing_file(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "missing.json")]) == 2
    assert "cannot read" in capsys.readouterr().err
