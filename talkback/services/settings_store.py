from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Mapping, Optional

from talkback.services.setting_schema import SettingKey, resolve_key

log = logging.getLogger(__name__)

_LOCK = RLock()


def read_settings_text(path: Path) -> Optional[str]:
    """Return the raw settings file, or None when it is absent or unreadable."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.debug("settings file not found: %s", path)
        return None
    except (OSError, UnicodeDecodeError) as exc:
        log.debug("settings file unreadable: %s: %s", path, exc)
        return None


class StoredSettingsInvalid(RuntimeError):
    """The settings file exists but cannot be merged into; writing would lose it."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"settings file {path} is not a JSON object: {reason}")


def load_stored_document(path: Path) -> Dict[str, Any]:
    """Stored document for a write. A missing file is empty; an unusable one raises."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        raise StoredSettingsInvalid(path, str(exc)) from exc
    try:
        raw = json.loads(text)
    except ValueError as exc:
        raise StoredSettingsInvalid(path, str(exc)) from exc
    if not isinstance(raw, dict):
        raise StoredSettingsInvalid(path, type(raw).__name__)
    return raw


def _atomic_write(path: Path, data: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".settings.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)
            fh.write("\n")
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.unlink(tmp)


def _append_audit_entry(
    audit_path: Path, before: Mapping[str, Any], after: Mapping[str, Any], actor: str
) -> None:
    entry = {
        "ts": int(time.time() * 1000),
        "actor": actor,
        "before": dict(before),
        "after": dict(after),
    }
    try:
        audit_path.parent.mkdir(parents=True, exist_ok=True)
        with audit_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(entry, separators=(",", ":")) + "\n")
    except OSError as exc:
        # Audit persistence never blocks a settings write.
        log.warning("settings audit append failed: %s", exc)


def save_settings_patch(
    accepted: Mapping[SettingKey, Any],
    *,
    path: Path,
    audit_path: Optional[Path] = None,
    actor: str = "admin-api",
) -> Dict[str, Any]:
    """Merge validated values into the stored document under dashed keys.

    Other spellings of the same key are replaced. Keys the schema does not
    know are left as they are.
    Raises ``StoredSettingsInvalid`` rather than overwrite a file that does
    not decode to an object.
    """
    with _LOCK:
        before = load_stored_document(path)
        after: Dict[str, Any] = {}
        for raw_key, value in before.items():
            if resolve_key(str(raw_key)) in accepted:
                continue
            after[raw_key] = value
        for key, value in accepted.items():
            after[key.dashed] = value

        if after == before:
            return after
        _atomic_write(path, after)
        if audit_path is not None:
            _append_audit_entry(audit_path, before, after, actor)
        log.info(
            "settings file updated",
            extra={"actor": actor, "keys": sorted(key.value for key in accepted)},
        )
        return after


__all__ = [
    "StoredSettingsInvalid",
    "load_stored_document",
    "read_settings_text",
    "save_settings_patch",
]
