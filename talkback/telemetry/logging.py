# talkback/telemetry/logging.py
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, MutableMapping, Optional, TextIO, Tuple

from talkback.middleware.request_context import get_request_id

_JSON_SAFE_PRIMITIVES = (str, int, float, bool, type(None))

# Standard LogRecord attributes kept out of the payload
_STD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }
)


def _iso8601(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def _json_sanitize(value: Any) -> Any:
    if isinstance(value, _JSON_SAFE_PRIMITIVES):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        return {str(k): _json_sanitize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_sanitize(v) for v in value]
    return str(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per line with stable keys and the current request id."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _iso8601(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _STD_KEYS and not k.startswith("_")
        }
        rid = extra.pop("request_id", None) or get_request_id()
        if rid:
            payload["request_id"] = rid
        if extra:
            payload.update(_json_sanitize(extra))

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


_configured = False


def configure_root_logging(
    level: int | str = "INFO", *, json_lines: bool = True, stream: Optional[TextIO] = None
) -> None:
    """Idempotent root logger setup writing to ``stream`` (stdout by default)."""
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    resolved = level if isinstance(level, int) else getattr(logging, str(level).upper(), logging.INFO)
    root.setLevel(resolved)

    # Drop pre-existing handlers to avoid duplicate lines on reload
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    if json_lines:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)

    _configured = True


class ContextAdapter(logging.LoggerAdapter):
    """Bind static context (e.g., component) to every line via ``extra``."""

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        super().__init__(logger, dict(extra or {}))

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        merged: Dict[str, Any] = {}
        call_extra = kwargs.get("extra")
        if isinstance(call_extra, Mapping):
            merged.update(call_extra)
        for k, v in (self.extra or {}).items():
            merged.setdefault(k, v)
        kwargs["extra"] = merged
        return msg, kwargs


def bind(logger: logging.Logger | None = None, **context: Any) -> ContextAdapter:
    """
    Return a LoggerAdapter with bound context.

        log = bind(logging.getLogger(__name__), component="admin")
        log.info("settings saved")
    """
    return ContextAdapter(logger or logging.getLogger(), context)
