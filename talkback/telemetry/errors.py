"""Global JSON error handling with stable error codes and request correlation."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from talkback.middleware.request_context import get_request_id
from talkback.services.settings_overrides import SettingsError
from talkback.services.settings_store import StoredSettingsInvalid

log = logging.getLogger(__name__)

_STATUS_TO_CODE = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "validation_error",
}


def _rid_from_request(request: Request) -> str:
    return (
        get_request_id()
        or getattr(request.state, "request_id", None)
        or request.headers.get("X-Request-ID")
        or str(uuid4())
    )


def _json_error(
    request: Request,
    *,
    detail: str,
    status: int,
    code: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    rid = _rid_from_request(request)
    body: Dict[str, Any] = {
        "detail": detail,
        "code": code or _STATUS_TO_CODE.get(status, "error"),
        "request_id": rid,
    }
    if extra:
        body.update(extra)
    resp = JSONResponse(status_code=status, content=body, headers=headers)
    resp.headers["X-Request-ID"] = rid
    return resp


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return _json_error(
            request,
            detail=detail,
            status=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _json_error(
            request,
            detail="Validation failed",
            status=422,
            code="validation_error",
            extra={"errors": exc.errors()},
        )

    @app.exception_handler(SettingsError)
    async def settings_exc_handler(request: Request, exc: SettingsError) -> JSONResponse:
        return _json_error(
            request,
            detail="Settings rejected",
            status=422,
            code="settings_rejected",
            extra={"rejected": [r.as_dict() for r in exc.rejected]},
        )

    @app.exception_handler(StoredSettingsInvalid)
    async def stored_settings_exc_handler(
        request: Request, exc: StoredSettingsInvalid
    ) -> JSONResponse:
        log.error("refusing to overwrite settings file", extra={"reason": exc.reason})
        return _json_error(
            request,
            detail="Stored settings file is not a JSON object; repair it before saving",
            status=409,
            code="settings_file_invalid",
        )

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception) -> JSONResponse:
        # Details go to the log, correlated by request_id; never to the client.
        log.exception("unhandled error: %s", type(exc).__name__)
        return _json_error(
            request,
            detail="Internal server error",
            status=500,
            code="internal_error",
        )
