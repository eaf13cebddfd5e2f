from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_REQUEST_ID: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_HEADER = "X-Request-ID"

access_log = logging.getLogger("talkback.access")


def get_request_id() -> Optional[str]:
    """Return the id of the request being handled, if any."""
    return _REQUEST_ID.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Per-request bookkeeping:
    - accept an incoming X-Request-ID or generate a UUID4;
    - expose it through a context variable and ``request.state``;
    - echo it on the response and write one access log line.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        raw = (request.headers.get(_HEADER) or "").strip()
        rid = raw or str(uuid.uuid4())

        token = _REQUEST_ID.set(rid)
        request.state.request_id = rid
        start = time.perf_counter()
        try:
            response = await call_next(request)
            if response.headers.get(_HEADER) is None:
                response.headers[_HEADER] = rid
            access_log.info(
                "request",
                extra={
                    "request_id": rid,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            return response
        finally:
            _REQUEST_ID.reset(token)
