from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from talkback.dependencies.auth import ADMIN_COOKIE, require_admin
from talkback.dependencies.settings import get_runtime_settings
from talkback.services.locale import Locale, resolve_language
from talkback.services.runtime_settings import RuntimeSettings
from talkback.services.templater import display_error, logout_html, parse_template

router = APIRouter(prefix="/admin", tags=["admin-ui"])

log = logging.getLogger(__name__)


@router.get("/documentation", response_class=HTMLResponse)
def documentation(
    request: Request,
    _: None = Depends(require_admin),
    runtime: RuntimeSettings = Depends(get_runtime_settings),
) -> HTMLResponse:
    try:
        locale = Locale(
            resolve_language(runtime.values.language, request.headers.get("accept-language"))
        )
        template = {
            "language": locale.language,
            "title": locale["documentation"],
            "logout": logout_html(locale, "\t\t\t"),
            "sub_title": locale["coming-soon"],
        }
        return HTMLResponse(parse_template("documentation.html", template))
    except Exception as error:
        log.exception("documentation view failed")
        return HTMLResponse(display_error(str(error)))


@router.post("/logout")
def logout() -> RedirectResponse:
    resp = RedirectResponse("/admin/documentation", status_code=status.HTTP_303_SEE_OTHER)
    resp.delete_cookie(ADMIN_COOKIE)
    return resp
