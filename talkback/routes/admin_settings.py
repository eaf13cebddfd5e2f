from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from talkback.config import AppConfig
from talkback.dependencies.auth import require_admin
from talkback.dependencies.settings import get_config, get_runtime_settings
from talkback.services.comment_settings import SETTING_SPECS
from talkback.services.runtime_settings import RuntimeSettings, load_runtime_settings
from talkback.services.settings_overrides import override_settings
from talkback.services.settings_store import save_settings_patch
from talkback.telemetry.logging import bind

router = APIRouter(prefix="/admin", tags=["admin-settings"])

log = bind(logging.getLogger(__name__), component="admin-settings")


def _schema_view() -> Dict[str, Any]:
    return {
        key.value: {"kind": spec.kind.value, "default": spec.default, "safe": spec.safe}
        for key, spec in SETTING_SPECS.items()
    }


def _admin_view(runtime: RuntimeSettings) -> Dict[str, Any]:
    return {
        "settings": runtime.values.as_document(),
        "derived": runtime.derived(),
    }


@router.get("/settings")
def get_settings(
    _: None = Depends(require_admin),
    runtime: RuntimeSettings = Depends(get_runtime_settings),
) -> JSONResponse:
    body = _admin_view(runtime)
    body["rejected"] = [r.as_dict() for r in runtime.rejected]
    body["schema"] = _schema_view()
    return JSONResponse(body)


@router.post("/settings")
async def update_settings(
    request: Request,
    _: None = Depends(require_admin),
    runtime: RuntimeSettings = Depends(get_runtime_settings),
    config: AppConfig = Depends(get_config),
) -> JSONResponse:
    """
    Accept a JSON object of settings (dashed or camelCase keys) over the full
    settings surface. Accepted values are persisted to the settings file;
    rejected ones are reported back and not stored.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid json")
    if not isinstance(payload, Mapping):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid payload")

    result = override_settings(runtime.values, payload, strict=config.SETTINGS_STRICT)
    if result.accepted:
        save_settings_patch(
            result.accepted,
            path=config.settings_path(),
            audit_path=config.settings_audit_path(),
            actor="admin-api",
        )
        log.info("settings saved", extra={"count": len(result.accepted)})

    effective = load_runtime_settings(config, runtime.site)
    body = _admin_view(effective)
    body["rejected"] = [r.as_dict() for r in result.rejected]
    return JSONResponse(body, status_code=status.HTTP_200_OK)
