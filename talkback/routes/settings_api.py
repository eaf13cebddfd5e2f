from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from talkback.config import AppConfig
from talkback.dependencies.settings import get_config, get_runtime_settings
from talkback.services.runtime_settings import RuntimeSettings, load_user_settings
from talkback.services.setting_schema import SettingsScope

router = APIRouter(prefix="/api", tags=["settings"])


def frontend_view(runtime: RuntimeSettings) -> Dict[str, Any]:
    """Settings a comment frontend may see; no filesystem paths."""
    return {
        "settings": runtime.values.as_document(SettingsScope.SAFE),
        "derived": {
            "themePath": runtime.theme_path,
            "httpRoot": runtime.http_root,
            "httpBackend": runtime.http_backend,
            "httpImages": runtime.http_images,
            "absolutePath": runtime.absolute_url,
        },
    }


@router.get("/settings")
def get_frontend_settings(
    cfg: Optional[str] = Query(default=None, description="JSON object of frontend settings"),
    runtime: RuntimeSettings = Depends(get_runtime_settings),
    config: AppConfig = Depends(get_config),
) -> Dict[str, Any]:
    body: Dict[str, Any]
    if cfg is None:
        body = frontend_view(runtime)
        body["rejected"] = []
        return body

    updated = load_user_settings(runtime, cfg, strict=config.SETTINGS_STRICT)
    # Only report what the caller sent; settings-file diagnostics stay server side.
    user_rejected = updated.rejected[len(runtime.rejected):]
    body = frontend_view(updated)
    body["rejected"] = [r.as_dict() for r in user_rejected]
    return body
