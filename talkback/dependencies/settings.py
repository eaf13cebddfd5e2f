from __future__ import annotations

from fastapi import Depends, Request

from talkback.config import AppConfig, get_app_config
from talkback.services.runtime_settings import (
    RuntimeSettings,
    SiteContext,
    load_runtime_settings,
)


def get_config() -> AppConfig:
    return get_app_config()


def get_runtime_settings(
    request: Request, config: AppConfig = Depends(get_config)
) -> RuntimeSettings:
    """Settings for this request: defaults, then the settings file, synchronized."""
    runtime = load_runtime_settings(config, SiteContext.from_request(request, config))
    request.state.settings = runtime
    return runtime


__all__ = ["get_config", "get_runtime_settings"]
