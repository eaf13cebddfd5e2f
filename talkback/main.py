# talkback/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI

from talkback.config import get_app_config
from talkback.middleware.request_context import RequestContextMiddleware
from talkback.routes import admin_documentation, admin_settings, health, settings_api
from talkback.telemetry.errors import register_error_handlers
from talkback.telemetry.logging import configure_root_logging

log = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "ops", "description": "Liveness"},
    {"name": "settings", "description": "Frontend-safe comment settings"},
    {"name": "admin-settings", "description": "Full settings surface (admin)"},
    {"name": "admin-ui", "description": "Administration pages"},
]


def create_app() -> FastAPI:
    config = get_app_config()
    configure_root_logging(config.LOG_LEVEL, json_lines=config.LOG_JSON)

    app = FastAPI(
        title=config.APP_NAME,
        description="Self-hosted comment threads with file-based settings.",
        version=config.VERSION,
        openapi_tags=OPENAPI_TAGS,
    )
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health.router)
    app.include_router(settings_api.router)
    app.include_router(admin_settings.router)
    app.include_router(admin_documentation.router)

    register_error_handlers(app)

    log.info(
        "app created",
        extra={
            "env": config.ENV,
            "root_directory": str(config.root_path()),
            "settings_file": str(config.settings_path()),
            "settings_strict": config.SETTINGS_STRICT,
        },
    )
    return app


app = create_app()
