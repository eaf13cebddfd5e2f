from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from talkback.config import AppConfig
from talkback.dependencies.settings import get_config

router = APIRouter(tags=["ops"])


@router.get("/health")
def health(config: AppConfig = Depends(get_config)) -> Dict[str, Any]:
    return {
        "status": "ok",
        "service": config.APP_NAME,
        "version": config.VERSION,
        "env": config.ENV,
    }
