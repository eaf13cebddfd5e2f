# talkback/config.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

# talkback -> repo_root
_REPO_ROOT = Path(__file__).resolve().parents[1]


class AppConfig(BaseSettings):
    # --- Identity / Build ---
    APP_NAME: str = Field(default="Talkback")
    ENV: str = Field(default=os.environ.get("ENV", "dev"))
    VERSION: str = Field(default=os.environ.get("VERSION", "0.1.0"))

    # --- Install layout ---
    # Filesystem root of the install; themes/, images/ and config/ live below it.
    ROOT_DIRECTORY: str = Field(default=str(_REPO_ROOT))
    # Web server document root; the HTTP root is ROOT_DIRECTORY relative to it.
    DOCUMENT_ROOT: Optional[str] = None
    # Overrides the request Host header for absolute URLs and referer checks.
    DOMAIN: Optional[str] = None

    # --- Comment settings file ---
    SETTINGS_FILE: str = Field(default="config/settings.json")
    SETTINGS_STRICT: bool = Field(default=False)
    SETTINGS_AUDIT_PATH: Optional[str] = None

    # --- Logging ---
    LOG_JSON: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    model_config = {
        "extra": "ignore",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    def root_path(self) -> Path:
        return Path(self.ROOT_DIRECTORY).resolve()

    def settings_path(self) -> Path:
        path = Path(self.SETTINGS_FILE)
        if path.is_absolute():
            return path
        return self.root_path() / path

    def settings_audit_path(self) -> Path:
        if self.SETTINGS_AUDIT_PATH:
            return Path(self.SETTINGS_AUDIT_PATH)
        return self.root_path() / "var" / "settings_audit.jsonl"


def get_app_config() -> AppConfig:
    return AppConfig()


def admin_token() -> str | None:
    token = os.environ.get("ADMIN_UI_TOKEN", "")
    return token or None
