"""Request-scoped settings: synchronized values plus the paths derived from them.

A ``RuntimeSettings`` value is built once per request (see
``talkback.dependencies.settings``) and never mutated; the frontend override
path returns a new value.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import timezone, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from starlette.requests import Request

from talkback.config import AppConfig
from talkback.services.comment_settings import CommentSettings
from talkback.services.setting_schema import SettingsScope
from talkback.services.settings_overrides import (
    RejectedSetting,
    SettingsDocument,
    override_settings,
    synchronize,
)
from talkback.services.settings_store import read_settings_text

log = logging.getLogger(__name__)

COOKIE_LIFETIME_S = 60 * 60 * 24 * 30
DEFAULT_THEME_DIR = "themes/default"


def derive_http_root(root_directory: str | Path, document_root: Optional[str | Path]) -> str:
    """Return ``root_directory`` as seen over HTTP from ``document_root``.

    ``"/comments"`` for ``/var/www/comments`` under ``/var/www``; empty when the
    two are the same directory or the root lies outside the document root.
    """
    if not document_root:
        return ""
    try:
        rel = Path(root_directory).resolve().relative_to(Path(document_root).resolve())
    except ValueError:
        return ""
    text = rel.as_posix()
    return "" if text == "." else "/" + text


def is_https(scheme: str, port: Optional[int]) -> bool:
    if scheme.lower() == "https":
        return True
    # Assume HTTPS on the standard SSL port
    return port == 443


@lru_cache(maxsize=64)
def _zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        log.warning("unknown server timezone %r; using UTC", name)
        return timezone.utc


@dataclass(frozen=True)
class SiteContext:
    root_directory: str
    http_root: str = ""
    domain: str = ""
    https: bool = False

    @classmethod
    def from_request(cls, request: Request, config: AppConfig) -> "SiteContext":
        server = request.scope.get("server") or (None, None)
        port = server[1] if len(server) > 1 else None
        domain = config.DOMAIN or request.headers.get("host") or (request.url.hostname or "")
        return cls(
            root_directory=str(config.root_path()),
            http_root=derive_http_root(config.root_path(), config.DOCUMENT_ROOT),
            domain=domain,
            https=is_https(request.url.scheme, port),
        )


@dataclass(frozen=True)
class RuntimeSettings:
    values: CommentSettings
    site: SiteContext
    issued_at: float = field(default_factory=time.time)
    rejected: Tuple[RejectedSetting, ...] = ()

    # --- Derived fields ---
    @property
    def theme_path(self) -> str:
        return "themes/" + self.values.theme

    @property
    def root_directory(self) -> str:
        return self.site.root_directory

    @property
    def http_root(self) -> str:
        return self.site.http_root

    @property
    def http_backend(self) -> str:
        return self.site.http_root + "/backend"

    @property
    def http_images(self) -> str:
        return self.site.http_root + "/images"

    @property
    def cookie_expiration(self) -> int:
        return int(self.issued_at) + COOKIE_LIFETIME_S

    @property
    def domain(self) -> str:
        return self.site.domain

    @property
    def absolute_url(self) -> str:
        protocol = "https" if self.site.https else "http"
        return f"{protocol}://{self.site.domain}"

    @property
    def timezone(self) -> tzinfo:
        return _zone(self.values.server_timezone)

    def derived(self) -> Dict[str, Any]:
        return {
            "themePath": self.theme_path,
            "rootDirectory": self.root_directory,
            "httpRoot": self.http_root,
            "httpBackend": self.http_backend,
            "httpImages": self.http_images,
            "cookieExpiration": self.cookie_expiration,
            "domain": self.domain,
            "absolutePath": self.absolute_url,
        }

    # --- Paths ---
    def absolute_path(self, file: str) -> str:
        return self.site.root_directory + "/" + file.strip("/")

    def http_path(self, file: str) -> str:
        return self.http_root + "/" + file.strip("/")

    def backend_path(self, file: str) -> str:
        return self.http_backend + "/" + file.strip("/")

    def image_path(self, filename: str) -> str:
        return self.http_images + "/" + filename.strip("/") + "." + self.values.image_format

    def theme_path_for(self, file: str, http: bool = True) -> str:
        """Path to ``file`` in the configured theme, else in the default theme."""
        theme_file = self.theme_path + "/" + file
        if not Path(self.absolute_path(theme_file)).exists():
            theme_file = DEFAULT_THEME_DIR + "/" + file
        if http:
            theme_file = self.http_path(theme_file)
        return theme_file

    def api_status(self, api: str) -> str:
        enabled = self.values.enabled_api
        if isinstance(enabled, list) and ("all" in enabled or api in enabled):
            return "enabled"
        return "disabled"

    # --- Frontend overrides ---
    def with_user_settings(self, document: SettingsDocument, *, strict: bool = False) -> "RuntimeSettings":
        return load_user_settings(self, document, strict=strict)


def load_runtime_settings(
    config: AppConfig, site: SiteContext, *, strict: Optional[bool] = None
) -> RuntimeSettings:
    """Defaults, overridden by the settings file, then synchronized."""
    strict = config.SETTINGS_STRICT if strict is None else strict
    text = read_settings_text(config.settings_path())
    result = override_settings(CommentSettings(), text, scope=SettingsScope.FULL, strict=strict)
    return RuntimeSettings(
        values=synchronize(result.settings),
        site=site,
        rejected=result.rejected,
    )


def load_user_settings(
    runtime: RuntimeSettings, document: SettingsDocument, *, strict: bool = False
) -> RuntimeSettings:
    """Apply frontend-supplied settings, limited to the safe subset."""
    result = override_settings(runtime.values, document, scope=SettingsScope.SAFE, strict=strict)
    return replace(
        runtime,
        values=synchronize(result.settings),
        rejected=runtime.rejected + result.rejected,
    )


__all__ = [
    "COOKIE_LIFETIME_S",
    "RuntimeSettings",
    "SiteContext",
    "derive_http_root",
    "is_https",
    "load_runtime_settings",
    "load_user_settings",
]
