"""Compiled-in comment settings and the schema derived from them."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, get_origin

from pydantic import Field

from talkback.pydantic_base import CamelModel
from talkback.services.setting_schema import (
    SAFE_KEYS,
    SettingKey,
    SettingSpec,
    SettingsScope,
    ValueKind,
)

FIELD_OPTION_NAMES = ("name", "password", "email", "website")
GRAVATAR_DEFAULTS = frozenset({"identicon", "monsterid", "wavatar", "retro", "custom"})


def _default_field_options() -> Dict[str, Any]:
    return {name: True for name in FIELD_OPTION_NAMES}


class CommentSettings(CamelModel):
    # --- Frontend-safe ---
    language: str = "auto"
    theme: str = "default"
    uses_moderation: bool = False
    pends_user_edits: bool = False
    default_name: str = "Anonymous"
    allows_images: bool = True
    allows_login: bool = True
    allows_likes: bool = True
    allows_dislikes: bool = False
    uses_cancel_buttons: bool = True
    uses_auto_login: bool = True
    uses_ajax: bool = True
    collapses_interface: bool = False
    collapses_comments: bool = True
    collapse_limit: int = 3
    reply_mode: str = "thread"  # "thread" | "stream"
    stream_depth: int = 3
    popularity_threshold: int = 5
    popularity_limit: int = 2
    uses_markdown: bool = True
    uses_user_timezone: bool = True
    uses_short_dates: bool = True
    time_format: str = "%I:%M%p"
    date_format: str = "%m/%d/%Y"
    displays_title: bool = True
    form_position: str = "top"  # "top" | "bottom"
    shows_reply_count: bool = True
    count_includes_deleted: bool = True
    icon_mode: str = "image"  # "image" | "count" | "none"
    icon_size: int = 45
    image_format: str = "png"
    uses_labels: bool = False
    appends_css: bool = True
    appends_rss: bool = True
    login_method: str = "defaultLogin"
    sets_cookies: bool = True
    secure_cookies: bool = False
    gravatar_default: str = "custom"
    gravatar_force: bool = False
    # Values are True, False or "required"
    field_options: Dict[str, Any] = Field(default_factory=_default_field_options)

    # --- Trusted paths only ---
    server_timezone: str = "UTC"
    data_format: str = "json"
    notification_email: str = "example@example.com"
    noreply_email: str = "noreply@example.com"
    mail_type: str = "text"  # "text" | "html"
    spam_database: str = "remote"
    spam_check_modes: str = "php"
    allows_user_replies: bool = False
    allows_notifications: bool = True
    enabled_api: List[str] = Field(default_factory=lambda: ["all"])
    minifies_javascript: bool = False
    minify_level: int = 4
    allows_local_metadata: bool = False

    def value(self, key: SettingKey) -> Any:
        return getattr(self, key.field_name)

    def as_document(self, scope: SettingsScope = SettingsScope.FULL) -> Dict[str, Any]:
        """camelCase mapping of the settings visible in ``scope``."""
        return {
            key.value: self.value(key)
            for key in SettingKey
            if scope.permits(key)
        }


_SCALAR_KINDS: Mapping[Any, ValueKind] = {
    bool: ValueKind.BOOLEAN,
    int: ValueKind.INTEGER,
    float: ValueKind.FLOAT,
    str: ValueKind.STRING,
    list: ValueKind.LIST,
    dict: ValueKind.MAPPING,
}


def _annotation_kind(annotation: Any) -> ValueKind:
    origin = get_origin(annotation) or annotation
    try:
        return _SCALAR_KINDS[origin]
    except KeyError:
        raise TypeError(f"unsupported setting annotation: {annotation!r}") from None


def _build_specs() -> Dict[SettingKey, SettingSpec]:
    defaults = CommentSettings()
    fields = CommentSettings.model_fields
    specs: Dict[SettingKey, SettingSpec] = {}
    for key in SettingKey:
        info = fields.get(key.field_name)
        if info is None:
            raise RuntimeError(f"setting {key.value!r} has no field {key.field_name!r}")
        specs[key] = SettingSpec(
            key=key,
            kind=_annotation_kind(info.annotation),
            default=defaults.value(key),
            safe=key in SAFE_KEYS,
        )
    extra = set(fields) - {key.field_name for key in SettingKey}
    if extra:
        raise RuntimeError(f"settings fields without a key: {sorted(extra)}")
    return specs


SETTING_SPECS: Mapping[SettingKey, SettingSpec] = _build_specs()


__all__ = [
    "CommentSettings",
    "FIELD_OPTION_NAMES",
    "GRAVATAR_DEFAULTS",
    "SETTING_SPECS",
]
