"""Recognised comment settings, their value kinds and the frontend-safe subset.

Keys travel in three spellings: dashed (``allows-login``) in the settings
file, camelCase (``allowsLogin``) on the wire, and snake_case
(``allows_login``) as model field names. ``SettingKey`` values are the
camelCase form; ``normalize_key`` maps dashed input onto it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Optional

from pydantic.alias_generators import to_snake


class SettingKey(str, Enum):
    # frontend-safe
    LANGUAGE = "language"
    THEME = "theme"
    USES_MODERATION = "usesModeration"
    PENDS_USER_EDITS = "pendsUserEdits"
    DEFAULT_NAME = "defaultName"
    ALLOWS_IMAGES = "allowsImages"
    ALLOWS_LOGIN = "allowsLogin"
    ALLOWS_LIKES = "allowsLikes"
    ALLOWS_DISLIKES = "allowsDislikes"
    USES_CANCEL_BUTTONS = "usesCancelButtons"
    USES_AUTO_LOGIN = "usesAutoLogin"
    USES_AJAX = "usesAjax"
    COLLAPSES_INTERFACE = "collapsesInterface"
    COLLAPSES_COMMENTS = "collapsesComments"
    COLLAPSE_LIMIT = "collapseLimit"
    REPLY_MODE = "replyMode"
    STREAM_DEPTH = "streamDepth"
    POPULARITY_THRESHOLD = "popularityThreshold"
    POPULARITY_LIMIT = "popularityLimit"
    USES_MARKDOWN = "usesMarkdown"
    USES_USER_TIMEZONE = "usesUserTimezone"
    USES_SHORT_DATES = "usesShortDates"
    TIME_FORMAT = "timeFormat"
    DATE_FORMAT = "dateFormat"
    DISPLAYS_TITLE = "displaysTitle"
    FORM_POSITION = "formPosition"
    SHOWS_REPLY_COUNT = "showsReplyCount"
    COUNT_INCLUDES_DELETED = "countIncludesDeleted"
    ICON_MODE = "iconMode"
    ICON_SIZE = "iconSize"
    IMAGE_FORMAT = "imageFormat"
    USES_LABELS = "usesLabels"
    APPENDS_CSS = "appendsCss"
    APPENDS_RSS = "appendsRss"
    LOGIN_METHOD = "loginMethod"
    SETS_COOKIES = "setsCookies"
    SECURE_COOKIES = "secureCookies"
    GRAVATAR_DEFAULT = "gravatarDefault"
    GRAVATAR_FORCE = "gravatarForce"
    FIELD_OPTIONS = "fieldOptions"

    # trusted paths only
    SERVER_TIMEZONE = "serverTimezone"
    DATA_FORMAT = "dataFormat"
    NOTIFICATION_EMAIL = "notificationEmail"
    NOREPLY_EMAIL = "noreplyEmail"
    MAIL_TYPE = "mailType"
    SPAM_DATABASE = "spamDatabase"
    SPAM_CHECK_MODES = "spamCheckModes"
    ALLOWS_USER_REPLIES = "allowsUserReplies"
    ALLOWS_NOTIFICATIONS = "allowsNotifications"
    ENABLED_API = "enabledApi"
    MINIFIES_JAVASCRIPT = "minifiesJavascript"
    MINIFY_LEVEL = "minifyLevel"
    ALLOWS_LOCAL_METADATA = "allowsLocalMetadata"

    @property
    def field_name(self) -> str:
        return to_snake(self.value)

    @property
    def dashed(self) -> str:
        return camel_to_dashed(self.value)


SAFE_KEYS: FrozenSet[SettingKey] = frozenset(
    {
        SettingKey.LANGUAGE,
        SettingKey.THEME,
        SettingKey.USES_MODERATION,
        SettingKey.PENDS_USER_EDITS,
        SettingKey.DEFAULT_NAME,
        SettingKey.ALLOWS_IMAGES,
        SettingKey.ALLOWS_LOGIN,
        SettingKey.ALLOWS_LIKES,
        SettingKey.ALLOWS_DISLIKES,
        SettingKey.USES_CANCEL_BUTTONS,
        SettingKey.USES_AUTO_LOGIN,
        SettingKey.USES_AJAX,
        SettingKey.COLLAPSES_INTERFACE,
        SettingKey.COLLAPSES_COMMENTS,
        SettingKey.COLLAPSE_LIMIT,
        SettingKey.REPLY_MODE,
        SettingKey.STREAM_DEPTH,
        SettingKey.POPULARITY_THRESHOLD,
        SettingKey.POPULARITY_LIMIT,
        SettingKey.USES_MARKDOWN,
        SettingKey.USES_USER_TIMEZONE,
        SettingKey.USES_SHORT_DATES,
        SettingKey.TIME_FORMAT,
        SettingKey.DATE_FORMAT,
        SettingKey.DISPLAYS_TITLE,
        SettingKey.FORM_POSITION,
        SettingKey.SHOWS_REPLY_COUNT,
        SettingKey.COUNT_INCLUDES_DELETED,
        SettingKey.ICON_MODE,
        SettingKey.ICON_SIZE,
        SettingKey.IMAGE_FORMAT,
        SettingKey.USES_LABELS,
        SettingKey.APPENDS_CSS,
        SettingKey.APPENDS_RSS,
        SettingKey.LOGIN_METHOD,
        SettingKey.SETS_COOKIES,
        SettingKey.SECURE_COOKIES,
        SettingKey.GRAVATAR_DEFAULT,
        SettingKey.GRAVATAR_FORCE,
        SettingKey.FIELD_OPTIONS,
    }
)


class SettingsScope(str, Enum):
    FULL = "full"
    SAFE = "safe"

    def permits(self, key: SettingKey) -> bool:
        return self is SettingsScope.FULL or key in SAFE_KEYS


class ValueKind(str, Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    MAPPING = "mapping"
    NULL = "null"


def kind_of(value: Any) -> Optional[ValueKind]:
    # bool first: it is a subclass of int
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if isinstance(value, dict):
        return ValueKind.MAPPING
    return None


@dataclass(frozen=True)
class SettingSpec:
    key: SettingKey
    kind: ValueKind
    default: Any
    safe: bool

    def accepts(self, value: Any) -> bool:
        return kind_of(value) is self.kind


# ---------------------------------------------------------------------------
# Key spelling
# ---------------------------------------------------------------------------

_DASH_RUN_LETTER = re.compile(r"-+([a-z])")
_UPPER = re.compile(r"([A-Z])")


def normalize_key(key: str) -> str:
    """Convert a dashed key (``Allows-Login``) to camelCase (``allowsLogin``).

    Keys without a dash are returned untouched. Dashes not followed by a
    letter are dropped, so the result never contains a dash and normalizing
    twice gives the same answer.
    """
    if "-" not in key:
        return key
    camel = _DASH_RUN_LETTER.sub(lambda m: m.group(1).upper(), key.lower())
    return camel.replace("-", "")


def camel_to_dashed(key: str) -> str:
    return _UPPER.sub(lambda m: "-" + m.group(1).lower(), key)


def resolve_key(raw: str) -> Optional[SettingKey]:
    try:
        return SettingKey(normalize_key(raw))
    except ValueError:
        return None


__all__ = [
    "SAFE_KEYS",
    "SettingKey",
    "SettingSpec",
    "SettingsScope",
    "ValueKind",
    "camel_to_dashed",
    "kind_of",
    "normalize_key",
    "resolve_key",
]
