"""Merge settings documents onto defaults and enforce cross-field policy.

Both entry points are pure: they take a ``CommentSettings`` value and return
a new one. Rejected keys are collected as ``RejectedSetting`` diagnostics
rather than raised, unless the caller asks for strict handling.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from talkback.services.comment_settings import (
    FIELD_OPTION_NAMES,
    GRAVATAR_DEFAULTS,
    SETTING_SPECS,
    CommentSettings,
)
from talkback.services.setting_schema import (
    SettingKey,
    SettingsScope,
    ValueKind,
    kind_of,
    resolve_key,
)

log = logging.getLogger(__name__)

SettingsDocument = Union[str, bytes, Mapping[str, Any], None]

# Rejection reasons
MALFORMED_DOCUMENT = "malformed_document"
NOT_AN_OBJECT = "not_an_object"
UNKNOWN_KEY = "unknown_key"
NOT_PERMITTED = "not_permitted"
TYPE_MISMATCH = "type_mismatch"


@dataclass(frozen=True)
class RejectedSetting:
    key: Optional[str]
    reason: str
    detail: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "reason": self.reason, "detail": self.detail}


class SettingsError(ValueError):
    """Raised in strict mode when a settings document has rejected entries."""

    def __init__(self, rejected: Tuple[RejectedSetting, ...]) -> None:
        self.rejected = rejected
        names = ", ".join(r.key or "<document>" for r in rejected)
        super().__init__(f"rejected settings: {names}")


@dataclass(frozen=True)
class OverrideResult:
    settings: CommentSettings
    accepted: Mapping[SettingKey, Any] = field(default_factory=dict)
    rejected: Tuple[RejectedSetting, ...] = ()


def _decode(document: SettingsDocument) -> Tuple[Optional[Mapping[str, Any]], Optional[RejectedSetting]]:
    if document is None:
        return None, None
    if isinstance(document, Mapping):
        return document, None
    try:
        decoded = json.loads(document)
    except (ValueError, TypeError) as exc:
        return None, RejectedSetting(None, MALFORMED_DOCUMENT, str(exc))
    if not isinstance(decoded, dict):
        return None, RejectedSetting(None, NOT_AN_OBJECT, type(decoded).__name__)
    return decoded, None


def override_settings(
    settings: CommentSettings,
    document: SettingsDocument,
    *,
    scope: SettingsScope = SettingsScope.FULL,
    strict: bool = False,
) -> OverrideResult:
    """Return ``settings`` with every acceptable entry of ``document`` applied.

    An entry is applied only when its key names a setting visible in
    ``scope`` and its value has the same kind as the setting's default.
    A document that is not a JSON object changes nothing.
    """
    data, problem = _decode(document)
    rejected: List[RejectedSetting] = []
    accepted: Dict[SettingKey, Any] = {}

    if problem is not None:
        rejected.append(problem)
    for raw_key, value in (data or {}).items():
        key = resolve_key(str(raw_key))
        if key is None:
            rejected.append(RejectedSetting(str(raw_key), UNKNOWN_KEY))
            continue
        if not scope.permits(key):
            rejected.append(RejectedSetting(key.value, NOT_PERMITTED, scope.value))
            continue
        spec = SETTING_SPECS[key]
        # Empty objects are written as [] by some encoders
        if value == [] and spec.kind is ValueKind.MAPPING:
            value = {}
        if not spec.accepts(value):
            got = kind_of(value)
            rejected.append(
                RejectedSetting(
                    key.value,
                    TYPE_MISMATCH,
                    f"expected {spec.kind.value}, got {got.value if got else type(value).__name__}",
                )
            )
            continue
        accepted[key] = copy.deepcopy(value)

    result_rejected = tuple(rejected)
    if result_rejected:
        if strict:
            raise SettingsError(result_rejected)
        log.warning(
            "settings entries rejected",
            extra={"scope": scope.value, "rejected": [r.as_dict() for r in result_rejected]},
        )

    if not accepted:
        return OverrideResult(settings=settings, rejected=result_rejected)
    updated = settings.model_copy(update={key.field_name: value for key, value in accepted.items()})
    return OverrideResult(settings=updated, accepted=accepted, rejected=result_rejected)


def synchronize(settings: CommentSettings) -> CommentSettings:
    """Apply the settings that depend on other settings."""
    updates: Dict[str, Any] = {}

    # Likes are tracked with cookies
    if settings.sets_cookies is False:
        updates["allows_likes"] = False
        updates["allows_dislikes"] = False

    options = dict(settings.field_options)
    for name in FIELD_OPTION_NAMES:
        if options.get(name) is None:
            options[name] = True

    if options["name"] is False:
        options["password"] = False

    allows_login = settings.allows_login
    if options["name"] is False or options["password"] is False:
        allows_login = False
    updates["allows_login"] = allows_login
    updates["field_options"] = options

    if allows_login is False:
        updates["uses_auto_login"] = False

    if settings.gravatar_default not in GRAVATAR_DEFAULTS:
        updates["gravatar_default"] = "custom"

    return settings.model_copy(update=updates)


__all__ = [
    "MALFORMED_DOCUMENT",
    "NOT_AN_OBJECT",
    "NOT_PERMITTED",
    "OverrideResult",
    "RejectedSetting",
    "SettingsDocument",
    "SettingsError",
    "TYPE_MISMATCH",
    "UNKNOWN_KEY",
    "override_settings",
    "synchronize",
]
