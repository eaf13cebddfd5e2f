from __future__ import annotations

import pytest

from talkback.services.comment_settings import CommentSettings
from talkback.services.settings_overrides import override_settings, synchronize


def _sync(**fields) -> CommentSettings:
    return synchronize(CommentSettings(**fields))


def test_defaults_are_stable() -> None:
    base = CommentSettings()
    assert synchronize(base) == base


def test_synchronize_returns_new_value() -> None:
    base = CommentSettings(sets_cookies=False)
    synced = synchronize(base)
    assert synced is not base
    assert base.allows_likes is True


def test_cookies_off_disables_likes_and_dislikes() -> None:
    s = _sync(sets_cookies=False, allows_likes=True, allows_dislikes=True)
    assert s.allows_likes is False
    assert s.allows_dislikes is False


def test_missing_field_options_default_to_enabled() -> None:
    s = _sync(field_options={"email": "required", "website": None})
    assert s.field_options == {
        "name": True,
        "password": True,
        "email": "required",
        "website": True,
    }


def test_name_off_disables_password_and_login() -> None:
    s = _sync(field_options={"name": False}, allows_login=True, uses_auto_login=True)
    assert s.field_options["password"] is False
    assert s.allows_login is False
    assert s.uses_auto_login is False


def test_password_off_disables_login_only() -> None:
    s = _sync(field_options={"password": False})
    assert s.field_options["name"] is True
    assert s.allows_login is False
    assert s.uses_auto_login is False


def test_login_off_disables_auto_login() -> None:
    s = _sync(allows_login=False, uses_auto_login=True)
    assert s.uses_auto_login is False


def test_required_name_keeps_login() -> None:
    s = _sync(field_options={"name": "required", "password": "required"})
    assert s.allows_login is True
    assert s.uses_auto_login is True


@pytest.mark.parametrize("value", ["identicon", "monsterid", "wavatar", "retro", "custom"])
def test_known_gravatar_defaults_are_kept(value: str) -> None:
    assert _sync(gravatar_default=value).gravatar_default == value


@pytest.mark.parametrize("value", ["mm", "", "Identicon", "blank", "retro "])
def test_unknown_gravatar_default_becomes_custom(value: str) -> None:
    assert _sync(gravatar_default=value).gravatar_default == "custom"


def test_document_then_synchronize() -> None:
    doc = '{"field-options": {"name": false}, "gravatar-default": "robohash", "sets-cookies": false}'
    s = synchronize(override_settings(CommentSettings(), doc).settings)
    assert s.field_options == {"name": False, "password": False, "email": True, "website": True}
    assert s.allows_login is False
    assert s.uses_auto_login is False
    assert s.gravatar_default == "custom"
    assert s.allows_likes is False
