from __future__ import annotations

import json
from datetime import timezone
from pathlib import Path

import pytest

from talkback.config import AppConfig
from talkback.services.comment_settings import CommentSettings
from talkback.services.runtime_settings import (
    COOKIE_LIFETIME_S,
    RuntimeSettings,
    SiteContext,
    derive_http_root,
    is_https,
    load_runtime_settings,
    load_user_settings,
)
from talkback.services.settings_overrides import NOT_PERMITTED, SettingsError


def _runtime(root: str = "/srv/talkback", **fields) -> RuntimeSettings:
    site = SiteContext(root_directory=root, http_root="/comments", domain="example.com", https=True)
    return RuntimeSettings(values=CommentSettings(**fields), site=site, issued_at=1_000.0)


def test_derive_http_root(tmp_path: Path) -> None:
    docroot = tmp_path / "www"
    root = docroot / "blog" / "comments"
    root.mkdir(parents=True)
    outside = tmp_path / "elsewhere"
    outside.mkdir()

    assert derive_http_root(root, docroot) == "/blog/comments"
    assert derive_http_root(docroot, docroot) == ""
    assert derive_http_root(outside, docroot) == ""
    assert derive_http_root(root, None) == ""
    assert derive_http_root(root, str(docroot) + "/") == "/blog/comments"


@pytest.mark.parametrize(
    "scheme, port, expected",
    [("https", 80, True), ("http", 443, True), ("HTTPS", None, True), ("http", 80, False), ("http", None, False)],
)
def test_is_https(scheme, port, expected) -> None:
    assert is_https(scheme, port) is expected


def test_derived_fields() -> None:
    rt = _runtime(theme="dark")
    assert rt.theme_path == "themes/dark"
    assert rt.http_backend == "/comments/backend"
    assert rt.http_images == "/comments/images"
    assert rt.absolute_url == "https://example.com"
    assert rt.cookie_expiration == 1_000 + COOKIE_LIFETIME_S
    derived = rt.derived()
    assert derived["themePath"] == "themes/dark"
    assert derived["httpBackend"] == "/comments/backend"
    assert derived["rootDirectory"] == "/srv/talkback"


def test_plain_http_absolute_url() -> None:
    rt = RuntimeSettings(values=CommentSettings(), site=SiteContext("/srv", domain="blog.test"))
    assert rt.absolute_url == "http://blog.test"
    assert rt.http_backend == "/backend"


def test_path_helpers_trim_slashes() -> None:
    rt = _runtime(image_format="svg")
    assert rt.absolute_path("/config/settings.json/") == "/srv/talkback/config/settings.json"
    assert rt.http_path("/frontend/comments.js") == "/comments/frontend/comments.js"
    assert rt.backend_path("load-comments") == "/comments/backend/load-comments"
    assert rt.image_path("/avatar/") == "/comments/images/avatar.svg"


def test_theme_path_falls_back_to_default(tmp_path: Path) -> None:
    themed = tmp_path / "themes" / "dark"
    themed.mkdir(parents=True)
    (themed / "style.css").write_text("body{}", encoding="utf-8")
    rt = _runtime(root=str(tmp_path), theme="dark")

    assert rt.theme_path_for("style.css") == "/comments/themes/dark/style.css"
    assert rt.theme_path_for("style.css", http=False) == "themes/dark/style.css"
    assert rt.theme_path_for("comments.html") == "/comments/themes/default/comments.html"
    assert rt.theme_path_for("comments.html", http=False) == "themes/default/comments.html"


@pytest.mark.parametrize(
    "enabled, api, status",
    [
        (["all"], "rss", "enabled"),
        (["rss"], "rss", "enabled"),
        (["rss"], "json", "disabled"),
        ([], "rss", "disabled"),
    ],
)
def test_api_status(enabled, api, status) -> None:
    assert _runtime(enabled_api=enabled).api_status(api) == status


def test_unknown_timezone_falls_back_to_utc() -> None:
    assert _runtime(server_timezone="Not/AZone").timezone is timezone.utc
    assert _runtime(server_timezone="").timezone is timezone.utc


def _config(root: Path, **kwargs) -> AppConfig:
    return AppConfig(ROOT_DIRECTORY=str(root), **kwargs)


def test_load_without_settings_file(install_root: Path) -> None:
    rt = load_runtime_settings(_config(install_root), SiteContext(str(install_root)))
    assert rt.values == CommentSettings()
    assert rt.rejected == ()


def test_load_applies_file_and_synchronizes(install_root: Path, write_settings) -> None:
    write_settings(
        {
            "theme": "dark",
            "allows-login": False,
            "gravatar-default": "robohash",
            "server-timezone": "Europe/Berlin",
            "collapse-limit": "9",
        }
    )
    rt = load_runtime_settings(_config(install_root), SiteContext(str(install_root)))
    assert rt.values.theme == "dark"
    assert rt.values.uses_auto_login is False
    assert rt.values.gravatar_default == "custom"
    assert rt.values.server_timezone == "Europe/Berlin"
    assert rt.values.collapse_limit == 3
    assert [r.key for r in rt.rejected] == ["collapseLimit"]


def test_load_ignores_malformed_file(install_root: Path, write_settings) -> None:
    write_settings("{ this is not json")
    rt = load_runtime_settings(_config(install_root), SiteContext(str(install_root)))
    assert rt.values == CommentSettings()
    assert len(rt.rejected) == 1


def test_load_strict_raises(install_root: Path, write_settings) -> None:
    write_settings({"theme": 5})
    with pytest.raises(SettingsError):
        load_runtime_settings(_config(install_root, SETTINGS_STRICT=True), SiteContext(str(install_root)))


def test_settings_file_override_path(tmp_path: Path, install_root: Path) -> None:
    custom = tmp_path / "elsewhere.json"
    custom.write_text(json.dumps({"theme": "custom"}), encoding="utf-8")
    rt = load_runtime_settings(
        _config(install_root, SETTINGS_FILE=str(custom)), SiteContext(str(install_root))
    )
    assert rt.values.theme == "custom"


def test_user_settings_limited_to_safe_subset() -> None:
    base = _runtime()
    updated = load_user_settings(
        base, '{"theme": "dark", "server-timezone": "Asia/Tokyo", "field-options": {"name": false}}'
    )
    assert updated.values.theme == "dark"
    assert updated.values.server_timezone == "UTC"
    assert updated.values.allows_login is False
    assert [(r.key, r.reason) for r in updated.rejected] == [("serverTimezone", NOT_PERMITTED)]
    assert updated.site == base.site
    assert base.values.theme == "default"


def test_with_user_settings_ignores_garbage() -> None:
    base = _runtime()
    updated = base.with_user_settings("not json at all")
    assert updated.values == base.values
