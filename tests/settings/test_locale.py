from __future__ import annotations

import pytest

from talkback.services.locale import Locale, resolve_language


@pytest.mark.parametrize(
    "language, accept, expected",
    [
        ("auto", None, "en"),
        ("auto", "de-DE,de;q=0.9", "de"),
        ("auto", "pt-BR, es;q=0.8", "es"),
        ("auto", "*", "en"),
        ("fr", "de", "fr"),
        ("fr_FR", None, "fr"),
        ("es-MX", None, "es"),
        ("xx", None, "en"),
        ("", None, "en"),
    ],
)
def test_resolve_language(language, accept, expected) -> None:
    assert resolve_language(language, accept) == expected


def test_unknown_language_uses_english() -> None:
    assert Locale("zz").language == "en"
    assert Locale("zz")["logout"] == "Logout"


def test_missing_key_raises() -> None:
    with pytest.raises(KeyError):
        Locale("de")["no-such-text"]
