from __future__ import annotations

from typing import Dict, Optional

DEFAULT_LANGUAGE = "en"

_CATALOG: Dict[str, Dict[str, str]] = {
    "en": {
        "documentation": "Documentation",
        "coming-soon": "Coming soon.",
        "logout": "Logout",
        "settings": "Settings",
        "error": "Error",
    },
    "de": {
        "documentation": "Dokumentation",
        "coming-soon": "Demnächst verfügbar.",
        "logout": "Abmelden",
        "settings": "Einstellungen",
        "error": "Fehler",
    },
    "es": {
        "documentation": "Documentación",
        "coming-soon": "Próximamente.",
        "logout": "Cerrar sesión",
        "settings": "Configuración",
        "error": "Error",
    },
    "fr": {
        "documentation": "Documentation",
        "coming-soon": "Bientôt disponible.",
        "logout": "Déconnexion",
        "settings": "Paramètres",
        "error": "Erreur",
    },
}


def _from_accept_language(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    for part in header.split(","):
        tag = part.split(";", 1)[0].strip().lower()
        if not tag or tag == "*":
            continue
        primary = tag.split("-", 1)[0]
        if primary in _CATALOG:
            return primary
    return None


def resolve_language(language: str, accept_language: Optional[str] = None) -> str:
    """Map a configured language (possibly ``auto``) onto a catalogued one."""
    lang = (language or "").strip().lower()
    if lang == "auto":
        return _from_accept_language(accept_language) or DEFAULT_LANGUAGE
    if lang in _CATALOG:
        return lang
    primary = lang.split("-", 1)[0].split("_", 1)[0]
    return primary if primary in _CATALOG else DEFAULT_LANGUAGE


class Locale:
    """Text lookup with English fallback for untranslated keys."""

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        self.language = language if language in _CATALOG else DEFAULT_LANGUAGE
        merged: Dict[str, str] = dict(_CATALOG[DEFAULT_LANGUAGE])
        merged.update(_CATALOG[self.language])
        self._text = merged

    def __getitem__(self, key: str) -> str:
        return self._text[key]


__all__ = ["DEFAULT_LANGUAGE", "Locale", "resolve_language"]
