from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from fastapi.templating import Jinja2Templates
from markupsafe import Markup, escape

from talkback.services.locale import Locale

_TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "ui" / "templates"

templates = Jinja2Templates(directory=str(_TEMPLATE_DIR))


def parse_template(name: str, data: Mapping[str, Any]) -> str:
    """Render an admin template to a string."""
    return templates.get_template(name).render(**dict(data))


def logout_html(locale: Locale, indent: str = "") -> Markup:
    """Logout control for admin pages; ``indent`` prefixes every line."""
    lines = [
        '<form class="talkback-logout" action="/admin/logout" method="post">',
        '\t<button type="submit">{}</button>'.format(escape(locale["logout"])),
        "</form>",
    ]
    return Markup("\n".join(indent + line for line in lines))


def display_error(message: str) -> Markup:
    return Markup('<span class="talkback-error">Talkback: {}</span>').format(message)


__all__ = ["display_error", "logout_html", "parse_template", "templates"]
