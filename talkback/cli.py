from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from talkback.services.comment_settings import CommentSettings
from talkback.services.setting_schema import SettingsScope
from talkback.services.settings_overrides import SettingsError, override_settings, synchronize
from talkback.services.settings_store import read_settings_text
from talkback.telemetry.logging import configure_root_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="talkback-settings",
        description="Validate a comment settings file and print the effective settings.",
    )
    parser.add_argument("path", help="settings JSON file")
    parser.add_argument(
        "--scope",
        choices=[s.value for s in SettingsScope],
        default=SettingsScope.FULL.value,
        help="'safe' checks the file as frontend input would be checked",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="exit with status 1 when any entry is rejected",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    # stdout carries the JSON result
    configure_root_logging("WARNING", json_lines=False, stream=sys.stderr)
    path = Path(args.path)
    text = read_settings_text(path)
    if text is None:
        print(f"cannot read {path}", file=sys.stderr)
        return 2

    scope = SettingsScope(args.scope)
    try:
        result = override_settings(CommentSettings(), text, scope=scope, strict=args.strict)
    except SettingsError as exc:
        out: Dict[str, Any] = {"rejected": [r.as_dict() for r in exc.rejected]}
        print(json.dumps(out, indent=2))
        return 1

    settings = synchronize(result.settings)
    out = {
        "settings": settings.as_document(scope),
        "rejected": [r.as_dict() for r in result.rejected],
    }
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
