from __future__ import annotations

import base64
import binascii
import os
from hmac import compare_digest

from fastapi import HTTPException, Request, status

from talkback.config import admin_token

ADMIN_COOKIE = "talkback_admin"


def _bearer_ok(req: Request) -> bool:
    token = admin_token()
    if not token:
        return False
    auth = req.headers.get("Authorization", "")
    if auth.startswith("Bearer ") and compare_digest(auth[7:], token):
        return True
    cookie = req.cookies.get(ADMIN_COOKIE, "")
    return bool(cookie) and compare_digest(cookie, token)


def _basic_ok(req: Request) -> bool:
    if admin_token():
        return False  # prefer bearer when set
    user = os.getenv("ADMIN_UI_USER")
    password = os.getenv("ADMIN_UI_PASS")
    if not (user and password):
        return False
    auth = req.headers.get("Authorization", "")
    if not auth.startswith("Basic "):
        return False
    try:
        u, p = base64.b64decode(auth[6:]).decode("utf-8").split(":", 1)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return False
    return compare_digest(u, user) and compare_digest(p, password)


def require_admin(req: Request) -> None:
    if _bearer_ok(req) or _basic_ok(req):
        return
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Auth required",
        headers={"WWW-Authenticate": "Bearer" if admin_token() else "Basic"},
    )


__all__ = ["ADMIN_COOKIE", "require_admin"]
