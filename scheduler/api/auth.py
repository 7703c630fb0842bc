"""Single-password sign-in.

When ``TODO_PASSWORD`` is set, task routes require an HS256 token issued by
``POST /api/signin``. The token subject is a hash of the password, so
changing the password invalidates every token already handed out.
"""
from __future__ import annotations

import hashlib
import hmac
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, Request, status

from scheduler.config import Settings

TOKEN_COOKIE = "token"
TOKEN_ISSUER = "scheduler"


def password_hash(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(candidate: str, settings: Settings) -> bool:
    return hmac.compare_digest(candidate.encode("utf-8"), (settings.password or "").encode("utf-8"))


def create_access_token(settings: Settings) -> tuple[str, datetime]:
    now = datetime.now(timezone.utc)
    expires = now + timedelta(hours=settings.token_ttl_hours)
    payload = {
        "iss": TOKEN_ISSUER,
        "sub": password_hash(settings.password or ""),
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, settings.signing_key, algorithm="HS256"), expires


def _decode_access_token(token: str, settings: Settings) -> dict:
    try:
        return jwt.decode(token, settings.signing_key, algorithms=["HS256"], issuer=TOKEN_ISSUER)
    except jwt.ExpiredSignatureError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


def _read_token(request: Request) -> str | None:
    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.replace("Bearer ", "", 1).strip() or None
    return None


def require_authenticated(request: Request) -> None:
    settings: Settings = request.app.state.settings
    if not settings.auth_enabled:
        return

    token = _read_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    payload = _decode_access_token(token, settings)
    if payload.get("sub") != password_hash(settings.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
