# -*- coding: utf-8 -*-
"""Development backend — password hashing, access/refresh JWTs and FastAPI helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from fastapi import Depends, HTTPException, Request

from ..config import Settings
from .storage import get_user_by_id

ACCESS = "access"
REFRESH = "refresh"
ADMIN_ROLE = "ADMIN"

# Password hashing (stdlib pbkdf2_hmac).
_PBKDF2_ALG = "sha256"
_PBKDF2_ITERATIONS = 200_000


def hash_password(password: str) -> str:
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac(_PBKDF2_ALG, password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return f"pbkdf2_{_PBKDF2_ALG}${_PBKDF2_ITERATIONS}${_b64url_encode(salt)}${_b64url_encode(dk)}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        scheme, iter_s, salt_b64, dk_b64 = password_hash.split("$", 3)
        if not scheme.startswith("pbkdf2_"):
            return False
        alg = scheme.split("_", 1)[1]
        actual = hashlib.pbkdf2_hmac(alg, password.encode("utf-8"), _b64url_decode(salt_b64), int(iter_s))
        return hmac.compare_digest(actual, _b64url_decode(dk_b64))
    except (ValueError, TypeError):
        return False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_config(request: Request) -> Settings:
    return request.app.state.config


def create_token(*, user_id: int, username: str, kind: str, secret: str, ttl: timedelta) -> str:
    now = _utc_now()
    payload = {
        "sub": str(user_id),
        "username": username,
        "typ": kind,
        "jti": uuid4().hex,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return _jwt_encode(payload, secret)


def create_access_token(config: Settings, user: Dict[str, Any]) -> str:
    return create_token(
        user_id=user["id"],
        username=user["username"],
        kind=ACCESS,
        secret=config.dev_jwt_secret,
        ttl=timedelta(minutes=int(config.dev_access_ttl_minutes)),
    )


def create_refresh_token(config: Settings, user: Dict[str, Any]) -> str:
    return create_token(
        user_id=user["id"],
        username=user["username"],
        kind=REFRESH,
        secret=config.dev_jwt_secret,
        ttl=timedelta(days=int(config.dev_refresh_ttl_days)),
    )


def decode_token(token: str, secret: str, *, kind: str) -> Dict[str, Any]:
    try:
        payload = _jwt_decode(token, secret)
    except (ValueError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    if payload.get("typ") != kind:
        raise HTTPException(status_code=401, detail="Wrong token type")
    exp = int(payload.get("exp") or 0)
    if exp and exp < int(_utc_now().timestamp()):
        raise HTTPException(status_code=401, detail="Token expired")
    return payload


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))


def _jwt_encode(payload: Dict[str, Any], secret: str) -> str:
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return f"{header_b64}.{payload_b64}.{_b64url_encode(sig)}"


def _jwt_decode(token: str, secret: str) -> Dict[str, Any]:
    parts = token.split(".")
    if len(parts) != 3:
        raise ValueError("invalid token")
    header_b64, payload_b64, sig_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    expected_sig = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    if not hmac.compare_digest(expected_sig, _b64url_decode(sig_b64)):
        raise ValueError("bad signature")
    payload = json.loads(_b64url_decode(payload_b64).decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("bad payload")
    return payload


def get_bearer_token(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        return token or None
    return None


def get_current_user(request: Request, config: Settings = Depends(get_config)) -> Dict[str, Any]:
    token = get_bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    payload = decode_token(token, config.dev_jwt_secret, kind=ACCESS)
    try:
        user_id = int(payload.get("sub") or 0)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    user = get_user_by_id(config.dev_db_path, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if user["locked"] or not user["enabled"]:
        raise HTTPException(status_code=401, detail="Account locked or disabled")
    return user


def is_admin(user: Dict[str, Any]) -> bool:
    return ADMIN_ROLE in (user.get("roles") or [])


def require_self_or_admin(user: Dict[str, Any], target_id: int) -> None:
    if user["id"] != target_id and not is_admin(user):
        raise HTTPException(status_code=403, detail="Forbidden")


def require_admin(user: Dict[str, Any]) -> None:
    if not is_admin(user):
        raise HTTPException(status_code=403, detail="Admin role required")
