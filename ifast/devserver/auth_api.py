# -*- coding: utf-8 -*-
"""Development backend — /api/auth endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from ..auth.models import LoginRequest
from ..auth.service import TOKEN_DELIMITER
from ..config import Settings
from .security import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_config,
    get_current_user,
    verify_password,
)
from .storage import get_user_by_id, get_user_by_username, record_login

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_class=PlainTextResponse, summary="Login, returns access|refresh")
def login(request: LoginRequest, config: Settings = Depends(get_config)):
    user = get_user_by_username(config.dev_db_path, request.username)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    if user["locked"]:
        raise HTTPException(status_code=403, detail="Account locked")
    if not user["enabled"]:
        raise HTTPException(status_code=403, detail="Account disabled")

    record_login(config.dev_db_path, user["id"])
    access = create_access_token(config, user)
    refresh = create_refresh_token(config, user)
    logger.info("User %s logged in", user["username"])
    return PlainTextResponse(f"{access}{TOKEN_DELIMITER}{refresh}")


@router.post("/refresh", response_class=PlainTextResponse, summary="Exchange a refresh token for a new access token")
def refresh(
    refresh_token: str = Query(..., alias="refreshToken"),
    config: Settings = Depends(get_config),
):
    payload = decode_token(refresh_token, config.dev_jwt_secret, kind=REFRESH)
    try:
        user_id = int(payload.get("sub") or 0)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    user = get_user_by_id(config.dev_db_path, user_id)
    if not user or user["locked"] or not user["enabled"]:
        raise HTTPException(status_code=401, detail="Refresh not allowed")
    return PlainTextResponse(create_access_token(config, user))


@router.post("/logout", response_class=PlainTextResponse, summary="Logout")
def logout(user: dict = Depends(get_current_user)):
    # Tokens are stateless; the client drops them.
    logger.info("User %s logged out", user["username"])
    return PlainTextResponse("Logged out successfully")
