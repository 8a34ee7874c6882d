# -*- coding: utf-8 -*-
"""Development backend — /api/users endpoints."""

from __future__ import annotations

import sqlite3
from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from ..auth import validation
from ..config import Settings
from ..users.models import UserRegistrationRequest
from .models import UserOut
from .security import get_config, get_current_user, hash_password, require_admin, require_self_or_admin
from .storage import create_user, delete_user, get_user_by_id, set_user_roles, update_user

router = APIRouter(prefix="/api/users", tags=["Users"])


def _load_user(config: Settings, user_id: int) -> dict:
    user = get_user_by_id(config.dev_db_path, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/register", response_model=UserOut, status_code=201, summary="Register a new user")
def register(request: UserRegistrationRequest, config: Settings = Depends(get_config)):
    if not validation.validate_username(request.username):
        raise HTTPException(status_code=422, detail="Invalid username length")
    if not validation.validate_password(request.password):
        raise HTTPException(status_code=422, detail="Invalid password length")
    if not validation.validate_email(request.email):
        raise HTTPException(status_code=400, detail="Invalid email")
    try:
        user = create_user(
            config.dev_db_path,
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
        )
    except sqlite3.IntegrityError as exc:
        raise HTTPException(status_code=409, detail="Username or email already registered") from exc
    return UserOut.from_row(user)


@router.get("/me", response_model=UserOut, summary="Get current user")
def me(user: dict = Depends(get_current_user)):
    return UserOut.from_row(user)


@router.get("/{user_id}", response_model=UserOut, summary="Get a user by id")
def get_user(user_id: int, user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    require_self_or_admin(user, user_id)
    return UserOut.from_row(_load_user(config, user_id))


@router.put("/{user_id}/roles", response_class=PlainTextResponse, summary="Replace a user's roles")
def update_roles(
    user_id: int,
    roles: List[str] = Body(...),
    user: dict = Depends(get_current_user),
    config: Settings = Depends(get_config),
):
    require_admin(user)
    _load_user(config, user_id)
    set_user_roles(config.dev_db_path, user_id, [r.strip().upper() for r in roles if r.strip()])
    return PlainTextResponse("Roles updated successfully")


@router.put("/{user_id}/profile", response_model=UserOut, summary="Update first/last name")
def update_profile(
    user_id: int,
    first_name: str = Query(..., alias="firstName", max_length=validation.MAX_NAME_LENGTH),
    last_name: str = Query(..., alias="lastName", max_length=validation.MAX_NAME_LENGTH),
    user: dict = Depends(get_current_user),
    config: Settings = Depends(get_config),
):
    require_self_or_admin(user, user_id)
    _load_user(config, user_id)
    updated = update_user(config.dev_db_path, user_id, first_name=first_name, last_name=last_name)
    return UserOut.from_row(updated)


def _set_flag(config: Settings, user: dict, user_id: int, **flag: bool) -> None:
    require_admin(user)
    _load_user(config, user_id)
    update_user(config.dev_db_path, user_id, **flag)


@router.post("/{user_id}/lock", response_class=PlainTextResponse, summary="Lock a user")
def lock(user_id: int, user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    _set_flag(config, user, user_id, locked=True)
    return PlainTextResponse("User locked successfully")


@router.post("/{user_id}/unlock", response_class=PlainTextResponse, summary="Unlock a user")
def unlock(user_id: int, user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    _set_flag(config, user, user_id, locked=False)
    return PlainTextResponse("User unlocked successfully")


@router.post("/{user_id}/enable", response_class=PlainTextResponse, summary="Enable a user")
def enable(user_id: int, user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    _set_flag(config, user, user_id, enabled=True)
    return PlainTextResponse("User enabled successfully")


@router.post("/{user_id}/disable", response_class=PlainTextResponse, summary="Disable a user")
def disable(user_id: int, user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    _set_flag(config, user, user_id, enabled=False)
    return PlainTextResponse("User disabled successfully")


@router.delete("/{user_id}", response_class=PlainTextResponse, summary="Delete a user")
def remove(user_id: int, user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    require_self_or_admin(user, user_id)
    if not delete_user(config.dev_db_path, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return PlainTextResponse("User deleted successfully")
