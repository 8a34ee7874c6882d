# -*- coding: utf-8 -*-
"""Users — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from ..dates import ApiDatetime
from ..schemas import CamelModel


class UserResponse(CamelModel):
    id: Optional[int] = None
    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_verified: Optional[bool] = None
    mfa_enabled: Optional[bool] = None
    enabled: Optional[bool] = None
    created_at: Optional[ApiDatetime] = None
    last_login_at: Optional[ApiDatetime] = None
    roles: Optional[List[str]] = None


class UserRegistrationRequest(CamelModel):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)
    first_name: str
    last_name: str
