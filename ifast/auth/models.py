# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from pydantic import Field

from ..schemas import CamelModel


class TokenPair(CamelModel):
    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
