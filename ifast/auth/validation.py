# -*- coding: utf-8 -*-
"""Auth — sign-up/login input validation."""

from __future__ import annotations

import re

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 50
MAX_NAME_LENGTH = 100

_EMAIL_RE = re.compile(r"[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}")


def validate_email(email: str) -> bool:
    return _EMAIL_RE.fullmatch(email or "") is not None


def validate_password(password: str) -> bool:
    return MIN_PASSWORD_LENGTH <= len(password or "") <= MAX_PASSWORD_LENGTH


def validate_username(username: str) -> bool:
    return MIN_USERNAME_LENGTH <= len(username or "") <= MAX_USERNAME_LENGTH


def validate_name(name: str) -> bool:
    return 0 < len((name or "").strip()) <= MAX_NAME_LENGTH
