# -*- coding: utf-8 -*-
"""Development backend — response models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..schemas import CamelModel


class UserOut(CamelModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email_verified: bool = False
    mfa_enabled: bool = False
    enabled: bool = True
    # SQL-style "YYYY-MM-DD HH:MM:SS", the layout the production backend emits.
    created_at: str
    last_login_at: Optional[str] = None
    roles: List[str] = []

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "UserOut":
        return cls(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            first_name=row.get("first_name"),
            last_name=row.get("last_name"),
            email_verified=row.get("email_verified", False),
            mfa_enabled=row.get("mfa_enabled", False),
            enabled=row.get("enabled", True),
            created_at=row["created_at"],
            last_login_at=row.get("last_login_at"),
            roles=row.get("roles") or [],
        )
