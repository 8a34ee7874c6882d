# -*- coding: utf-8 -*-
"""Auth — credential storage for the access/refresh token pair."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from ..app_db import db_conn, init_app_db
from ..config import settings
from .models import TokenPair


class TokenStoreError(Exception):
    """The credential storage area could not be read or written."""


class TokenStore(Protocol):
    def save(self, tokens: TokenPair) -> None: ...

    def load(self) -> Optional[TokenPair]: ...

    def delete(self) -> None: ...


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class SQLiteTokenStore:
    """Token pair kept in the local database under a fixed (service, account) key."""

    def __init__(
        self,
        db_path: Path | None = None,
        *,
        service: str | None = None,
        account: str | None = None,
    ) -> None:
        self.db_path = db_path or settings.db_path
        self.service = service or settings.credential_service
        self.account = account or settings.credential_account
        try:
            init_app_db(self.db_path)
        except (sqlite3.Error, OSError) as exc:
            raise TokenStoreError(f"Cannot open credential store at {self.db_path}: {exc}") from exc

    def save(self, tokens: TokenPair) -> None:
        payload = tokens.model_dump_json(by_alias=True)
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO credentials (service, account, payload, updated_at) VALUES (?, ?, ?, ?)
                    ON CONFLICT(service, account) DO UPDATE SET payload = excluded.payload, updated_at = excluded.updated_at
                    """,
                    (self.service, self.account, payload, _utc_now()),
                )
        except sqlite3.Error as exc:
            raise TokenStoreError(f"Cannot save tokens: {exc}") from exc

    def load(self) -> Optional[TokenPair]:
        try:
            with db_conn(self.db_path) as conn:
                row = conn.execute(
                    "SELECT payload FROM credentials WHERE service = ? AND account = ?",
                    (self.service, self.account),
                ).fetchone()
        except sqlite3.Error as exc:
            raise TokenStoreError(f"Cannot load tokens: {exc}") from exc
        if row is None:
            return None
        try:
            return TokenPair.model_validate_json(row["payload"])
        except ValidationError as exc:
            raise TokenStoreError("Stored token payload is corrupt") from exc

    def delete(self) -> None:
        try:
            with db_conn(self.db_path) as conn:
                conn.execute(
                    "DELETE FROM credentials WHERE service = ? AND account = ?",
                    (self.service, self.account),
                )
        except sqlite3.Error as exc:
            raise TokenStoreError(f"Cannot delete tokens: {exc}") from exc


class MemoryTokenStore:
    def __init__(self, tokens: Optional[TokenPair] = None) -> None:
        self._tokens = tokens

    def save(self, tokens: TokenPair) -> None:
        self._tokens = tokens

    def load(self) -> Optional[TokenPair]:
        return self._tokens

    def delete(self) -> None:
        self._tokens = None
