# -*- coding: utf-8 -*-
"""Development backend — SQLite schema and storage helpers (users + fasting records)."""

from __future__ import annotations

import json
import sqlite3
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..app_db import connect, db_conn
from ..dates import parse_api_date, to_iso8601
from ..fasting.models import FastingStatistics, FastRecord, FastType


def init_dev_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        cur = conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                email TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                first_name TEXT,
                last_name TEXT,
                email_verified INTEGER NOT NULL DEFAULT 0,
                mfa_enabled INTEGER NOT NULL DEFAULT 0,
                enabled INTEGER NOT NULL DEFAULT 1,
                locked INTEGER NOT NULL DEFAULT 0,
                roles TEXT NOT NULL DEFAULT '["USER"]',
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                last_login_at TEXT
            );
            """
        )
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS fasting_records (
                id TEXT PRIMARY KEY,
                user_id INTEGER NOT NULL,
                start_time TEXT NOT NULL,
                end_time TEXT,
                duration REAL NOT NULL,
                type TEXT NOT NULL,
                notes TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_fasting_records_user_start ON fasting_records(user_id, start_time DESC);"
        )
        conn.commit()
    finally:
        conn.close()


def _sql_now() -> str:
    # Same layout as sqlite CURRENT_TIMESTAMP.
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _user_row(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    user = dict(row)
    user["roles"] = json.loads(user.get("roles") or "[]")
    for flag in ("email_verified", "mfa_enabled", "enabled", "locked"):
        user[flag] = bool(user.get(flag))
    return user


# ---- users ----


def get_user_by_id(db_path: Path, user_id: int) -> Optional[Dict[str, Any]]:
    with db_conn(db_path) as conn:
        return _user_row(conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone())


def get_user_by_username(db_path: Path, username: str) -> Optional[Dict[str, Any]]:
    with db_conn(db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE username = ?", (username.strip(),)).fetchone()
        return _user_row(row)


def create_user(
    db_path: Path,
    *,
    username: str,
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    roles: Iterable[str] = ("USER",),
) -> Optional[Dict[str, Any]]:
    """Insert a user. Raises ``sqlite3.IntegrityError`` when username or email is taken."""
    with db_conn(db_path) as conn:
        cur = conn.execute(
            """
            INSERT INTO users (username, email, password_hash, first_name, last_name, roles, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                username.strip(),
                email.lower().strip(),
                password_hash,
                first_name,
                last_name,
                json.dumps(list(roles)),
                _sql_now(),
            ),
        )
        user_id = cur.lastrowid
    return get_user_by_id(db_path, user_id)


_USER_COLUMNS = {"first_name", "last_name", "enabled", "locked", "email_verified", "mfa_enabled", "last_login_at"}


def update_user(db_path: Path, user_id: int, **fields: Any) -> Optional[Dict[str, Any]]:
    unknown = set(fields) - _USER_COLUMNS
    if unknown:
        raise ValueError(f"Unknown user fields: {sorted(unknown)}")
    if fields:
        assignments = ", ".join(f"{name} = ?" for name in fields)
        with db_conn(db_path) as conn:
            conn.execute(f"UPDATE users SET {assignments} WHERE id = ?", (*fields.values(), user_id))
    return get_user_by_id(db_path, user_id)


def set_user_roles(db_path: Path, user_id: int, roles: Iterable[str]) -> Optional[Dict[str, Any]]:
    with db_conn(db_path) as conn:
        conn.execute("UPDATE users SET roles = ? WHERE id = ?", (json.dumps(list(roles)), user_id))
    return get_user_by_id(db_path, user_id)


def record_login(db_path: Path, user_id: int) -> None:
    update_user(db_path, user_id, last_login_at=_sql_now())


def delete_user(db_path: Path, user_id: int) -> bool:
    with db_conn(db_path) as conn:
        conn.execute("PRAGMA foreign_keys = ON;")
        cur = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
    return cur.rowcount > 0


# ---- fasting records ----


def _record_row(row: sqlite3.Row) -> FastRecord:
    return FastRecord(
        id=row["id"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        duration=row["duration"],
        type=row["type"],
        notes=row["notes"],
        created_at=row["created_at"],
    )


def list_records(
    db_path: Path,
    user_id: int,
    *,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    fast_type: Optional[FastType] = None,
) -> List[FastRecord]:
    with db_conn(db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM fasting_records WHERE user_id = ? ORDER BY start_time DESC",
            (user_id,),
        ).fetchall()
    records = [_record_row(row) for row in rows]
    if start is not None:
        records = [r for r in records if r.start_time >= start]
    if end is not None:
        records = [r for r in records if r.start_time <= end]
    if fast_type is not None:
        records = [r for r in records if r.type == fast_type]
    return records


def get_record(db_path: Path, user_id: int, record_id: str) -> Optional[FastRecord]:
    with db_conn(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM fasting_records WHERE id = ? AND user_id = ?",
            (record_id, user_id),
        ).fetchone()
    return _record_row(row) if row else None


def _record_params(record: FastRecord) -> tuple:
    return (
        to_iso8601(record.start_time),
        to_iso8601(record.end_time) if record.end_time else None,
        record.duration,
        record.type.value,
        record.notes,
    )


def insert_record(db_path: Path, user_id: int, record: FastRecord) -> FastRecord:
    """Raises ``sqlite3.IntegrityError`` when the id already exists."""
    with db_conn(db_path) as conn:
        conn.execute(
            """
            INSERT INTO fasting_records (id, user_id, start_time, end_time, duration, type, notes, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (str(record.id), user_id, *_record_params(record), to_iso8601(record.created_at)),
        )
    return get_record(db_path, user_id, str(record.id))


def update_record(db_path: Path, user_id: int, record: FastRecord) -> Optional[FastRecord]:
    with db_conn(db_path) as conn:
        cur = conn.execute(
            """
            UPDATE fasting_records SET start_time = ?, end_time = ?, duration = ?, type = ?, notes = ?
            WHERE id = ? AND user_id = ?
            """,
            (*_record_params(record), str(record.id), user_id),
        )
    if cur.rowcount == 0:
        return None
    return get_record(db_path, user_id, str(record.id))


def delete_record(db_path: Path, user_id: int, record_id: str) -> bool:
    with db_conn(db_path) as conn:
        cur = conn.execute("DELETE FROM fasting_records WHERE id = ? AND user_id = ?", (record_id, user_id))
    return cur.rowcount > 0


def compute_statistics(records: List[FastRecord], today: Optional[date] = None) -> FastingStatistics:
    """Aggregate completed fasts. Hours are rounded to 2 decimals.

    The streak counts consecutive calendar days (UTC, by start time) with a completed
    fast, ending today, or yesterday when nothing has been completed yet today.
    """
    completed = [r for r in records if r.end_time is not None]
    hours = [r.duration / 3600.0 for r in completed]
    total = sum(hours)

    today = today or datetime.now(timezone.utc).date()
    days = {r.start_time.astimezone(timezone.utc).date() for r in completed}
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)

    return FastingStatistics(
        total_fasting_hours=round(total, 2),
        average_fasting_duration=round(total / len(hours), 2) if hours else 0.0,
        longest_fast=round(max(hours), 2) if hours else 0.0,
        current_streak=streak,
        total_fasts=len(completed),
    )


def parse_query_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a ``startDate``/``endDate`` query value; raises ``ValueError`` when unparsable."""
    if not value:
        return None
    return parse_api_date(value)
