# -*- coding: utf-8 -*-
"""Fasting — device-local record store (SQLite)."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import List, Optional
from uuid import UUID

from ..app_db import db_conn, init_app_db
from ..config import settings
from ..dates import parse_api_date, to_iso8601
from .models import FastRecord, FastType

logger = logging.getLogger(__name__)


def _format(value: Optional[datetime]) -> Optional[str]:
    return to_iso8601(value) if value is not None else None


def _row_to_record(row: sqlite3.Row) -> FastRecord:
    end_raw = row["end_time"]
    try:
        fast_type = FastType(row["type"])
    except ValueError:
        fast_type = FastType.SIXTEEN_EIGHT
    return FastRecord(
        id=UUID(row["id"]),
        start_time=parse_api_date(row["start_time"]),
        end_time=parse_api_date(end_raw) if end_raw else None,
        duration=float(row["duration"] or 0.0),
        type=fast_type,
        notes=row["notes"],
        created_at=parse_api_date(row["created_at"]),
    )


class FastRecordStore:
    """CRUD for fasting sessions keyed by record id, plus calendar-day queries."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or settings.db_path
        init_app_db(self.db_path)

    def save(self, record: FastRecord) -> FastRecord:
        with db_conn(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO fast_records (id, start_time, end_time, duration, type, notes, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(record.id),
                    to_iso8601(record.start_time),
                    _format(record.end_time),
                    record.duration,
                    record.type.value,
                    record.notes,
                    to_iso8601(record.created_at),
                ),
            )
        logger.debug("Saved fast record %s", record.id)
        return record

    def get(self, record_id: UUID) -> Optional[FastRecord]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT * FROM fast_records WHERE id = ?", (str(record_id),)).fetchone()
        return _row_to_record(row) if row else None

    def update(self, record: FastRecord) -> Optional[FastRecord]:
        """Apply ``end_time`` and ``notes`` from ``record`` to the stored record.

        Start time, type and creation time stay as stored; duration is recomputed
        from the stored start. Returns ``None`` when the id is unknown.
        """
        existing = self.get(record.id)
        if existing is None:
            logger.warning("Cannot update unknown fast record %s", record.id)
            return None
        if record.end_time is not None:
            duration = max((record.end_time - existing.start_time).total_seconds(), 0.0)
        else:
            duration = existing.duration
        updated = existing.model_copy(update={"end_time": record.end_time, "duration": duration, "notes": record.notes})
        with db_conn(self.db_path) as conn:
            conn.execute(
                "UPDATE fast_records SET end_time = ?, duration = ?, notes = ? WHERE id = ?",
                (_format(updated.end_time), updated.duration, updated.notes, str(updated.id)),
            )
        return updated

    def delete(self, record_id: UUID) -> bool:
        with db_conn(self.db_path) as conn:
            cur = conn.execute("DELETE FROM fast_records WHERE id = ?", (str(record_id),))
        return cur.rowcount > 0

    def list_records(self) -> List[FastRecord]:
        with db_conn(self.db_path) as conn:
            rows = conn.execute("SELECT * FROM fast_records ORDER BY created_at DESC").fetchall()
        return [_row_to_record(row) for row in rows]

    def current_fast(self) -> Optional[FastRecord]:
        return next((r for r in self.list_records() if r.end_time is None), None)

    def records_for_date(self, day: date, tz: Optional[tzinfo] = None) -> List[FastRecord]:
        """Records whose start falls on ``day`` in ``tz`` (local time zone when omitted)."""
        return [r for r in self.list_records() if r.start_time.astimezone(tz).date() == day]

    def records_for_week(self, now: Optional[datetime] = None) -> List[FastRecord]:
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        week_ago = now - timedelta(days=7)
        return [r for r in self.list_records() if r.start_time >= week_ago]
