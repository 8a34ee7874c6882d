# -*- coding: utf-8 -*-
"""Fasting — Pydantic models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import Field

from ..dates import ApiDatetime
from ..schemas import CamelModel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FastType(str, Enum):
    SIXTEEN_EIGHT = "16:8"
    FOURTEEN_TEN = "14:10"
    EIGHTEEN_SIX = "18:6"
    TWENTY_FOUR = "24:0"
    CUSTOM = "Custom"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def target_hours(self) -> int:
        return _TARGET_HOURS[self]


_TARGET_HOURS = {
    FastType.SIXTEEN_EIGHT: 16,
    FastType.FOURTEEN_TEN: 14,
    FastType.EIGHTEEN_SIX: 18,
    FastType.TWENTY_FOUR: 24,
    FastType.CUSTOM: 16,
}


class FastRecord(CamelModel):
    # Every key except endTime and notes must be present on the wire.
    id: UUID
    start_time: ApiDatetime
    end_time: Optional[ApiDatetime] = None
    duration: float = Field(..., ge=0, description="seconds")
    type: FastType
    notes: Optional[str] = None
    created_at: ApiDatetime

    @classmethod
    def start(
        cls,
        start_time: datetime,
        end_time: Optional[datetime] = None,
        type: FastType = FastType.SIXTEEN_EIGHT,
        notes: Optional[str] = None,
    ) -> "FastRecord":
        """New record with a fresh id; duration follows ``end_time`` (0 while running)."""
        duration = (end_time - start_time).total_seconds() if end_time else 0.0
        return cls(
            id=uuid4(),
            start_time=start_time,
            end_time=end_time,
            duration=max(duration, 0.0),
            type=type,
            notes=notes,
            created_at=_utc_now(),
        )

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    @property
    def target_reached(self) -> bool:
        return self.duration >= self.type.target_hours * 3600


class FastingStatistics(CamelModel):
    total_fasting_hours: float = Field(..., ge=0)
    average_fasting_duration: float = Field(..., ge=0, description="hours")
    longest_fast: float = Field(..., ge=0, description="hours")
    current_streak: int = Field(..., ge=0, description="consecutive days")
    total_fasts: int = Field(..., ge=0)
