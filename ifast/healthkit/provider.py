# -*- coding: utf-8 -*-
"""HealthKit step counts — read-only daily query over exported sync files.

Export files use the device sync layout::

    {"sync_id": "...", "synced_at": "...", "data": {"daily_steps": [{"date": "2025-01-15", "count": 8421}]}}

A bare ``{"daily_steps": [...]}`` payload is accepted too.
"""

from __future__ import annotations

import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Protocol

from ..config import settings
from .models import DailySteps

logger = logging.getLogger(__name__)

DEFAULT_STEP_GOAL = 10_000
CALORIES_PER_STEP = 0.04
MILES_PER_STEP = 0.0005


class StepCountProvider(Protocol):
    def daily_steps(self, start: date, end: date) -> List[DailySteps]: ...


def _iter_days(start: date, end: date) -> List[date]:
    if end < start:
        return []
    days: List[date] = []
    cur = start
    while cur <= end:
        days.append(cur)
        cur = cur + timedelta(days=1)
    return days


class HealthExportStepProvider:
    def __init__(self, export_dir: Path | None = None) -> None:
        self.export_dir = export_dir or settings.health_export_dir

    def _iter_payloads(self) -> Iterable[Dict[str, Any]]:
        if not self.export_dir.exists():
            return []
        payloads: List[Dict[str, Any]] = []
        for fp in sorted(self.export_dir.glob("*.json")):
            try:
                record = json.loads(fp.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Skipping unreadable health export %s: %s", fp.name, exc)
                continue
            if not isinstance(record, dict):
                continue
            payload = record.get("data") if isinstance(record.get("data"), dict) else record
            payloads.append(payload)
        return payloads

    def daily_steps(self, start: date, end: date) -> List[DailySteps]:
        days = _iter_days(start, end)
        per_day: Dict[str, int] = {d.isoformat(): 0 for d in days}
        for payload in self._iter_payloads():
            for item in payload.get("daily_steps", []) or []:
                try:
                    d = str(item.get("date") or "")[:10]
                    count = int(item.get("count") or 0)
                except (AttributeError, TypeError, ValueError):
                    continue
                if d not in per_day:
                    continue
                # Overlapping syncs report the same day more than once.
                per_day[d] = max(per_day[d], max(count, 0))
        return [DailySteps(date=d, count=count) for d, count in per_day.items()]

    def steps_for_day(self, day: date) -> int:
        return self.daily_steps(day, day)[0].count


def calories_from_steps(steps: int) -> int:
    """Rough estimate."""
    return int(steps * CALORIES_PER_STEP)


def distance_from_steps(steps: int) -> float:
    """Miles, rough estimate."""
    return steps * MILES_PER_STEP


def step_progress(steps: int, goal: int | None = None) -> float:
    """Fraction of the daily goal reached, capped at 1.0."""
    if goal is None:
        goal = settings.step_goal or DEFAULT_STEP_GOAL
    if goal <= 0:
        return 1.0
    return min(steps / goal, 1.0)
