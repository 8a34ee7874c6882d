# -*- coding: utf-8 -*-
"""HealthKit step data — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DailySteps(BaseModel):
    date: str = Field(..., description="ISO8601 date, e.g. 2025-01-15")
    count: int = Field(..., ge=0)
