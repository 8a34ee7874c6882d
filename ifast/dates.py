# -*- coding: utf-8 -*-
"""Date decoding for backend payloads.

The backend has been seen emitting several date layouts for the same field, so
decoding walks an ordered list of candidates and keeps the first match. Values
without an explicit zone are read as UTC.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional, Tuple

from pydantic import BeforeValidator

logger = logging.getLogger(__name__)

EPOCH = "epoch"

# (label, strptime pattern | EPOCH), tried in order.
DATE_FORMATS: List[Tuple[str, str]] = [
    ("iso8601-ms", "%Y-%m-%dT%H:%M:%S.%f%z"),
    ("iso8601", "%Y-%m-%dT%H:%M:%S%z"),
    ("iso8601-local", "%Y-%m-%dT%H:%M:%S"),
    ("date", "%Y-%m-%d"),
    ("sql", "%Y-%m-%d %H:%M:%S"),
    ("unix", EPOCH),
    ("us", "%m/%d/%Y %H:%M:%S"),
    ("us-date", "%m/%d/%Y"),
]

_EPOCH_RE = re.compile(r"^-?\d+(\.\d+)?$")


def _parse_epoch(value: str) -> Optional[datetime]:
    if not _EPOCH_RE.match(value):
        return None
    seconds = float(value)
    if not math.isfinite(seconds):
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def match_date_format(value: str) -> Optional[Tuple[str, datetime]]:
    """Return ``(label, datetime)`` for the first candidate format that parses ``value``."""
    for label, pattern in DATE_FORMATS:
        if pattern == EPOCH:
            parsed = _parse_epoch(value)
        else:
            try:
                parsed = datetime.strptime(value, pattern)
            except ValueError:
                parsed = None
        if parsed is None:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return label, parsed
    return None


def parse_api_date(value: str) -> datetime:
    match = match_date_format(value)
    if match is None:
        logger.debug("Date string %r does not match any expected format", value)
        raise ValueError(f"Date string '{value}' does not match any expected format")
    label, parsed = match
    logger.debug("Decoded date %r using %s", value, label)
    return parsed


def _coerce_api_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return parse_api_date(value)
    raise ValueError(f"Expected a date string, got {type(value).__name__}")


ApiDatetime = Annotated[datetime, BeforeValidator(_coerce_api_date)]


def to_iso8601(value: datetime) -> str:
    """Format as second-precision ISO-8601 in UTC (``2024-01-15T10:30:00Z``)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
