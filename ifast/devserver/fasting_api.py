# -*- coding: utf-8 -*-
"""Development backend — /api/fasting endpoints."""

from __future__ import annotations

import sqlite3
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from ..config import Settings
from ..fasting.models import FastingStatistics, FastRecord, FastType
from .security import get_config, get_current_user
from .storage import (
    compute_statistics,
    delete_record,
    get_record,
    insert_record,
    list_records,
    parse_query_date,
    update_record,
)

router = APIRouter(prefix="/api/fasting", tags=["Fasting"])


def _normalized(record: FastRecord) -> FastRecord:
    if record.end_time is not None and record.end_time < record.start_time:
        raise HTTPException(status_code=400, detail="endTime is before startTime")
    duration = (record.end_time - record.start_time).total_seconds() if record.end_time else 0.0
    return record.model_copy(update={"duration": duration})


@router.get("/records", response_model=List[FastRecord], summary="List fasting records")
def get_records(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    fast_type: Optional[FastType] = Query(default=None, alias="type"),
    user: dict = Depends(get_current_user),
    config: Settings = Depends(get_config),
):
    try:
        start = parse_query_date(start_date)
        end = parse_query_date(end_date)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return list_records(config.dev_db_path, user["id"], start=start, end=end, fast_type=fast_type)


@router.post("/records", response_model=FastRecord, status_code=201, summary="Create a fasting record")
def create(record: FastRecord, user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    try:
        return insert_record(config.dev_db_path, user["id"], _normalized(record))
    except sqlite3.IntegrityError as exc:
        raise HTTPException(status_code=409, detail="Record already exists") from exc


@router.put("/records/{record_id}", response_model=FastRecord, summary="Update a fasting record")
def update(
    record_id: UUID,
    record: FastRecord,
    user: dict = Depends(get_current_user),
    config: Settings = Depends(get_config),
):
    record = _normalized(record.model_copy(update={"id": record_id}))
    updated = update_record(config.dev_db_path, user["id"], record)
    if updated is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return updated


@router.delete("/records/{record_id}", response_class=PlainTextResponse, summary="Delete a fasting record")
def remove(record_id: UUID, user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    if get_record(config.dev_db_path, user["id"], str(record_id)) is None:
        raise HTTPException(status_code=404, detail="Record not found")
    delete_record(config.dev_db_path, user["id"], str(record_id))
    return PlainTextResponse("Record deleted successfully")


@router.get("/statistics", response_model=FastingStatistics, summary="Fasting statistics for the current user")
def statistics(user: dict = Depends(get_current_user), config: Settings = Depends(get_config)):
    return compute_statistics(list_records(config.dev_db_path, user["id"]))
