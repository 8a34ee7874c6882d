# -*- coding: utf-8 -*-
"""Fasting — typed wrappers for /api/fasting."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List
from uuid import UUID

from ..dates import to_iso8601
from .models import FastingStatistics, FastRecord, FastType

RECORDS_PATH = "/api/fasting/records"
STATISTICS_PATH = "/api/fasting/statistics"


class FastingAPI:
    def __init__(self, client: Any) -> None:
        self.client = client

    async def list_records(self) -> List[FastRecord]:
        return await self.client.request(RECORDS_PATH, response_model=List[FastRecord])

    async def create_record(self, record: FastRecord) -> FastRecord:
        return await self.client.request(RECORDS_PATH, method="POST", body=record, response_model=FastRecord)

    async def update_record(self, record: FastRecord) -> FastRecord:
        return await self.client.request(
            f"{RECORDS_PATH}/{record.id}",
            method="PUT",
            body=record,
            response_model=FastRecord,
        )

    async def delete_record(self, record_id: UUID) -> str:
        return await self.client.request(f"{RECORDS_PATH}/{record_id}", method="DELETE")

    async def get_statistics(self) -> FastingStatistics:
        return await self.client.request(STATISTICS_PATH, response_model=FastingStatistics)

    async def records_between(self, start: datetime, end: datetime) -> List[FastRecord]:
        return await self.client.request(
            RECORDS_PATH,
            query=[("startDate", to_iso8601(start)), ("endDate", to_iso8601(end))],
            response_model=List[FastRecord],
        )

    async def records_by_type(self, fast_type: FastType) -> List[FastRecord]:
        return await self.client.request(
            RECORDS_PATH,
            query=[("type", fast_type.display_name)],
            response_model=List[FastRecord],
        )
