# -*- coding: utf-8 -*-
"""Shared fixtures for the test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import httpx

from ifast.auth.token_store import MemoryTokenStore
from ifast.config import Settings
from ifast.devserver.app import create_app
from ifast.services import IFastServices, build_services

BASE_URL = "http://testserver"


def make_config(tmp: Path) -> Settings:
    cfg = Settings()
    cfg.base_url = BASE_URL
    cfg.data_root = tmp
    cfg.db_path = tmp / "fasts.sqlite"
    cfg.dev_db_path = tmp / "devserver.db"
    cfg.health_export_dir = tmp / "healthkit"
    cfg.dev_jwt_secret = "test-secret"
    cfg.request_timeout = 5.0
    return cfg


class RecordingTransport(httpx.AsyncBaseTransport):
    """Wraps another transport and remembers (method, path) for every request."""

    def __init__(self, inner: httpx.AsyncBaseTransport) -> None:
        self.inner = inner
        self.calls: List[Tuple[str, str]] = []
        self.requests: List[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, request.url.path))
        self.requests.append(request)
        return await self.inner.handle_async_request(request)

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [path for m, path in self.calls if method is None or m == method]


def mock_transport(handler: Callable[[httpx.Request], httpx.Response]) -> RecordingTransport:
    return RecordingTransport(httpx.MockTransport(handler))


def json_response(status: int, payload) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(payload).encode("utf-8"), headers={"content-type": "application/json"})


def dev_services(tmp: Path) -> Tuple[IFastServices, RecordingTransport, Settings]:
    cfg = make_config(tmp)
    app = create_app(cfg)
    transport = RecordingTransport(httpx.ASGITransport(app=app))
    services = build_services(cfg, token_store=MemoryTokenStore(), transport=transport)
    return services, transport, cfg
