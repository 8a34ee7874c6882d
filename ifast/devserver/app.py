# -*- coding: utf-8 -*-
"""Development backend — FastAPI application factory."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from ..config import Settings, settings
from .auth_api import router as auth_router
from .fasting_api import router as fasting_router
from .storage import init_dev_db
from .users_api import router as users_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or settings
    init_dev_db(config.dev_db_path)

    app = FastAPI(
        title="iFast development backend",
        description="Local implementation of the auth, users and fasting endpoints used by the iFast client.",
        version="0.1.0",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )
    app.state.config = config
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(fasting_router)

    @app.get("/api/health", summary="Liveness probe")
    def health():
        return {"status": "ok"}

    logger.info("Development backend using database %s", config.dev_db_path)
    return app
