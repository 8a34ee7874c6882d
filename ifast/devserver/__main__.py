# -*- coding: utf-8 -*-
"""Run the development backend: ``python -m ifast.devserver``."""

from __future__ import annotations

import logging

import uvicorn

from ..config import settings
from .app import create_app


def main() -> None:
    logging.basicConfig(level=settings.log_level, format="[%(levelname)s] %(name)s: %(message)s")
    uvicorn.run(
        create_app(settings),
        host=settings.dev_host,
        port=settings.dev_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
