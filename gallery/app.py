"""
FastAPI application entry point for the gallery service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from gallery.config import get_settings
from gallery.routes import router


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Image Gallery", version="0.1.0")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
