"""
FastAPI application entrypoint for the Easy Breezy OAuth and device broker.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from easybreezy.api.errors import register_exception_handlers
from easybreezy.api.routes import router as api_router
from easybreezy.core.config import get_settings
from easybreezy.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Easy Breezy API",
        version="1.0.0",
        description="OAuth2 and device control API for the Easy Breezy smart home app.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
