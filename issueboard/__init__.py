"""Application factory and top-level wiring for the IssueBoard service.

This module brings together configuration, the record store, API routers and
error handling. Nothing here touches the disk or a database at import time:
the store is prepared (and default projects seeded) when the app starts.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import AppSettings, get_settings
from .core.errors import (
    RecordServiceError,
    http_exception_handler,
    record_service_exception_handler,
    validation_exception_handler,
)
from .crud.projects import ensure_seeded
from .middlewares import RequestIdMiddleware
from .storage import RecordStore, build_store

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def prepare_store(store: RecordStore, settings: AppSettings) -> None:
    """Create backend structures and seed default projects once."""

    store.ensure_ready()
    if settings.SEED_DEFAULT_PROJECTS and ensure_seeded(store):
        logger.info("Seeded default projects into %s store", store.backend)


def create_app(settings: AppSettings | None = None, store: RecordStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    store = store or build_store(settings)

    app = FastAPI(title=settings.APP_NAME, version=__version__)
    # Handlers read these through ``issueboard.deps.store``.
    app.state.settings = settings
    app.state.store = store

    # ---------- Middleware ----------
    app.add_middleware(RequestIdMiddleware)
    if settings.ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.ALLOWED_ORIGINS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # ---------- Routers ----------
    from .routers import api_board, api_comments, api_issues, api_projects

    app.include_router(api_projects.router)
    app.include_router(api_issues.router)
    app.include_router(api_comments.router)
    app.include_router(api_board.router)

    # ---------- Exception handling ----------
    # Every failure leaves the API in the same {"code", "message"} envelope.
    app.add_exception_handler(RecordServiceError, record_service_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.on_event("startup")
    def _prepare_store() -> None:
        prepare_store(store, settings)
        logger.info("IssueBoard ready with %s store", store.backend)

    @app.on_event("shutdown")
    def _close_store() -> None:
        store.close()

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    return app


__all__ = ["create_app", "prepare_store"]
