#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
WikiRender application factory.

Run with::

    uvicorn wikirender.main:app --reload
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wikirender.core.config import Settings, get_settings
from wikirender.core.database import create_all_tables, dispose_db, init_db
from wikirender.render import RenderError, UnrenderableNodeError
from wikirender.routes import overrides, pages, render

log = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    await create_all_tables()
    log.info("%s %s started", app.title, app.version)
    yield
    await dispose_db()


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


def _add_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(RenderError)
    async def render_error(request: Request, exc: RenderError):
        # markup the engine refuses (nesting too deep, inconsistent tree)
        level = logging.ERROR if isinstance(exc, UnrenderableNodeError) else logging.WARNING
        log.log(level, "Rejected markup on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(500)
    async def server_error(request: Request, exc):
        log.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    settings = get_settings()
    _configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Renders DokuWiki-style markup to HTML with link and media overrides.",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module in (pages, render, overrides):
        app.include_router(module.router, prefix=API_PREFIX)

    _add_error_handlers(app)

    @app.get("/api/health", tags=["system"])
    async def health():
        return {"status": "ok", "version": settings.app_version, "app": settings.app_name}

    return app


# -----------------------------------------------------------------------------

app = create_app()


# -----------------------------------------------------------------------------
