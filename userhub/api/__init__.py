"""userhub REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from userhub.api.deps import dispose_engine, init_session_factory
from userhub.api.errors import register_error_handlers
from userhub.api.middleware.request_id import RequestIDMiddleware
from userhub.api.routers import users
from userhub.core.logging import setup_logging

RESOURCES = "/resources"
V1 = "/v1"
USERS = "/users"

API_PREFIX = RESOURCES + V1

_ENV_CORS_ORIGINS = "USERHUB_CORS_ORIGINS"
_DEFAULT_CORS_ORIGINS = "http://localhost:3000"


def _cors_origins() -> list[str]:
    raw = os.environ.get(_ENV_CORS_ORIGINS, _DEFAULT_CORS_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


def _lifespan(
    database_url: str | None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: open the engine. Shutdown: dispose it."""
        init_session_factory(database_url)
        yield
        await dispose_engine()

    return lifespan


def create_app(database_url: str | None = None) -> FastAPI:
    """Build the application.

    *database_url* overrides ``$USERHUB_DATABASE_URL``; the engine is only
    created when the lifespan starts.
    """
    setup_logging()

    app = FastAPI(
        title="userhub",
        docs_url=API_PREFIX + "/docs",
        openapi_url=API_PREFIX + "/openapi.json",
        lifespan=_lifespan(database_url),
    )
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(users.router, prefix=API_PREFIX + USERS, tags=["users"])
    return app
