from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from social_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from social_chat.api.middleware.metrics import RequestTimingMiddleware
from social_chat.api.v1.routers import (
    friend_requests,
    health,
    messages,
    presence,
    users,
    ws,
)
from social_chat.application.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from social_chat.application.uow import UnitOfWorkFactory
from social_chat.config import settings
from social_chat.infrastructure.db.session import dispose_engine
from social_chat.infrastructure.db.uow import open_uow
from social_chat.infrastructure.ws.manager import ConnectionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle of the realtime core."""
    app.state.manager = ConnectionManager(app.state.uow_factory)
    logger.info("Connection manager started")

    yield

    await app.state.manager.close()
    await dispose_engine()


def create_app(uow_factory: UnitOfWorkFactory | None = None) -> FastAPI:
    app = FastAPI(
        title="Social Chat Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.uow_factory = uow_factory or open_uow

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware, slow_ms=settings.SLOW_REQUEST_MS)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(friend_requests.router)
    app.include_router(messages.router)
    app.include_router(presence.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(PersistenceError)
    async def _persistence(_req: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Store unavailable: %s", exc.detail)
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})
