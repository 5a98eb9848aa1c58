from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatroom.api.middleware.request_context import HEADER as REQUEST_ID_HEADER, RequestContextMiddleware
from chatroom.api.v1.routers import health, messages, registration, session
from chatroom.config import settings
from chatroom.infrastructure.freshness.watermark import InMemoryWatermark

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables, open the Redis pool; release both pools on shutdown."""
    from chatroom.infrastructure.db.session import create_all, engine

    if settings.DB_CREATE_ALL:
        await create_all()
        logger.info("Database tables synchronized")

    app.state.redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)

    yield

    await app.state.redis.aclose()
    await engine.dispose()
    logger.info("Redis and database pools closed")


def create_app() -> FastAPI:
    app = FastAPI(title="Chatroom", version="0.1.0", lifespan=lifespan)

    # One watermark per process, starting at process start.
    app.state.watermark = InMemoryWatermark()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    for module in (health, session, registration, messages):
        app.include_router(module.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _bad_request(_req: Request, exc: RequestValidationError) -> JSONResponse:
        # one readable line, same shape as the service errors
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "request"
        return JSONResponse(
            status_code=422,
            content={"detail": f"{field}: {first.get('msg', 'invalid input')}"},
        )

    @app.exception_handler(Exception)
    async def _unhandled(req: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", req.method, req.url.path, exc_info=exc)
        cid = getattr(req.state, "correlation_id", None)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
            headers={REQUEST_ID_HEADER: cid} if cid else None,
        )
