from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from chatroom.domain.value_objects.timestamps import format_timestamp
from chatroom.infrastructure.db.session import ping_database

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

PING_TIMEOUT_SECONDS = 2.0


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    """Postgres and Redis must answer; also reports the watermark."""
    pings = {
        "postgres": ping_database(),
        "redis": request.app.state.redis.ping(),
    }
    results = await asyncio.gather(
        *(asyncio.wait_for(p, PING_TIMEOUT_SECONDS) for p in pings.values()),
        return_exceptions=True,
    )
    errors = [
        f"{name}: {result!r}"
        for name, result in zip(pings, results)
        if isinstance(result, Exception)
    ]

    if errors:
        logger.warning("Readiness check failed: %s", "; ".join(errors))
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors},
        )
    return JSONResponse(
        content={
            "status": "ready",
            "lastWrite": format_timestamp(request.app.state.watermark.value),
        }
    )
