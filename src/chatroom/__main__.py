"""Entrypoint: python -m chatroom"""
from __future__ import annotations

import logging

import uvicorn

from chatroom.api.middleware.request_context import CorrelationIdFilter
from chatroom.config import settings


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(CorrelationIdFilter())


def main() -> None:
    configure_logging()
    uvicorn.run(
        "chatroom.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
