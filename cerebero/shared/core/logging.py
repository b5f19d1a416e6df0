"""
Logging Configuration

Structured logging via structlog. Every module logs key-value events:

    logger.info("content_created", user_id=user_id, content_id=content_id)

Log Output:
===========
Development:
    2025-03-02T10:30:00Z [info     ] content_created   [cerebero] user_id=... content_id=...

Production (JSON):
    {"timestamp": "...", "level": "info", "event": "content_created", "user_id": "..."}

Request Context:
================
The API binds ``request_id`` and ``path`` per request with ``log_context``;
services add ``user_id`` once identity is resolved. All log lines emitted
while the request is in flight carry those keys.

Usage:
======
    from cerebero.shared.core.logging import get_logger, log_context

    logger = get_logger(__name__)
    log_context(user_id=user_id)
    logger.warning("embedding_failed", content_id=content_id, error=str(e))
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.typing import Processor

from cerebero.config.settings import Settings, settings


def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Console rendering in development, JSON everywhere else. Safe to call
    more than once; the app factory calls it again with its own settings.
    """
    config = config or settings

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        force=True,
    )

    # httpx logs every request at INFO; the storage client logs its own events
    logging.getLogger("httpx").setLevel(logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.is_development:
        processors: list[Processor] = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> None:
    """Bind key-value pairs onto every log line for the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context() -> None:
    """Drop all bound context; called when a request finishes."""
    structlog.contextvars.clear_contextvars()


setup_logging()

logger = get_logger("cerebero")
