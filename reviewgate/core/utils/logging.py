"""
Structured logging utilities.

Provides logging setup for the entry points and a context manager for
structured operation logging with timing and error tracking.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", fmt: str | None = None, stream: Any = None) -> None:
    """
    Configure stdlib logging and route structlog through it.

    Args:
        level: Root log level name.
        fmt: stdlib format string.
        stream: Output stream, stderr by default so stdout stays free for
            workflow commands.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt or "%(asctime)s %(levelname)8s %(message)s",
        stream=stream or sys.stderr,
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def log_operation(
    operation: str,
    subject_ids: dict[str, str] | None = None,
    **context: Any,
) -> Any:  # AsyncGenerator[None, None]
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        subject_ids: Dictionary of subject identifiers (e.g., {"repo": "owner/repo", "pr": "123"})
        **context: Additional context to include in logs

    Example:
        async with log_operation("fetch_reviews", repo=repo, pr=pr_number):
            reviews = await client.list_pull_request_reviews(...)
    """
    start_time = time.time()
    log = logger.bind(operation=operation, **(subject_ids or {}), **context)

    log.debug("operation_started")

    try:
        yield
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        log.error("operation_failed", error=str(e), latency_ms=latency_ms)
        raise
    else:
        latency_ms = int((time.time() - start_time) * 1000)
        log.info("operation_completed", latency_ms=latency_ms)
