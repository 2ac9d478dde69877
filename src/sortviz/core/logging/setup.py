from __future__ import annotations

import logging
import sys
from typing import Any

import orjson
import structlog


def _json_serializer(obj: Any, default: Any) -> str:
    """
    JSON serializer for structured logs (orjson backed).
    """
    return orjson.dumps(obj, default=default).decode("utf-8")


def configure_logging(*, level: str = "INFO") -> None:
    """
    Configure structured logging for the entire application.

    This must be called exactly once at process startup.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        # Merge context variables (session_id, component, etc.)
        structlog.contextvars.merge_contextvars,

        # Standard metadata
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),

        # Exception handling
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.dict_tracebacks,

        structlog.processors.JSONRenderer(serializer=_json_serializer),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )

    # stdlib loggers (uvicorn, fastapi) share the same stream
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def bind_context(**values: Any) -> None:
    """
    Bind contextual information to all future log entries.

    Example:
        bind_context(session_id="s_ab12cd34", component="player")
    """
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    """
    Clear all bound logging context.
    """
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    """
    Drop selected keys from the bound logging context, keeping the rest.
    """
    structlog.contextvars.unbind_contextvars(*keys)
