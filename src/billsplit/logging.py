from __future__ import annotations

import logging
from typing import Any, ContextManager

import structlog


def _resolve_level(level: str) -> int:
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def build_processors(json_output: bool = True) -> list[Any]:
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        renderer,
    ]


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    numeric_level = _resolve_level(level)
    logging.basicConfig(level=numeric_level, format="%(message)s")

    structlog.configure(
        processors=build_processors(json_output),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def bind_context(**values: Any) -> ContextManager[None]:
    """Attach fields such as ``bill_id`` to every event logged inside the block."""
    return structlog.contextvars.bound_contextvars(**values)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


sql_logger = get_logger("sql")
