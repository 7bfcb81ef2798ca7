"""Observability – structlog configuration and get_logger helper."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from mp_fcm.observability.filters import SensitiveFieldsFilter


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


def configure_logging(
    level: int = logging.INFO,
    sensitive_fields: frozenset[str] | None = None,
) -> None:
    """Route structlog through stdlib logging with JSON output.

    Values under sensitive keys (bearer tokens, registration tokens) are
    redacted before rendering.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        SensitiveFieldsFilter(sensitive_fields),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


__all__ = ["configure_logging", "get_logger"]
