"""Structured logging with structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from daas_db.core.settings import DatabaseSettings


def configure_logging(settings: DatabaseSettings | None = None) -> None:
    """Route structlog through the stdlib root logger.

    Call once at process start. Libraries embedding daas-db may skip this and
    keep their own structlog configuration.
    """
    settings = settings or DatabaseSettings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    formatter = structlog.stdlib.ProcessorFormatter(processor=renderer)

    for handler in logging.root.handlers:
        handler.setFormatter(formatter)
