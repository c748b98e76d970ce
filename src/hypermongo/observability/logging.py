"""Structured logging for the ``hypermongo`` logger tree.

Modules log through ``logging.getLogger(__name__)``; this module renders
those records with structlog (JSON or console) and tags each one with the
store context bound at load time, so log lines from several adapters in
one process can be told apart.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from hypermongo.clients.base.client import StoreClient
    from hypermongo.config.settings import Settings

PACKAGE_LOGGER = "hypermongo"


def _renderer(log_format: str) -> list[Any]:
    if log_format == "console":
        return [structlog.dev.ConsoleRenderer()]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def setup_logging(settings: Settings | None = None, stream: Any = None) -> logging.Logger:
    """Route the package's stdlib log records through structlog.

    Args:
        settings: Adapter settings; only ``observability`` is read. Uses
            defaults (INFO, JSON) if None.
        stream: Output stream, defaults to stdout.

    Returns:
        The configured ``hypermongo`` package logger.
    """
    log_level = settings.observability.log_level.upper() if settings else "INFO"
    log_format = settings.observability.log_format if settings else "json"

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *_renderer(log_format)],
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers = [handler]
    package_logger.setLevel(getattr(logging, log_level, logging.INFO))
    package_logger.propagate = False

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return package_logger


def bind_store_context(client: StoreClient, meta_db_name: str) -> None:
    """Tag subsequent log lines with the store backend and control database."""
    structlog.contextvars.bind_contextvars(store_client=client.name, meta_db=meta_db_name)
