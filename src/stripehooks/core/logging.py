"""
Logging for stripehooks.

Package modules log through stdlib loggers under ``stripehooks``. Dispatch
records carry ``event_type`` and ``event_id`` via ``extra`` so that JSON
output can be filtered per webhook event. The endpoint secret is never
passed to a logger.
"""

import logging
import sys
from typing import Any

import structlog

LOGGER_NAME = "stripehooks"

# Record attributes rendered in text mode when a log call supplies them
EVENT_FIELDS = ("event_type", "event_id")


class _TextFormatter(logging.Formatter):
    """Human-readable lines, suffixed with ``event_type=... event_id=...`` when known."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = " ".join(
            f"{name}={getattr(record, name)}" for name in EVENT_FIELDS if hasattr(record, name)
        )
        return f"{line} ({context})" if context else line


def _json_formatter() -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(allow=EVENT_FIELDS),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(level: int | str = logging.INFO, json_format: bool = False) -> logging.Logger:
    """
    Configure the stripehooks logger.

    Args:
        level: Logging level (e.g., logging.INFO, "DEBUG")
        json_format: Emit one JSON object per line (timestamp, level, logger,
            event, and event_type/event_id for dispatch records)

    Returns:
        The configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Re-configuring replaces the previous handler
    if logger.handlers:
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(_json_formatter())
    else:
        handler.setFormatter(
            _TextFormatter(
                "[%(asctime)s] %(levelname)s [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )

    logger.addHandler(handler)

    # Host applications keep their own root handlers
    logger.propagate = False

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a child logger of stripehooks."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


def event_context(event_type: str, event_id: str | None = None) -> dict[str, Any]:
    """Build the ``extra`` mapping attached to dispatch log records."""
    return {"event_type": event_type, "event_id": event_id or "unknown"}
