"""Logging setup for content-modeller.

Everything logs through stdlib loggers under the "content_modeller"
namespace. configure_logging() installs a single stderr handler (stdout is
reserved for JSON envelopes) whose filter stamps each record with the active
command context: request id, command, form display id and elapsed time.

Usage:
    from content_modeller.core.logging_config import configure_logging, get_logger

    configure_logging(level="DEBUG", format="structured")
    logger = get_logger("core.storage")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO, Union

from content_modeller.core.context import current_context

__all__ = [
    "ROOT_LOGGER_NAME",
    "CommandContextFilter",
    "JsonLinesFormatter",
    "ConsoleFormatter",
    "configure_logging",
    "get_logger",
]

ROOT_LOGGER_NAME = "content_modeller"

_CONTEXT_FIELDS = ("request_id", "command", "display_id", "elapsed_ms")

# Attributes every LogRecord carries; anything else came in through extra=.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
    *_CONTEXT_FIELDS,
}


class CommandContextFilter(logging.Filter):
    """Copy the active command context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in current_context().log_fields().items():
            setattr(record, key, value)
        return True


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    extra: Dict[str, Any] = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS:
            continue
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            value = str(value)
        extra[key] = value
    return extra


class JsonLinesFormatter(logging.Formatter):
    """One JSON object per record.

    Example:
        {"ts":"2024-05-02T09:14:03.512+00:00","level":"INFO","logger":"content_modeller.core.storage",
         "message":"Saved form display node.article.default","request_id":"cli_3f9a0c7d21be",
         "command":"move-field","display_id":"node.article.default","elapsed_ms":6.41}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_FIELDS:
            entry[key] = getattr(record, key, "-")

        extra = _extra_fields(record)
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, separators=(",", ":"), default=str)


class ConsoleFormatter(logging.Formatter):
    """Single-line console output.

        09:14:03 INFO  [cli_3f9a0c7d21be node.article.default] core.storage: Saved form display node.article.default
    """

    def __init__(self, *, show_time: bool = True):
        super().__init__()
        self.show_time = show_time

    def format(self, record: logging.LogRecord) -> str:
        parts = []
        if self.show_time:
            parts.append(datetime.fromtimestamp(record.created).strftime("%H:%M:%S"))
        parts.append(f"{record.levelname:<5}")

        tags = [
            value
            for value in (getattr(record, "request_id", "-"), getattr(record, "display_id", "-"))
            if value and value != "-"
        ]
        if tags:
            parts.append(f"[{' '.join(tags)}]")

        name = record.name
        if name.startswith(ROOT_LOGGER_NAME + "."):
            name = name[len(ROOT_LOGGER_NAME) + 1 :]
        parts.append(f"{name}: {record.getMessage()}")

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    *,
    level: Union[int, str] = logging.WARNING,
    format: str = "human",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install the content_modeller handler, replacing any earlier one.

    Args:
        level: Level name or number (default: WARNING); unknown names mean WARNING
        format: "structured" for JSON lines, anything else for console lines
        stream: Output stream (default: stderr)

    Returns:
        The content_modeller logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.strip().upper(), logging.WARNING)
        if not isinstance(level, int):
            level = logging.WARNING

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonLinesFormatter() if format == "structured" else ConsoleFormatter())
    handler.addFilter(CommandContextFilter())

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the content_modeller namespace ("core.storage" -> "content_modeller.core.storage")."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
