"""Logging setup for the server process.

stdout is the MCP stdio channel, so the only handler writes to stderr. Every
record passes through ``ContextFilter``, which stamps it with the correlation
id, tool name and elapsed time of the tool call in progress.

    configure_logging(level="DEBUG", format="human")
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO, Union

from pr_writer_mcp.core.context import elapsed_ms, get_correlation_id, get_tool_name

__all__ = [
    "ROOT_LOGGER_NAME",
    "ContextFilter",
    "StructuredFormatter",
    "HumanReadableFormatter",
    "configure_logging",
]

ROOT_LOGGER_NAME = "pr_writer_mcp"

_CONTEXT_FIELDS = ("correlation_id", "tool_name", "elapsed_ms")

# Attributes every LogRecord has; anything else arrived via ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class ContextFilter(logging.Filter):
    """Attach the current tool-call context to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        record.tool_name = get_tool_name() or "-"
        record.elapsed_ms = elapsed_ms()
        return True


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    extra: Dict[str, Any] = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or key in _CONTEXT_FIELDS:
            continue
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            value = str(value)
        extra[key] = value
    return extra


class StructuredFormatter(logging.Formatter):
    """One JSON object per line.

    {"timestamp": "...", "level": "INFO", "logger": "pr_writer_mcp.tools.pr",
     "message": "...", "correlation_id": "tool_a1b2c3d4e5f6", "tool": "submit",
     "elapsed_ms": 412.5, "extra": {"status_code": 201}}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "-"),
            "tool": getattr(record, "tool_name", "-"),
            "elapsed_ms": getattr(record, "elapsed_ms", 0.0),
        }
        extra = _extra_fields(record)
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """``2025-01-15 10:30:45 [INFO] [tool_a1b2c3] tools.pr: message``"""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith(ROOT_LOGGER_NAME + "."):
            name = name[len(ROOT_LOGGER_NAME) + 1:]

        prefix = f"{datetime.fromtimestamp(record.created):%Y-%m-%d %H:%M:%S} [{record.levelname}]"
        corr_id = getattr(record, "correlation_id", "-")
        if corr_id != "-":
            prefix += f" [{corr_id}]"

        line = f"{prefix} {name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    *,
    level: Union[int, str] = logging.INFO,
    format: str = "structured",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install a single stderr handler on the ``pr_writer_mcp`` logger.

    Args:
        level: Log level (default: INFO)
        format: "structured" (JSON lines) or "human"
        stream: Output stream (default: stderr)

    Returns:
        The configured ``pr_writer_mcp`` logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        StructuredFormatter() if format == "structured" else HumanReadableFormatter()
    )
    handler.addFilter(ContextFilter())
    root.addHandler(handler)
    return root
