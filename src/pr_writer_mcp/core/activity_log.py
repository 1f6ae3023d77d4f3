"""
Append-only activity log for tool invocations.

Each tool appends what it composed or what the remote answered, so a user can
see afterwards what was sent to the host and to GitHub. Two implementations:

- ``FileActivityLog`` appends timestamped blocks to a fixed file.
- ``MemoryActivityLog`` keeps entries in memory (tests, dry runs).

Entries are also mirrored to the ``pr_writer_mcp.activity`` logger at DEBUG.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)
_activity_logger = logging.getLogger("pr_writer_mcp.activity")


@dataclass(frozen=True)
class ActivityEntry:
    """One appended log entry."""

    source: str
    message: str
    fields: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def render(self) -> str:
        lines = [f"[{self.timestamp}] [{self.source}]", self.message]
        for key, value in self.fields.items():
            lines.append(f"{key}: {value}")
        return "\n" + "\n".join(lines) + "\n"


class ActivityLog(ABC):
    """Abstract base class for activity log sinks."""

    def append(self, source: str, message: str, **fields: Any) -> None:
        """
        Append an entry. Never raises.

        Args:
            source: Name of the tool writing the entry
            message: Free-form text
            **fields: Structured context rendered after the message
        """
        entry = ActivityEntry(source=source, message=message, fields=dict(fields))
        _activity_logger.debug("%s: %s", source, message, extra={"activity": entry.fields})
        self._write(entry)

    @abstractmethod
    def _write(self, entry: ActivityEntry) -> None:
        pass


class FileActivityLog(ActivityLog):
    """Append entries to a text file, creating parent directories on demand."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _write(self, entry: ActivityEntry) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(entry.render())
        except OSError as e:
            logger.error("Failed to append to activity log %s: %s", self.path, e)


class MemoryActivityLog(ActivityLog):
    """Keep entries in memory."""

    def __init__(self) -> None:
        self.entries: List[ActivityEntry] = []

    def _write(self, entry: ActivityEntry) -> None:
        self.entries.append(entry)

    def messages(self, source: Optional[str] = None) -> List[str]:
        """Messages in append order, optionally filtered by source."""
        return [e.message for e in self.entries if source is None or e.source == source]
