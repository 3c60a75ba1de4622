"""Bounded log buffer backing the scrolling log region.

Entries look like::

    [14:02:11.482] Download finished

Each entry is stored with its color name so the region can be repainted
after the reserved area is redrawn.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

DEFAULT_CAPACITY = 1000

LEVEL_COLORS = {
    logging.DEBUG: "dim",
    logging.INFO: "white",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}


def format_timestamp(when: datetime | None = None) -> str:
    """Format a time as HH:MM:SS.mmm."""
    when = when or datetime.now()
    return when.strftime("%H:%M:%S.") + f"{when.microsecond // 1000:03d}"


@dataclass(frozen=True)
class LogEntry:
    """One line of log output."""

    timestamp: str
    color: str
    text: str

    @classmethod
    def create(cls, text: str, color: str = "white") -> "LogEntry":
        return cls(timestamp=format_timestamp(), color=color, text=text)


class LogRingBuffer:
    """Insertion-ordered log entries, oldest evicted past capacity.

    Eviction is permanent; snapshot() only reflects entries still held.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def snapshot(self) -> list[LogEntry]:
        """All held entries, oldest first."""
        return list(self._entries)

    def tail(self, count: int) -> list[LogEntry]:
        """The newest ``count`` entries, oldest first."""
        if count <= 0:
            return []
        entries = self.snapshot()
        return entries[-count:]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class LogBufferHandler(logging.Handler):
    """Route logging records into the on-screen log stream.

    ``sink`` is normally ``Screen.log``. Records emitted while the sink is
    already running (for example a layout warning raised while a log line
    is being drawn) are appended to ``fallback`` instead of being drawn, so
    the handler never recurses.
    """

    def __init__(
        self,
        sink: Callable[[str, str], object],
        fallback: LogRingBuffer | None = None,
        level: int = logging.INFO,
    ):
        super().__init__(level=level)
        self._sink = sink
        self._fallback = fallback
        self._emitting = False
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        color = LEVEL_COLORS.get(record.levelno, "white")
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return

        if self._emitting:
            if self._fallback is not None:
                self._fallback.append(LogEntry.create(message, color))
            return

        self._emitting = True
        try:
            self._sink(message, color)
        except Exception:
            self.handleError(record)
        finally:
            self._emitting = False
