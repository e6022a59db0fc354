"""Simulation log — what happened to memory, and on which tick.

Allocations, releases, compactions and warnings are recorded as
structured entries stamped with the simulation clock.  A run never
prints anything itself; front ends decide what to show:

- The CLI **subscribes** a listener and echoes warnings and compaction
  notices the moment they are logged, so an interactive session sees
  "Performing defragmentation..." on the tick it happens.
- The scheduler takes a **mark** when a run starts and later asks for
  the warning **messages** logged since that mark, so a logger shared
  by several runs never mixes their results.

One logger may outlive many runs; entries are never removed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    # Receives every entry as soon as it is appended.
    LogListener = Callable[["LogEntry"], None]


class LogLevel(IntEnum):
    """Severity of a log entry; DEBUG < INFO < WARNING < ERROR."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One thing that happened during a run.

    Attributes:
        level: How serious it is.
        message: Human-readable description.
        source: Component that reported it ("allocator", "defrag",
            "registry", "scheduler").
        tick: Simulation clock when it happened.

    """

    level: LogLevel
    message: str
    source: str
    tick: int = 0

    def __str__(self) -> str:
        """Format as ``t=TICK LEVEL source: message``."""
        return f"t={self.tick} {self.level.name} {self.source}: {self.message}"


class Logger:
    """Append-only record of a simulation, with live listeners."""

    def __init__(self) -> None:
        """Create an empty log with no listeners."""
        self._entries: list[LogEntry] = []
        self._listeners: list[LogListener] = []

    def __len__(self) -> int:
        """Return the number of entries logged so far."""
        return len(self._entries)

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every entry, oldest first."""
        return list(self._entries)

    def subscribe(self, listener: LogListener) -> None:
        """Call ``listener`` with each entry logged from now on."""
        self._listeners.append(listener)

    def mark(self) -> int:
        """Return a position to pass as ``start`` to later queries."""
        return len(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str, tick: int = 0) -> None:
        """Append an entry and hand it to every listener.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            tick: Simulation clock at the event.

        """
        entry = LogEntry(level=level, message=message, source=source, tick=tick)
        self._entries.append(entry)
        for listener in self._listeners:
            listener(entry)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        start: int = 0,
        ticks: range | None = None,
    ) -> list[LogEntry]:
        """Return entries matching every given criterion.

        Args:
            min_level: Keep entries at or above this level.
            source: Keep entries from this component only.
            start: Ignore entries before this ``mark()``.
            ticks: Keep entries whose clock value lies in this range.

        """
        result = self._entries[start:]
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        if ticks is not None:
            result = [e for e in result if e.tick in ticks]
        return result

    def messages(self, level: LogLevel, *, start: int = 0) -> list[str]:
        """Return the messages logged at exactly ``level`` since ``start``."""
        return [e.message for e in self._entries[start:] if e.level is level]
