"""Process registry — who enters and leaves memory, and when.

Each process has a one-character name, a memory request (in frames),
and a timeline of events::

    enter 0, exit 5, enter 12, exit 20, ...

The registry owns every process in registration order.  That order is
also the process id used in the frame store, and the order in which
simultaneous entries are placed.

Events are consumed as the clock passes them: ``pop_due`` removes them
for good.  A process with no events left is inert for the rest of the
run, and once every process is inert the simulation is finished.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from py_memsim.config import SimulationConfig


class ScheduleError(ValueError):
    """Raise when a schedule cannot be simulated as given."""


class EventKind(StrEnum):
    """Whether a process enters or leaves memory."""

    ENTER = "enter"
    EXIT = "exit"


@dataclass(frozen=True)
class Event:
    """A single timeline entry."""

    time: int
    kind: EventKind


class Process:
    """A scheduled process and its remaining events."""

    def __init__(self, *, name: str, frames: int, events: Iterable[Event]) -> None:
        """Create a process from an already-ordered event sequence.

        Args:
            name: One-character display name.
            frames: Number of frames the process requests.
            events: Alternating enter/exit events in time order.

        Raises:
            ScheduleError: If the name or the timeline is malformed.

        """
        self._name = name
        self._frames = frames
        self._events: deque[Event] = deque(events)
        if len(name) != 1 or name.isspace():
            msg = f"Process name must be a single visible character, got {name!r}"
            raise ScheduleError(msg)
        # Zero or negative sizes cannot be placed at all; only 10-100 is a soft limit.
        if frames <= 0:
            msg = f"Process {name} must request a positive number of frames, got {frames}"
            raise ScheduleError(msg)
        self._check_timeline()

    @classmethod
    def from_pairs(cls, *, name: str, frames: int, pairs: Iterable[tuple[int, int]]) -> Process:
        """Create a process from (enter, exit) pairs in any order.

        The pairs are sorted by enter time and flattened into
        enter/exit events.
        """
        events: list[Event] = []
        for enter, leave in sorted(pairs):
            events.append(Event(enter, EventKind.ENTER))
            events.append(Event(leave, EventKind.EXIT))
        return cls(name=name, frames=frames, events=events)

    def _check_timeline(self) -> None:
        previous = -1
        for position, event in enumerate(self._events):
            expected = EventKind.ENTER if position % 2 == 0 else EventKind.EXIT
            if event.kind is not expected:
                msg = f"Process {self._name}: expected {expected} at position {position}"
                raise ScheduleError(msg)
            # Strictly increasing; a stale event would never fire.
            if event.time <= previous:
                msg = (
                    f"Process {self._name}: event times must be non-negative "
                    f"and strictly increasing, got {event.time} after {previous}"
                )
                raise ScheduleError(msg)
            previous = event.time
        if len(self._events) % 2:
            msg = f"Process {self._name}: every enter needs a matching exit"
            raise ScheduleError(msg)

    @property
    def name(self) -> str:
        """Return the display name."""
        return self._name

    @property
    def frames(self) -> int:
        """Return the number of frames requested."""
        return self._frames

    @property
    def events(self) -> list[Event]:
        """Return the remaining events."""
        return list(self._events)

    @property
    def finished(self) -> bool:
        """Return True if no events remain."""
        return not self._events

    def pop_due(self, time: int) -> Event | None:
        """Remove and return the next event if it happens at ``time``."""
        if self._events and self._events[0].time == time:
            return self._events.popleft()
        return None

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return f"Process(name={self._name!r}, frames={self._frames}, events={len(self._events)})"


class ProcessRegistry:
    """All processes of one simulation, in registration order."""

    def __init__(self, processes: Iterable[Process], *, config: SimulationConfig) -> None:
        """Register processes and collect recoverable warnings.

        Args:
            processes: The processes, in the order they were loaded.
            config: Provides the valid request range and process limit.

        """
        self._processes = list(processes)
        self._warnings: list[str] = []
        for proc in self._processes:
            if not config.min_process_frames <= proc.frames <= config.max_process_frames:
                self._warnings.append(
                    f"Process {proc.name} has a memory allocation of {proc.frames} frames. "
                    f"Valid range is {config.min_process_frames} - {config.max_process_frames}."
                )
        seen: set[str] = set()
        for proc in self._processes:
            if proc.name in seen:
                self._warnings.append(f"Process name {proc.name} is used more than once")
            seen.add(proc.name)
        if len(self._processes) > config.max_processes:
            self._warnings.append(
                f"Number of processes is {len(self._processes)} "
                f"while the valid limit is {config.max_processes}"
            )

    def __len__(self) -> int:
        """Return the number of registered processes."""
        return len(self._processes)

    def __iter__(self) -> Iterator[Process]:
        """Iterate processes in registration order."""
        return iter(self._processes)

    def __getitem__(self, pid: int) -> Process:
        """Return the process with the given id."""
        return self._processes[pid]

    @property
    def warnings(self) -> list[str]:
        """Return the recoverable problems found at registration."""
        return list(self._warnings)

    @property
    def names(self) -> list[str]:
        """Return display names indexed by process id."""
        return [proc.name for proc in self._processes]

    @property
    def finished(self) -> bool:
        """Return True once every process has consumed all its events."""
        return all(proc.finished for proc in self._processes)

    def pop_due(self, time: int) -> list[tuple[int, Event]]:
        """Remove and return the events due at ``time``.

        Returns:
            ``(pid, event)`` pairs in registration order, at most one
            per process.

        """
        due: list[tuple[int, Event]] = []
        for pid, proc in enumerate(self._processes):
            event = proc.pop_due(time)
            if event is not None:
                due.append((pid, event))
        return due
