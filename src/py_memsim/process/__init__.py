"""Process subsystem — the schedule and the clock that replays it.

Re-exports public symbols so callers can write::

    from py_memsim.process import EventScheduler, Process, ProcessRegistry
"""

from py_memsim.process.registry import (
    Event,
    EventKind,
    Process,
    ProcessRegistry,
    ScheduleError,
)
from py_memsim.process.scheduler import (
    EventScheduler,
    RunResult,
    SchedulerState,
    TerminationReason,
)

__all__ = [
    "Event",
    "EventKind",
    "EventScheduler",
    "Process",
    "ProcessRegistry",
    "RunResult",
    "ScheduleError",
    "SchedulerState",
    "TerminationReason",
]
