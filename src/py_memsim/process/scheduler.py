"""Event scheduler — drive the clock and fire entry/exit events.

Each iteration of the main loop is one **tick**:

1. Collect every event due at the current time (at most one per process).
2. Apply all **exits** first, then all **entries** in registration
   order.  Exits go first so that processes entering on the same tick
   see as much free memory as possible.
3. Decide whether a snapshot of the memory map is due.
4. Advance the clock by exactly one.

State machine::

    IDLE → EVENTS_PENDING → DRAINING → IDLE ... → DONE
      └──────────(no events)──────↗

Snapshot rules:
    - Time 0 always produces a snapshot (the initial memory map).
    - In **quiet** (batch) mode, every tick on which an event fired
      produces a snapshot.
    - In **interactive** mode, fired events are remembered until the
      clock reaches the pause threshold, then one snapshot is produced
      and the pause source is asked for the next threshold.  A
      threshold of 0 stops the run on the spot.
    - The run always ends with a final snapshot, whether or not the
      last tick produced one.

Fatal simulation errors (out of memory, corruption) end the run
immediately; ``run`` reports them as a ``FATAL_ABORT`` result instead of
letting the exception escape.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from py_memsim.logging import LogLevel
from py_memsim.memory.errors import SimulationError
from py_memsim.process.registry import EventKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from py_memsim.context import SimulationContext, Snapshot
    from py_memsim.memory.defrag import DefragReport
    from py_memsim.memory.placement import PlacementStrategy
    from py_memsim.process.registry import ProcessRegistry

    # Called with the current clock, returns the next pause threshold.
    PauseSource = Callable[[int], int]

_INITIAL_PAUSE = 1


class SchedulerState(StrEnum):
    """Where the scheduler is within a tick."""

    IDLE = "idle"
    EVENTS_PENDING = "events_pending"
    DRAINING = "draining"
    DONE = "done"


class TerminationReason(StrEnum):
    """Why a run stopped."""

    NATURAL_COMPLETION = "natural_completion"
    FATAL_ABORT = "fatal_abort"
    EXIT_REQUESTED = "exit_requested"


@dataclass(frozen=True)
class RunResult:
    """Summary of a finished run.

    Attributes:
        reason: Why the run stopped.
        detail: The fatal error message, if any.
        final_time: Clock value when the run stopped.
        snapshots_delivered: Number of snapshots handed to the caller.
        warnings: Every recoverable problem logged during the run.
        defragmentations: One report per compaction, in order.

    """

    reason: TerminationReason
    detail: str | None
    final_time: int
    snapshots_delivered: int
    warnings: tuple[str, ...] = ()
    defragmentations: tuple[DefragReport, ...] = ()

    @property
    def ok(self) -> bool:
        """Return True unless the run was aborted by a fatal error."""
        return self.reason is not TerminationReason.FATAL_ABORT


class EventScheduler:
    """Advance the simulation clock and apply due events."""

    def __init__(
        self,
        *,
        registry: ProcessRegistry,
        strategy: PlacementStrategy,
        context: SimulationContext,
        quiet: bool = True,
        pause_source: PauseSource | None = None,
    ) -> None:
        """Create a scheduler over a registry, strategy, and context.

        Args:
            registry: The processes and their remaining events.
            strategy: The placement strategy, chosen once for the run.
            context: The mutable simulation state.
            quiet: Batch mode; snapshot on every event tick, never pause.
            pause_source: Supplies pause thresholds in interactive mode.

        Raises:
            ValueError: If interactive mode is requested without a
                pause source.

        """
        if not quiet and pause_source is None:
            msg = "Interactive mode needs a pause source"
            raise ValueError(msg)
        self._registry = registry
        self._strategy = strategy
        self._context = context
        self._quiet = quiet
        self._pause_source = pause_source
        self._pause_threshold = _INITIAL_PAUSE
        self._event_pending = False
        self._state = SchedulerState.IDLE
        self._log_start = context.logger.mark()
        for warning in registry.warnings:
            context.log(LogLevel.WARNING, warning, source="registry")

    @property
    def state(self) -> SchedulerState:
        """Return the current state."""
        return self._state

    @property
    def clock(self) -> int:
        """Return the current simulation time."""
        return self._context.clock

    @property
    def pause_threshold(self) -> int:
        """Return the clock value at which interactive mode next pauses."""
        return self._pause_threshold

    @property
    def finished(self) -> bool:
        """Return True once no process has events left."""
        return self._registry.finished

    def _apply_events(self) -> bool:
        due = self._registry.pop_due(self._context.clock)
        if not due:
            return False
        self._state = SchedulerState.EVENTS_PENDING
        for pid, event in due:
            if event.kind is EventKind.EXIT:
                proc = self._registry[pid]
                self._context.release(pid, size=proc.frames, contiguous=self._strategy.contiguous)
                self._context.log(LogLevel.DEBUG, f"Process {proc.name} exited", source="scheduler")
        for pid, event in due:
            if event.kind is EventKind.ENTER:
                proc = self._registry[pid]
                self._strategy.allocate(pid, proc.frames, self._context)
                self._context.log(LogLevel.DEBUG, f"Process {proc.name} entered", source="scheduler")
        return True

    def _snapshot_due(self) -> bool:
        if self._event_pending and (self._quiet or self._context.clock >= self._pause_threshold):
            return True
        return self._context.clock == 0

    def step(self) -> Snapshot | None:
        """Run one tick: apply due events, maybe snapshot, advance the clock.

        Returns:
            The memory map if a snapshot is due this tick, else None.

        Raises:
            RuntimeError: If the scheduler is already done.
            SimulationError: If an event cannot be applied (fatal).

        """
        if self._state is SchedulerState.DONE:
            msg = "Scheduler is done; no more ticks to run"
            raise RuntimeError(msg)
        if self._apply_events():
            self._event_pending = True
        self._state = SchedulerState.DRAINING
        snapshot = None
        if self._snapshot_due():
            snapshot = self._context.snapshot(self._registry.names)
            self._event_pending = False
        self._context.clock += 1
        self._state = SchedulerState.IDLE
        return snapshot

    def final_snapshot(self) -> Snapshot:
        """Mark the run done and return the closing memory map."""
        self._state = SchedulerState.DONE
        return self._context.snapshot(self._registry.names)

    def _result(self, reason: TerminationReason, delivered: int, detail: str | None = None) -> RunResult:
        warnings = self._context.logger.messages(LogLevel.WARNING, start=self._log_start)
        return RunResult(
            reason=reason,
            detail=detail,
            final_time=self._context.clock,
            snapshots_delivered=delivered,
            warnings=tuple(warnings),
            defragmentations=tuple(self._context.defrag_reports),
        )

    def run(self, on_snapshot: Callable[[Snapshot], None] | None = None) -> RunResult:
        """Run until every event has fired, the user stops, or a fatal error.

        Args:
            on_snapshot: Receives each snapshot as it becomes due.

        Returns:
            How and when the run ended.

        """
        delivered = 0
        try:
            while not self._registry.finished:
                snapshot = self.step()
                if snapshot is None:
                    continue
                if on_snapshot is not None:
                    on_snapshot(snapshot)
                delivered += 1
                if not self._quiet and self._pause_source is not None:
                    threshold = self._pause_source(snapshot.time)
                    if threshold == 0:
                        self._state = SchedulerState.DONE
                        self._context.log(LogLevel.INFO, "Exit command received", source="scheduler")
                        return self._result(TerminationReason.EXIT_REQUESTED, delivered)
                    self._pause_threshold = threshold
        except SimulationError as e:
            self._state = SchedulerState.DONE
            self._context.log(LogLevel.ERROR, str(e), source="scheduler")
            return self._result(TerminationReason.FATAL_ABORT, delivered, detail=str(e))

        final = self.final_snapshot()
        if on_snapshot is not None:
            on_snapshot(final)
        delivered += 1
        return self._result(TerminationReason.NATURAL_COMPLETION, delivered)
