"""Simulation context — every piece of mutable state in one place.

A run touches exactly four mutable things: the frame store, the next-fit
cursor, the clock, and the log.  Bundling them into one explicit value
(instead of module globals) means two simulations can run side by side,
and tests can build a context, poke at it, and throw it away.

The context also owns the low-level memory operations every strategy
shares:

- **claim** — write one process's ownership over a free span.
- **release** — clear a process's frames when it exits.
- **defragment** — compact memory, log the result, reset the cursor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_memsim.config import SimulationConfig
from py_memsim.logging import Logger, LogLevel
from py_memsim.memory.defrag import DefragReport, Defragmenter
from py_memsim.memory.errors import FrameInUseError, MemoryCorruptionError
from py_memsim.memory.frames import SYSTEM_RESERVED, UNOWNED, FrameStore
from py_memsim.memory.free_space import FreeRun, FreeSpaceTracker
from py_memsim.render import format_defrag_report

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True)
class Snapshot:
    """The memory map at one instant: one display symbol per frame."""

    time: int
    symbols: tuple[str, ...]

    def rows(self, width: int) -> list[str]:
        """Split the map into rows of ``width`` symbols."""
        text = "".join(self.symbols)
        return [text[i : i + width] for i in range(0, len(text), width)]


class SimulationContext:
    """Mutable state of one simulation run plus shared memory operations."""

    def __init__(self, config: SimulationConfig | None = None, *, logger: Logger | None = None) -> None:
        """Create a fresh context: empty memory, clock at 0, cursor at 0.

        Args:
            config: Memory geometry and display settings (defaults if None).
            logger: Log to record events in (a new one if None).

        """
        self.config = config or SimulationConfig()
        self.frames = FrameStore(
            total_frames=self.config.total_frames,
            system_frames=self.config.system_frames,
        )
        self.tracker = FreeSpaceTracker(self.frames)
        self.defragmenter = Defragmenter(self.frames, self.tracker)
        self.logger = logger if logger is not None else Logger()
        self.clock = 0
        self.next_index = 0
        self.defrag_reports: list[DefragReport] = []

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Record a log entry stamped with the current clock."""
        self.logger.log(level, message, source=source, tick=self.clock)

    def free_runs(self) -> list[FreeRun]:
        """Return the current free runs in address order."""
        return self.tracker.scan()

    def claim(self, owner: int, start: int, length: int) -> FreeRun:
        """Give ``length`` frames starting at ``start`` to ``owner``.

        The next-fit cursor is moved to ``start``: the next next-fit
        search resumes at the beginning of this block.

        Args:
            owner: The process id receiving the frames.
            start: First frame of the block.
            length: Number of frames.

        Returns:
            The block that was written.

        Raises:
            OutOfRangeError: If the block leaves main memory.
            FrameInUseError: If any frame of the block is already owned.

        """
        self.frames.check_span(start, length)
        for index in range(start, start + length):
            current = self.frames.get(index)
            if current != UNOWNED:
                msg = f"Frame {index} is already owned ({current}); cannot place process {owner}"
                raise FrameInUseError(msg)
        self.next_index = start
        for index in range(start, start + length):
            self.frames.set(index, owner)
        self.log(
            LogLevel.DEBUG,
            f"Process {owner} placed in frames [{start}, {start + length})",
            source="allocator",
        )
        return FreeRun(start=start, size=length)

    def release(self, owner: int, *, size: int, contiguous: bool) -> int:
        """Return a process's frames to the free pool.

        Under a contiguous strategy the process must occupy exactly
        ``size`` consecutive frames starting at its lowest frame;
        anything else means memory was corrupted.

        Args:
            owner: The exiting process id.
            size: Frames the process requested.
            contiguous: Whether the active strategy places contiguously.

        Returns:
            The number of frames freed.

        Raises:
            MemoryCorruptionError: If a contiguous process's block is
                broken.

        """
        held = self.frames.frames_owned_by(owner)
        if not held:
            self.log(
                LogLevel.WARNING,
                f"Process {owner} is not resident; nothing to release",
                source="allocator",
            )
            return 0

        if contiguous:
            start = held[0]
            self.frames.check_span(start, size)
            span = range(start, start + size)
            if len(held) != size or held != list(span):
                msg = f"Memory corruption: process {owner} is not contiguous at frame {start}"
                raise MemoryCorruptionError(msg)
        for index in held:
            self.frames.set(index, UNOWNED)
        self.log(LogLevel.DEBUG, f"Process {owner} released {len(held)} frames", source="allocator")
        return len(held)

    def defragment(self) -> DefragReport:
        """Compact memory, reset the next-fit cursor, and log the outcome.

        Raises:
            OutOfMemoryError: If there is at most one free run.

        """
        self.log(LogLevel.INFO, "Performing defragmentation...", source="defrag")
        report = self.defragmenter.defragment()
        self.next_index = 0
        self.defrag_reports.append(report)
        self.log(LogLevel.INFO, format_defrag_report(report), source="defrag")
        return report

    def snapshot(self, names: Sequence[str]) -> Snapshot:
        """Capture the memory map, mapping process ids to their names.

        Args:
            names: Display name of each process, indexed by process id.

        """
        symbols: list[str] = []
        for owner in self.frames.owners():
            if owner == UNOWNED:
                symbols.append(self.config.free_symbol)
            elif owner == SYSTEM_RESERVED:
                symbols.append(self.config.system_symbol)
            else:
                symbols.append(names[owner])
        return Snapshot(time=self.clock, symbols=tuple(symbols))
