"""Defragmentation — compact processes toward low memory.

After enough entries and exits, memory looks like Swiss cheese: the
total free space would fit a new process, but no single hole is large
enough.  Compaction slides every owned frame down over the holes below
it until all free frames form one run at the top of memory.

Algorithm (one pass per hole)::

    . . A A . B B .        lowest hole is 2 frames at index 0
    A A . B B . . .        pass 1: every owned frame above it slides down 2
    A A B B . . . .        pass 2: the 1-frame hole at index 2 closes

Each pass takes the lowest hole of size ``g`` and moves every owned
frame above it down by ``g``.  Free frames met on the way are skipped,
so later holes merge into the moving gap.  The pass repeats until one
run is left.  Relative order of owned frames never changes, and the
system area is never touched because the first hole always starts
above it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_memsim.memory.errors import OutOfMemoryError
from py_memsim.memory.frames import UNOWNED

if TYPE_CHECKING:
    from py_memsim.memory.frames import FrameStore
    from py_memsim.memory.free_space import FreeSpaceTracker


@dataclass(frozen=True)
class DefragReport:
    """Outcome of one compaction.

    Attributes:
        processes_moved: Number of distinct processes that were relocated.
        free_run_size: Size of the single free run left afterwards.
        total_frames: Size of main memory, for the percentage.

    """

    processes_moved: int
    free_run_size: int
    total_frames: int

    @property
    def percent_free(self) -> float:
        """Return the free run as a percentage of total memory."""
        return 100 * self.free_run_size / self.total_frames


class Defragmenter:
    """Merge all free space into a single run."""

    def __init__(self, store: FrameStore, tracker: FreeSpaceTracker) -> None:
        """Create a defragmenter over a store and its free-space tracker."""
        self._store = store
        self._tracker = tracker

    def defragment(self) -> DefragReport:
        """Compact memory so exactly one free run remains.

        Returns:
            A report of processes moved and the resulting free run.

        Raises:
            OutOfMemoryError: If memory already has zero or one free
                run, so compaction cannot create a larger hole.

        """
        runs = self._tracker.scan()
        if len(runs) <= 1:
            msg = f"Out of memory: {len(runs)} free run(s), nothing to compact"
            raise OutOfMemoryError(msg)

        moved: set[int] = set()
        total = self._store.total_frames
        while len(runs) > 1:
            gap = runs[0].size
            for index in range(runs[0].end, total):
                owner = self._store.get(index)
                if owner == UNOWNED:
                    continue
                moved.add(owner)
                self._store.set(index - gap, owner)
                self._store.set(index, UNOWNED)
            runs = self._tracker.scan()

        return DefragReport(
            processes_moved=len(moved),
            free_run_size=runs[0].size,
            total_frames=total,
        )
