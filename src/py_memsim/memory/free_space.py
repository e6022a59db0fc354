"""Free-space tracking — find the holes in main memory.

A **free run** is a maximal stretch of unowned frames: it cannot grow
left or right without hitting an owned frame or the edge of memory.
Every placement decision starts from the list of free runs, in address
order.

The list is recomputed from scratch on every call instead of being
maintained incrementally.  Memory is small (a few thousand frames) and
allocations are rare compared to clock ticks, so a linear scan keeps
the bookkeeping impossible to get out of sync.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_memsim.memory.frames import UNOWNED

if TYPE_CHECKING:
    from py_memsim.memory.frames import FrameStore


@dataclass(frozen=True, order=True)
class FreeRun:
    """A contiguous block of frames, described by start and size.

    Used both for holes (free runs) and for the extents written by a
    placement.
    """

    start: int
    size: int

    @property
    def end(self) -> int:
        """Return the index one past the last frame of the run."""
        return self.start + self.size

    def __contains__(self, index: object) -> bool:
        """Return True if ``index`` falls inside the run."""
        return isinstance(index, int) and self.start <= index < self.end


class FreeSpaceTracker:
    """Scan a frame store for free runs."""

    def __init__(self, store: FrameStore) -> None:
        """Create a tracker over the given store."""
        self._store = store

    def scan(self) -> list[FreeRun]:
        """Return every free run in ascending address order."""
        runs: list[FreeRun] = []
        start: int | None = None
        owners = self._store.owners()
        for index, owner in enumerate(owners):
            if owner == UNOWNED:
                if start is None:
                    start = index
            elif start is not None:
                runs.append(FreeRun(start=start, size=index - start))
                start = None
        if start is not None:
            runs.append(FreeRun(start=start, size=len(owners) - start))
        return runs

    def total_free(self) -> int:
        """Return the number of unowned frames."""
        return sum(run.size for run in self.scan())
