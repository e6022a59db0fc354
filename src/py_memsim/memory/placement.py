"""Placement strategies — decide where a new process goes in memory.

Five strategies ship out of the box:

- **FirstFitStrategy**: the first hole (lowest address) that is big
  enough.  Fast, and tends to leave small slivers near the bottom.
- **BestFitStrategy**: the smallest hole that is big enough.  Wastes the
  least space per placement but leaves many tiny unusable holes.
- **WorstFitStrategy**: the largest hole.  The leftover piece is as big
  as possible, so it stays useful for later requests.
- **NextFitStrategy**: like first fit, but the search resumes where the
  previous placement started instead of at address 0.
- **NonContiguousStrategy**: no single hole is needed; the process is
  spread over as many holes as it takes, lowest address first.

The four contiguous strategies share one recovery rule: if no hole is
big enough, compact memory **once** and search again.  A second failure
is fatal.  Compaction never runs twice for one request, because if one
pass cannot make room, a second one cannot either.

Design: Strategy pattern
    The event scheduler is the *context*; PlacementStrategy is the
    *strategy*.  The strategy is chosen once, by name, when the run is
    configured, and the scheduler calls ``allocate`` the same way for
    every variant.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Protocol

from py_memsim.memory.errors import OutOfMemoryError

if TYPE_CHECKING:
    from py_memsim.context import SimulationContext
    from py_memsim.memory.free_space import FreeRun

# One search, one compaction, one more search.
_MAX_ATTEMPTS = 2


class Algorithm(StrEnum):
    """Names of the available placement strategies."""

    FIRST = "first"
    BEST = "best"
    NEXT = "next"
    WORST = "worst"
    NONCONTIG = "noncontig"


class PlacementStrategy(Protocol):
    """Interface every placement strategy must satisfy."""

    algorithm: ClassVar[Algorithm]
    contiguous: ClassVar[bool]

    def place(self, requested: int, context: SimulationContext) -> int:
        """Return the start index where the (first part of the) request goes."""
        ...  # pragma: no cover

    def allocate(self, owner: int, requested: int, context: SimulationContext) -> list[FreeRun]:
        """Place the request and write ownership; return the blocks written."""
        ...  # pragma: no cover


class ContiguousStrategy:
    """Shared behaviour for strategies that need one single hole.

    Subclasses implement ``find``, which only searches.  ``place`` wraps
    it in the search / compact / search-again loop.
    """

    algorithm: ClassVar[Algorithm]
    contiguous: ClassVar[bool] = True

    def find(self, requested: int, context: SimulationContext) -> int | None:
        """Return a start index for the request, or None if nothing fits."""
        raise NotImplementedError

    def place(self, requested: int, context: SimulationContext) -> int:
        """Find a hole for the request, compacting memory at most once.

        Raises:
            OutOfMemoryError: If no hole fits even after compaction, or
                compaction itself is impossible.

        """
        for attempt in range(_MAX_ATTEMPTS):
            start = self.find(requested, context)
            if start is not None:
                return start
            if attempt + 1 < _MAX_ATTEMPTS:
                context.defragment()
        msg = f"Out of memory: no free block of {requested} frames after defragmentation"
        raise OutOfMemoryError(msg)

    def allocate(self, owner: int, requested: int, context: SimulationContext) -> list[FreeRun]:
        """Place the request in one block and write ownership."""
        start = self.place(requested, context)
        return [context.claim(owner, start, requested)]


def _first_fit(requested: int, runs: list[FreeRun]) -> int | None:
    for run in runs:
        if run.size >= requested:
            return run.start
    return None


class FirstFitStrategy(ContiguousStrategy):
    """First fit — the lowest-address hole that is big enough."""

    algorithm = Algorithm.FIRST

    def find(self, requested: int, context: SimulationContext) -> int | None:
        """Scan holes in address order and take the first that fits."""
        return _first_fit(requested, context.free_runs())


class BestFitStrategy(ContiguousStrategy):
    """Best fit — the smallest hole that is big enough.

    Tiebreaker: among equally small holes the lowest address wins,
    because ``sorted`` is stable and the holes arrive in address order.
    """

    algorithm = Algorithm.BEST

    def find(self, requested: int, context: SimulationContext) -> int | None:
        """Take the smallest hole with room for the request."""
        by_size = sorted(context.free_runs(), key=lambda run: run.size)
        return _first_fit(requested, by_size)


class WorstFitStrategy(ContiguousStrategy):
    """Worst fit — always the largest hole, if it is big enough.

    Tiebreaker: among equally large holes the lowest address wins.
    """

    algorithm = Algorithm.WORST

    def find(self, requested: int, context: SimulationContext) -> int | None:
        """Take the largest hole, or None if even that is too small."""
        runs = context.free_runs()
        if not runs:
            return None
        largest = max(runs, key=lambda run: run.size)
        return largest.start if largest.size >= requested else None


class NextFitStrategy(ContiguousStrategy):
    """Next fit — resume the search at the cursor.

    The cursor (``context.next_index``) is the start of the most recent
    placement, so the search begins at the block that was just placed,
    not after it.  Holes ending at or before the cursor are skipped.  If
    the cursor sits inside a hole, only the part from the cursor onward
    counts.  When nothing past the cursor fits, the search falls back to
    plain first fit from address 0.
    """

    algorithm = Algorithm.NEXT

    def find(self, requested: int, context: SimulationContext) -> int | None:
        """Search from the cursor, then fall back to first fit."""
        cursor = context.next_index
        runs = context.free_runs()
        for run in runs:
            if run.end <= cursor:
                continue
            if cursor in run:
                if run.end - cursor >= requested:
                    return cursor
            elif run.size >= requested:
                return run.start
        return _first_fit(requested, runs)


class NonContiguousStrategy:
    """Non-contiguous — fill holes from the bottom until the request is met.

    Compaction is never attempted: the strategy does not need a single
    hole, so merging holes cannot help.  Running out of holes is fatal.
    """

    algorithm: ClassVar[Algorithm] = Algorithm.NONCONTIG
    contiguous: ClassVar[bool] = False

    def place(self, requested: int, context: SimulationContext) -> int:
        """Return the start of the lowest hole, where filling begins.

        Raises:
            OutOfMemoryError: If memory has no free frame at all.

        """
        runs = context.free_runs()
        if not runs:
            msg = f"Out of memory: no free frames for a request of {requested}"
            raise OutOfMemoryError(msg)
        return runs[0].start

    def allocate(self, owner: int, requested: int, context: SimulationContext) -> list[FreeRun]:
        """Spread the request over the lowest holes.

        Raises:
            OutOfMemoryError: If fewer frames are free than requested;
                nothing is claimed in that case.

        """
        available = context.tracker.total_free()
        if available < requested:
            msg = (
                f"Out of memory: {requested - available} of {requested} frames "
                f"still needed for process {owner}"
            )
            raise OutOfMemoryError(msg)
        written: list[FreeRun] = []
        remaining = requested
        while remaining > 0:
            runs = context.free_runs()
            take = min(runs[0].size, remaining)
            written.append(context.claim(owner, runs[0].start, take))
            remaining -= take
        return written


_STRATEGIES: dict[Algorithm, type[ContiguousStrategy] | type[NonContiguousStrategy]] = {
    Algorithm.FIRST: FirstFitStrategy,
    Algorithm.BEST: BestFitStrategy,
    Algorithm.NEXT: NextFitStrategy,
    Algorithm.WORST: WorstFitStrategy,
    Algorithm.NONCONTIG: NonContiguousStrategy,
}


def make_strategy(algorithm: Algorithm | str) -> PlacementStrategy:
    """Create the strategy for an algorithm name.

    Args:
        algorithm: An ``Algorithm`` or its string value (e.g. ``"best"``).

    Raises:
        ValueError: If the name is not a known algorithm.

    """
    try:
        key = Algorithm(algorithm)
    except ValueError:
        choices = ", ".join(a.value for a in Algorithm)
        msg = f"Unknown algorithm {algorithm!r} (choose from {choices})"
        raise ValueError(msg) from None
    return _STRATEGIES[key]()
