"""Tests for free-space tracking.

A free run is a maximal stretch of unowned frames.  The tracker lists
them in address order, recomputed from the store on every scan.
"""

from py_memsim.memory.frames import FrameStore
from py_memsim.memory.free_space import FreeRun, FreeSpaceTracker

TOTAL_FRAMES = 20
SYSTEM_FRAMES = 4


def _store_and_tracker() -> tuple[FrameStore, FreeSpaceTracker]:
    store = FrameStore(total_frames=TOTAL_FRAMES, system_frames=SYSTEM_FRAMES)
    return store, FreeSpaceTracker(store)


class TestFreeRun:
    """Verify the FreeRun value type."""

    def test_end_is_exclusive(self) -> None:
        """end is one past the last frame."""
        assert FreeRun(start=3, size=4).end == 7

    def test_contains(self) -> None:
        """Membership covers [start, end)."""
        run = FreeRun(start=3, size=4)
        assert 3 in run
        assert 6 in run
        assert 7 not in run
        assert 2 not in run


class TestScan:
    """Verify scanning for holes."""

    def test_empty_memory_is_one_run(self) -> None:
        """With nothing allocated, all non-system frames form one run."""
        _, tracker = _store_and_tracker()
        assert tracker.scan() == [FreeRun(start=SYSTEM_FRAMES, size=TOTAL_FRAMES - SYSTEM_FRAMES)]

    def test_runs_are_maximal_and_ordered(self) -> None:
        """Owned frames split memory into ascending, maximal runs."""
        store, tracker = _store_and_tracker()
        store.set(8, 0)
        store.set(9, 0)
        store.set(15, 1)
        assert tracker.scan() == [
            FreeRun(start=4, size=4),
            FreeRun(start=10, size=5),
            FreeRun(start=16, size=4),
        ]

    def test_run_touching_end_of_memory(self) -> None:
        """A run reaching the last frame is reported."""
        store, tracker = _store_and_tracker()
        for i in range(SYSTEM_FRAMES, TOTAL_FRAMES - 1):
            store.set(i, 0)
        assert tracker.scan() == [FreeRun(start=TOTAL_FRAMES - 1, size=1)]

    def test_full_memory_has_no_runs(self) -> None:
        """Completely used memory has no free runs."""
        store, tracker = _store_and_tracker()
        for i in range(SYSTEM_FRAMES, TOTAL_FRAMES):
            store.set(i, 0)
        assert tracker.scan() == []
        assert tracker.total_free() == 0

    def test_scan_is_idempotent(self) -> None:
        """Two scans with no writes in between agree."""
        store, tracker = _store_and_tracker()
        store.set(6, 0)
        store.set(12, 1)
        assert tracker.scan() == tracker.scan()

    def test_total_free(self) -> None:
        """total_free counts every unowned frame."""
        store, tracker = _store_and_tracker()
        store.set(6, 0)
        store.set(12, 1)
        assert tracker.total_free() == TOTAL_FRAMES - SYSTEM_FRAMES - 2
