"""Tests for the simulation context.

The context holds the frame store, the next-fit cursor, the clock and
the log, and provides the claim / release / defragment operations that
every strategy shares.
"""

import pytest

from py_memsim.config import SimulationConfig
from py_memsim.context import SimulationContext, Snapshot
from py_memsim.logging import LogLevel
from py_memsim.memory.errors import FrameInUseError, MemoryCorruptionError, OutOfRangeError
from py_memsim.memory.frames import UNOWNED
from py_memsim.memory.free_space import FreeRun

TOTAL_FRAMES = 40
SYSTEM_FRAMES = 4
PID = 0


def _context() -> SimulationContext:
    return SimulationContext(SimulationConfig(total_frames=TOTAL_FRAMES, system_frames=SYSTEM_FRAMES))


class TestContextCreation:
    """Verify the initial state."""

    def test_defaults(self) -> None:
        """A default context uses the standard 1600/80 geometry."""
        context = SimulationContext()
        assert context.frames.total_frames == 1600
        assert context.frames.system_frames == 80
        assert context.clock == 0
        assert context.next_index == 0

    def test_initial_free_run(self) -> None:
        """Everything above the system area is one free run."""
        context = _context()
        assert context.free_runs() == [FreeRun(start=SYSTEM_FRAMES, size=TOTAL_FRAMES - SYSTEM_FRAMES)]


class TestClaim:
    """Verify writing a process's block."""

    def test_claim_writes_owner(self) -> None:
        """Every frame of the block belongs to the process."""
        context = _context()
        block = context.claim(PID, 10, 5)
        assert block == FreeRun(start=10, size=5)
        assert context.frames.frames_owned_by(PID) == list(range(10, 15))

    def test_claim_moves_cursor_to_start(self) -> None:
        """The next-fit cursor points at the block's first frame."""
        context = _context()
        context.claim(PID, 10, 5)
        assert context.next_index == 10

    def test_claim_over_owned_frame_raises(self) -> None:
        """Placing on top of another process is an invariant violation."""
        context = _context()
        context.claim(PID, 10, 5)
        with pytest.raises(FrameInUseError):
            context.claim(PID + 1, 12, 5)
        assert context.frames.frames_owned_by(PID + 1) == []

    def test_claim_past_end_raises(self) -> None:
        """Blocks overrunning memory are rejected before any write."""
        context = _context()
        with pytest.raises(OutOfRangeError):
            context.claim(PID, TOTAL_FRAMES - 2, 5)
        assert context.frames.frames_owned_by(PID) == []


class TestRelease:
    """Verify clearing a process's frames."""

    def test_contiguous_release(self) -> None:
        """A contiguous block is freed in full."""
        context = _context()
        context.claim(PID, 10, 5)
        freed = context.release(PID, size=5, contiguous=True)
        assert freed == 5
        assert context.frames.frames_owned_by(PID) == []

    def test_contiguous_release_detects_corruption(self) -> None:
        """A hole inside a contiguous block means corrupted memory."""
        context = _context()
        context.claim(PID, 10, 5)
        context.frames.set(12, UNOWNED)
        with pytest.raises(MemoryCorruptionError, match="not contiguous"):
            context.release(PID, size=5, contiguous=True)

    def test_noncontiguous_release(self) -> None:
        """Scattered frames are all freed."""
        context = _context()
        context.claim(PID, 5, 3)
        context.claim(PID, 20, 4)
        freed = context.release(PID, size=7, contiguous=False)
        assert freed == 7
        assert len(context.free_runs()) == 1

    def test_release_non_resident_warns(self) -> None:
        """Releasing a process with no frames logs a warning and frees nothing."""
        context = _context()
        assert context.release(PID, size=5, contiguous=True) == 0
        warnings = context.logger.filter(min_level=LogLevel.WARNING)
        assert len(warnings) == 1
        assert "not resident" in warnings[0].message


class TestContextDefragment:
    """Verify the logged compaction wrapper."""

    def test_defragment_logs_and_records(self) -> None:
        """Compaction is logged and its report kept."""
        context = _context()
        context.claim(PID, 10, 5)
        context.claim(PID + 1, 20, 5)
        context.release(PID, size=5, contiguous=True)
        report = context.defragment()
        assert context.defrag_reports == [report]
        messages = [e.message for e in context.logger.filter(source="defrag")]
        assert messages[0] == "Performing defragmentation..."
        assert "Relocated 1 processes" in messages[1]


class TestSnapshot:
    """Verify the memory map snapshot."""

    def test_symbols(self) -> None:
        """Frames map to system, free, and process-name symbols."""
        context = _context()
        context.claim(PID, SYSTEM_FRAMES, 2)
        context.clock = 7
        snap = context.snapshot(["A"])
        assert snap.time == 7
        assert snap.symbols[:SYSTEM_FRAMES] == ("#",) * SYSTEM_FRAMES
        assert snap.symbols[SYSTEM_FRAMES : SYSTEM_FRAMES + 2] == ("A", "A")
        assert set(snap.symbols[SYSTEM_FRAMES + 2 :]) == {"."}

    def test_rows(self) -> None:
        """rows splits the map into fixed-width lines."""
        snap = Snapshot(time=0, symbols=tuple("##AA..."))
        assert snap.rows(3) == ["##A", "A..", "."]
