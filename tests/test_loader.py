"""Tests for the schedule loader.

A schedule file declares a process count, then one line per process:
name, frame request, and enter/exit time pairs.
"""

from pathlib import Path

import pytest

from py_memsim.loader import load_schedule, parse_process, parse_schedule
from py_memsim.process.registry import Event, EventKind, ScheduleError

SAMPLE = """3
A 45 0 350 400 900
B 28 0 2650
C 58 1100 1500 0 950
"""


class TestParseProcess:
    """Verify single process lines."""

    def test_fields(self) -> None:
        """Name, frames, and events are read from the line."""
        proc = parse_process("B 28 0 2650")
        assert proc.name == "B"
        assert proc.frames == 28
        assert proc.events == [Event(0, EventKind.ENTER), Event(2650, EventKind.EXIT)]

    def test_odd_number_of_times(self) -> None:
        """An enter without an exit is rejected."""
        with pytest.raises(ScheduleError, match="without an exit"):
            parse_process("A 45 0 350 400", line_no=2)

    def test_too_short(self) -> None:
        """A line needs at least one time pair."""
        with pytest.raises(ScheduleError, match="expected"):
            parse_process("A 45")

    def test_non_integer(self) -> None:
        """Frame counts and times must be integers."""
        with pytest.raises(ScheduleError, match="frame count"):
            parse_process("A lots 0 5")
        with pytest.raises(ScheduleError, match="event time"):
            parse_process("A 45 zero 5")

    def test_zero_frames_is_malformed(self) -> None:
        """A zero-frame request is rejected, unlike a small positive one."""
        with pytest.raises(ScheduleError, match="positive number of frames"):
            parse_schedule("1\nP 0 0 5\n")
        assert parse_schedule("1\nP 5 0 5\n")[0].frames == 5


class TestParseSchedule:
    """Verify whole files."""

    def test_sample(self) -> None:
        """Every process is loaded in file order."""
        procs = parse_schedule(SAMPLE)
        assert [p.name for p in procs] == ["A", "B", "C"]

    def test_pairs_sorted(self) -> None:
        """Pairs listed out of order are sorted per process."""
        procs = parse_schedule(SAMPLE)
        assert [e.time for e in procs[2].events] == [0, 950, 1100, 1500]

    def test_blank_lines_ignored(self) -> None:
        """Blank lines between and after entries are skipped."""
        procs = parse_schedule("\n1\n\nA 20 0 5\n\n")
        assert len(procs) == 1

    def test_count_mismatch(self) -> None:
        """The declared count must match the process lines."""
        with pytest.raises(ScheduleError, match="Invalid number of processes"):
            parse_schedule("2\nA 20 0 5\n")

    def test_empty(self) -> None:
        """An empty file is rejected."""
        with pytest.raises(ScheduleError, match="empty"):
            parse_schedule("   \n")

    def test_bad_count(self) -> None:
        """The first line must be an integer."""
        with pytest.raises(ScheduleError, match="process count"):
            parse_schedule("three\nA 20 0 5\n")


class TestLoadSchedule:
    """Verify reading from disk."""

    def test_load_from_file(self, tmp_path: Path) -> None:
        """A schedule file is read and parsed."""
        path = tmp_path / "sched.txt"
        path.write_text(SAMPLE)
        assert len(load_schedule(path)) == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a schedule error."""
        with pytest.raises(ScheduleError, match="Cannot read"):
            load_schedule(tmp_path / "nope.txt")
