"""Schedule loader — turn a schedule file into processes.

File format::

    3
    A 45 0 350 400 900
    B 28 0 2650
    C 58 0 950 1100 1500

The first line declares how many processes follow.  Each process line
holds a one-character name, the number of frames requested, and one or
more ``enter exit`` time pairs.  Blank lines are ignored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from py_memsim.process.registry import Process, ScheduleError

if TYPE_CHECKING:
    from pathlib import Path


def _parse_int(token: str, *, line_no: int, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        msg = f"Line {line_no}: {what} must be an integer, got {token!r}"
        raise ScheduleError(msg) from None


def parse_process(line: str, *, line_no: int = 0) -> Process:
    """Parse one process line.

    Raises:
        ScheduleError: If the line is malformed.

    """
    tokens = line.split()
    if len(tokens) < 4:
        msg = f"Line {line_no}: expected 'name frames enter exit ...', got {line.strip()!r}"
        raise ScheduleError(msg)
    name, size, *times = tokens
    if len(times) % 2:
        msg = f"Line {line_no}: process {name} has an enter time without an exit time"
        raise ScheduleError(msg)
    frames = _parse_int(size, line_no=line_no, what="frame count")
    values = [_parse_int(t, line_no=line_no, what="event time") for t in times]
    pairs = list(zip(values[::2], values[1::2], strict=True))
    return Process.from_pairs(name=name, frames=frames, pairs=pairs)


def parse_schedule(text: str) -> list[Process]:
    """Parse a whole schedule.

    Args:
        text: The schedule file contents.

    Returns:
        The processes in file order.

    Raises:
        ScheduleError: If the file is malformed or the declared process
            count does not match the number of process lines.

    """
    lines = [(no, line) for no, line in enumerate(text.splitlines(), start=1) if line.strip()]
    if not lines:
        msg = "Schedule is empty"
        raise ScheduleError(msg)
    first_no, first = lines[0]
    declared = _parse_int(first.strip(), line_no=first_no, what="process count")
    processes = [parse_process(line, line_no=no) for no, line in lines[1:]]
    if declared != len(processes):
        msg = f"Invalid number of processes loaded: declared {declared}, found {len(processes)}"
        raise ScheduleError(msg)
    return processes


def load_schedule(path: Path) -> list[Process]:
    """Read and parse a schedule file.

    Raises:
        ScheduleError: If the file cannot be read or is malformed.

    """
    try:
        text = path.read_text()
    except OSError as e:
        msg = f"Cannot read schedule {path}: {e}"
        raise ScheduleError(msg) from e
    return parse_schedule(text)
