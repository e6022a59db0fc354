"""Console rendering of memory maps and compaction reports.

Pure functions returning strings, so the CLI stays a thin I/O wrapper
and the output format can be tested without capturing stdout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from py_memsim.context import Snapshot
    from py_memsim.memory.defrag import DefragReport


def format_snapshot(snapshot: Snapshot, *, width: int = 80) -> str:
    """Render a snapshot as a header line followed by rows of frames.

    Example (width 8)::

        Memory at time 0:
        ##AAA...
        ........

    """
    lines = [f"Memory at time {snapshot.time}:", *snapshot.rows(width)]
    return "\n".join(lines) + "\n"


def format_defrag_report(report: DefragReport) -> str:
    """Render the summary printed after a compaction."""
    return (
        "Defragmentation completed.\n"
        f"Relocated {report.processes_moved} processes to create a free memory block "
        f"of {report.free_run_size} units ({report.percent_free:.4g}% of total memory)."
    )
