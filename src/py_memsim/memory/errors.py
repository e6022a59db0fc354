"""Fatal simulation errors.

Any of these aborts the run: the memory map is no longer trustworthy
(corruption, protected write) or the schedule cannot be satisfied
(out of memory).  The event scheduler catches ``SimulationError`` at the
top of the run and reports it as a fatal termination.
"""


class SimulationError(Exception):
    """Base class for errors that abort a simulation run."""


class OutOfRangeError(SimulationError, IndexError):
    """Raise when a frame index or span falls outside main memory."""


class ProtectedFrameError(SimulationError):
    """Raise when something tries to write a system-reserved frame."""


class FrameInUseError(SimulationError):
    """Raise when a placement would overwrite an owned frame."""


class MemoryCorruptionError(SimulationError):
    """Raise when a contiguous process's frames are not where expected."""


class OutOfMemoryError(SimulationError):
    """Raise when a placement cannot be satisfied, even after compaction."""
