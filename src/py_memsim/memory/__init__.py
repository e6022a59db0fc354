"""Memory subsystem — frames, free space, placement, and compaction.

Re-exports public symbols so callers can write::

    from py_memsim.memory import FrameStore, make_strategy
"""

from py_memsim.memory.defrag import DefragReport, Defragmenter
from py_memsim.memory.errors import (
    FrameInUseError,
    MemoryCorruptionError,
    OutOfMemoryError,
    OutOfRangeError,
    ProtectedFrameError,
    SimulationError,
)
from py_memsim.memory.frames import SYSTEM_RESERVED, UNOWNED, FrameStore
from py_memsim.memory.free_space import FreeRun, FreeSpaceTracker
from py_memsim.memory.placement import (
    Algorithm,
    BestFitStrategy,
    ContiguousStrategy,
    FirstFitStrategy,
    NextFitStrategy,
    NonContiguousStrategy,
    PlacementStrategy,
    WorstFitStrategy,
    make_strategy,
)

__all__ = [
    "SYSTEM_RESERVED",
    "UNOWNED",
    "Algorithm",
    "BestFitStrategy",
    "ContiguousStrategy",
    "DefragReport",
    "Defragmenter",
    "FirstFitStrategy",
    "FrameInUseError",
    "FrameStore",
    "FreeRun",
    "FreeSpaceTracker",
    "MemoryCorruptionError",
    "NextFitStrategy",
    "NonContiguousStrategy",
    "OutOfMemoryError",
    "OutOfRangeError",
    "PlacementStrategy",
    "ProtectedFrameError",
    "SimulationError",
    "WorstFitStrategy",
    "make_strategy",
]
