"""Frame store — the simulated physical memory.

Main memory is a fixed array of **frames**.  Each frame records a single
owner: nobody (``UNOWNED``), the operating system (``SYSTEM_RESERVED``),
or a process, identified by its registration index (0, 1, 2, ...).

The first ``system_frames`` frames are handed to the system when the
store is created and can never be written again.  Every other frame
moves between ``UNOWNED`` and a process id as processes enter and leave
(or slide around during compaction).

Why integers instead of the process names?
    Names are only for display.  Using the registration index keeps the
    store independent of how processes are labelled, and the snapshot
    layer maps ids back to names when the memory map is rendered.
"""

from py_memsim.memory.errors import OutOfRangeError, ProtectedFrameError

UNOWNED = -1
SYSTEM_RESERVED = -2


class FrameStore:
    """Fixed-size array of frame owners with bounds checking."""

    def __init__(self, *, total_frames: int, system_frames: int) -> None:
        """Create a store with the leading frames reserved for the system.

        Args:
            total_frames: Number of frames in main memory.
            system_frames: Number of leading frames owned by the system.

        Raises:
            ValueError: If the geometry is impossible.

        """
        if total_frames <= 0 or not 0 <= system_frames < total_frames:
            msg = f"Invalid geometry: {system_frames} system frames of {total_frames}"
            raise ValueError(msg)
        self._system_frames = system_frames
        self._owners: list[int] = [SYSTEM_RESERVED] * system_frames + [UNOWNED] * (
            total_frames - system_frames
        )

    def __len__(self) -> int:
        """Return the total number of frames."""
        return len(self._owners)

    @property
    def total_frames(self) -> int:
        """Return the total number of frames."""
        return len(self._owners)

    @property
    def system_frames(self) -> int:
        """Return the number of system-reserved frames."""
        return self._system_frames

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._owners):
            msg = f"Frame index {index} out of range [0, {len(self._owners)})"
            raise OutOfRangeError(msg)

    def check_span(self, start: int, length: int) -> None:
        """Validate that ``[start, start + length)`` lies inside memory.

        Args:
            start: First frame of the span.
            length: Number of frames in the span (must be positive).

        Raises:
            OutOfRangeError: If any part of the span is out of bounds.

        """
        if length <= 0 or start < 0 or start + length > len(self._owners):
            msg = f"Span of {length} frames at {start} exceeds memory of {len(self._owners)} frames"
            raise OutOfRangeError(msg)

    def get(self, index: int) -> int:
        """Return the owner of a frame.

        Raises:
            OutOfRangeError: If the index is out of bounds.

        """
        self._check_index(index)
        return self._owners[index]

    def set(self, index: int, owner: int) -> None:
        """Change the owner of a frame.

        Args:
            index: The frame to write.
            owner: ``UNOWNED`` or a process id (>= 0).

        Raises:
            OutOfRangeError: If the index is out of bounds.
            ProtectedFrameError: If the frame belongs to the system, or
                the new owner is the system marker.

        """
        self._check_index(index)
        if self._owners[index] == SYSTEM_RESERVED:
            msg = f"Frame {index} is reserved for the system"
            raise ProtectedFrameError(msg)
        if owner == SYSTEM_RESERVED or owner < UNOWNED:
            msg = f"Cannot assign owner {owner} to frame {index}"
            raise ProtectedFrameError(msg)
        self._owners[index] = owner

    def owners(self) -> list[int]:
        """Return a copy of every frame's owner, in address order."""
        return list(self._owners)

    def frames_owned_by(self, owner: int) -> list[int]:
        """Return the indices of every frame held by ``owner``."""
        return [i for i, o in enumerate(self._owners) if o == owner]
