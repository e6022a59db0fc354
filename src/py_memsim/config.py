"""Simulation configuration — memory geometry and display settings.

The defaults describe the classic lab machine: 1600 frames of main
memory, the first 80 of which belong to the operating system, and
schedules of at most 26 processes (one per letter of the alphabet).

A configuration can be loaded from a JSON file of overrides, the same
way a bootloader reads its kernel image::

    {"total_frames": 400, "system_frames": 20}

Keys that are absent keep their defaults; unknown keys are rejected so
that a typo never silently runs the wrong experiment.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_TOTAL_FRAMES = 1600
DEFAULT_SYSTEM_FRAMES = 80
DEFAULT_MAX_PROCESSES = 26


class ConfigError(ValueError):
    """Raise when a configuration value or file is invalid."""


@dataclass(frozen=True)
class SimulationConfig:
    """Fixed settings for one simulation run.

    Attributes:
        total_frames: Number of frames in main memory.
        system_frames: Leading frames permanently owned by the system.
        min_process_frames: Smallest request that is not a warning.
        max_process_frames: Largest request that is not a warning.
        max_processes: Number of distinct process identities the
            memory map can display before a warning is raised.
        chars_per_line: Frames per row in the rendered memory map.
        free_symbol: Symbol for an unowned frame.
        system_symbol: Symbol for a system-reserved frame.

    """

    total_frames: int = DEFAULT_TOTAL_FRAMES
    system_frames: int = DEFAULT_SYSTEM_FRAMES
    min_process_frames: int = 10
    max_process_frames: int = 100
    max_processes: int = DEFAULT_MAX_PROCESSES
    chars_per_line: int = 80
    free_symbol: str = "."
    system_symbol: str = "#"

    def __post_init__(self) -> None:
        """Validate the geometry so the frame store can trust it."""
        if self.total_frames <= 0:
            msg = f"total_frames must be positive, got {self.total_frames}"
            raise ConfigError(msg)
        if not 0 <= self.system_frames < self.total_frames:
            msg = (
                f"system_frames must be in [0, {self.total_frames}), got {self.system_frames}"
            )
            raise ConfigError(msg)
        if not 0 < self.min_process_frames <= self.max_process_frames:
            msg = (
                f"Invalid process size range "
                f"{self.min_process_frames}-{self.max_process_frames}"
            )
            raise ConfigError(msg)
        if self.max_processes <= 0 or self.chars_per_line <= 0:
            msg = "max_processes and chars_per_line must be positive"
            raise ConfigError(msg)
        for symbol in (self.free_symbol, self.system_symbol):
            if len(symbol) != 1:
                msg = f"Display symbols must be one character, got {symbol!r}"
                raise ConfigError(msg)
        if self.free_symbol == self.system_symbol:
            msg = "free_symbol and system_symbol must differ"
            raise ConfigError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as a plain dict (JSON-friendly)."""
        return dataclasses.asdict(self)


def config_from_dict(data: dict[str, Any]) -> SimulationConfig:
    """Build a configuration from a dict of overrides.

    Args:
        data: Field names mapped to their new values.

    Returns:
        A validated configuration.

    Raises:
        ConfigError: If a key is unknown or a value has the wrong type.

    """
    known = {f.name: f.type for f in dataclasses.fields(SimulationConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    for key, value in data.items():
        expected = str if known[key] == "str" else int
        if not isinstance(value, expected) or isinstance(value, bool):
            msg = f"Configuration key {key!r} must be {expected.__name__}, got {value!r}"
            raise ConfigError(msg)
    return SimulationConfig(**data)


def load_config(path: Path) -> SimulationConfig:
    """Load a configuration from a JSON file of overrides.

    Args:
        path: Path to a JSON object file.

    Returns:
        The resulting configuration.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.

    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Cannot load configuration: {e}"
        raise ConfigError(msg) from e
    if not isinstance(data, dict):
        msg = "Configuration file must contain a JSON object"
        raise ConfigError(msg)
    return config_from_dict(data)
