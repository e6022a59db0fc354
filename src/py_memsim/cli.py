"""Command-line entry point — ``memsim [-q] SCHEDULE ALGORITHM``.

The CLI is the thin I/O wrapper around the simulator:

    1. **Load** — read the configuration and the schedule file.
    2. **Run** — drive the event scheduler, printing each memory map.
    3. **Pause** — in interactive mode, after each map ask for the next
       clock value to run until (``0`` quits).
    4. **Report** — print warnings and compaction summaries as they are
       logged, and exit non-zero on a fatal error.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from py_memsim.config import ConfigError, SimulationConfig, load_config
from py_memsim.loader import load_schedule
from py_memsim.logging import Logger, LogLevel
from py_memsim.memory.placement import Algorithm
from py_memsim.process.registry import ScheduleError
from py_memsim.process.scheduler import TerminationReason
from py_memsim.render import format_snapshot
from py_memsim.simulator import create_scheduler

if TYPE_CHECKING:
    from py_memsim.context import Snapshot
    from py_memsim.logging import LogEntry

_PROMPT = "Enter integer t, then press ENTER"


def _echo_entry(entry: LogEntry) -> None:
    """Echo warnings to stderr and compaction notices to stdout as they happen."""
    if entry.level is LogLevel.WARNING:
        click.echo(f"{entry.level.name}: {entry.message}", err=True)
    elif entry.source == "defrag" and entry.level >= LogLevel.INFO:
        click.echo(entry.message)


def _ask_pause(_clock: int) -> int:
    return click.prompt(_PROMPT, type=click.IntRange(min=0), prompt_suffix=": ")


@click.command()
@click.option("-q", "--quiet", is_flag=True, default=False, help="Batch mode: print every event, never pause.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file overriding memory geometry and display settings.",
)
@click.argument("schedule", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("algorithm", type=click.Choice([a.value for a in Algorithm]))
def main(quiet: bool, config_path: Path | None, schedule: Path, algorithm: str) -> None:
    """Simulate main-memory allocation of SCHEDULE using ALGORITHM."""
    try:
        config = load_config(config_path) if config_path is not None else SimulationConfig()
        processes = load_schedule(schedule)
    except (ConfigError, ScheduleError) as e:
        raise click.ClickException(str(e)) from e

    logger = Logger()
    logger.subscribe(_echo_entry)
    scheduler = create_scheduler(
        processes,
        algorithm,
        config=config,
        logger=logger,
        quiet=quiet,
        pause_source=None if quiet else _ask_pause,
    )

    def show(snapshot: Snapshot) -> None:
        click.echo(format_snapshot(snapshot, width=config.chars_per_line))

    result = scheduler.run(on_snapshot=show)

    if not result.ok:
        raise click.ClickException(result.detail or "simulation aborted")
    if result.reason is TerminationReason.EXIT_REQUESTED:
        click.echo("Exit command received")
        return
    click.echo("End of Simulation")
