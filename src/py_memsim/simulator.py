"""Simulation assembly — wire the components together for one run.

The pieces (context, registry, strategy, scheduler) are independent so
they can be tested on their own.  This module is the one place that
knows how to put them together::

    scheduler = create_scheduler(processes, "best")
    result = scheduler.run(on_snapshot=print)

``simulate`` is the batch-mode shortcut used by the web API and tests:
it runs to the end and returns the result with every snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from py_memsim.context import SimulationContext
from py_memsim.memory.placement import make_strategy
from py_memsim.process.registry import ProcessRegistry
from py_memsim.process.scheduler import EventScheduler

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from py_memsim.config import SimulationConfig
    from py_memsim.context import Snapshot
    from py_memsim.logging import Logger
    from py_memsim.memory.placement import Algorithm
    from py_memsim.process.registry import Process
    from py_memsim.process.scheduler import RunResult


def create_scheduler(
    processes: Iterable[Process],
    algorithm: Algorithm | str,
    *,
    config: SimulationConfig | None = None,
    logger: Logger | None = None,
    quiet: bool = True,
    pause_source: Callable[[int], int] | None = None,
) -> EventScheduler:
    """Build a ready-to-run scheduler over a fresh context.

    Args:
        processes: The loaded processes, in registration order.
        algorithm: Placement strategy name (``first``, ``best``, ...).
        config: Memory geometry and display settings.
        logger: Log to record events in (a new one if None).
        quiet: Batch mode (no pausing).
        pause_source: Supplies pause thresholds in interactive mode.

    Raises:
        ValueError: If the algorithm name is unknown.

    """
    context = SimulationContext(config, logger=logger)
    registry = ProcessRegistry(processes, config=context.config)
    return EventScheduler(
        registry=registry,
        strategy=make_strategy(algorithm),
        context=context,
        quiet=quiet,
        pause_source=pause_source,
    )


def simulate(
    processes: Iterable[Process],
    algorithm: Algorithm | str,
    *,
    config: SimulationConfig | None = None,
    logger: Logger | None = None,
) -> tuple[RunResult, list[Snapshot]]:
    """Run a whole schedule in batch mode.

    Returns:
        The run result and every snapshot delivered, in order.

    """
    snapshots: list[Snapshot] = []
    scheduler = create_scheduler(processes, algorithm, config=config, logger=logger)
    result = scheduler.run(on_snapshot=snapshots.append)
    return result, snapshots
