"""Flask application factory for the PyMemSim web API.

The ``create_app`` function returns a Flask app with two endpoints:

- ``GET /api/algorithms`` — list the available placement strategies.
- ``POST /api/simulate`` — run a schedule in batch mode and return every
  memory map, warning, and compaction report as JSON.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import Flask, Response, jsonify, request

from py_memsim.config import ConfigError, config_from_dict
from py_memsim.loader import parse_schedule
from py_memsim.logging import Logger, LogLevel
from py_memsim.memory.placement import Algorithm
from py_memsim.process.registry import ScheduleError
from py_memsim.simulator import simulate

if TYPE_CHECKING:
    from py_memsim.config import SimulationConfig
    from py_memsim.context import Snapshot
    from py_memsim.process.scheduler import RunResult

_HTTP_BAD_REQUEST = 400


def _result_to_json(
    result: RunResult,
    snapshots: list[Snapshot],
    *,
    config: SimulationConfig,
    logger: Logger,
) -> dict[str, object]:
    previous = -1
    maps: list[dict[str, object]] = []
    for s in snapshots:
        # Everything logged since the map before this one.
        events = logger.filter(min_level=LogLevel.INFO, ticks=range(previous + 1, s.time + 1))
        maps.append(
            {"time": s.time, "rows": s.rows(config.chars_per_line), "log": [str(e) for e in events]},
        )
        previous = s.time
    return {
        "ok": result.ok,
        "reason": result.reason.value,
        "detail": result.detail,
        "final_time": result.final_time,
        "config": config.to_dict(),
        "warnings": list(result.warnings),
        "defragmentations": [
            {
                "processes_moved": r.processes_moved,
                "free_run_size": r.free_run_size,
                "percent_free": r.percent_free,
            }
            for r in result.defragmentations
        ],
        "snapshots": maps,
    }


def create_app() -> Flask:
    """Create and configure the Flask application.

    Returns:
        A configured Flask application ready to serve.

    """
    app = Flask(__name__)

    @app.route("/api/algorithms")
    def algorithms() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the names of every placement strategy."""
        return jsonify({"algorithms": [a.value for a in Algorithm]})

    @app.route("/api/simulate", methods=["POST"])
    def run_simulation() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run a schedule and return the outcome.

        Expects JSON body: ``{"schedule": "...", "algorithm": "first"}``
        with an optional ``"config"`` object of overrides.

        Returns:
            JSON with ``ok``, ``reason``, ``config``, ``snapshots`` (each with
            the log lines since the previous map), ``warnings`` and
            ``defragmentations`` fields.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "schedule" not in data or "algorithm" not in data:
            return jsonify({"error": "Missing 'schedule' or 'algorithm' field"}), _HTTP_BAD_REQUEST

        algorithm = data["algorithm"]
        if not isinstance(algorithm, str) or algorithm not in {a.value for a in Algorithm}:
            return jsonify({"error": f"Unknown algorithm {algorithm!r}"}), _HTTP_BAD_REQUEST

        overrides = data.get("config", {})
        if not isinstance(overrides, dict):
            return jsonify({"error": "'config' must be an object"}), _HTTP_BAD_REQUEST

        try:
            config = config_from_dict(overrides)
            processes = parse_schedule(str(data["schedule"]))
        except (ConfigError, ScheduleError) as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST

        logger = Logger()
        result, snapshots = simulate(processes, algorithm, config=config, logger=logger)
        return jsonify(_result_to_json(result, snapshots, config=config, logger=logger))

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``memsim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
