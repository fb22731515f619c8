"""Forecast orchestration service.

Chooses the simulation mode for a project, derives throughput history when a
project is forecast as a flat backlog, and converts throughput records into
the series the engine consumes.
"""
from __future__ import annotations

import logging
import random
from typing import Mapping, Optional, Sequence

from forecaster.models.calendar import Calendar
from forecaster.models.project import Project
from forecaster.models.report import SimulationReport
from forecaster.models.simulation import SimulationConfig, SimulationMode
from forecaster.models.throughput import ThroughputRecord
from forecaster.simulation.engine import run_dependency_simulation, run_throughput_simulation
from forecaster.simulation.errors import EmptyProject
from forecaster.simulation.velocity import daily_throughput

logger = logging.getLogger(__name__)


def forecast_project(
    project: Project,
    calendar: Calendar,
    config: SimulationConfig,
    histories: Optional[Mapping[str, Sequence[float]]] = None,
    rng: Optional[random.Random] = None,
) -> SimulationReport:
    """Forecast a project in the mode named by ``config.mode``.

    Dependency mode runs the forward pass over the work package graph. Flat
    mode counts the open packages as the backlog and burns it down with the
    daily throughput of the project's done packages.
    """
    if not project.work_packages:
        raise EmptyProject()

    if config.mode == SimulationMode.flat_throughput:
        history = daily_throughput(project.work_packages, calendar)
        backlog = len(project.open_packages)
        logger.info("Forecasting %s as a flat backlog of %d packages", project.name, backlog)
        return run_throughput_simulation(
            backlog, history, config, calendar=calendar, rng=rng, data_source=project.name,
        )

    return run_dependency_simulation(
        project.work_packages, calendar, config,
        rng=rng, histories=histories, data_source=project.name,
    )


def throughput_series(records: Sequence[ThroughputRecord]) -> list[float]:
    """Completed counts ordered by date."""
    return [float(r.completed_issues) for r in sorted(records, key=lambda r: r.date)]


def forecast_backlog(
    backlog_size: int,
    records: Sequence[ThroughputRecord],
    config: SimulationConfig,
    calendar: Optional[Calendar] = None,
    data_source: str = "throughput history",
    rng: Optional[random.Random] = None,
) -> SimulationReport:
    """Forecast a flat backlog from daily throughput records."""
    return run_throughput_simulation(
        backlog_size, throughput_series(records), config,
        calendar=calendar, rng=rng, data_source=data_source,
    )
