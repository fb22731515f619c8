"""Monte Carlo forecasting engine.

Two entry points: a forward pass over the dependency graph per iteration, and
a flat burn-down of a backlog from daily throughput history. Both validate
every input before the first iteration and return an immutable
SimulationReport.
"""
from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from typing import Mapping, Optional, Sequence

from forecaster.models.calendar import Calendar
from forecaster.models.report import DurationUnit, SimulationReport, WorkPackageForecast
from forecaster.models.simulation import SimulationConfig, SimulationMode
from forecaster.models.work_package import WorkPackage
from forecaster.simulation.errors import EmptyProject, InvalidBacklogSize
from forecaster.simulation.graph import build_graph
from forecaster.simulation.report import assemble_report, build_percentiles
from forecaster.simulation.sampler import DurationSampler, validate_history
from forecaster.simulation.scheduler import CalendarScheduler
from forecaster.simulation.statistics import mean
from forecaster.simulation.velocity import resolve_velocity

logger = logging.getLogger(__name__)


def _make_rng(config: SimulationConfig, rng: Optional[random.Random]) -> random.Random:
    if rng is not None:
        return rng
    return random.Random(config.seed) if config.seed is not None else random.Random()


def run_dependency_simulation(
    work_packages: Sequence[WorkPackage],
    calendar: Calendar,
    config: SimulationConfig,
    rng: Optional[random.Random] = None,
    histories: Optional[Mapping[str, Sequence[float]]] = None,
    data_source: str = "",
) -> SimulationReport:
    """Forecast finish dates for a set of dependent work packages.

    Each iteration visits nodes in topological order. A node becomes eligible
    at the latest finish of its dependencies, its own start date, or the
    simulation start. Done nodes keep their recorded done date. The project
    finish for an iteration is the latest finish among terminal nodes.
    """
    if not work_packages:
        raise EmptyProject()

    graph = build_graph(work_packages)
    velocity = resolve_velocity(work_packages, calendar, config)
    sampler = DurationSampler(_make_rng(config, rng), config.story_points, velocity, histories)
    scheduler = CalendarScheduler(calendar, config.start_date, config.max_lookahead_days)

    # Validate and resolve every estimate before drawing anything
    plans = [None if wp.is_done else sampler.prepare(wp) for wp in work_packages]
    fixed_start = [
        max(scheduler.offset_of(wp.start_date), 0.0) if wp.start_date else 0.0
        for wp in work_packages
    ]
    done_finish = [
        scheduler.offset_of(wp.done_date) if wp.done_date else 0.0
        for wp in work_packages
    ]

    # Fixed and recorded dates are shown as given; sampled ones land on working days
    to_date = [
        scheduler.calendar_date if plan is None or sampler.pins_date(plan) else scheduler.date_for
        for plan in plans
    ]

    n = len(graph)
    open_count = sum(1 for plan in plans if plan is not None)
    logger.info(
        "Dependency simulation: %d packages (%d open), %d iterations, start %s",
        n, open_count, config.iterations, config.start_date,
    )

    node_samples: list[list[float]] = [[] for _ in range(n)]
    overall: list[float] = []
    overall_dates: dict[float, date] = {}
    terminals = graph.terminals
    for _ in range(config.iterations):
        finish = [0.0] * n
        for i in graph.order:
            plan = plans[i]
            if plan is None:
                finish[i] = done_finish[i]
            else:
                start = max([finish[j] for j in graph.predecessors[i]] + [fixed_start[i], 0.0])
                finish[i] = sampler.finish_offset(plan, start, scheduler, config.max_horizon_days)
            node_samples[i].append(finish[i])
        last = max(terminals, key=lambda t: finish[t])
        overall.append(finish[last])
        if finish[last] not in overall_dates:
            overall_dates[finish[last]] = to_date[last](finish[last])

    forecasts = [
        WorkPackageForecast(
            id=wp.id,
            done=wp.is_done,
            percentiles=build_percentiles(node_samples[i], to_date[i]),
        )
        for i, wp in enumerate(work_packages)
    ]
    report = assemble_report(
        data_source=data_source,
        mode=SimulationMode.dependency_graph,
        start_date=config.start_date,
        samples=overall,
        to_date=overall_dates.__getitem__,
        unit=DurationUnit.calendar_days,
        simulated_items=open_count,
        velocity=velocity,
        work_packages=forecasts,
    )
    logger.info("Dependency simulation complete: P50 %s, P85 %s",
                report.percentile(50).date, report.percentile(85).date)
    return report


def run_throughput_simulation(
    backlog_size: int,
    history: Sequence[float],
    config: SimulationConfig,
    calendar: Optional[Calendar] = None,
    rng: Optional[random.Random] = None,
    data_source: str = "",
) -> SimulationReport:
    """Forecast how many working days it takes to burn down a flat backlog.

    Every working day draws one value from ``history`` and scales it by the
    team's capacity on that day. Samples are working-day counts.
    """
    if backlog_size <= 0:
        raise InvalidBacklogSize(backlog_size)
    series = validate_history(history)

    calendar = calendar or Calendar()
    sampler = DurationSampler(_make_rng(config, rng))
    scheduler = CalendarScheduler(calendar, config.start_date, config.max_lookahead_days)
    velocity = mean(series)

    logger.info(
        "Throughput simulation: backlog %d, %d history days (velocity %.2f), %d iterations",
        backlog_size, len(series), velocity, config.iterations,
    )

    def draw() -> float:
        return sampler.draw_throughput(series)

    # Working-day count -> calendar day index on which the backlog emptied
    finish_day: dict[int, int] = {}
    samples: list[float] = []
    for _ in range(config.iterations):
        worked, last_day = scheduler.burn_down(0.0, backlog_size, draw, config.max_horizon_days)
        finish_day[worked] = last_day
        samples.append(float(worked))

    report = assemble_report(
        data_source=data_source,
        mode=SimulationMode.flat_throughput,
        start_date=config.start_date,
        samples=samples,
        to_date=lambda days: config.start_date + timedelta(days=finish_day[int(days)]),
        unit=DurationUnit.working_days,
        simulated_items=backlog_size,
        velocity=velocity,
    )
    logger.info("Throughput simulation complete: P50 %s, P85 %s",
                report.percentile(50).date, report.percentile(85).date)
    return report
