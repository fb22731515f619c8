"""Percentile tables and report assembly."""
from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Sequence

from forecaster.models.report import (
    DurationUnit,
    PercentileValue,
    SimulationReport,
    WorkPackageForecast,
)
from forecaster.models.simulation import SimulationMode
from forecaster.simulation.statistics import PERCENTILE_RANKS, percentile_table


def build_percentiles(
    samples: Sequence[float],
    to_date: Callable[[float], date],
    ranks: Sequence[int] = PERCENTILE_RANKS,
) -> tuple[PercentileValue, ...]:
    table = percentile_table(samples, ranks)
    return tuple(
        PercentileValue(rank=rank, days=days, date=to_date(days))
        for rank, days in table.items()
    )


def assemble_report(
    *,
    data_source: str,
    mode: SimulationMode,
    start_date: date,
    samples: Sequence[float],
    to_date: Callable[[float], date],
    unit: DurationUnit,
    simulated_items: int,
    velocity: Optional[float] = None,
    work_packages: Optional[Sequence[WorkPackageForecast]] = None,
) -> SimulationReport:
    """Freeze the collected samples and their percentile table into a report."""
    return SimulationReport(
        data_source=data_source,
        mode=mode,
        start_date=start_date,
        iterations=len(samples),
        simulated_items=simulated_items,
        velocity=velocity,
        unit=unit,
        percentiles=build_percentiles(samples, to_date),
        samples=tuple(samples),
        work_packages=tuple(work_packages) if work_packages is not None else None,
    )
