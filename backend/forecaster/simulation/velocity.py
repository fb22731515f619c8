"""Velocity and daily throughput derived from completed work packages."""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from forecaster.config import settings
from forecaster.models.calendar import Calendar
from forecaster.models.simulation import SimulationConfig
from forecaster.models.work_package import StoryPoints, WorkPackage
from forecaster.simulation.errors import InsufficientHistory

logger = logging.getLogger(__name__)


def _days(first: date, last: date):
    day = first
    while day <= last:
        yield day
        day += timedelta(days=1)


def derive_velocity(
    work_packages: Sequence[WorkPackage],
    calendar: Calendar,
    window: Optional[int] = None,
) -> float:
    """Story points completed per unit of team capacity.

    Uses the most recent ``window`` done story-point packages that carry both
    a start and a done date. Capacity is summed over every day from the
    earliest start to the latest done date, inclusive.
    """
    window = window or settings.VELOCITY_WINDOW
    finished = [
        wp for wp in work_packages
        if wp.is_done
        and isinstance(wp.estimate, StoryPoints)
        and wp.start_date is not None
        and wp.done_date is not None
    ]
    if not finished:
        raise InsufficientHistory("no done story point packages with start and done dates")

    finished.sort(key=lambda wp: wp.done_date)
    recent = finished[-window:]
    points = sum(wp.estimate.value for wp in recent)
    first = min(wp.start_date for wp in recent)
    last = max(wp.done_date for wp in recent)
    capacity = sum(calendar.capacity_on(day) for day in _days(first, last))
    if capacity <= 0:
        raise InsufficientHistory(f"no team capacity between {first} and {last}")

    velocity = points / capacity
    logger.info(
        "Derived velocity %.3f from %d packages (%s to %s)", velocity, len(recent), first, last,
    )
    return velocity


def resolve_velocity(
    work_packages: Sequence[WorkPackage],
    calendar: Calendar,
    config: SimulationConfig,
) -> Optional[float]:
    """Configured velocity, else one derived from history when story points need it."""
    if config.velocity is not None:
        return config.velocity

    table = config.story_points.table
    needs_velocity = any(
        not wp.is_done
        and isinstance(wp.estimate, StoryPoints)
        and float(wp.estimate.value) not in table
        for wp in work_packages
    )
    if not needs_velocity:
        return None
    return derive_velocity(work_packages, calendar)


def daily_throughput(work_packages: Sequence[WorkPackage], calendar: Calendar) -> list[float]:
    """Completed package count per day, first to last done date inclusive.

    Days without completions are kept as zeros when the team had capacity on
    them; days without capacity are dropped unless something was completed.
    """
    counts: dict[date, int] = {}
    for wp in work_packages:
        if wp.is_done and wp.done_date is not None:
            counts[wp.done_date] = counts.get(wp.done_date, 0) + 1
    if not counts:
        raise InsufficientHistory("no done work packages with a done date")

    series: list[float] = []
    for day in _days(min(counts), max(counts)):
        if day in counts:
            series.append(float(counts[day]))
        elif calendar.capacity_on(day) > 0:
            series.append(0.0)
    return series
