"""Duration sampler.

Every estimate kind is handled here: ``prepare`` validates a package and
normalises its estimate once before the run, ``finish_offset`` draws one
outcome per iteration. Randomness comes only from the injected ``rng``.
"""
from __future__ import annotations

import random
from typing import Mapping, Optional, Sequence, Union

from forecaster.models.simulation import StoryPointMapping
from forecaster.models.work_package import (
    EmpiricalThroughput,
    FixedTimeBox,
    StoryPoints,
    ThreePointEstimate,
    WorkPackage,
)
from forecaster.simulation.errors import InsufficientHistory, InvalidEstimate
from forecaster.simulation.scheduler import CalendarScheduler
from forecaster.simulation.story_points import to_three_point

# Estimates after preparation: story points are resolved to day ranges
PreparedEstimate = Union[FixedTimeBox, ThreePointEstimate, EmpiricalThroughput]


def validate_three_point(work_package_id: str, estimate: ThreePointEstimate) -> None:
    o, l, p = estimate.optimistic, estimate.likely, estimate.pessimistic
    values = {"optimistic": o, "likely": l, "pessimistic": p}
    if o < 0:
        raise InvalidEstimate(work_package_id, "optimistic must not be negative", values)
    if o > l or l > p:
        raise InvalidEstimate(
            work_package_id, "expected optimistic <= likely <= pessimistic", values,
        )
    if p == o and l != o:
        raise InvalidEstimate(work_package_id, "degenerate range", values)


def validate_history(
    series: Sequence[float], name: str = "history", work_package_id: Optional[str] = None,
) -> list[float]:
    """Check a daily-completion series and return it as a list of floats."""
    values = [float(v) for v in series]
    if not values:
        raise InsufficientHistory(f"{name} is empty", work_package_id)
    negative = [v for v in values if v < 0]
    if negative:
        raise InsufficientHistory(
            f"{name} contains negative counts: {negative[:5]}", work_package_id,
        )
    return values


class DurationSampler:
    """Draws durations for prepared estimates from an injected random source."""

    def __init__(
        self,
        rng: random.Random,
        story_points: Optional[StoryPointMapping] = None,
        velocity: Optional[float] = None,
        histories: Optional[Mapping[str, Sequence[float]]] = None,
    ) -> None:
        self.rng = rng
        self.story_points = story_points or StoryPointMapping()
        self.velocity = velocity
        self._histories: dict[str, list[float]] = {}
        self._raw_histories = dict(histories or {})

    def prepare(self, wp: WorkPackage) -> PreparedEstimate:
        """Validate an open package's estimate and resolve story points.

        Raises InvalidEstimate or InsufficientHistory.
        """
        estimate = wp.estimate
        if estimate is None:
            raise InvalidEstimate(wp.id, "open work package has no estimate")

        if isinstance(estimate, StoryPoints):
            estimate = to_three_point(wp.id, estimate.value, self.story_points, self.velocity)

        if isinstance(estimate, FixedTimeBox):
            return estimate
        if isinstance(estimate, ThreePointEstimate):
            validate_three_point(wp.id, estimate)
            return estimate
        if isinstance(estimate, EmpiricalThroughput):
            self.history(estimate.history, wp.id)
            return estimate
        raise InvalidEstimate(wp.id, f"unsupported estimate kind {type(estimate).__name__}")

    def history(self, name: str, work_package_id: Optional[str] = None) -> list[float]:
        series = self._histories.get(name)
        if series is None:
            if name not in self._raw_histories:
                raise InsufficientHistory(f"unknown history {name!r}", work_package_id)
            series = validate_history(self._raw_histories[name], name, work_package_id)
            self._histories[name] = series
        return series

    # ------------------------------------------------------------------
    # Draws
    # ------------------------------------------------------------------
    def draw_pert(self, optimistic: float, likely: float, pessimistic: float) -> float:
        """PERT-Beta sample scaled into [optimistic, pessimistic]."""
        spread = pessimistic - optimistic
        if spread <= 0:
            return optimistic
        alpha = 1.0 + 4.0 * (likely - optimistic) / spread
        beta = 1.0 + 4.0 * (pessimistic - likely) / spread
        return optimistic + self.rng.betavariate(alpha, beta) * spread

    def draw_throughput(self, series: Sequence[float]) -> float:
        """Uniform pick, with replacement, from a daily-completion series."""
        return self.rng.choice(series)

    def pins_date(self, estimate: PreparedEstimate) -> bool:
        """Whether the finish date is fixed and must not be moved to a working day."""
        return isinstance(estimate, FixedTimeBox)

    def finish_offset(
        self,
        estimate: PreparedEstimate,
        start_offset: float,
        scheduler: CalendarScheduler,
        max_horizon_days: int,
    ) -> float:
        """Sample one finish offset for a package eligible at ``start_offset``."""
        if isinstance(estimate, FixedTimeBox):
            return scheduler.offset_of(estimate.end_date)
        if isinstance(estimate, ThreePointEstimate):
            effort = self.draw_pert(estimate.optimistic, estimate.likely, estimate.pessimistic)
            return scheduler.finish_offset(start_offset, effort)
        if isinstance(estimate, EmpiricalThroughput):
            series = self.history(estimate.history)
            _, last_day = scheduler.burn_down(
                start_offset, estimate.items, lambda: self.draw_throughput(series), max_horizon_days,
            )
            return last_day + 1.0
        raise TypeError(f"unprepared estimate {type(estimate).__name__}")
