"""Tests for the duration sampler."""
import random
from datetime import date

import pytest

from forecaster.models.calendar import Calendar
from forecaster.models.simulation import StoryPointMapping
from forecaster.models.work_package import (
    EmpiricalThroughput,
    FixedTimeBox,
    StoryPoints,
    ThreePointEstimate,
    WorkPackage,
)
from forecaster.simulation.errors import InsufficientHistory, InvalidEstimate
from forecaster.simulation.sampler import DurationSampler
from forecaster.simulation.scheduler import CalendarScheduler

MONDAY = date(2024, 1, 8)


def _make_package(**overrides) -> WorkPackage:
    defaults = dict(
        id="WP-1",
        estimate=ThreePointEstimate(optimistic=1, likely=2, pessimistic=3),
    )
    defaults.update(overrides)
    return WorkPackage(**defaults)


def _sampler(seed: int = 7, **kwargs) -> DurationSampler:
    return DurationSampler(random.Random(seed), **kwargs)


def test_pert_draws_stay_in_range():
    sampler = _sampler()
    draws = [sampler.draw_pert(1, 2, 3) for _ in range(10_000)]
    assert min(draws) >= 1
    assert max(draws) <= 3


def test_pert_mean_near_pert_mean():
    sampler = _sampler()
    draws = [sampler.draw_pert(1, 2, 6) for _ in range(20_000)]
    # PERT mean = (o + 4l + p) / 6
    assert abs(sum(draws) / len(draws) - 2.5) < 0.05


def test_pert_point_estimate_is_constant():
    sampler = _sampler()
    assert sampler.draw_pert(2, 2, 2) == 2


def test_same_seed_same_draws():
    a, b = _sampler(seed=11), _sampler(seed=11)
    assert [a.draw_pert(1, 4, 9) for _ in range(50)] == [b.draw_pert(1, 4, 9) for _ in range(50)]


def test_optimistic_above_likely_is_invalid():
    wp = _make_package(estimate=ThreePointEstimate(optimistic=5, likely=2, pessimistic=8))
    with pytest.raises(InvalidEstimate) as exc:
        _sampler().prepare(wp)
    assert exc.value.work_package_id == "WP-1"
    assert exc.value.values == {"optimistic": 5, "likely": 2, "pessimistic": 8}


def test_likely_above_pessimistic_is_invalid():
    wp = _make_package(estimate=ThreePointEstimate(optimistic=1, likely=9, pessimistic=8))
    with pytest.raises(InvalidEstimate):
        _sampler().prepare(wp)


def test_missing_estimate_is_invalid():
    with pytest.raises(InvalidEstimate):
        _sampler().prepare(_make_package(estimate=None))


def test_story_points_resolve_through_mapping():
    entry = ThreePointEstimate(optimistic=1, likely=1, pessimistic=2)
    sampler = _sampler(story_points=StoryPointMapping(table={8: entry}))
    prepared = sampler.prepare(_make_package(estimate=StoryPoints(value=8)))
    assert prepared == entry


def test_story_points_without_mapping_or_velocity():
    with pytest.raises(InvalidEstimate):
        _sampler().prepare(_make_package(estimate=StoryPoints(value=8)))


def test_unknown_history():
    wp = _make_package(estimate=EmpiricalThroughput(history="team"))
    with pytest.raises(InsufficientHistory) as exc:
        _sampler().prepare(wp)
    assert exc.value.work_package_id == "WP-1"


def test_empty_history():
    wp = _make_package(estimate=EmpiricalThroughput(history="team"))
    with pytest.raises(InsufficientHistory):
        _sampler(histories={"team": []}).prepare(wp)


def test_throughput_draws_come_from_history():
    sampler = _sampler()
    history = [0.0, 2.0, 5.0]
    assert all(sampler.draw_throughput(history) in history for _ in range(200))


def test_fixed_time_box_ignores_start_and_calendar():
    scheduler = CalendarScheduler(Calendar(), MONDAY, 3650)
    estimate = FixedTimeBox(end_date=date(2024, 1, 13))
    offset = _sampler().finish_offset(estimate, 2.0, scheduler, 3650)
    assert offset == 5.0


def test_empirical_package_burns_down_items():
    scheduler = CalendarScheduler(Calendar(), MONDAY, 3650)
    sampler = _sampler(histories={"team": [1.0]})
    estimate = sampler.prepare(_make_package(estimate=EmpiricalThroughput(history="team", items=2)))
    assert sampler.finish_offset(estimate, 0.0, scheduler, 3650) == 2.0
