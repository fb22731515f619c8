"""Story point to three-point day range mapping."""
from __future__ import annotations

from typing import Optional

from forecaster.models.simulation import StoryPointMapping
from forecaster.models.work_package import ThreePointEstimate
from forecaster.simulation.errors import InvalidEstimate

FIBONACCI_SCALE: tuple[float, ...] = (
    0.0, 1.0, 2.0, 3.0, 5.0, 8.0, 13.0, 21.0, 34.0, 55.0, 89.0, 144.0, 233.0, 377.0, 610.0, 987.0,
)


def fibonacci_bounds(value: float) -> tuple[float, float]:
    """Return the (lower, upper) Fibonacci pair enclosing ``value``.

    A value on the scale is the upper end of its pair: ``fibonacci_bounds(3)``
    is ``(2, 3)``, so such a value has no pessimistic headroom above it.
    """
    if value <= FIBONACCI_SCALE[0]:
        return FIBONACCI_SCALE[0], FIBONACCI_SCALE[1]
    for lower, upper in zip(FIBONACCI_SCALE, FIBONACCI_SCALE[1:]):
        if value <= upper:
            return lower, upper
    last = FIBONACCI_SCALE[-1]
    return last, last


def to_three_point(
    work_package_id: str,
    points: float,
    mapping: StoryPointMapping,
    velocity: Optional[float],
) -> ThreePointEstimate:
    """Resolve a story point value into a day range.

    Explicit table entries win. Otherwise the Fibonacci bounds around the value
    are converted to days with ``velocity`` (points per working day).
    """
    if points < 0:
        raise InvalidEstimate(work_package_id, "story points must not be negative", {"value": points})

    configured = mapping.table.get(float(points))
    if configured is not None:
        return configured

    if velocity is None or velocity <= 0:
        raise InvalidEstimate(
            work_package_id,
            "story points have no mapping entry and no velocity is available",
            {"value": points},
        )

    lower, upper = fibonacci_bounds(points)
    # Values above the scale collapse the range onto the value itself
    upper = max(upper, points)
    return ThreePointEstimate(
        optimistic=lower / velocity,
        likely=points / velocity,
        pessimistic=upper / velocity,
    )
