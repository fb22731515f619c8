"""Calendar scheduler: maps working-day effort onto calendar dates.

Time is a fractional offset in calendar days from the run's start date:
offset 2.5 means half of the third day's capacity has been used. A package
with an offset ``x`` is complete on the first day with capacity on or after
``start_date + ceil(x)``.
"""
from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Callable

from forecaster.models.calendar import Calendar
from forecaster.simulation.errors import ForecastHorizonExceeded, NoAvailableCapacity

_EPS = 1e-9


class CalendarScheduler:
    """Forward walk over a team calendar, one day at a time."""

    def __init__(self, calendar: Calendar, start_date: date, max_lookahead_days: int) -> None:
        self.calendar = calendar
        self.start_date = start_date
        self.max_lookahead_days = max_lookahead_days
        self._capacity: dict[int, float] = {}

    def capacity(self, day_index: int) -> float:
        """Team capacity on the day ``day_index`` days after the start date."""
        cap = self._capacity.get(day_index)
        if cap is None:
            cap = max(self.calendar.capacity_on(self.start_date + timedelta(days=day_index)), 0.0)
            self._capacity[day_index] = cap
        return cap

    def offset_of(self, day: date) -> float:
        return float((day - self.start_date).days)

    def calendar_date(self, offset: float) -> date:
        """Date of an offset with no regard to the calendar."""
        # Round first so accumulated float error does not push a whole day out
        return self.start_date + timedelta(days=math.ceil(round(offset, 6)))

    def date_for(self, offset: float) -> date:
        """First day with capacity on which a package finishing at ``offset`` is complete.

        Offsets at or before the start are not moved.
        """
        day = math.ceil(round(offset, 6))
        if day <= 0:
            return self.start_date + timedelta(days=day)
        limit = day + self.max_lookahead_days
        while self.capacity(day) <= 0:
            day += 1
            if day >= limit:
                raise NoAvailableCapacity(self.calendar_date(offset), 0.0, self.max_lookahead_days)
        return self.start_date + timedelta(days=day)

    def finish_offset(self, start_offset: float, effort: float) -> float:
        """Consume ``effort`` working days of capacity starting at ``start_offset``.

        Each day contributes its capacity (less any fraction already used on
        the starting day). Raises NoAvailableCapacity when the effort is not
        exhausted within the lookahead window.
        """
        if effort <= 0:
            return start_offset

        day = math.floor(start_offset)
        used = start_offset - day
        remaining = effort
        limit = day + self.max_lookahead_days
        while day < limit:
            cap = self.capacity(day)
            if cap > 0:
                available = cap * (1.0 - used)
                if remaining <= available + _EPS:
                    return min(day + used + remaining / cap, day + 1.0)
                remaining -= available
            day += 1
            used = 0.0

        raise NoAvailableCapacity(
            self.start_date + timedelta(days=math.floor(start_offset)),
            effort,
            self.max_lookahead_days,
        )

    def burn_down(
        self,
        start_offset: float,
        items: float,
        draw: Callable[[], float],
        max_horizon_days: int,
    ) -> tuple[int, int]:
        """Burn ``items`` down with one throughput draw per working day.

        The drawn value is scaled by the day's capacity. Returns
        ``(working_days, last_day_index)`` where the last day is the one on
        which the remaining count reached zero.
        """
        day = math.floor(start_offset)
        used = start_offset - day
        remaining = float(items)
        worked = 0
        limit = day + max_horizon_days
        while day < limit:
            cap = self.capacity(day)
            if cap > 0:
                worked += 1
                remaining -= draw() * cap * (1.0 - used)
                if remaining <= _EPS:
                    return worked, day
            day += 1
            used = 0.0

        raise ForecastHorizonExceeded(remaining, max_horizon_days)

