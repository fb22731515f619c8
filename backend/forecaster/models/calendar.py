from datetime import date
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field, model_validator


class Weekday(str, Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

    @property
    def index(self) -> int:
        """Position matching ``date.weekday()`` (Monday == 0)."""
        return list(Weekday).index(self)


class FreeDateRange(BaseModel):
    """Inclusive range of days a team member is away."""
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_order(self) -> "FreeDateRange":
        if self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        return self

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class MemberCalendar(BaseModel):
    """Availability of a single team member."""
    name: str
    capacity: float = Field(default=1.0, ge=0.0, le=1.0)
    free_weekdays: list[Weekday] = []
    free_date_ranges: list[FreeDateRange] = []
    capacity_overrides: dict[date, Annotated[float, Field(ge=0.0, le=1.0)]] = {}

    def capacity_on(self, day: date) -> float:
        if day in self.capacity_overrides:
            return self.capacity_overrides[day]
        if any(w.index == day.weekday() for w in self.free_weekdays):
            return 0.0
        if any(r.contains(day) for r in self.free_date_ranges):
            return 0.0
        return self.capacity


class Calendar(BaseModel):
    """Team working calendar.

    A date has zero capacity on a non-working weekday or a holiday. Otherwise
    capacity is 1.0 when no members are configured, or the mean of the member
    capacities on that date.
    """
    non_working_weekdays: list[Weekday] = [Weekday.saturday, Weekday.sunday]
    holidays: list[date] = []
    members: list[MemberCalendar] = []

    def capacity_on(self, day: date) -> float:
        if any(w.index == day.weekday() for w in self.non_working_weekdays):
            return 0.0
        if day in self.holidays:
            return 0.0
        if not self.members:
            return 1.0
        return sum(m.capacity_on(day) for m in self.members) / len(self.members)

    def is_working_day(self, day: date) -> bool:
        return self.capacity_on(day) > 0.0
