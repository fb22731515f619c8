from datetime import date
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class WorkPackageStatus(str, Enum):
    """Tracker status of a work package. Only ``done`` is excluded from sampling."""
    to_do = "to_do"
    in_progress = "in_progress"
    done = "done"


class FixedTimeBox(BaseModel):
    """Package that finishes on a fixed date regardless of the calendar."""
    kind: Literal["fixed_time_box"] = "fixed_time_box"
    end_date: date


class ThreePointEstimate(BaseModel):
    """Optimistic / most likely / pessimistic effort in working days."""
    kind: Literal["three_point"] = "three_point"
    optimistic: float
    likely: float
    pessimistic: float


class StoryPoints(BaseModel):
    kind: Literal["story_points"] = "story_points"
    value: float


class EmpiricalThroughput(BaseModel):
    """Package burned down from a named historical daily-completion series."""
    kind: Literal["empirical_throughput"] = "empirical_throughput"
    history: str
    items: float = Field(default=1.0, gt=0)


EstimateSpec = Annotated[
    Union[FixedTimeBox, ThreePointEstimate, StoryPoints, EmpiricalThroughput],
    Field(discriminator="kind"),
]


class WorkPackage(BaseModel):
    id: str = Field(min_length=1)
    summary: Optional[str] = None
    estimate: Optional[EstimateSpec] = None
    dependencies: list[str] = []
    start_date: Optional[date] = None
    status: WorkPackageStatus = WorkPackageStatus.to_do
    done_date: Optional[date] = None

    @field_validator("dependencies")
    @classmethod
    def _collapse_duplicates(cls, value: list[str]) -> list[str]:
        # Ordered set: keep first occurrence
        return list(dict.fromkeys(value))

    @property
    def is_done(self) -> bool:
        return self.status == WorkPackageStatus.done
