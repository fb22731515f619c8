import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from forecaster.models.simulation import SimulationMode


class DurationUnit(str, Enum):
    calendar_days = "calendar_days"  # fractional offset from the start date
    working_days = "working_days"    # count of days with capacity


class PercentileValue(BaseModel):
    """Forecast at one confidence level."""
    model_config = ConfigDict(frozen=True)

    rank: int
    days: float
    date: datetime.date


class WorkPackageForecast(BaseModel):
    """Per-package finish forecast in dependency mode."""
    model_config = ConfigDict(frozen=True)

    id: str
    done: bool
    percentiles: tuple[PercentileValue, ...]


class SimulationReport(BaseModel):
    """Result of a forecast run. Built once at the end of the run."""
    model_config = ConfigDict(frozen=True)

    data_source: str
    mode: SimulationMode
    start_date: datetime.date
    iterations: int
    simulated_items: int
    velocity: Optional[float] = None
    unit: DurationUnit
    percentiles: tuple[PercentileValue, ...]
    samples: tuple[float, ...]
    work_packages: Optional[tuple[WorkPackageForecast, ...]] = None

    def percentile(self, rank: int) -> PercentileValue:
        for value in self.percentiles:
            if value.rank == rank:
                return value
        raise KeyError(f"percentile rank {rank} not in report")
