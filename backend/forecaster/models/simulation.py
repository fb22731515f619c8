from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from forecaster.config import settings
from forecaster.models.work_package import ThreePointEstimate


class SimulationMode(str, Enum):
    """Which simulation the run performs."""
    dependency_graph = "dependency_graph"  # forward pass over the DAG
    flat_throughput = "flat_throughput"    # whole-backlog burn-down from history


class StoryPointMapping(BaseModel):
    """Maps story point values to three-point day ranges.

    Values found in ``table`` use the configured range. Other values fall back
    to the enclosing Fibonacci bounds divided by the run's velocity.
    """
    table: dict[float, ThreePointEstimate] = {}


class SimulationConfig(BaseModel):
    """Configuration for Monte Carlo forecast runs."""
    iterations: int = Field(default_factory=lambda: settings.DEFAULT_ITERATIONS, gt=0)
    seed: Optional[int] = Field(default_factory=lambda: settings.DEFAULT_SEED)
    mode: SimulationMode = SimulationMode.dependency_graph
    start_date: date = Field(default_factory=date.today)
    max_lookahead_days: int = Field(default_factory=lambda: settings.MAX_LOOKAHEAD_DAYS, gt=0)
    max_horizon_days: int = Field(default_factory=lambda: settings.MAX_HORIZON_DAYS, gt=0)
    velocity: Optional[float] = Field(default=None, gt=0)
    story_points: StoryPointMapping = StoryPointMapping()
