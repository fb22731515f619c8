from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from forecaster.models.calendar import Calendar
from forecaster.models.project import Project
from forecaster.models.report import SimulationReport
from forecaster.models.simulation import SimulationConfig
from forecaster.models.throughput import ThroughputRecord
from forecaster.services.simulation_service import forecast_backlog, forecast_project
from forecaster.simulation.errors import EngineError

router = APIRouter(tags=["forecasts"])


class ProjectForecastRequest(BaseModel):
    """Request body for a project forecast with inline work packages."""
    project: Project
    calendar: Calendar = Calendar()
    config: Optional[SimulationConfig] = None
    histories: dict[str, list[float]] = {}


class ThroughputForecastRequest(BaseModel):
    """Request body for forecasting a flat backlog from throughput history."""
    backlog_size: int
    history: list[ThroughputRecord] = Field(min_length=1)
    calendar: Optional[Calendar] = None
    config: Optional[SimulationConfig] = None
    data_source: str = "throughput history"


@router.post("/forecasts/project", response_model=SimulationReport)
def forecast_project_endpoint(request: ProjectForecastRequest):
    """Run a Monte Carlo forecast for a project.

    Uses the dependency graph by default, or a flat burn-down of the open
    packages when ``config.mode`` is ``flat_throughput``.
    """
    config = request.config or SimulationConfig()
    try:
        return forecast_project(request.project, request.calendar, config, request.histories)
    except EngineError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/forecasts/throughput", response_model=SimulationReport)
def forecast_throughput_endpoint(request: ThroughputForecastRequest):
    """Forecast how many working days a backlog needs at historical throughput."""
    config = request.config or SimulationConfig()
    try:
        return forecast_backlog(
            request.backlog_size, request.history, config,
            calendar=request.calendar, data_source=request.data_source,
        )
    except EngineError as e:
        raise HTTPException(status_code=422, detail=str(e))
