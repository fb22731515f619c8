"""Forecasting engine: graph, sampler, calendar scheduler and Monte Carlo runs."""
from forecaster.simulation.errors import (
    CycleDetected,
    DuplicateWorkPackage,
    EmptyProject,
    EngineError,
    ForecastHorizonExceeded,
    InsufficientHistory,
    InvalidBacklogSize,
    InvalidEstimate,
    NoAvailableCapacity,
    UnknownDependency,
)
from forecaster.simulation.graph import DependencyGraph, build_graph, topological_order
from forecaster.simulation.sampler import DurationSampler
from forecaster.simulation.scheduler import CalendarScheduler
from forecaster.simulation.statistics import PERCENTILE_RANKS, percentile, percentile_table
from forecaster.simulation.engine import run_dependency_simulation, run_throughput_simulation

__all__ = [
    "EngineError",
    "CycleDetected",
    "UnknownDependency",
    "DuplicateWorkPackage",
    "EmptyProject",
    "InvalidEstimate",
    "InsufficientHistory",
    "InvalidBacklogSize",
    "NoAvailableCapacity",
    "ForecastHorizonExceeded",
    "DependencyGraph",
    "build_graph",
    "topological_order",
    "DurationSampler",
    "CalendarScheduler",
    "PERCENTILE_RANKS",
    "percentile",
    "percentile_table",
    "run_dependency_simulation",
    "run_throughput_simulation",
]
