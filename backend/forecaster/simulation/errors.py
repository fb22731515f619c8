"""Engine error taxonomy.

Every error is terminal: the engine validates structure and estimates before
the first iteration and never retries. Each exception keeps the offending
identifiers and values as attributes so callers can render a diagnostic.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, Optional


class EngineError(Exception):
    """Base class for all forecasting engine failures."""


# ---------------------------------------------------------------------------
# Graph structure
# ---------------------------------------------------------------------------
class CycleDetected(EngineError):
    def __init__(self, node_ids: Iterable[str]) -> None:
        self.node_ids = list(node_ids)
        super().__init__(
            f"dependency graph has a cycle among: {', '.join(self.node_ids)}"
        )


class UnknownDependency(EngineError):
    def __init__(self, work_package_id: str, dependency_id: str) -> None:
        self.work_package_id = work_package_id
        self.dependency_id = dependency_id
        super().__init__(
            f"dependency {dependency_id} not found for work package {work_package_id}"
        )


class DuplicateWorkPackage(EngineError):
    def __init__(self, work_package_id: str) -> None:
        self.work_package_id = work_package_id
        super().__init__(f"work package id {work_package_id} is not unique")


class EmptyProject(EngineError):
    def __init__(self) -> None:
        super().__init__("project has no work packages")


# ---------------------------------------------------------------------------
# Sampling inputs
# ---------------------------------------------------------------------------
class InvalidEstimate(EngineError):
    def __init__(self, work_package_id: str, detail: str, values: Optional[dict] = None) -> None:
        self.work_package_id = work_package_id
        self.detail = detail
        self.values = dict(values or {})
        suffix = f" {self.values}" if self.values else ""
        super().__init__(f"invalid estimate for {work_package_id}: {detail}{suffix}")


class InsufficientHistory(EngineError):
    def __init__(self, detail: str, work_package_id: Optional[str] = None) -> None:
        self.detail = detail
        self.work_package_id = work_package_id
        prefix = f"{work_package_id}: " if work_package_id else ""
        super().__init__(f"insufficient history: {prefix}{detail}")


class InvalidBacklogSize(EngineError):
    def __init__(self, backlog_size: int) -> None:
        self.backlog_size = backlog_size
        super().__init__(f"backlog size must be greater than zero, got {backlog_size}")


# ---------------------------------------------------------------------------
# Scheduling guards
# ---------------------------------------------------------------------------
class NoAvailableCapacity(EngineError):
    def __init__(self, start_date: date, effort: float, lookahead_days: int) -> None:
        self.start_date = start_date
        self.effort = effort
        self.lookahead_days = lookahead_days
        super().__init__(
            f"could not schedule {effort:.2f} days of effort from {start_date} "
            f"within {lookahead_days} days"
        )


class ForecastHorizonExceeded(EngineError):
    def __init__(self, remaining: float, horizon_days: int) -> None:
        self.remaining = remaining
        self.horizon_days = horizon_days
        super().__init__(
            f"{remaining:.2f} items still open after the {horizon_days}-day forecast horizon"
        )
