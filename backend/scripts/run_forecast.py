#!/usr/bin/env python3
"""Run a Monte Carlo forecast from an Excel sheet and print the text report.

Usage:
    cd backend && python scripts/run_forecast.py project --sheet work_packages.xlsx
    cd backend && python scripts/run_forecast.py project --sheet wp.xlsx --mode flat_throughput
    cd backend && python scripts/run_forecast.py throughput --sheet history.xlsx --backlog 40
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BACKEND_DIR))

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s", datefmt="%H:%M:%S")
logger = logging.getLogger(__name__)

from forecaster.models.calendar import Calendar
from forecaster.models.simulation import SimulationConfig, SimulationMode
from forecaster.services.report_format import format_simulation_report
from forecaster.services.sheet_parser import parse_project_sheet, parse_throughput_sheet
from forecaster.services.simulation_service import forecast_backlog, forecast_project
from forecaster.simulation.errors import EngineError


def _load_calendar(path: str | None) -> Calendar:
    if not path:
        return Calendar()
    return Calendar.model_validate_json(Path(path).read_text(encoding="utf-8"))


def _build_config(args: argparse.Namespace) -> SimulationConfig:
    overrides: dict = {}
    if args.iterations is not None:
        overrides["iterations"] = args.iterations
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.start:
        overrides["start_date"] = date.fromisoformat(args.start)
    if getattr(args, "mode", None):
        overrides["mode"] = SimulationMode(args.mode)
    if getattr(args, "velocity", None) is not None:
        overrides["velocity"] = args.velocity
    return SimulationConfig(**overrides)


def main() -> int:
    parser = argparse.ArgumentParser(description="Monte Carlo project completion forecast")
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("project", "throughput"):
        p = sub.add_parser(name)
        p.add_argument("--sheet", required=True, help="Path to the Excel sheet")
        p.add_argument("--calendar", help="Path to a calendar JSON file (default: Mon-Fri)")
        p.add_argument("--iterations", type=int, default=None, help="Iterations (default: settings)")
        p.add_argument("--seed", type=int, default=None, help="Random seed (default: settings)")
        p.add_argument("--start", help="Start date YYYY-MM-DD (default: today)")

    sub.choices["project"].add_argument(
        "--mode", choices=[m.value for m in SimulationMode], default=None,
        help="Simulation mode (default: dependency_graph)",
    )
    sub.choices["project"].add_argument(
        "--velocity", type=float, default=None, help="Story points per working day",
    )
    sub.choices["throughput"].add_argument(
        "--backlog", type=int, required=True, help="Number of items left to complete",
    )

    args = parser.parse_args()
    sheet = Path(args.sheet)
    calendar = _load_calendar(args.calendar)
    config = _build_config(args)

    try:
        with sheet.open("rb") as fh:
            if args.command == "project":
                project = parse_project_sheet(fh, sheet.name)
                logger.info("Loaded %d work packages from %s", len(project.work_packages), sheet)
                report = forecast_project(project, calendar, config)
            else:
                records = parse_throughput_sheet(fh)
                logger.info("Loaded %d throughput days from %s", len(records), sheet)
                report = forecast_backlog(
                    args.backlog, records, config, calendar=calendar, data_source=sheet.name,
                )
    except (ValueError, EngineError) as e:
        logger.error("Forecast failed: %s", e)
        return 1

    print(format_simulation_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
