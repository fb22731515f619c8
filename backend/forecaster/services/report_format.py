"""Plain-text rendering of a SimulationReport."""
from __future__ import annotations

from forecaster.models.report import DurationUnit, SimulationReport

_UNIT_LABELS = {
    DurationUnit.calendar_days: "calendar days",
    DurationUnit.working_days: "working days",
}


def format_simulation_report(report: SimulationReport) -> str:
    velocity = f"{report.velocity:.2f}" if report.velocity is not None else "n/a"
    lines = [
        f"Data source: {report.data_source or 'n/a'}",
        f"Mode: {report.mode.value}",
        f"Start date: {report.start_date.isoformat()}",
        f"Iterations: {report.iterations}",
        f"Simulated items: {report.simulated_items}",
        f"Velocity: {velocity}",
        f"Unit: {_UNIT_LABELS[report.unit]}",
        "",
        f"{'Percentile':>10} | {'Days':>8} | Date",
    ]
    for value in report.percentiles:
        lines.append(f"{value.rank:>10} | {value.days:>8.1f} | {value.date.isoformat()}")

    if report.work_packages:
        lines.append("")
        lines.append("Work packages (P50 / P85):")
        for wp in report.work_packages:
            by_rank = {p.rank: p for p in wp.percentiles}
            suffix = " (done)" if wp.done else ""
            lines.append(
                f"  {wp.id}: {by_rank[50].date.isoformat()} / {by_rank[85].date.isoformat()}{suffix}"
            )
    return "\n".join(lines)
