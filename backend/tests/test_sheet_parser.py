"""Tests for the Excel sheet parsers."""
import io
from datetime import date

import pytest
from openpyxl import Workbook

from forecaster.models.work_package import (
    FixedTimeBox,
    StoryPoints,
    ThreePointEstimate,
    WorkPackageStatus,
)
from forecaster.services.sheet_parser import (
    _find_column,
    _PROJECT_PATTERNS,
    parse_project_sheet,
    parse_throughput_sheet,
)


def _make_excel(rows, columns) -> io.BytesIO:
    """Create an in-memory Excel file."""
    wb = Workbook()
    ws = wb.active
    ws.append(columns)
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


class TestColumnMatching:
    def test_case_insensitive_partial_match(self):
        cols = ["Issue Key", "Story Points (SP)", "Depends On"]
        assert _find_column(cols, "id", _PROJECT_PATTERNS) == "Issue Key"
        assert _find_column(cols, "story_points", _PROJECT_PATTERNS) == "Story Points (SP)"
        assert _find_column(cols, "dependencies", _PROJECT_PATTERNS) == "Depends On"

    def test_exact_id_column(self):
        assert _find_column(["Summary", "ID"], "id", _PROJECT_PATTERNS) == "ID"

    def test_missing_column(self):
        assert _find_column(["Summary"], "end_date", _PROJECT_PATTERNS) is None


class TestProjectSheet:
    def test_story_point_sheet(self):
        columns = ["Issue Key", "Summary", "Status", "Story Points", "Depends On",
                   "Start Date", "Done Date"]
        rows = [
            ["WP-1", "Design", "Done", 3, None, date(2024, 1, 1), date(2024, 1, 5)],
            ["WP-2", "Build", "To Do", 5, "WP-1", None, None],
            ["WP-3", "Ship", "In Progress", 2, "WP-1, WP-2", None, None],
        ]
        project = parse_project_sheet(_make_excel(rows, columns), "release_plan.xlsx")

        assert project.name == "release plan"
        assert [wp.id for wp in project.work_packages] == ["WP-1", "WP-2", "WP-3"]
        first, second, third = project.work_packages
        assert first.status == WorkPackageStatus.done
        assert first.done_date == date(2024, 1, 5)
        assert first.start_date == date(2024, 1, 1)
        assert isinstance(first.estimate, StoryPoints)
        assert first.estimate.value == 3.0
        assert second.dependencies == ["WP-1"]
        assert second.start_date is None
        assert third.status == WorkPackageStatus.in_progress
        assert third.dependencies == ["WP-1", "WP-2"]

    def test_three_point_and_fixed_date_sheet(self):
        columns = ["ID", "Optimistic", "Most Likely", "Pessimistic", "End Date"]
        rows = [
            ["A", 1, 2, 4, None],
            ["B", None, None, None, date(2024, 3, 1)],
        ]
        project = parse_project_sheet(_make_excel(rows, columns), "plan.xlsx")
        a, b = project.work_packages
        assert isinstance(a.estimate, ThreePointEstimate)
        assert (a.estimate.optimistic, a.estimate.likely, a.estimate.pessimistic) == (1, 2, 4)
        assert isinstance(b.estimate, FixedTimeBox)
        assert b.estimate.end_date == date(2024, 3, 1)

    def test_numeric_ids_become_strings(self):
        project = parse_project_sheet(_make_excel([[101, 3]], ["ID", "Points"]), "p.xlsx")
        assert project.work_packages[0].id == "101"

    def test_missing_id_column(self):
        with pytest.raises(ValueError, match="id column"):
            parse_project_sheet(_make_excel([["x"]], ["Summary"]), "p.xlsx")

    def test_empty_file(self):
        with pytest.raises(ValueError, match="empty"):
            parse_project_sheet(io.BytesIO(b""), "p.xlsx")

    def test_no_data_rows(self):
        with pytest.raises(ValueError):
            parse_project_sheet(_make_excel([], ["ID", "Points"]), "p.xlsx")


class TestThroughputSheet:
    def test_records_sorted_by_date(self):
        rows = [
            [date(2024, 1, 9), 2],
            [date(2024, 1, 8), 4],
            [date(2024, 1, 10), 0],
        ]
        records = parse_throughput_sheet(_make_excel(rows, ["Date", "Completed Issues"]))
        assert [r.date for r in records] == [date(2024, 1, 8), date(2024, 1, 9), date(2024, 1, 10)]
        assert [r.completed_issues for r in records] == [4, 2, 0]

    def test_invalid_rows_skipped(self):
        rows = [
            [date(2024, 1, 8), 3],
            [date(2024, 1, 9), None],
            [None, 5],
        ]
        records = parse_throughput_sheet(_make_excel(rows, ["Date", "Throughput"]))
        assert len(records) == 1

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="date and completed"):
            parse_throughput_sheet(_make_excel([[1]], ["Velocity"]))
