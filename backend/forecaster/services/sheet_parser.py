"""Parse uploaded Excel sheets into work packages or throughput history.

Column matching is flexible (partial, case-insensitive): patterns are tried
most specific first, so exports from different trackers map without a fixed
template. Dates accept anything pandas can parse.
"""
from __future__ import annotations

import logging
import re
from datetime import date
from io import BytesIO
from typing import BinaryIO

from forecaster.models.project import Project
from forecaster.models.throughput import ThroughputRecord
from forecaster.models.work_package import (
    FixedTimeBox,
    StoryPoints,
    ThreePointEstimate,
    WorkPackage,
    WorkPackageStatus,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Column matching helpers
# ---------------------------------------------------------------------------
_PROJECT_PATTERNS: dict[str, list[str]] = {
    "id": ["issue key", "key", "^id$", "work package"],
    "summary": ["summary", "title", "name"],
    "status": ["status", "state"],
    "story_points": ["story points", "story point", "points", "^sp$"],
    "optimistic": ["optimistic", "best case"],
    "likely": ["most likely", "likely", "expected"],
    "pessimistic": ["pessimistic", "worst case"],
    "end_date": ["end date", "due date", "fixed date", "deadline"],
    "dependencies": ["depends on", "dependencies", "blocked by", "predecessors"],
    "start_date": ["start date", "^start$"],
    "done_date": ["done date", "resolution date", "resolved", "completed"],
}

_THROUGHPUT_PATTERNS: dict[str, list[str]] = {
    "date": ["^date$", "day", "date"],
    "completed": ["completed issues", "completed", "throughput", "resolved", "count", "issues"],
}

_DONE_STATUSES = {"done", "closed", "resolved", "complete", "completed"}
_IN_PROGRESS_STATUSES = {"in progress", "in_progress", "in review", "doing", "started"}


def _find_column(columns: list[str], key: str, patterns: dict[str, list[str]]) -> str | None:
    """Find a column name by partial case-insensitive match.

    A pattern containing regex metacharacters is treated as a regex;
    otherwise plain substring matching is used.
    """
    col_lower = {c: c.lower().strip() for c in columns}
    for pattern in patterns.get(key, [key]):
        pat = pattern.lower()
        if any(ch in pat for ch in ("*", "+", "?", "\\", "^", "$", "|")):
            rx = re.compile(pat)
            for orig, low in col_lower.items():
                if rx.search(low):
                    return orig
        else:
            for orig, low in col_lower.items():
                if pat in low:
                    return orig
    return None


def _map_columns(columns: list[str], patterns: dict[str, list[str]]) -> dict[str, str | None]:
    # A column is claimed by the first key that matches it
    col_map: dict[str, str | None] = {}
    claimed: set[str] = set()
    for key in patterns:
        col = _find_column([c for c in columns if c not in claimed], key, patterns)
        col_map[key] = col
        if col is not None:
            claimed.add(col)
    return col_map


def _read_sheet(file: BinaryIO):
    try:
        import openpyxl  # noqa: F401
    except ImportError:
        raise ValueError("openpyxl is required to parse Excel files")

    import pandas as pd

    data = file.read()
    if not data:
        raise ValueError("Uploaded file is empty")

    df = pd.read_excel(BytesIO(data))
    df.columns = [str(c).strip() for c in df.columns]
    if df.empty:
        raise ValueError("Spreadsheet contains no data rows")
    return df


def _name_from_filename(filename: str) -> str:
    name = re.sub(r"\.(xlsx?|csv)$", "", filename, flags=re.IGNORECASE)
    return name.replace("_", " ").replace("-", " ").strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def parse_project_sheet(file: BinaryIO, filename: str) -> Project:
    """Parse an Excel sheet of work packages into a Project.

    Each row's estimate is taken from the first available of: end date
    (fixed time box), optimistic/likely/pessimistic, story points. Raises
    ValueError on invalid or empty data.
    """
    df = _read_sheet(file)
    col_map = _map_columns(list(df.columns), _PROJECT_PATTERNS)
    logger.info("Project sheet columns: %s", list(df.columns))
    logger.info("Column mapping: %s", col_map)

    id_col = col_map.get("id")
    if not id_col:
        raise ValueError(f"Cannot find an id column. Available columns: {list(df.columns)}")

    work_packages: list[WorkPackage] = []
    for _, row in df.iterrows():
        wp_id = _safe_str(row, id_col)
        if not wp_id:
            continue

        status = _parse_status(_safe_str(row, col_map.get("status")))
        wp_kwargs: dict = dict(
            id=wp_id,
            summary=_safe_str(row, col_map.get("summary")) or None,
            estimate=_parse_estimate(row, col_map),
            dependencies=_split_ids(_safe_str(row, col_map.get("dependencies"))),
            start_date=_safe_date(row, col_map.get("start_date")),
            status=status,
            done_date=_safe_date(row, col_map.get("done_date")),
        )
        work_packages.append(WorkPackage(**wp_kwargs))

    if not work_packages:
        raise ValueError("No work packages could be parsed from the file")

    return Project(name=_name_from_filename(filename), work_packages=work_packages)


def parse_throughput_sheet(file: BinaryIO) -> list[ThroughputRecord]:
    """Parse an Excel sheet of daily completion counts, sorted by date.

    Raises ValueError on invalid or empty data.
    """
    df = _read_sheet(file)
    col_map = _map_columns(list(df.columns), _THROUGHPUT_PATTERNS)
    logger.info("Throughput sheet column mapping: %s", col_map)

    date_col = col_map.get("date")
    count_col = col_map.get("completed")
    if not date_col or not count_col:
        raise ValueError(
            f"Cannot find date and completed columns. Available columns: {list(df.columns)}"
        )

    records: list[ThroughputRecord] = []
    for _, row in df.iterrows():
        day = _safe_date(row, date_col)
        count = _safe_float(row, count_col)
        if day is None or count is None or count < 0:
            continue
        records.append(ThroughputRecord(date=day, completed_issues=int(count)))

    if not records:
        raise ValueError("No valid throughput rows after filtering")

    records.sort(key=lambda r: r.date)
    return records


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _parse_estimate(row, col_map: dict[str, str | None]):
    end_date = _safe_date(row, col_map.get("end_date"))
    if end_date is not None:
        return FixedTimeBox(end_date=end_date)

    o = _safe_float(row, col_map.get("optimistic"))
    l = _safe_float(row, col_map.get("likely"))
    p = _safe_float(row, col_map.get("pessimistic"))
    if o is not None and l is not None and p is not None:
        return ThreePointEstimate(optimistic=o, likely=l, pessimistic=p)

    points = _safe_float(row, col_map.get("story_points"))
    if points is not None:
        return StoryPoints(value=points)
    return None


def _parse_status(raw: str) -> WorkPackageStatus:
    status = raw.strip().lower()
    if status in _DONE_STATUSES:
        return WorkPackageStatus.done
    if status in _IN_PROGRESS_STATUSES:
        return WorkPackageStatus.in_progress
    return WorkPackageStatus.to_do


def _split_ids(raw: str) -> list[str]:
    return [part for part in re.split(r"[,;\s]+", raw) if part]


def _safe_str(row, col: str | None) -> str:
    if col is None:
        return ""
    val = row.get(col)
    if val is None or val != val:  # NaN check
        return ""
    if isinstance(val, float) and val.is_integer():
        val = int(val)
    return str(val).strip()


def _safe_float(row, col: str | None) -> float | None:
    if col is None:
        return None
    try:
        val = float(row[col])
        if val != val:  # NaN check
            return None
        return val
    except (ValueError, TypeError, KeyError):
        return None


def _safe_date(row, col: str | None) -> date | None:
    if col is None:
        return None
    import pandas as pd

    val = row.get(col)
    if val is None:
        return None
    try:
        ts = pd.to_datetime(val)
    except (ValueError, TypeError):
        return None
    if pd.isna(ts):
        return None
    return ts.date()
