"""
Schedule spreadsheet parsing.

The exam schedule is maintained in a Google Sheet and exported as CSV.
Columns are located by header text so the sheet owners can reorder them,
with one exception kept for older sheets: when no postponement/remarks
header exists, column H (index 7) is read as the remarks column.
"""

import csv
import io
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import ScheduleRow

# Header substrings (case-insensitive), in lookup order
REQUIRED_COLUMNS = {
    "application_id": "application id",
    "campus": "campus applied",
    "course": "course",
    "venue": "exam venue",
    "date": "date",
    "time": "time",
}
REMARKS_HEADER_KEYWORDS = ("postpone", "remark")
REMARKS_FALLBACK_INDEX = 7  # Column H


class ScheduleFormatError(Exception):
    """The schedule export is missing a required column."""


@dataclass
class ParseReport:
    """Tracks data quality issues while parsing a schedule export"""
    total_rows: int = 0
    parsed_rows: int = 0
    skipped_rows: int = 0
    columns: Dict[str, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, message: str):
        if len(self.warnings) < 50:
            self.warnings.append(message)

    def has_issues(self) -> bool:
        return bool(self.skipped_rows or self.warnings)

    def summary(self) -> str:
        lines = [
            f"Rows: {self.parsed_rows}/{self.total_rows} parsed, {self.skipped_rows} skipped",
            f"Columns: {self.columns}",
        ]
        for warning in self.warnings[:10]:
            lines.append(f"  - {warning}")
        return "\n".join(lines)


def clean_cell(value: Optional[str]) -> str:
    """Trim whitespace and stray quote characters around a cell"""
    if value is None:
        return ""
    return value.strip().strip("'\"")


def _find_column(headers: List[str], keyword: str) -> int:
    for index, header in enumerate(headers):
        if keyword in header.strip().lower():
            return index
    return -1


def locate_columns(headers: List[str], report: Optional[ParseReport] = None) -> Dict[str, int]:
    """
    Map logical column names to indexes in the header row.

    Raises:
        ScheduleFormatError: If a required column header is missing
    """
    columns: Dict[str, int] = {}
    missing = []

    for name, keyword in REQUIRED_COLUMNS.items():
        index = _find_column(headers, keyword)
        if index < 0:
            missing.append(keyword)
        columns[name] = index

    if missing:
        raise ScheduleFormatError(f"Schedule export is missing columns: {', '.join(missing)}")

    remarks_index = -1
    for keyword in REMARKS_HEADER_KEYWORDS:
        remarks_index = _find_column(headers, keyword)
        if remarks_index >= 0:
            break

    if remarks_index < 0:
        remarks_index = REMARKS_FALLBACK_INDEX
        if report is not None:
            report.add_warning(
                f"No postponement header found; reading remarks from column index {REMARKS_FALLBACK_INDEX}"
            )

    columns["postponement_remarks"] = remarks_index

    if report is not None:
        report.columns = dict(columns)
    return columns


def parse_schedule_csv(text: str, report: Optional[ParseReport] = None) -> List[ScheduleRow]:
    """
    Parse a schedule CSV export into rows.

    Args:
        text: Raw CSV text (first row is the header)
        report: Optional report collecting skipped rows and warnings

    Returns:
        Parsed rows in sheet order

    Raises:
        ScheduleFormatError: If the header row is missing or incomplete
    """
    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    if not rows:
        raise ScheduleFormatError("Schedule export is empty")

    columns = locate_columns(rows[0], report)
    required_width = max(
        index for name, index in columns.items() if name != "postponement_remarks"
    ) + 1
    remarks_index = columns["postponement_remarks"]

    schedule = []
    skipped = 0
    for row in rows[1:]:
        if len(row) < required_width:
            skipped += 1
            continue

        schedule.append(ScheduleRow(
            application_id=clean_cell(row[columns["application_id"]]),
            campus=clean_cell(row[columns["campus"]]),
            course=clean_cell(row[columns["course"]]),
            venue=clean_cell(row[columns["venue"]]),
            date=clean_cell(row[columns["date"]]),
            time=clean_cell(row[columns["time"]]),
            postponement_remarks=clean_cell(row[remarks_index]) if remarks_index < len(row) else "",
        ))

    if report is not None:
        report.total_rows = len(rows) - 1
        report.parsed_rows = len(schedule)
        report.skipped_rows = skipped

    return schedule
