"""
Tests for core/parsers.py - Schedule CSV parsing
"""

import pytest

from core.parsers import (
    REMARKS_FALLBACK_INDEX,
    ParseReport,
    ScheduleFormatError,
    clean_cell,
    locate_columns,
    parse_schedule_csv,
)


class TestCleanCell:

    def test_strips_whitespace_and_quotes(self):
        assert clean_cell("  '1003'  ") == "1003"
        assert clean_cell('"Jan 24, 2025"') == "Jan 24, 2025"

    def test_none(self):
        assert clean_cell(None) == ""


class TestLocateColumns:

    def test_header_matching_is_case_insensitive(self):
        headers = ["TIME", "date", "Exam Venue", "COURSE", "campus applied", "Application ID", "Postponement Remarks"]
        columns = locate_columns(headers)

        assert columns["application_id"] == 5
        assert columns["campus"] == 4
        assert columns["course"] == 3
        assert columns["venue"] == 2
        assert columns["date"] == 1
        assert columns["time"] == 0
        assert columns["postponement_remarks"] == 6

    def test_remarks_header_keyword(self):
        headers = ["Application ID", "Campus Applied", "Course", "Exam Venue", "Date", "Time", "Remarks"]
        assert locate_columns(headers)["postponement_remarks"] == 6

    def test_remarks_falls_back_to_column_h(self):
        headers = ["Application ID", "Campus Applied", "Course", "Exam Venue", "Date", "Time", "Room", "Notes"]
        report = ParseReport()

        columns = locate_columns(headers, report)

        assert columns["postponement_remarks"] == REMARKS_FALLBACK_INDEX == 7
        assert len(report.warnings) == 1
        assert report.columns == columns

    def test_missing_required_column(self):
        with pytest.raises(ScheduleFormatError) as exc_info:
            locate_columns(["Application ID", "Course", "Date", "Time"])
        assert "campus applied" in str(exc_info.value)
        assert "exam venue" in str(exc_info.value)


class TestParseScheduleCsv:
    """Tests for parse_schedule_csv"""

    def test_parses_rows(self, schedule_csv):
        rows = parse_schedule_csv(schedule_csv)

        assert len(rows) == 3
        first = rows[0]
        assert first.application_id == "1001"
        assert first.campus == "Main"
        assert first.course == "BSCS"
        assert first.venue == "BoholIslandStateUniversity-CandijayCampus"
        assert first.date == "Jan 24, 2025"
        assert first.time == "9:00 AM - 12:00 PM"
        assert first.postponement_remarks == ""

    def test_postponement_remarks(self, schedule_csv):
        rows = parse_schedule_csv(schedule_csv)
        assert rows[1].postponement_remarks == "Moved to 03/15/2025 due to weather"

    def test_quoted_id_is_cleaned(self, schedule_csv):
        rows = parse_schedule_csv(schedule_csv)
        assert rows[2].application_id == "1003"
        assert rows[2].date == "N/A"

    def test_short_rows_are_skipped(self):
        text = (
            "Application ID,Campus Applied,Course,Exam Venue,Date,Time,Room,Postponed\n"
            "1001,Main,BSCS,Venue,\"Jan 24, 2025\",9:00 AM\n"
            "1002,Main,BSCS\n"
        )
        report = ParseReport()
        rows = parse_schedule_csv(text, report)

        assert [row.application_id for row in rows] == ["1001"]
        assert rows[0].postponement_remarks == ""
        assert report.total_rows == 2
        assert report.parsed_rows == 1
        assert report.skipped_rows == 1
        assert report.has_issues() is True

    def test_blank_lines_ignored(self):
        text = (
            "Application ID,Campus Applied,Course,Exam Venue,Date,Time,Room,Postponed\n"
            "\n"
            ",,,,,,,\n"
            "1001,Main,BSCS,Venue,N/A,N/A,,\n"
        )
        rows = parse_schedule_csv(text)
        assert len(rows) == 1

    def test_empty_export(self):
        with pytest.raises(ScheduleFormatError):
            parse_schedule_csv("")

    def test_report_summary(self, schedule_csv):
        report = ParseReport()
        parse_schedule_csv(schedule_csv, report)

        assert report.has_issues() is False
        assert "3/3 parsed" in report.summary()
