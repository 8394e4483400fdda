"""
Tests for core/status.py - Exam state resolution
"""

import pytest
from datetime import datetime

from core.status import ExamState, resolve_status, status_label, status_message

NOW = datetime(2025, 1, 24, 10, 30)


class TestResolveStatusPostponed:
    """Postponement always takes precedence over the original schedule"""

    def test_postponed_to_past_date_overrides_future_exam(self):
        result = resolve_status("Dec 1, 2025", "9:00 AM", True, "01/01/2020", now=NOW)
        assert result == ExamState.POSTPONED_PAST

    def test_postponed_to_future_date(self):
        result = resolve_status("Jan 10, 2025", "9:00 AM", True, "03/15/2025", now=NOW)
        assert result == ExamState.POSTPONED_UPCOMING

    def test_postponed_to_today_is_upcoming(self):
        """Time of day is not checked for the postponed date"""
        result = resolve_status("Jan 10, 2025", "9:00 AM", True, "01/24/2025", now=NOW)
        assert result == ExamState.POSTPONED_UPCOMING

    @pytest.mark.parametrize("postponed_date", [None, "", "N/A", "-"])
    def test_postponed_without_usable_date(self, postponed_date):
        result = resolve_status("Jan 10, 2025", "9:00 AM", True, postponed_date, now=NOW)
        assert result == ExamState.POSTPONED_UPCOMING

    def test_postponed_date_ignored_when_not_postponed(self):
        result = resolve_status("Jan 10, 2025", "9:00 AM", False, "01/01/2030", now=NOW)
        assert result == ExamState.PAST


class TestResolveStatusScheduled:
    """Tests for exams that are not postponed"""

    @pytest.mark.parametrize("date_str", ["N/A", "-", "", None])
    def test_no_date_is_upcoming(self, date_str):
        assert resolve_status(date_str, "9:00 AM", False, now=NOW) == ExamState.UPCOMING

    def test_past_date(self):
        assert resolve_status("Jan 20, 2025", "9:00 AM", False, now=NOW) == ExamState.PAST

    def test_future_date(self):
        assert resolve_status("Jan 30, 2025", "9:00 AM", False, now=NOW) == ExamState.UPCOMING

    def test_today_time_passed(self):
        assert resolve_status("Jan 24, 2025", "9:00 AM", False, now=NOW) == ExamState.TODAY_PAST

    def test_today_time_not_yet(self):
        assert resolve_status("Jan 24, 2025", "1:30 pm - 4:30 pm", False, now=NOW) == ExamState.UPCOMING

    def test_today_without_time(self):
        assert resolve_status("Jan 24, 2025", "N/A", False, now=NOW) == ExamState.UPCOMING

    def test_unparseable_date_is_upcoming(self):
        assert resolve_status("to be announced", "9:00 AM", False, now=NOW) == ExamState.UPCOMING


class TestStatusMessages:
    """Tests for user-facing messages and labels"""

    def test_every_state_has_a_message(self):
        for state in ExamState:
            assert status_message(state)

    def test_upcoming_today_message(self):
        assert "today" in status_message(ExamState.UPCOMING, is_today=True)
        assert status_message(ExamState.UPCOMING) == "Your exam is scheduled as shown above."

    def test_today_past_message(self):
        assert "time has already passed" in status_message(ExamState.TODAY_PAST)

    def test_labels(self):
        assert status_label(ExamState.TODAY_PAST) == "Missed Today"
        assert status_label(ExamState.POSTPONED_PAST) == "Postponed (Past)"
        assert status_label(ExamState.UPCOMING) == "Upcoming"

    def test_state_values_match_api_strings(self):
        assert ExamState.TODAY_PAST.value == "today-past"
        assert ExamState.POSTPONED_UPCOMING == "postponed-upcoming"
