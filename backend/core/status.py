"""
Exam Status Resolution

Combines the schedule date, start time and postponement facts into the
state shown to the applicant.

Precedence (first rule that applies wins):
1. Postponed with a usable new date -> postponed-past / postponed-upcoming
   depending on the new date's calendar day (time of day is not checked)
2. Postponed without a new date     -> postponed-upcoming
3. No scheduled date                -> upcoming
4. Scheduled date in the past       -> past
5. Scheduled today, start passed    -> today-past
6. Anything else                    -> upcoming
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from .dates import DateStatus, TimeStatus, classify_date, classify_time, is_sentinel


class ExamState(str, Enum):
    """User-facing classification of an applicant's exam timing."""
    UPCOMING = "upcoming"
    PAST = "past"
    TODAY_PAST = "today-past"
    POSTPONED_UPCOMING = "postponed-upcoming"
    POSTPONED_PAST = "postponed-past"


STATUS_MESSAGES = {
    ExamState.PAST: "This exam has already taken place on a previous date.",
    ExamState.TODAY_PAST: "This exam was scheduled for today, but the time has already passed.",
    ExamState.POSTPONED_PAST: "This exam was postponed and the new date has passed.",
    ExamState.POSTPONED_UPCOMING: "This exam has been postponed. Please check the new schedule.",
}

UPCOMING_TODAY_MESSAGE = "This exam is scheduled for today and is upcoming."
UPCOMING_MESSAGE = "Your exam is scheduled as shown above."

STATUS_LABELS = {
    ExamState.UPCOMING: "Upcoming",
    ExamState.PAST: "Past",
    ExamState.TODAY_PAST: "Missed Today",
    ExamState.POSTPONED_UPCOMING: "Postponed",
    ExamState.POSTPONED_PAST: "Postponed (Past)",
}


def resolve_status(
    date_str: Optional[str],
    time_str: Optional[str],
    is_postponed: bool,
    postponed_date_str: Optional[str] = None,
    now: Optional[datetime] = None
) -> ExamState:
    """
    Resolve the exam state for one application.

    Args:
        date_str: Scheduled exam date cell
        time_str: Scheduled exam time cell (start of range is used)
        is_postponed: Whether the schedule row carries postponement remarks
        postponed_date_str: New date extracted from the remarks, if any
        now: Reference instant, defaults to the local current time

    Returns:
        The ExamState; never raises
    """
    if is_postponed and not is_sentinel(postponed_date_str):
        if classify_date(postponed_date_str, now) == DateStatus.PAST:
            return ExamState.POSTPONED_PAST
        return ExamState.POSTPONED_UPCOMING

    if is_postponed:
        return ExamState.POSTPONED_UPCOMING

    if is_sentinel(date_str):
        return ExamState.UPCOMING

    date_status = classify_date(date_str, now)

    if date_status == DateStatus.PAST:
        return ExamState.PAST

    if date_status == DateStatus.TODAY:
        if classify_time(time_str, now) == TimeStatus.PAST:
            return ExamState.TODAY_PAST
        return ExamState.UPCOMING

    return ExamState.UPCOMING


def status_message(state: ExamState, is_today: bool = False) -> str:
    """Human-readable explanation of an exam state"""
    if state == ExamState.UPCOMING:
        return UPCOMING_TODAY_MESSAGE if is_today else UPCOMING_MESSAGE
    return STATUS_MESSAGES.get(state, "Please check your exam schedule.")


def status_label(state: ExamState) -> str:
    """Short badge label for an exam state"""
    return STATUS_LABELS.get(state, "Upcoming")
