"""
Date and Time Classification for Exam Schedules

Schedule cells are typed by hand into a spreadsheet, so dates and times
arrive in loose formats:

Dates:
- "Jan 24, 2025"        (preferred sheet format)
- "2025-01-24"          (ISO / RFC style)
- "01/24/2025"          (MM/DD/YYYY)

Times:
- "9:00 AM"
- "1:30 pm - 4:30 pm"   (only the start time is evaluated)

"N/A" and "-" are sentinels meaning "intentionally absent".

Nothing in this module raises. Anything unparseable is classified as
FUTURE so an exam is shown as pending rather than wrongly marked missed.
"""

import re
from datetime import date, datetime
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Optional

SENTINELS = ("N/A", "-")

MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"
]

MONTH_DAY_YEAR_RE = re.compile(r'^([A-Za-z]{3})\s+(\d{1,2}),\s+(\d{4})$')
TIME_RE = re.compile(r'(\d+):(\d+)\s*(am|pm)', re.IGNORECASE)
POSTPONED_DATE_RE = re.compile(r'(\d{1,2})/(\d{1,2})/(\d{4})')

# Month-name layouts typed into the sheet besides the preferred one
NAMED_MONTH_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
)


class DateStatus(str, Enum):
    """Where a calendar day falls relative to today."""
    PAST = "past"
    TODAY = "today"
    FUTURE = "future"


class TimeStatus(str, Enum):
    """Whether a clock time has already passed today."""
    PAST = "past"
    FUTURE = "future"


def is_sentinel(value: Optional[str]) -> bool:
    """True for empty values and the "N/A" / "-" placeholders"""
    if value is None:
        return True
    text = str(value).strip()
    return not text or text in SENTINELS


def _now(now: Optional[datetime] = None) -> datetime:
    return now if now is not None else datetime.now()


def _compare_days(exam_day: date, now: datetime) -> DateStatus:
    today = now.date()
    if exam_day < today:
        return DateStatus.PAST
    if exam_day == today:
        return DateStatus.TODAY
    return DateStatus.FUTURE


def _parse_month_day_year(text: str) -> Optional[date]:
    """Parse the sheet's "Jan 24, 2025" format"""
    match = MONTH_DAY_YEAR_RE.match(text)
    if not match:
        return None
    month_name, day, year = match.groups()
    if month_name not in MONTH_ABBREVIATIONS:
        return None
    return date(int(year), MONTH_ABBREVIATIONS.index(month_name) + 1, int(day))


def _parse_generic(text: str) -> Optional[date]:
    """ISO 8601, RFC 2822 and month-name layouts such as "24 Jan 2025"."""
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    try:
        return parsedate_to_datetime(text).date()
    except (TypeError, ValueError, IndexError):
        pass

    for fmt in NAMED_MONTH_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _parse_slashed(text: str) -> Optional[date]:
    """Parse MM/DD/YYYY (month is 1-indexed as typed)"""
    parts = text.split("/")
    if len(parts) != 3:
        return None
    month, day, year = (int(part.strip()) for part in parts)
    return date(year, month, day)


def parse_exam_date(date_str: Optional[str]) -> Optional[date]:
    """
    Parse a schedule date cell into a calendar day.

    Returns:
        The parsed date, or None for sentinels and unrecognized formats.

    Raises:
        ValueError: If a recognized format holds an impossible date.
    """
    if is_sentinel(date_str):
        return None

    text = str(date_str).strip()
    for parser in (_parse_month_day_year, _parse_generic, _parse_slashed):
        parsed = parser(text)
        if parsed is not None:
            return parsed
    return None


def classify_date(date_str: Optional[str], now: Optional[datetime] = None) -> DateStatus:
    """
    Classify a schedule date as past, today or future (calendar day only).

    Args:
        date_str: Date cell from the schedule sheet
        now: Reference instant, defaults to the local current time

    Returns:
        DateStatus.FUTURE for sentinels, unknown formats and parse errors
    """
    try:
        exam_day = parse_exam_date(date_str)
    except (ValueError, OverflowError) as e:
        print(f"[DATES] Could not parse date {date_str!r}: {e}")
        return DateStatus.FUTURE

    if exam_day is None:
        return DateStatus.FUTURE

    return _compare_days(exam_day, _now(now))


def classify_time(time_str: Optional[str], now: Optional[datetime] = None) -> TimeStatus:
    """
    Decide whether a clock time has already passed today.

    For ranges like "1:30 pm - 4:30 pm" only the start time counts. The
    time is always applied to today's date, not to the exam's date.
    """
    if is_sentinel(time_str):
        return TimeStatus.FUTURE

    current = _now(now)
    start_time = str(time_str)
    if "-" in start_time:
        start_time = start_time.split("-")[0]
    start_time = start_time.strip()

    match = TIME_RE.search(start_time)
    if not match:
        return TimeStatus.FUTURE

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper()

    # Convert to 24-hour format
    if period == "PM" and hours < 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0

    try:
        exam_time = current.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    except (ValueError, OverflowError) as e:
        print(f"[DATES] Could not parse time {time_str!r}: {e}")
        return TimeStatus.FUTURE

    return TimeStatus.PAST if current > exam_time else TimeStatus.FUTURE


def is_today(date_str: Optional[str], now: Optional[datetime] = None) -> bool:
    """True if the date cell refers to the current calendar day"""
    if is_sentinel(date_str):
        return False
    return classify_date(date_str, now) == DateStatus.TODAY


def extract_postponed_date(remarks: Optional[str]) -> Optional[str]:
    """
    Find the first MM/DD/YYYY date in free-text postponement remarks.

    Example:
        "Moved to 03/15/2025, please confirm" -> "03/15/2025"

    Returns:
        The matched text verbatim, or None if no date is present
    """
    if not remarks:
        return None

    match = POSTPONED_DATE_RE.search(remarks)
    if match:
        return match.group(0)
    return None
