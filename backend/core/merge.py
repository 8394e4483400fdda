"""
Merge an accepted application with its row in the exam schedule.

Pure and total: no I/O, no exceptions. Missing schedule data yields a
record with "N/A" fields and an "upcoming" status.
"""

from datetime import datetime
from typing import Iterable, Optional

from .dates import extract_postponed_date, is_today
from .models import NOT_AVAILABLE, ApplicationRecord, ProcessedRecord, ScheduleRow
from .status import resolve_status
from .venues import search_venue


def find_schedule_row(application_id, schedule: Iterable[ScheduleRow]) -> Optional[ScheduleRow]:
    """First schedule row whose id equals the application id as a string"""
    wanted = str(application_id).strip()
    for row in schedule:
        if row.application_id == wanted:
            return row
    return None


def merge_application(
    application: ApplicationRecord,
    application_id,
    schedule: Iterable[ScheduleRow],
    now: Optional[datetime] = None
) -> ProcessedRecord:
    """
    Attach schedule facts and the exam state to an application.

    Args:
        application: Accepted application from the admissions API
        application_id: Id the visitor searched for
        schedule: Parsed schedule table
        now: Reference instant for the status, defaults to local now

    Returns:
        A fully populated ProcessedRecord
    """
    row = find_schedule_row(application_id, schedule)

    remarks = row.postponement_remarks.strip() if row else ""
    is_postponed = bool(remarks)
    postponed_date = extract_postponed_date(remarks) if is_postponed else None

    exam_date = (row.date if row else "") or NOT_AVAILABLE
    exam_time = (row.time if row else "") or NOT_AVAILABLE
    course = (row.course if row else "") or application.coursecode or NOT_AVAILABLE
    venue = application.exam_venue or NOT_AVAILABLE

    record = ProcessedRecord(
        id=str(application.id),
        first_name=application.first_name,
        last_name=application.last_name,
        middle_name=application.middle_name,
        coursecode=application.coursecode,
        exam_venue=application.exam_venue,
        campus=application.campus,
        date=exam_date,
        time=exam_time,
        course=course,
        venue=venue,
        remarks=remarks if is_postponed else NOT_AVAILABLE,
        is_postponed=is_postponed,
        postponed_date=postponed_date,
        is_today=is_today(exam_date, now),
        date_status=resolve_status(exam_date, exam_time, is_postponed, postponed_date, now),
    )

    if venue != NOT_AVAILABLE:
        location = search_venue(venue)
        if location:
            record.venue_coordinates = location.coordinates

    return record
