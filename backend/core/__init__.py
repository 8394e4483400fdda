from .dates import (
    DateStatus,
    TimeStatus,
    classify_date,
    classify_time,
    extract_postponed_date,
    is_sentinel,
)
from .status import ExamState, resolve_status, status_message, status_label
from .models import (
    ApplicationRecord,
    Coordinates,
    ProcessedRecord,
    RejectedRecord,
    ScheduleRow,
    VenueLocation,
)
from .merge import find_schedule_row, merge_application
from .venues import search_venue, normalize_venue_name
from .parsers import parse_schedule_csv, ParseReport, ScheduleFormatError
