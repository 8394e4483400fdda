"""
Unit test fixtures
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path

# Add backend to path for imports
backend_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(backend_dir))

from core.models import ApplicationRecord, ScheduleRow


SCHEDULE_CSV = (
    "Application ID,Campus Applied,Course,Exam Venue,Date,Time,Room,Postponed\n"
    "1001,Main,BSCS,BoholIslandStateUniversity-CandijayCampus,\"Jan 24, 2025\",9:00 AM - 12:00 PM,101,\n"
    "1002,Bilar,BSED,BoholIslandStateUniversity-BilarCampus,01/20/2025,1:30 pm - 4:30 pm,102,Moved to 03/15/2025 due to weather\n"
    "'1003',Calape,BSIT,BoholIslandStateUniversity-CalapeCampus,N/A,-,103,\n"
)


@pytest.fixture
def reference_now():
    """Pinned clock: Jan 24, 2025 at 10:30 local time"""
    return datetime(2025, 1, 24, 10, 30)


@pytest.fixture
def schedule_csv():
    """CSV export in the sheet's column layout"""
    return SCHEDULE_CSV


@pytest.fixture
def sample_schedule():
    """Parsed schedule rows"""
    return [
        ScheduleRow(
            application_id="1001",
            campus="Main",
            course="BSCS",
            venue="BoholIslandStateUniversity-CandijayCampus",
            date="Jan 24, 2025",
            time="9:00 AM - 12:00 PM",
        ),
        ScheduleRow(
            application_id="1002",
            campus="Bilar",
            course="BSED",
            venue="BoholIslandStateUniversity-BilarCampus",
            date="01/20/2025",
            time="1:30 pm - 4:30 pm",
            postponement_remarks="Moved to 03/15/2025 due to weather",
        ),
        ScheduleRow(
            application_id=1003,
            campus="Calape",
            course="",
            venue="",
            date="N/A",
            time="-",
        ),
    ]


@pytest.fixture
def sample_application_payload():
    """Sample admissions API response for an accepted application"""
    return {
        "id": 1001,
        "first_name": "Maria",
        "last_name": "Santos",
        "coursecode": "BSCS",
        "exam_venue": "Bohol Island State University - Candijay Campus",
        "campus": "Candijay",
        "internal_flag": "ignored",
    }


@pytest.fixture
def sample_application(sample_application_payload):
    return ApplicationRecord.from_api(sample_application_payload)
