"""
Data structures shared by the schedule, lookup and server layers.

Upstream payloads are mapped onto fixed field sets here; keys the
admissions API adds later are ignored instead of being passed through.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .status import ExamState

NOT_AVAILABLE = "N/A"


def _text(value: Any) -> str:
    """Coerce an upstream value to a stripped string ("" for None)"""
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


def _is_missing_id(value: Any) -> bool:
    """The admissions API answers unknown ids with id 0 (or nothing)"""
    text = _text(value)
    return text in ("", "0")


@dataclass
class ScheduleRow:
    """One row of the exam schedule spreadsheet."""
    application_id: str
    campus: str = ""
    course: str = ""
    venue: str = ""
    date: str = ""
    time: str = ""
    postponement_remarks: str = ""

    def __post_init__(self):
        # Ids arrive as numbers or strings; matching is by string equality only
        self.application_id = _text(self.application_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "application_id": self.application_id,
            "campus": self.campus,
            "course": self.course,
            "venue": self.venue,
            "date": self.date,
            "time": self.time,
            "postponement_remarks": self.postponement_remarks,
        }


@dataclass
class ApplicationRecord:
    """Accepted application as returned by the admissions API."""
    id: str
    first_name: str = ""
    last_name: str = ""
    middle_name: Optional[str] = None
    coursecode: Optional[str] = None
    exam_venue: Optional[str] = None
    campus: Optional[str] = None
    status: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> Optional["ApplicationRecord"]:
        """
        Build a record from the admissions API payload.

        Returns:
            None when the payload is empty or carries the "not found" id 0
        """
        if not payload or _is_missing_id(payload.get("id")):
            return None

        return cls(
            id=_text(payload.get("id")),
            first_name=_text(payload.get("first_name")),
            last_name=_text(payload.get("last_name")),
            middle_name=_optional_text(payload.get("middle_name")),
            coursecode=_optional_text(payload.get("coursecode")),
            exam_venue=_optional_text(payload.get("exam_venue")),
            campus=_optional_text(payload.get("campus")),
            status=_optional_text(payload.get("status")),
            email=_optional_text(payload.get("email")),
        )


@dataclass
class RejectedRecord:
    """Rejected application with the admissions office remarks."""
    id: str
    first_name: str = ""
    last_name: str = ""
    coursecode: str = ""
    status: str = ""
    status_remarks: str = ""
    remarks: str = ""

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> Optional["RejectedRecord"]:
        if not payload or _is_missing_id(payload.get("id")):
            return None

        return cls(
            id=_text(payload.get("id")),
            first_name=_text(payload.get("first_name")),
            last_name=_text(payload.get("last_name")),
            coursecode=_text(payload.get("coursecode")),
            status=_text(payload.get("status")),
            status_remarks=_text(payload.get("status_remarks")),
            remarks=_text(payload.get("remarks")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "coursecode": self.coursecode,
            "status": self.status,
            "status_remarks": self.status_remarks,
            "remarks": self.remarks,
        }


@dataclass
class Coordinates:
    lat: float
    lng: float


@dataclass
class VenueLocation:
    """A known exam venue with its map coordinates."""
    name: str
    address: str
    lat: float
    lng: float

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(lat=self.lat, lng=self.lng)


@dataclass
class ProcessedRecord:
    """Accepted application merged with its exam schedule."""
    id: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    coursecode: Optional[str] = None
    exam_venue: Optional[str] = None
    campus: Optional[str] = None
    date: str = NOT_AVAILABLE
    time: str = NOT_AVAILABLE
    course: str = NOT_AVAILABLE
    venue: str = NOT_AVAILABLE
    remarks: str = NOT_AVAILABLE
    is_postponed: bool = False
    postponed_date: Optional[str] = None
    is_today: bool = False
    date_status: ExamState = ExamState.UPCOMING
    venue_coordinates: Optional[Coordinates] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "middle_name": self.middle_name,
            "coursecode": self.coursecode,
            "exam_venue": self.exam_venue,
            "campus": self.campus,
            "date": self.date,
            "time": self.time,
            "course": self.course,
            "venue": self.venue,
            "remarks": self.remarks,
            "is_postponed": self.is_postponed,
            "postponed_date": self.postponed_date,
            "is_today": self.is_today,
            "date_status": self.date_status.value,
            "venue_coordinates": (
                {"lat": self.venue_coordinates.lat, "lng": self.venue_coordinates.lng}
                if self.venue_coordinates else None
            ),
        }
