"""
Application lookup: accepted and rejected records are fetched in
parallel, and an accepted application is merged with its exam schedule.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from api.client import ExamLookupClient
from core.merge import merge_application
from core.models import ProcessedRecord, RejectedRecord
from .schedule import ScheduleCache

ACCEPTED = "accepted"
REJECTED = "rejected"
NOT_FOUND = "not_found"


@dataclass
class LookupResult:
    status: str
    application: Optional[ProcessedRecord] = None
    rejected: Optional[RejectedRecord] = None

    @property
    def found(self) -> bool:
        return self.status != NOT_FOUND


class LookupService:
    """Resolves an application id to an accepted or rejected result"""

    def __init__(self, client: ExamLookupClient, schedule: ScheduleCache):
        self.client = client
        self.schedule = schedule

    async def lookup(self, application_id: str, now: Optional[datetime] = None) -> LookupResult:
        """
        Look up an application by id.

        Args:
            application_id: Id typed by the visitor
            now: Reference instant for the exam status

        Returns:
            LookupResult with status accepted, rejected or not_found

        Raises:
            ValueError: If the id is blank
            ScheduleUnavailableError: If the application is accepted but
                no schedule can be loaded
        """
        application_id = str(application_id or "").strip()
        if not application_id:
            raise ValueError("Application ID is required")

        application, rejected = await asyncio.gather(
            self.client.fetch_application(application_id),
            self.client.fetch_rejected_application(application_id),
            return_exceptions=True
        )

        if isinstance(application, Exception):
            print(f"[LOOKUP] Application fetch failed for {application_id}: {application}")
            application = None
        if isinstance(rejected, Exception):
            print(f"[LOOKUP] Rejected fetch failed for {application_id}: {rejected}")
            rejected = None

        if application is not None:
            rows = await self.schedule.get()
            record = merge_application(application, application_id, rows, now)
            return LookupResult(status=ACCEPTED, application=record)

        if rejected is not None:
            return LookupResult(status=REJECTED, rejected=rejected)

        return LookupResult(status=NOT_FOUND)
