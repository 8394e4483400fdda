"""
Schedule Fetcher

Downloads the exam schedule export and parses it into ScheduleRow objects.
"""

from datetime import datetime
from typing import List, Optional

from .client import ExamLookupClient
from core.models import ScheduleRow
from core.parsers import ParseReport, parse_schedule_csv


class ScheduleFetcher:
    """Fetches and parses the exam schedule spreadsheet."""

    def __init__(self, client: ExamLookupClient):
        self.client = client
        self.report: Optional[ParseReport] = None

    async def fetch_rows(self) -> List[ScheduleRow]:
        """
        Download and parse the schedule.

        Raises:
            UpstreamError: If the export cannot be downloaded
            ScheduleFormatError: If the export lacks required columns
        """
        csv_text = await self.client.fetch_schedule_csv()

        self.report = ParseReport()
        rows = parse_schedule_csv(csv_text, self.report)

        print(f"[{datetime.now()}] Fetched schedule: {self.report.parsed_rows} rows "
              f"({self.report.skipped_rows} skipped)")
        for warning in self.report.warnings:
            print(f"[WARNING] {warning}")

        return rows


async def fetch_schedule() -> List[ScheduleRow]:
    """Convenience function to fetch the schedule with a one-off client"""
    async with ExamLookupClient() as client:
        return await ScheduleFetcher(client).fetch_rows()
