"""
HTTP Client for the Admissions API and the Schedule Spreadsheet

Provides a single aiohttp session for:
- Accepted application lookups (multipart form POST)
- Rejected application lookups (same request shape, separate endpoint)
- The exam schedule CSV export from Google Sheets
"""

import json
from typing import Any, Dict, Optional

import aiohttp

from core.config import (
    ADMISSIONS_API_URL,
    REJECTED_APPLICATIONS_API_URL,
    SCHEDULE_CSV_URL,
    USER_AGENT,
)
from core.models import ApplicationRecord, RejectedRecord

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class UpstreamError(Exception):
    """An upstream service failed or answered with an unexpected status."""

    def __init__(self, endpoint: str, status: int, message: str):
        self.endpoint = endpoint
        self.status = status
        self.message = message
        super().__init__(f"{endpoint}: {status} - {message}")


def build_lookup_form(application_id: str) -> aiohttp.FormData:
    """
    Build the multipart body the admissions API expects.

    The API reads a single form field named "data" holding
    {"application": {"id": <id>}}; numeric ids are sent as JSON numbers.
    """
    application_id = str(application_id).strip()
    id_value: Any = int(application_id) if application_id.isdigit() else application_id

    form = aiohttp.FormData()
    form.add_field("data", json.dumps({"application": {"id": id_value}}))
    return form


class ExamLookupClient:
    """
    Admissions API and schedule export client.

    Usage:
        async with ExamLookupClient() as client:
            record = await client.fetch_application("12345")
    """

    def __init__(
        self,
        admissions_url: str = ADMISSIONS_API_URL,
        rejected_url: Optional[str] = REJECTED_APPLICATIONS_API_URL,
        schedule_url: str = SCHEDULE_CSV_URL,
        timeout: int = 30
    ):
        self.admissions_url = admissions_url
        self.rejected_url = rejected_url
        self.schedule_url = schedule_url
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout, connect=5),
            headers={
                'User-Agent': USER_AGENT,
                'Accept-Encoding': 'gzip, deflate',
            }
        )
        return self

    async def __aexit__(self, *args):
        if self.session:
            await self.session.close()
            self.session = None

    async def _post_lookup(self, endpoint: str, application_id: str) -> Optional[Dict[str, Any]]:
        """POST a lookup form; None for 404 and empty payloads"""
        try:
            async with self.session.post(endpoint, data=build_lookup_form(application_id)) as resp:
                if resp.status == 404:
                    return None
                if resp.status != 200:
                    raise UpstreamError(endpoint, resp.status, await resp.text())

                data = await resp.json(content_type=None)
                if not data or not isinstance(data, dict):
                    return None
                return data

        except aiohttp.ClientError as e:
            raise UpstreamError(endpoint, 0, str(e)) from e
        except json.JSONDecodeError as e:
            raise UpstreamError(endpoint, 0, f"Invalid JSON: {e}") from e

    async def fetch_application(self, application_id: str) -> Optional[ApplicationRecord]:
        """
        Fetch an accepted application.

        Returns:
            The application, or None if the id is unknown

        Raises:
            UpstreamError: On transport errors and unexpected statuses
        """
        data = await self._post_lookup(self.admissions_url, application_id)
        return ApplicationRecord.from_api(data)

    async def fetch_rejected_application(self, application_id: str) -> Optional[RejectedRecord]:
        """Fetch a rejected application; None when unknown or not configured"""
        if not self.rejected_url:
            return None
        data = await self._post_lookup(self.rejected_url, application_id)
        return RejectedRecord.from_api(data)

    async def fetch_schedule_csv(self) -> str:
        """
        Download the exam schedule CSV export.

        Raises:
            UpstreamError: If the spreadsheet cannot be fetched
        """
        try:
            async with self.session.get(self.schedule_url, headers=NO_CACHE_HEADERS) as resp:
                if resp.status != 200:
                    raise UpstreamError(self.schedule_url, resp.status, "Failed to fetch spreadsheet data")
                return await resp.text()
        except aiohttp.ClientError as e:
            raise UpstreamError(self.schedule_url, 0, str(e)) from e
