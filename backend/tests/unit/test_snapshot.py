"""
Tests for tasks/snapshot.py - CSV snapshot download
"""

import pytest
import requests
from unittest.mock import patch, MagicMock

from core.parsers import ScheduleFormatError
from services.schedule import ScheduleCache
from tasks.snapshot import NO_CACHE_HEADERS, download_schedule_csv


class TestDownloadScheduleCsv:

    def test_writes_file(self, tmp_path, schedule_csv):
        response = MagicMock()
        response.text = schedule_csv
        output = tmp_path / "data" / "schedule.csv"

        with patch('tasks.snapshot.requests.get', return_value=response) as mock_get:
            size = download_schedule_csv("https://example.test/export.csv", output)

        assert output.read_text(encoding="utf-8") == schedule_csv
        assert size == len(schedule_csv.encode("utf-8"))
        assert mock_get.call_args[1]["headers"] == NO_CACHE_HEADERS
        response.raise_for_status.assert_called_once()

    def test_http_error_leaves_no_file(self, tmp_path):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        output = tmp_path / "schedule.csv"

        with patch('tasks.snapshot.requests.get', return_value=response):
            with pytest.raises(requests.HTTPError):
                download_schedule_csv("https://example.test/export.csv", output)

        assert not output.exists()

    def test_leaves_no_temp_file(self, tmp_path, schedule_csv):
        response = MagicMock()
        response.text = schedule_csv

        with patch('tasks.snapshot.requests.get', return_value=response):
            download_schedule_csv("https://example.test/export.csv", tmp_path / "schedule.csv")

        assert [p.name for p in tmp_path.iterdir()] == ["schedule.csv"]


class TestSnapshotValidation:
    """A bad download must never replace a good snapshot"""

    @pytest.fixture
    def existing_snapshot(self, tmp_path, schedule_csv):
        path = tmp_path / "schedule.csv"
        path.write_text(schedule_csv, encoding="utf-8")
        return path

    def test_sign_in_page_keeps_previous_snapshot(self, existing_snapshot, schedule_csv):
        response = MagicMock()
        response.text = "<html>Sign in - Google Accounts</html>"

        with patch('tasks.snapshot.requests.get', return_value=response):
            with pytest.raises(ScheduleFormatError):
                download_schedule_csv("https://example.test/export.csv", existing_snapshot)

        assert existing_snapshot.read_text(encoding="utf-8") == schedule_csv
        rows = ScheduleCache(MagicMock(), snapshot_path=existing_snapshot).load_snapshot()
        assert [row.application_id for row in rows] == ["1001", "1002", "1003"]

    def test_header_only_export_is_rejected(self, existing_snapshot, schedule_csv):
        response = MagicMock()
        response.text = schedule_csv.splitlines()[0] + "\n"

        with patch('tasks.snapshot.requests.get', return_value=response):
            with pytest.raises(ScheduleFormatError):
                download_schedule_csv("https://example.test/export.csv", existing_snapshot)

        assert existing_snapshot.read_text(encoding="utf-8") == schedule_csv

    def test_empty_body_is_rejected(self, existing_snapshot, schedule_csv):
        response = MagicMock()
        response.text = ""

        with patch('tasks.snapshot.requests.get', return_value=response):
            with pytest.raises(ScheduleFormatError):
                download_schedule_csv("https://example.test/export.csv", existing_snapshot)

        assert existing_snapshot.read_text(encoding="utf-8") == schedule_csv
