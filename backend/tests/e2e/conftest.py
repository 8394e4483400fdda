"""
E2E test fixtures and configuration

These tests verify the full application pipeline:
- Server startup and API endpoints
- Application lookup against a stubbed admissions API
- Schedule download, parsing and caching
- Venue search and the daily map quota

Run e2e tests with: pytest tests/e2e -m e2e
"""

import pytest
import sys
import time
from pathlib import Path
from contextlib import contextmanager

# Add backend to path for imports
backend_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(backend_dir))


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "e2e: marks tests as end-to-end tests (full pipeline)"
    )


class Timer:
    """Simple timer for measuring execution time"""

    def __init__(self):
        self.start_time = None
        self.end_time = None
        self.elapsed_ms = None

    def start(self):
        self.start_time = time.perf_counter()
        return self

    def stop(self):
        self.end_time = time.perf_counter()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000
        return self.elapsed_ms

    @contextmanager
    def measure(self, label: str = ""):
        """Context manager for timing a block of code"""
        self.start()
        yield self
        elapsed = self.stop()
        if label:
            print(f"\n  [{label}] {elapsed:.2f}ms")


@pytest.fixture
def timer():
    """Provide a timer instance for tests"""
    return Timer()


@pytest.fixture
def timed_request(timer):
    """Factory for making timed HTTP requests"""
    def _timed_request(client, method: str, url: str, **kwargs):
        timer.start()
        if method.upper() == "GET":
            response = client.get(url, **kwargs)
        elif method.upper() == "POST":
            response = client.post(url, **kwargs)
        elif method.upper() == "OPTIONS":
            response = client.options(url, **kwargs)
        else:
            raise ValueError(f"Unsupported method: {method}")
        elapsed = timer.stop()
        print(f"\n  [{method.upper()} {url}] {elapsed:.2f}ms - Status: {response.status_code}")
        return response, elapsed
    return _timed_request


@pytest.fixture
def schedule_export():
    """Schedule CSV export as served by the spreadsheet"""
    return (
        "Application ID,Campus Applied,Course,Exam Venue,Date,Time,Room,Postponed\n"
        "1001,Candijay,BSCS,BoholIslandStateUniversity-CandijayCampus,N/A,-,101,\n"
        "1002,Bilar,BSED,BoholIslandStateUniversity-BilarCampus,01/20/2025,1:30 pm - 4:30 pm,102,"
        "Moved to 03/15/2025 due to weather\n"
    )


@pytest.fixture
def admissions_records():
    """Accepted and rejected applications known to the stubbed admissions API"""
    return {
        "accepted": {
            "1001": {
                "id": 1001,
                "first_name": "Maria",
                "last_name": "Santos",
                "coursecode": "BSCS",
                "exam_venue": "Bohol Island State University - Candijay Campus",
                "campus": "Candijay",
            },
            "1002": {
                "id": 1002,
                "first_name": "Ana",
                "last_name": "Cruz",
                "coursecode": "BSED",
                "exam_venue": "Bohol Island State University - Bilar Campus",
                "campus": "Bilar",
            },
        },
        "rejected": {
            "2002": {
                "id": 2002,
                "first_name": "Jose",
                "last_name": "Reyes",
                "coursecode": "BSIT",
                "status": "Rejected",
                "status_remarks": "Incomplete requirements",
            },
        },
    }
