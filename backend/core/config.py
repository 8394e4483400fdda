"""
Configuration for the Exam Schedule Lookup Backend

All settings come from environment variables, optionally loaded from a
.env file next to the backend package.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


# Admissions API (accepted and rejected applications)
ADMISSIONS_API_URL = os.getenv(
    "ADMISSIONS_API_URL",
    "https://eas.bisu.edu.ph/api/client/trackapplication"
)
# Optional - rejected lookups are skipped when unset
REJECTED_APPLICATIONS_API_URL = os.getenv("REJECTED_APPLICATIONS_API_URL") or None

# Exam schedule spreadsheet (Google Sheets CSV export)
SHEET_ID = os.getenv("SHEET_ID", "1Wth7iPJvwFZkvBfR9sGdjKpnLnfC5T93fqG7uICFfNg")
SHEET_GID = os.getenv("SHEET_GID", "1262072827")
SCHEDULE_CSV_URL = os.getenv(
    "SCHEDULE_CSV_URL",
    f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/export?format=csv&gid={SHEET_GID}"
)

# Schedule cache
SCHEDULE_CACHE_TTL = int(os.getenv("SCHEDULE_CACHE_TTL", "300"))  # 5 minutes
SCHEDULE_REFRESH_MINUTES = int(os.getenv("SCHEDULE_REFRESH_MINUTES", "5"))
SCHEDULE_SNAPSHOT_PATH = Path(
    os.getenv("SCHEDULE_SNAPSHOT_PATH", str(Path(__file__).parent.parent / "data" / "schedule.csv"))
)

# Maps
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY") or None
MAP_DAILY_LIMIT = int(os.getenv("MAP_DAILY_LIMIT", "10000"))

# Redis
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_DB = int(os.getenv("REDIS_DB", "0"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)

# HTTP client identification
CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", "admin@example.com")
USER_AGENT = f"ExamScheduleLookup/1.0 (Schedule Lookup; Contact: {CONTACT_EMAIL})"

# Frontend origins allowed by CORS (comma separated)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    ).split(",")
    if origin.strip()
]
