"""
Schedule Snapshot Script

Downloads the exam schedule CSV export and saves it to disk. The server
falls back to this file when the spreadsheet is unreachable and nothing
is cached yet.

Usage:
    python -m tasks.snapshot                        # Write to SCHEDULE_SNAPSHOT_PATH
    python -m tasks.snapshot --output data/s.csv    # Custom output path
    python -m tasks.snapshot --check                # Also parse and report
"""

import argparse
from datetime import datetime
from pathlib import Path
from typing import Optional

import requests

from core.config import SCHEDULE_CSV_URL, SCHEDULE_SNAPSHOT_PATH, USER_AGENT
from core.parsers import ParseReport, ScheduleFormatError, parse_schedule_csv

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "User-Agent": USER_AGENT,
}


def download_schedule_csv(
    url: str,
    output_path: Path,
    timeout: int = 30,
    report: Optional[ParseReport] = None
) -> int:
    """
    Download the CSV export and write it to output_path.

    The download is parsed before anything is written, and the file is
    swapped into place in one step, so a failed or bogus download (a
    sign-in page, a truncated export) leaves the previous snapshot intact.

    Returns:
        Number of bytes written

    Raises:
        requests.RequestException: If the download fails
        ScheduleFormatError: If the download is not a usable schedule
    """
    response = requests.get(url, headers=NO_CACHE_HEADERS, timeout=timeout)
    response.raise_for_status()

    content = response.text
    rows = parse_schedule_csv(content, report)
    if not rows:
        raise ScheduleFormatError("Schedule export has no rows")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = output_path.with_name(output_path.name + ".tmp")
    try:
        tmp_path.write_text(content, encoding="utf-8")
        tmp_path.replace(output_path)
    finally:
        tmp_path.unlink(missing_ok=True)
    return len(content.encode("utf-8"))


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Save a local copy of the exam schedule spreadsheet"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=SCHEDULE_SNAPSHOT_PATH,
        help="Where to write the CSV snapshot"
    )
    parser.add_argument(
        "--url",
        type=str,
        default=SCHEDULE_CSV_URL,
        help="CSV export URL"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Print the parse report for the saved snapshot"
    )

    args = parser.parse_args()

    print(f"[{datetime.now()}] Downloading schedule from {args.url}")
    report = ParseReport()
    try:
        size = download_schedule_csv(args.url, args.output, report=report)
    except requests.RequestException as e:
        print(f"ERROR: Failed to download schedule: {e}")
        return
    except ScheduleFormatError as e:
        print(f"ERROR: Download is not a usable schedule, snapshot left unchanged: {e}")
        return
    print(f"[{datetime.now()}] Wrote {size} bytes to {args.output}")

    if args.check:
        print(report.summary())


if __name__ == "__main__":
    main()
