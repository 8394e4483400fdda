"""
Background Task Scheduler for Schedule Refreshes

UPDATE SCHEDULE:
- Schedule Refresh: Every SCHEDULE_REFRESH_MINUTES (default 5), inside the server process
- Schedule Snapshot: Daily at 1 AM (CSV copy used when the sheet is unreachable)
- Map Usage Report: Daily at midnight, after the map counter rolls over

Usage:
    python -m tasks.scheduler                   # Run snapshot scheduler (foreground)
    python -m tasks.scheduler --once refresh    # Refresh the schedule once
    python -m tasks.scheduler --once snapshot   # Write a CSV snapshot once
"""

import asyncio
import argparse
from datetime import datetime
from pathlib import Path
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.triggers.cron import CronTrigger

from api.client import ExamLookupClient
from api.fetcher import ScheduleFetcher
from core.config import SCHEDULE_CSV_URL, SCHEDULE_REFRESH_MINUTES, SCHEDULE_SNAPSHOT_PATH
from services.cache import MapRequestCounter
from services.schedule import ScheduleCache, ScheduleUnavailableError
from tasks.snapshot import download_schedule_csv


class TaskScheduler:
    """Manages background update tasks"""

    def __init__(
        self,
        schedule: Optional[ScheduleCache] = None,
        counter: Optional[MapRequestCounter] = None,
        refresh_minutes: int = SCHEDULE_REFRESH_MINUTES,
        snapshot_path: Optional[Path] = SCHEDULE_SNAPSHOT_PATH
    ):
        self.scheduler = AsyncIOScheduler()
        self.schedule = schedule
        self.counter = counter
        self.refresh_minutes = refresh_minutes
        self.snapshot_path = snapshot_path

    async def start(self):
        """Start the scheduler with configured tasks"""
        print("=" * 60)
        print("Exam Schedule Refresh Scheduler")
        print("=" * 60)
        print(f"Started: {datetime.now()}")
        if self.schedule:
            print(f"Refresh interval: {self.refresh_minutes} min")
        print("=" * 60)

        if self.schedule:
            self.scheduler.add_job(
                self.refresh_schedule,
                IntervalTrigger(minutes=self.refresh_minutes),
                id='refresh_schedule',
                name=f'Refresh Schedule (every {self.refresh_minutes} min)',
                replace_existing=True,
                max_instances=1
            )

        if self.snapshot_path:
            self.scheduler.add_job(
                self.write_snapshot,
                CronTrigger(hour=1, minute=0),
                id='write_snapshot',
                name='Schedule Snapshot (Daily)',
                replace_existing=True,
                max_instances=1
            )

        if self.counter:
            self.scheduler.add_job(
                self.report_map_usage,
                CronTrigger(hour=0, minute=0),
                id='report_map_usage',
                name='Map Usage Report (Daily)',
                replace_existing=True,
                max_instances=1
            )

        self.scheduler.start()
        print("\n[SUCCESS] Scheduler started with the following jobs:")
        for job in self.scheduler.get_jobs():
            print(f"  - {job.name}: {job.trigger}")

    def shutdown(self):
        """Shutdown the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=True)
            print("[INFO] Scheduler stopped")

    # SCHEDULE REFRESH (Frequent)

    async def refresh_schedule(self):
        """Reload the schedule so lookups rarely wait on the spreadsheet"""
        try:
            rows = await self.schedule.get(force_refresh=True)
            print(f"[{datetime.now()}] Schedule refresh: {len(rows)} rows")
        except ScheduleUnavailableError as e:
            print(f"[ERROR] Schedule refresh failed: {e}")

    # SNAPSHOT (Daily)

    async def write_snapshot(self):
        """Save the CSV export to disk in a worker thread"""
        try:
            loop = asyncio.get_running_loop()
            size = await loop.run_in_executor(
                None, download_schedule_csv, SCHEDULE_CSV_URL, self.snapshot_path
            )
            print(f"[{datetime.now()}] Schedule snapshot written ({size} bytes)")
        except Exception as e:
            print(f"[ERROR] Schedule snapshot failed: {e}")

    # MAP USAGE (Daily)

    async def report_map_usage(self):
        """Log the previous day's map request total"""
        total = self.counter.yesterday_total()
        print(f"[{datetime.now()}] Map requests yesterday: {total}/{self.counter.limit}")


async def run_scheduler():
    """
    Run the standalone scheduler indefinitely.

    Only the snapshot job runs here; schedule refreshes belong to the
    server process that owns the cache.
    """
    scheduler = TaskScheduler(snapshot_path=SCHEDULE_SNAPSHOT_PATH)
    await scheduler.start()

    try:
        # Keep running until interrupted
        while True:
            await asyncio.sleep(1)
    except (KeyboardInterrupt, SystemExit, asyncio.CancelledError):
        scheduler.shutdown()


async def run_once(task: str):
    """Run a single task once"""
    if task == "refresh":
        async with ExamLookupClient() as client:
            rows = await ScheduleFetcher(client).fetch_rows()
            print(f"Result: {len(rows)} schedule rows")

    elif task == "snapshot":
        size = download_schedule_csv(SCHEDULE_CSV_URL, SCHEDULE_SNAPSHOT_PATH)
        print(f"Result: wrote {size} bytes to {SCHEDULE_SNAPSHOT_PATH}")

    else:
        print(f"Unknown task: {task}")


def main():
    parser = argparse.ArgumentParser(
        description="Exam Schedule Refresh Scheduler"
    )
    parser.add_argument(
        "--once",
        type=str,
        choices=["refresh", "snapshot"],
        help="Run a single task once and exit"
    )

    args = parser.parse_args()

    if args.once:
        asyncio.run(run_once(args.once))
    else:
        asyncio.run(run_scheduler())


if __name__ == "__main__":
    main()
