"""
Time-bounded cache for the exam schedule.

The schedule lives in a spreadsheet that changes a few times a day, so
rows are kept in memory for SCHEDULE_CACHE_TTL seconds. When a refresh
fails, the last good rows are served instead; on a cold start the
on-disk snapshot written by tasks.snapshot is used as a last resort.

There is no locking: two concurrent refreshes may both hit the
spreadsheet and the last one to finish wins.
"""

import time
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from core.config import SCHEDULE_CACHE_TTL
from core.models import ScheduleRow
from core.parsers import parse_schedule_csv

ScheduleLoader = Callable[[], Awaitable[List[ScheduleRow]]]


class ScheduleUnavailableError(Exception):
    """No schedule could be loaded and nothing is cached."""


class ScheduleCache:
    """In-memory schedule cache with last-known-good fallback"""

    def __init__(
        self,
        loader: ScheduleLoader,
        ttl_seconds: int = SCHEDULE_CACHE_TTL,
        snapshot_path: Optional[Path] = None,
        clock: Callable[[], float] = time.time
    ):
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self.snapshot_path = snapshot_path
        self._clock = clock
        self._rows: Optional[List[ScheduleRow]] = None
        self._fetched_at: float = 0.0
        self._stale = False

    @property
    def is_fresh(self) -> bool:
        """True while cached rows are inside the TTL window"""
        return self._rows is not None and (self._clock() - self._fetched_at) < self.ttl_seconds

    async def get(self, force_refresh: bool = False) -> List[ScheduleRow]:
        """
        Get the schedule, refreshing it when expired.

        Args:
            force_refresh: Skip the TTL check and reload now

        Raises:
            ScheduleUnavailableError: If loading fails with nothing to fall back on
        """
        if not force_refresh and self.is_fresh:
            return self._rows

        try:
            rows = await self._loader()
        except Exception as e:
            return self._fallback(e)

        self._rows = rows
        self._fetched_at = self._clock()
        self._stale = False
        print(f"[SCHEDULE] Loaded {len(rows)} schedule rows")
        return rows

    def _fallback(self, error: Exception) -> List[ScheduleRow]:
        if self._rows is not None:
            print(f"[SCHEDULE] Refresh failed ({error}); using cached schedule")
            self._stale = True
            return self._rows

        snapshot = self.load_snapshot()
        if snapshot is not None:
            print(f"[SCHEDULE] Refresh failed ({error}); using snapshot {self.snapshot_path}")
            self._stale = True
            return snapshot

        print(f"[ERROR] Schedule unavailable: {error}")
        raise ScheduleUnavailableError("Failed to fetch schedule data") from error

    def load_snapshot(self) -> Optional[List[ScheduleRow]]:
        """Rows from the on-disk CSV snapshot, or None if there is none"""
        if not self.snapshot_path or not Path(self.snapshot_path).exists():
            return None
        try:
            text = Path(self.snapshot_path).read_text(encoding="utf-8")
            return parse_schedule_csv(text)
        except Exception as e:
            print(f"[SCHEDULE] Snapshot unreadable: {e}")
            return None

    def invalidate(self):
        """Drop cached rows so the next get() reloads"""
        self._rows = None
        self._fetched_at = 0.0
        self._stale = False
        print("[SCHEDULE] Cache invalidated")

    def stats(self) -> Dict[str, Any]:
        """Cache statistics for the health endpoint"""
        cached = self._rows is not None
        return {
            "cached": cached,
            "rows": len(self._rows) if cached else 0,
            "age_seconds": round(self._clock() - self._fetched_at, 1) if cached else None,
            "ttl_seconds": self.ttl_seconds,
            "stale": self._stale,
        }
