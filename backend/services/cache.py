"""
Redis Cache Service and Daily Map Request Counter

Features:
- JSON get/set with TTL, atomic counters
- Graceful fallback if Redis unavailable
- Per-day map request counter that resets at local midnight
"""

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

import redis

from core.config import (
    MAP_DAILY_LIMIT,
    REDIS_DB,
    REDIS_HOST,
    REDIS_PASSWORD,
    REDIS_PORT,
    REDIS_URL,
)

# Cache key prefixes
CACHE_PREFIX = "exam_lookup:"
MAP_COUNTER_PREFIX = f"{CACHE_PREFIX}map_counter:"

# Counter keys outlive their day so yesterday's total can still be read
MAP_COUNTER_TTL = 2 * 24 * 60 * 60


class RedisCache:
    """Redis access with fail-soft semantics"""

    def __init__(self, url: Optional[str] = REDIS_URL):
        self._url = url
        self._client: Optional[redis.Redis] = None
        self._connected = False

    def connect(self) -> bool:
        """
        Connect to Redis server.

        Returns:
            True if connected successfully, False otherwise
        """
        try:
            # Try URL first, then host/port
            if self._url and self._url != "redis://localhost:6379/0":
                self._client = redis.from_url(
                    self._url,
                    decode_responses=True,
                    socket_timeout=5,
                    socket_connect_timeout=5
                )
            else:
                self._client = redis.Redis(
                    host=REDIS_HOST,
                    port=REDIS_PORT,
                    db=REDIS_DB,
                    password=REDIS_PASSWORD,
                    decode_responses=True,
                    socket_timeout=5,
                    socket_connect_timeout=5
                )

            # Test connection
            self._client.ping()
            self._connected = True
            print(f"[CACHE] Connected to Redis")
            return True

        except (redis.RedisError, ValueError) as e:
            print(f"[CACHE] Failed to connect to Redis: {e}")
            self._client = None
            self._connected = False
            return False

    @property
    def is_connected(self) -> bool:
        """Check if Redis is connected"""
        if not self._connected or not self._client:
            return False
        try:
            self._client.ping()
            return True
        except redis.RedisError:
            self._connected = False
            return False

    def _ensure_connected(self) -> bool:
        """Ensure Redis is connected, attempt reconnect if not"""
        if self.is_connected:
            return True
        return self.connect()

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        if not self._ensure_connected():
            return None

        try:
            data = self._client.get(key)
            if data:
                return json.loads(data)
            return None
        except (redis.RedisError, json.JSONDecodeError) as e:
            print(f"[CACHE] Get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int) -> bool:
        """Set value in cache with TTL"""
        if not self._ensure_connected():
            return False

        try:
            self._client.setex(key, ttl, json.dumps(value))
            return True
        except redis.RedisError as e:
            print(f"[CACHE] Set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete a key from cache"""
        if not self._ensure_connected():
            return False

        try:
            self._client.delete(key)
            return True
        except redis.RedisError as e:
            print(f"[CACHE] Delete error for {key}: {e}")
            return False

    def incr(self, key: str, ttl: Optional[int] = None) -> Optional[int]:
        """Atomically increment a counter, setting its TTL on creation"""
        if not self._ensure_connected():
            return None

        try:
            value = self._client.incr(key)
            if ttl and value == 1:
                self._client.expire(key, ttl)
            return int(value)
        except redis.RedisError as e:
            print(f"[CACHE] Incr error for {key}: {e}")
            return None

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        if not self._ensure_connected():
            return {"connected": False}

        try:
            info = self._client.info("stats")
            memory = self._client.info("memory")
            return {
                "connected": True,
                "hits": info.get("keyspace_hits", 0),
                "misses": info.get("keyspace_misses", 0),
                "memory_used": memory.get("used_memory_human", "unknown"),
            }
        except redis.RedisError as e:
            return {"connected": True, "error": str(e)}


@dataclass
class QuotaResult:
    """Outcome of a map request against the daily quota."""
    allowed: bool
    count: int
    limit: int


class MapRequestCounter:
    """
    Daily map request quota.

    One Redis key per local calendar day, so the count starts over at
    midnight without a reset job. Falls back to an in-process counter
    when Redis is unavailable.
    """

    def __init__(
        self,
        cache: RedisCache,
        limit: int = MAP_DAILY_LIMIT,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.cache = cache
        self.limit = limit
        self._clock = clock
        self._local_counts: Dict[str, int] = {}

    def _day(self) -> str:
        return self._clock().strftime("%Y-%m-%d")

    def _key(self, day: Optional[str] = None) -> str:
        return f"{MAP_COUNTER_PREFIX}{day or self._day()}"

    def current(self) -> int:
        """Requests counted so far today"""
        day = self._day()
        value = self.cache.get(self._key(day))
        if value is None:
            return self._local_counts.get(day, 0)
        return int(value)

    def try_increment(self) -> QuotaResult:
        """
        Count one map view unless today's quota is used up.

        Rejected requests are not counted. Requests counted in-process
        while Redis was down are carried into Redis once it is back.
        """
        day = self._day()
        key = self._key(day)
        stored = self.cache.get(key)
        count = int(stored) if stored is not None else self._local_counts.get(day, 0)
        if count >= self.limit:
            print(f"[QUOTA] Daily map limit reached ({count}/{self.limit})")
            return QuotaResult(allowed=False, count=count, limit=self.limit)

        if stored is None and count:
            self.cache.set(key, count, ttl=MAP_COUNTER_TTL)

        new_count = self.cache.incr(key, ttl=MAP_COUNTER_TTL)
        if new_count is None:
            new_count = count + 1

        # Drop counts from previous days
        self._local_counts = {day: new_count}
        return QuotaResult(allowed=True, count=new_count, limit=self.limit)

    def yesterday_total(self) -> int:
        """Final count for the previous day (while its key is retained)"""
        yesterday = (self._clock() - timedelta(days=1)).strftime("%Y-%m-%d")
        value = self.cache.get(self._key(yesterday))
        return int(value) if value is not None else 0
