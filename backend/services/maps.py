"""
Embedded map URLs for exam venues, limited by a daily request quota.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from core.config import GOOGLE_MAPS_API_KEY
from .cache import MapRequestCounter

EMBED_ENDPOINT = "https://www.google.com/maps/embed/v1/place"
EMBED_ZOOM = 15


class MapsNotConfiguredError(Exception):
    """No maps API key is configured."""


@dataclass
class MapUrlResult:
    map_url: Optional[str]
    request_count: int
    limit: int
    limit_reached: bool = False


class MapService:
    """Builds embedded map URLs and enforces the daily quota"""

    def __init__(self, counter: MapRequestCounter, api_key: Optional[str] = GOOGLE_MAPS_API_KEY):
        self.counter = counter
        self.api_key = api_key

    def build_embed_url(self, lat: float, lng: float, venue: Optional[str] = None) -> str:
        """Embed URL centered on the venue, labelled with its name when given"""
        query = quote(venue, safe="") if venue else f"{lat},{lng}"
        return (
            f"{EMBED_ENDPOINT}?key={self.api_key}&q={query}"
            f"&center={lat},{lng}&zoom={EMBED_ZOOM}"
        )

    def get_map_url(self, lat: float, lng: float, venue: Optional[str] = None) -> MapUrlResult:
        """
        Get an embed URL, counting the request against today's quota.

        Raises:
            MapsNotConfiguredError: If no API key is configured
        """
        if not self.api_key:
            raise MapsNotConfiguredError("Maps API key is not configured")

        quota = self.counter.try_increment()
        if not quota.allowed:
            return MapUrlResult(
                map_url=None,
                request_count=quota.count,
                limit=quota.limit,
                limit_reached=True
            )

        return MapUrlResult(
            map_url=self.build_embed_url(lat, lng, venue),
            request_count=quota.count,
            limit=quota.limit
        )
