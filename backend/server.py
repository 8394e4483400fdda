"""
FastAPI Server for the Exam Schedule Lookup API

Provides REST endpoints for the frontend to look up an application's
exam schedule, list the schedule and build venue map URLs.
Runs the schedule refresh scheduler in the background.

Usage:
    python server.py                    # Run server on port 8000
    python server.py --port 3001        # Custom port
    python server.py --no-scheduler     # Disable background refresh
"""

import asyncio
import argparse
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.client import ExamLookupClient
from api.fetcher import ScheduleFetcher
from core.config import CORS_ORIGINS, SCHEDULE_CACHE_TTL, SCHEDULE_SNAPSHOT_PATH
from core.models import ProcessedRecord, RejectedRecord
from core.status import status_label, status_message
from core.venues import directions_url, maps_search_url, search_venue
from services.cache import MapRequestCounter, RedisCache
from services.lookup import LookupService, NOT_FOUND
from services.maps import MapService, MapsNotConfiguredError
from services.schedule import ScheduleCache, ScheduleUnavailableError


# Pydantic Models (API Response Schemas)

class LookupRequest(BaseModel):
    id: str


class CoordinatesResponse(BaseModel):
    lat: float
    lng: float


class ApplicationResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    coursecode: Optional[str] = None
    exam_venue: Optional[str] = None
    campus: Optional[str] = None
    date: str
    time: str
    course: str
    venue: str
    remarks: str
    isPostponed: bool
    postponedDate: Optional[str] = None
    isToday: bool
    dateStatus: str
    statusMessage: str
    statusLabel: str
    venueCoordinates: Optional[CoordinatesResponse] = None


class RejectedResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    coursecode: str = ""
    status: str = ""
    status_remarks: str = ""
    remarks: str = ""


class LookupResponse(BaseModel):
    status: str
    application: Optional[ApplicationResponse] = None
    rejected: Optional[RejectedResponse] = None


class ScheduleRowResponse(BaseModel):
    application_id: str
    campus: str
    course: str
    venue: str
    date: str
    time: str
    postponement_remarks: str


class ScheduleResponse(BaseModel):
    rows: List[ScheduleRowResponse]
    total: int


class MapUrlResponse(BaseModel):
    mapUrl: str
    requestCount: int


class VenueResponse(BaseModel):
    name: str
    address: str
    lat: float
    lng: float
    mapsUrl: str
    directionsUrl: str


class ScheduleStatsResponse(BaseModel):
    cached: bool
    rows: int = 0
    age_seconds: Optional[float] = None
    ttl_seconds: int
    stale: bool = False


class HealthResponse(BaseModel):
    status: str
    redis: str
    schedule: ScheduleStatsResponse


# Service wiring

@dataclass
class AppServices:
    client: ExamLookupClient
    cache: RedisCache
    schedule: ScheduleCache
    lookup: LookupService
    maps: MapService


def create_services() -> AppServices:
    """Build the service graph used by the endpoints"""
    client = ExamLookupClient()
    cache = RedisCache()
    cache.connect()

    schedule = ScheduleCache(
        ScheduleFetcher(client).fetch_rows,
        ttl_seconds=SCHEDULE_CACHE_TTL,
        snapshot_path=SCHEDULE_SNAPSHOT_PATH
    )

    return AppServices(
        client=client,
        cache=cache,
        schedule=schedule,
        lookup=LookupService(client, schedule),
        maps=MapService(MapRequestCounter(cache)),
    )


def get_services(request: Request) -> AppServices:
    return request.app.state.services


# Background Scheduler

scheduler_task = None


async def run_background_scheduler(schedule: ScheduleCache, counter: MapRequestCounter):
    """Run the scheduler in the background"""
    from tasks.scheduler import TaskScheduler

    scheduler = TaskScheduler(schedule, counter)
    await scheduler.start()

    # Keep running
    try:
        while True:
            await asyncio.sleep(60)
    except asyncio.CancelledError:
        scheduler.shutdown()


# App Lifespan (startup/shutdown)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown"""
    global scheduler_task

    # Startup
    print("[Server] Initializing services...")
    services = create_services()
    await services.client.__aenter__()
    app.state.services = services

    # Start scheduler if enabled
    if app.state.enable_scheduler:
        print("[Server] Starting background scheduler...")
        scheduler_task = asyncio.create_task(
            run_background_scheduler(services.schedule, services.maps.counter)
        )

    print("[Server] Ready!")

    yield

    # Shutdown
    if scheduler_task:
        print("[Server] Stopping scheduler...")
        scheduler_task.cancel()
        try:
            await scheduler_task
        except asyncio.CancelledError:
            pass
        scheduler_task = None

    await services.client.__aexit__(None, None, None)
    print("[Server] Shutdown complete")


# FastAPI App

app = FastAPI(
    title="Exam Schedule Lookup API",
    description="Look up admission results and entrance exam schedules by application ID",
    version="1.0.0",
    lifespan=lifespan
)

# CORS - Allow frontend origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Default: enable scheduler
app.state.enable_scheduler = True


# API Endpoints

@app.get("/", response_model=HealthResponse)
async def health_check(services: AppServices = Depends(get_services)):
    """Health check endpoint"""
    redis_status = "connected" if services.cache.is_connected else "unavailable"
    schedule_stats = services.schedule.stats()

    return HealthResponse(
        status="ok" if schedule_stats["cached"] and not schedule_stats["stale"] else "degraded",
        redis=redis_status,
        schedule=ScheduleStatsResponse(**schedule_stats)
    )


@app.get("/api/health", response_model=HealthResponse)
async def api_health(services: AppServices = Depends(get_services)):
    """API health check"""
    return await health_check(services)


@app.post("/api/applications/lookup", response_model=LookupResponse)
async def lookup_application(body: LookupRequest, services: AppServices = Depends(get_services)):
    """
    Look up an application by ID.

    Returns the accepted application merged with its exam schedule, or
    the rejected application with its remarks.
    """
    return await _lookup(body.id, services)


@app.get("/api/applications/{application_id}", response_model=LookupResponse)
async def get_application(application_id: str, services: AppServices = Depends(get_services)):
    """Same as POST /api/applications/lookup, with the ID in the path"""
    return await _lookup(application_id, services)


@app.get("/api/schedule", response_model=ScheduleResponse)
async def get_schedule(services: AppServices = Depends(get_services)):
    """
    Get the parsed exam schedule (served from cache when fresh).
    """
    try:
        rows = await services.schedule.get()
    except ScheduleUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ScheduleResponse(
        rows=[ScheduleRowResponse(**row.to_dict()) for row in rows],
        total=len(rows)
    )


@app.post("/api/schedule/refresh", response_model=ScheduleResponse)
async def refresh_schedule(services: AppServices = Depends(get_services)):
    """
    Reload the schedule from the spreadsheet now.

    If the spreadsheet is unreachable the last good schedule stays cached
    and is returned.
    """
    try:
        rows = await services.schedule.get(force_refresh=True)
    except ScheduleUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ScheduleResponse(
        rows=[ScheduleRowResponse(**row.to_dict()) for row in rows],
        total=len(rows)
    )


@app.get("/api/map-url", response_model=MapUrlResponse)
async def get_map_url(
    lat: Optional[float] = Query(None, description="Venue latitude"),
    lng: Optional[float] = Query(None, description="Venue longitude"),
    venue: Optional[str] = Query(None, description="Venue name shown on the map"),
    services: AppServices = Depends(get_services)
):
    """
    Get an embedded map URL for a venue.

    Each call counts against the daily map quota; once it is used up the
    endpoint answers 429 until local midnight.
    """
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")

    try:
        result = services.maps.get_map_url(lat, lng, venue)
    except MapsNotConfiguredError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if result.limit_reached:
        return JSONResponse(
            status_code=429,
            content={
                "error": "Daily map request limit reached",
                "limitReached": True,
                "requestCount": result.request_count,
            }
        )

    return MapUrlResponse(mapUrl=result.map_url, requestCount=result.request_count)


@app.get("/api/venues/search", response_model=VenueResponse)
async def find_venue(name: str = Query(..., min_length=1, description="Venue name")):
    """
    Find a known exam venue by name (spacing, hyphens, commas and case ignored).
    """
    venue = search_venue(name)
    if not venue:
        raise HTTPException(status_code=404, detail=f"Venue not found: {name}")

    return VenueResponse(
        name=venue.name,
        address=venue.address,
        lat=venue.lat,
        lng=venue.lng,
        mapsUrl=maps_search_url(venue),
        directionsUrl=directions_url(venue)
    )


# Helpers

async def _lookup(application_id: str, services: AppServices) -> LookupResponse:
    try:
        result = await services.lookup.lookup(application_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ScheduleUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if result.status == NOT_FOUND:
        raise HTTPException(
            status_code=404,
            detail="Application not found. Please check your ID and try again."
        )

    return LookupResponse(
        status=result.status,
        application=_format_application(result.application) if result.application else None,
        rejected=_format_rejected(result.rejected) if result.rejected else None
    )


def _format_application(record: ProcessedRecord) -> ApplicationResponse:
    """Format a processed record for API response"""
    data = record.to_dict()
    coordinates = data["venue_coordinates"]

    return ApplicationResponse(
        id=data["id"],
        first_name=data["first_name"],
        last_name=data["last_name"],
        middle_name=data["middle_name"],
        coursecode=data["coursecode"],
        exam_venue=data["exam_venue"],
        campus=data["campus"],
        date=data["date"],
        time=data["time"],
        course=data["course"],
        venue=data["venue"],
        remarks=data["remarks"],
        isPostponed=data["is_postponed"],
        postponedDate=data["postponed_date"],
        isToday=data["is_today"],
        dateStatus=data["date_status"],
        statusMessage=status_message(record.date_status, record.is_today),
        statusLabel=status_label(record.date_status),
        venueCoordinates=CoordinatesResponse(**coordinates) if coordinates else None
    )


def _format_rejected(record: RejectedRecord) -> RejectedResponse:
    return RejectedResponse(**record.to_dict())


# Main

def main():
    import uvicorn

    parser = argparse.ArgumentParser(description="Exam Schedule Lookup API Server")
    parser.add_argument("--port", type=int, default=8000, help="Port to run on")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--no-scheduler", action="store_true", help="Disable background refresh")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    args = parser.parse_args()

    app.state.enable_scheduler = not args.no_scheduler

    print(f"[Server] Starting on http://{args.host}:{args.port}")
    print(f"[Server] Scheduler: {'enabled' if app.state.enable_scheduler else 'disabled'}")

    uvicorn.run(
        "server:app" if args.reload else app,
        host=args.host,
        port=args.port,
        reload=args.reload
    )


if __name__ == "__main__":
    main()
