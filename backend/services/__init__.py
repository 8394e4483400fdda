from .cache import RedisCache, MapRequestCounter, QuotaResult
from .schedule import ScheduleCache, ScheduleUnavailableError
from .maps import MapService, MapUrlResult, MapsNotConfiguredError
from .lookup import LookupService, LookupResult, ACCEPTED, REJECTED, NOT_FOUND
