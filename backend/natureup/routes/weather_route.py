from functools import lru_cache
from fastapi import APIRouter, Depends

from natureup.core.config import settings
from natureup.core.db_connection import MongoConnection
from natureup.models.weather_model import WeatherRequest, WeatherResponse
from natureup.repos.cache_repo import CacheRepository
from natureup.repos.local_repo import LocalCacheRepository
from natureup.services.Weather_service import WeatherService

router = APIRouter()

# --- Dependency Injection ---
@lru_cache
def get_cache_repo():
    """Get the cache repository for the configured storage mode."""
    if settings.STORAGE_MODE == "mongodb":
        return CacheRepository(MongoConnection(settings).cache_collection())
    return LocalCacheRepository(settings.LOCAL_CACHE_DIR)

def get_weather_service(repo=Depends(get_cache_repo)) -> WeatherService:
    return WeatherService(repo, settings)

@router.post("/weather", response_model=WeatherResponse)
async def get_weather_endpoint(
    request: WeatherRequest,
    service: WeatherService = Depends(get_weather_service)
):
    return await service.get_weather(request.latitude, request.longitude)
