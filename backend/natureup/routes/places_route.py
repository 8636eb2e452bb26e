from functools import lru_cache
from fastapi import APIRouter, Depends

from natureup.core.config import settings
from natureup.models.places_model import PlacesRequest, PlacesResponse
from natureup.services.Places_service import PlacesService

router = APIRouter()

@lru_cache
def get_places_service() -> PlacesService:
    return PlacesService(settings)

@router.post("/nearby-places", response_model=PlacesResponse, response_model_exclude_none=True)
async def get_places_endpoint(
    request: PlacesRequest,
    service: PlacesService = Depends(get_places_service)
):
    """Always answers 200 once coordinates are present; degraded results carry source="fallback"."""
    return await service.get_places(request.latitude, request.longitude)
