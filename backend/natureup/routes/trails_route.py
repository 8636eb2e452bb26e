from functools import lru_cache
from fastapi import APIRouter, Depends

from natureup.core.config import settings
from natureup.core.errors import UpstreamError
from natureup.models.trails_model import TrailsRequest, TrailsResponse
from natureup.services.Trails_service import TrailsService

router = APIRouter()

@lru_cache
def get_trails_service() -> TrailsService:
    return TrailsService(settings)

@router.post("/alltrails-search", response_model=TrailsResponse)
async def trails_search_endpoint(
    request: TrailsRequest,
    service: TrailsService = Depends(get_trails_service)
):
    try:
        return await service.search(request)
    except UpstreamError as e:
        # Clients read `trails` even on failure
        e.extra["trails"] = []
        raise
