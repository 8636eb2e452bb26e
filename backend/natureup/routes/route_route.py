from functools import lru_cache
from fastapi import APIRouter, Depends

from natureup.core.config import settings
from natureup.models.route_model import RouteRequest, RouteResponse
from natureup.services.Route_service import RouteService

router = APIRouter()

@lru_cache
def get_route_service() -> RouteService:
    return RouteService(settings)

@router.post("/calculate-route", response_model=RouteResponse)
async def calculate_route_endpoint(
    request: RouteRequest,
    service: RouteService = Depends(get_route_service)
):
    return await service.calculate_route(request.waypoints, request.mode)
