import httpx
import logging
from natureup.core.config import Settings
from natureup.core.errors import AppError, UpstreamError
from natureup.core.logger import logs
from natureup.models.route_model import RouteCoordinate, RouteResponse, Waypoint


class RouteService:
    def __init__(self, config: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = config.OSRM_BASE_URL.rstrip("/")
        self.timeout = config.HTTP_TIMEOUT
        self.transport = transport

    async def calculate_route(self, waypoints: list[Waypoint] | None, mode: str = "foot") -> RouteResponse:
        if not waypoints or len(waypoints) < 2:
            raise AppError("At least 2 waypoints are required", status_code=400, code="INSUFFICIENT_WAYPOINTS")

        # OSRM expects lng,lat pairs
        coordinates = ";".join(f"{wp.lng},{wp.lat}" for wp in waypoints)
        url = f"{self.base_url}/route/v1/{mode}/{coordinates}"
        params = {"overview": "full", "geometries": "geojson"}

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                resp = await client.get(url, params=params)
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"OSRM request failed: {str(e)}")
                raise UpstreamError("osrm", f"OSRM request failed: {str(e)}", code="ROUTE_FAILED")

        if resp.status_code != 200:
            logs.log(logging.ERROR, f"OSRM API error: {resp.status_code}")
            raise UpstreamError("osrm", f"OSRM API error: {resp.status_code}", upstream_status=resp.status_code, code="ROUTE_FAILED")

        try:
            data = resp.json()
        except ValueError:
            raise UpstreamError("osrm", "OSRM response malformed", upstream_status=resp.status_code, code="ROUTE_FAILED")

        routes = data.get("routes") or []
        if data.get("code") != "Ok" or not routes:
            raise AppError("No route found", status_code=404, code="NO_ROUTE")

        route = routes[0]
        try:
            coords = [
                RouteCoordinate(latitude=lat, longitude=lng)
                for lng, lat in route["geometry"]["coordinates"]
            ]
            return RouteResponse(
                coordinates=coords,
                distance=float(route["distance"]),
                duration=float(route["duration"])
            )
        except (KeyError, TypeError, ValueError) as e:
            logs.log(logging.ERROR, f"OSRM response malformed: {str(e)}")
            raise UpstreamError("osrm", "OSRM response malformed", upstream_status=resp.status_code, code="ROUTE_FAILED")
