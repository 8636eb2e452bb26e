import httpx
import logging
from natureup.core.config import Settings
from natureup.core.errors import UpstreamError, missing_coordinates
from natureup.core.logger import logs
from natureup.models.trails_model import Trail, TrailsRequest, TrailsResponse

METERS_PER_MILE = 1609.34


class TrailsService:
    """Trail search against the AllTrails search endpoint."""

    def __init__(self, config: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.api_token = config.ALLTRAILS_API_TOKEN
        self.search_url = config.ALLTRAILS_URL
        self.timeout = config.HTTP_TIMEOUT
        self.transport = transport

    def build_payload(self, request: TrailsRequest) -> dict:
        return {
            "country_name": "United States",
            "raw_query": f"trails near {request.latitude},{request.longitude}",
            "location_helper": "near",
            "radius": round(request.radius_miles * METERS_PER_MILE),
            "num_trails": request.num_trails,
            "filters": request.filters or "",
        }

    async def search(self, request: TrailsRequest) -> TrailsResponse:
        if not self.api_token:
            raise UpstreamError("alltrails", "AllTrails API token not configured", code="CONFIG_ERROR")

        missing_coordinates(request.latitude, request.longitude, "Missing latitude or longitude")

        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json"
        }
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                resp = await client.post(self.search_url, json=self.build_payload(request), headers=headers)
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"AllTrails request failed: {str(e)}")
                raise UpstreamError("alltrails", f"AllTrails request failed: {str(e)}", code="TRAIL_SEARCH_FAILED")

        if resp.status_code != 200:
            logs.log(logging.ERROR, f"AllTrails API error: {resp.text}")
            raise UpstreamError(
                "alltrails",
                f"AllTrails API returned {resp.status_code}",
                upstream_status=resp.status_code,
                code="TRAIL_SEARCH_FAILED"
            )

        try:
            data = resp.json()
            trails = [self._to_trail(t) for t in data.get("data") or []]
        except (KeyError, TypeError, ValueError) as e:
            logs.log(logging.ERROR, f"AllTrails response malformed: {str(e)}")
            raise UpstreamError("alltrails", "AllTrails response malformed", resp.status_code, code="TRAIL_SEARCH_FAILED")

        return TrailsResponse(
            trails=trails,
            assumed_location=data.get("assumed_location"),
            count=len(trails)
        )

    def _to_trail(self, trail: dict) -> Trail:
        return Trail(
            id=trail["hyperlink_url"],
            name=trail["trail_name"],
            latitude=trail["geoloc"]["lat"],
            longitude=trail["geoloc"]["lng"],
            difficulty=trail.get("difficulty_rating"),
            length=trail.get("length"),
            elevation_gain=trail.get("elevation_gain"),
            estimated_time=trail.get("estimated_completion_time"),
            star_rating=trail.get("star_rating"),
            description=trail.get("description") or "",
            location=trail.get("location"),
            url=trail["hyperlink_url"],
            image_url=trail.get("image")
        )
