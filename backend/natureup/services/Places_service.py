import httpx
import logging
from natureup.core.config import Settings
from natureup.core.errors import missing_coordinates
from natureup.core.geo import haversine_distance
from natureup.core.logger import logs
from natureup.models.places_model import Place, PlacesResponse

# (tag key, tag value, category) searched in this order
PLACE_QUERIES = [
    ("amenity", "park", "park"),
    ("leisure", "park", "park"),
    ("leisure", "nature_reserve", "nature reserve"),
    ("natural", "beach", "beach"),
    ("natural", "water", "lake"),
    ("leisure", "garden", "garden"),
    ("tourism", "viewpoint", "viewpoint"),
    ("highway", "path", "trail"),
    ("highway", "footway", "trail"),
    ("highway", "track", "trail"),
    ("route", "hiking", "hiking trail"),
]

SEARCH_RADIUS_M = 8046.72  # 5 miles
RESULTS_PER_QUERY = 5
EARLY_EXIT_THRESHOLD = 15
TOP_N = 3

# (name, category, lat offset, lng offset, distance in meters)
FALLBACK_PLACES = [
    ("Nearby Park", "park", 0.01, 0.01, 1200),
    ("Nature Trail", "trail", -0.015, 0.02, 2100),
    ("Scenic Viewpoint", "viewpoint", 0.02, -0.015, 2800),
]


def build_fallback_places(lat: float, lon: float) -> list[Place]:
    """Deterministic placeholder places around the origin."""
    return [
        Place(
            id=f"mock-{i}",
            name=name,
            latitude=lat + d_lat,
            longitude=lon + d_lon,
            type=category,
            distance=distance
        )
        for i, (name, category, d_lat, d_lon, distance) in enumerate(FALLBACK_PLACES, start=1)
    ]


def rank_places(places: list[Place], limit: int = TOP_N) -> list[Place]:
    """
    Dedupe by id and keep the closest `limit`, sorted by distance.
    A repeated id keeps the data of its last occurrence.
    """
    unique = {}
    for place in sorted(places, key=lambda p: p.distance):
        unique[place.id] = place
    return sorted(unique.values(), key=lambda p: p.distance)[:limit]


class PlacesService:
    def __init__(self, config: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.overpass_url = config.OVERPASS_URL
        self.timeout = config.HTTP_TIMEOUT
        self.transport = transport

    async def get_places(self, lat: float | None, lon: float | None) -> PlacesResponse:
        missing_coordinates(lat, lon)

        try:
            return await self._search(lat, lon)
        except Exception as e:
            logs.log(logging.ERROR, f"Nearby places search failed, using fallback data: {str(e)}")
            return self._fallback(lat, lon, str(e))

    async def _search(self, lat: float, lon: float) -> PlacesResponse:
        all_places: list[Place] = []
        debug = {"searches": [], "totalResults": 0, "source": "openstreetmap"}
        succeeded = 0
        last_error = None

        for key, value, category in PLACE_QUERIES:
            try:
                elements, status = await self._query_overpass(key, value, lat, lon)
            except (httpx.HTTPError, ValueError) as e:
                logs.log(logging.WARNING, f"Overpass query {key}={value} failed: {str(e)}")
                debug["searches"].append({"query": f"{key}={value}", "error": str(e)})
                last_error = e
                continue

            succeeded += 1
            debug["searches"].append({
                "query": f"{key}={value}",
                "status": status,
                "resultCount": len(elements)
            })

            places = self._to_places(elements[:RESULTS_PER_QUERY], category, lat, lon)
            all_places.extend(places)
            debug["totalResults"] += len(places)

            if len(all_places) >= EARLY_EXIT_THRESHOLD:
                break

        if succeeded == 0:
            return self._fallback(lat, lon, f"All Overpass queries failed: {last_error}")

        top_places = rank_places(all_places)
        logs.log(logging.INFO, f"Found {len(top_places)} places using OpenStreetMap for {lat},{lon}")
        return PlacesResponse(places=top_places, debug=debug, source="live")

    async def _query_overpass(self, key: str, value: str, lat: float, lon: float) -> tuple[list, int]:
        around = f"around:{SEARCH_RADIUS_M},{lat},{lon}"
        overpass_query = (
            f"[out:json];("
            f"node[{key}={value}]({around});"
            f"way[{key}={value}]({around});"
            f");out center;"
        )
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            response = await client.get(self.overpass_url, params={"data": overpass_query})
        response.raise_for_status()
        data = response.json()
        return data.get("elements") or [], response.status_code

    def _to_places(self, elements: list, category: str, lat: float, lon: float) -> list[Place]:
        places = []
        for element in elements:
            center = element.get("center") or {}
            p_lat = element.get("lat", center.get("lat"))
            p_lon = element.get("lon", center.get("lon"))
            if p_lat is None or p_lon is None:
                continue

            tags = element.get("tags") or {}
            places.append(Place(
                id=f"osm-{element.get('id')}",
                name=tags.get("name") or tags.get("ref") or category,
                latitude=p_lat,
                longitude=p_lon,
                type=category,
                distance=haversine_distance(lat, lon, p_lat, p_lon)
            ))
        return places

    def _fallback(self, lat: float, lon: float, reason: str) -> PlacesResponse:
        return PlacesResponse(
            places=build_fallback_places(lat, lon),
            debug={"errorMessage": reason, "mock": True},
            source="fallback",
            error="Using fallback mock data"
        )
