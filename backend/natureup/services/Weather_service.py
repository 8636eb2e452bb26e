import httpx
import logging
import math
from natureup.core.config import Settings
from natureup.core.errors import UpstreamError, missing_coordinates
from natureup.core.geo import cache_key
from natureup.core.logger import logs
from natureup.models.weather_model import WeatherResponse

# WMO weather interpretation codes (Open-Meteo documentation)
WEATHER_DESCRIPTIONS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    61: "Light rain",
    63: "Moderate rain",
    65: "Heavy rain",
    71: "Light snow",
    73: "Moderate snow",
    75: "Heavy snow",
    80: "Light showers",
    81: "Moderate showers",
    82: "Violent showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail",
    99: "Thunderstorm with hail",
}

DEFAULT_ICON = "🌤️"


def describe_weather_code(code: int) -> str:
    """Maps WMO codes to human readable text."""
    return WEATHER_DESCRIPTIONS.get(code, "Unknown")


def weather_icon(code: int) -> str:
    """Maps WMO codes to an icon glyph."""
    if code in (0, 1): return "☀️"
    if code == 2: return "⛅"
    if code == 3: return "☁️"
    if code in (45, 48): return "🌫️"
    if 51 <= code <= 55: return "🌦️"
    if 61 <= code <= 65: return "🌧️"
    if 71 <= code <= 75: return "❄️"
    if 80 <= code <= 82: return "🌧️"
    if code >= 95: return "⛈️"
    return DEFAULT_ICON


def round_half_up(value: float) -> int:
    """Rounds halves up (72.5 -> 73, 70.5 -> 71) instead of to the nearest even integer."""
    return math.floor(value + 0.5)


class WeatherService:
    def __init__(self, repo, config: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.repo = repo
        self.base_url = config.OPEN_METEO_URL
        self.ttl_minutes = config.WEATHER_CACHE_TTL_MINUTES
        self.timeout = config.HTTP_TIMEOUT
        self.transport = transport

    async def get_weather(self, lat: float | None, lon: float | None) -> WeatherResponse:
        missing_coordinates(lat, lon)

        # 1. Check Cache
        key = cache_key(lat, lon)
        logs.log(logging.INFO, f"Checking cache for {key}")

        cached = await self.repo.get(key)
        if cached:
            logs.log(logging.INFO, f"✓ Weather cache HIT for {key}")
            return WeatherResponse(**cached, source="cache")

        # 2. Call External API (Open-Meteo)
        logs.log(logging.INFO, f"✗ Weather cache MISS for {key}. Calling Open-Meteo API...")
        raw_data = await self._fetch_current(lat, lon)

        # 3. Process Current Weather Data
        try:
            current = raw_data["current"]
            code = int(current["weather_code"])
            weather = WeatherResponse(
                temperature=round_half_up(current["temperature_2m"]),
                feels_like=round_half_up(current["apparent_temperature"]),
                description=describe_weather_code(code),
                icon=weather_icon(code),
                humidity=current.get("relative_humidity_2m"),
                wind_speed=round_half_up(current["wind_speed_10m"]),
                location=raw_data.get("timezone") or "Current Location",
                source="api"
            )
        except (KeyError, TypeError, ValueError) as e:
            logs.log(logging.ERROR, f"Open-Meteo response malformed: {str(e)}")
            raise UpstreamError("open-meteo", "Failed to fetch weather data: malformed response", code="WEATHER_FETCH_FAILED")

        # 4. Save to Cache
        await self.repo.set(key, weather.model_dump(exclude={"source"}), self.ttl_minutes)

        return weather

    async def _fetch_current(self, lat: float, lon: float) -> dict:
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": "temperature_2m,relative_humidity_2m,apparent_temperature,weather_code,wind_speed_10m",
            "temperature_unit": "fahrenheit",
            "wind_speed_unit": "mph",
            "timezone": "auto"
        }
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                resp = await client.get(self.base_url, params=params)
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"Weather API failed: {str(e)}")
                raise UpstreamError("open-meteo", f"Failed to fetch weather data: {str(e)}", code="WEATHER_FETCH_FAILED")

        if resp.status_code != 200:
            logs.log(logging.ERROR, f"Weather API returned {resp.status_code}")
            raise UpstreamError(
                "open-meteo",
                f"Failed to fetch weather data: Open-Meteo returned {resp.status_code}",
                upstream_status=resp.status_code,
                code="WEATHER_FETCH_FAILED"
            )
        try:
            return resp.json()
        except ValueError:
            raise UpstreamError("open-meteo", "Failed to fetch weather data: invalid JSON", resp.status_code, code="WEATHER_FETCH_FAILED")
