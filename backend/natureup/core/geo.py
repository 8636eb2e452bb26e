import math

EARTH_RADIUS_KM = 6371.0
CACHE_KEY_PRECISION = 2  # ~1.1 km grid cell


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates, in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * 1000 * c


def round_coordinate(value: float) -> float:
    # Adding 0.0 turns -0.0 into 0.0
    return round(value, CACHE_KEY_PRECISION) + 0.0


def cache_key(lat: float, lng: float, prefix: str = "weather") -> str:
    """
    Stable cache key for a coordinate pair, e.g. "weather:40.71:-74.01".
    Nearby coordinates collapse onto the same key.
    """
    return f"{prefix}:{round_coordinate(lat):.2f}:{round_coordinate(lng):.2f}"
