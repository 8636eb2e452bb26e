from pydantic import BaseModel
from typing import List, Literal, Optional

class Waypoint(BaseModel):
    lat: float
    lng: float

class RouteRequest(BaseModel):
    waypoints: Optional[List[Waypoint]] = None
    mode: Literal["foot", "driving"] = "foot"

class RouteCoordinate(BaseModel):
    latitude: float
    longitude: float

class RouteResponse(BaseModel):
    coordinates: List[RouteCoordinate]
    distance: float  # meters
    duration: float  # seconds
