from pydantic import BaseModel
from typing import Any, Dict, List, Literal, Optional

class Place(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    type: str
    distance: float  # meters from the request origin

class PlacesRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None

class PlacesResponse(BaseModel):
    places: List[Place]
    debug: Dict[str, Any] = {}
    source: Literal["live", "fallback"]
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"
