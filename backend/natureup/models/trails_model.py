from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional, Union

class TrailsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_miles: float = Field(10, alias="radiusMiles")
    activities: List[str] = []
    filters: str = ""
    num_trails: int = Field(10, alias="numTrails")

class Trail(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    type: str = "trail"
    difficulty: Optional[Union[str, float]] = None
    length: Optional[Union[str, float]] = None
    elevation_gain: Optional[Union[str, float]] = None
    estimated_time: Optional[Union[str, float]] = None
    star_rating: Optional[float] = None
    description: str = ""
    location: Optional[str] = None
    url: str
    image_url: Optional[str] = None

class TrailsResponse(BaseModel):
    trails: List[Trail]
    assumed_location: Optional[Any] = None
    count: int
