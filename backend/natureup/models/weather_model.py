from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class WeatherRequest(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None

class WeatherResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    temperature: int  # Fahrenheit
    feels_like: int = Field(..., alias="feelsLike")
    description: str
    icon: str
    humidity: Optional[float] = None  # Percentage
    wind_speed: int = Field(..., alias="windSpeed")  # mph
    location: str
    source: str = "api"  # "cache" or "api"
