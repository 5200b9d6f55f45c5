#file: backend/models.py

from pydantic import BaseModel, Field, StringConstraints
from typing import Annotated, Dict, Optional

U32_MAX = 2 ** 32 - 1
U64_MAX = 2 ** 64 - 1

# Bounds keep every valid record well inside codec.MAX_RECORD_SIZE
MAX_LOCATION_LENGTH = 128
MAX_RECOMMENDATIONS_LENGTH = 512
MAX_POLLUTANTS = 16
MAX_POLLUTANT_NAME_LENGTH = 32

FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]
PollutantName = Annotated[str, StringConstraints(min_length=1, max_length=MAX_POLLUTANT_NAME_LENGTH)]
PollutantLevels = Annotated[Dict[PollutantName, FiniteFloat], Field(max_length=MAX_POLLUTANTS)]


class WeatherData(BaseModel):
    temperature: FiniteFloat = Field(0.0, description="Air temperature")
    humidity: FiniteFloat = Field(0.0, description="Relative humidity")
    wind_speed: FiniteFloat = Field(0.0, description="Wind speed")


class AirQualityData(BaseModel):
    id: int = Field(..., ge=0, le=U64_MAX, description="Identifier assigned by the store on creation")
    location: str = Field(..., max_length=MAX_LOCATION_LENGTH, description="Free-form location label")
    timestamp: int = Field(..., ge=0, le=U64_MAX, description="Nanoseconds since the Unix epoch of the last write")
    air_quality_index: int = Field(..., ge=0, le=U32_MAX, description="Air quality index (AQI)")
    health_recommendations: str = Field(..., max_length=MAX_RECOMMENDATIONS_LENGTH,
                                        description="Health recommendations supplied by the caller")
    pollutant_levels: PollutantLevels = Field(default_factory=dict,
                                              description="Pollutant name to concentration")
    weather_conditions: WeatherData = Field(default_factory=WeatherData,
                                            description="Weather at the time of the reading")


class AirQualityUpdatePayload(BaseModel):
    """Payload for create and update. Omitted optional fields reset to empty / zero on update."""
    location: str = Field(..., max_length=MAX_LOCATION_LENGTH, description="Free-form location label")
    air_quality_index: int = Field(..., ge=0, le=U32_MAX, description="Air quality index (AQI)")
    health_recommendations: str = Field(..., max_length=MAX_RECOMMENDATIONS_LENGTH,
                                        description="Health recommendations supplied by the caller")
    pollutant_levels: Optional[PollutantLevels] = Field(None, description="Pollutant name to concentration")
    weather_conditions: Optional[WeatherData] = Field(None, description="Weather at the time of the reading")


class HealthRecommendation(BaseModel):
    air_quality_index: int = Field(..., ge=0, le=U32_MAX)
    tier: str = Field(..., description="Tier label derived from the index")
    recommendation: str = Field(..., description="Advice text for the tier")
