# file: backend/main.py

import os
import logging
import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Path, Query, Request
from contextlib import asynccontextmanager
from typing import List

from backend.database import AIR_QUALITY_DB_URL, create_db_engine
from backend.errors import Err, Result
from backend.models import U32_MAX, U64_MAX, AirQualityData, AirQualityUpdatePayload, HealthRecommendation
from backend.service import AirQualityService

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database and build the single service instance on startup."""
    engine = create_db_engine(AIR_QUALITY_DB_URL)
    service = AirQualityService.from_engine(engine)
    app.state.service = service
    logging.info(f"Air quality store ready with {service.storage.count()} records, next id {service.counter.current()}")
    yield
    engine.dispose()


app = FastAPI(
    title = "Air Quality Record Store",
    description = "CRUD and filtered search over air quality records.",
    version = "0.2",
    lifespan = lifespan
)


def get_service(request: Request) -> AirQualityService:
    return request.app.state.service


def unwrap(result: Result):
    """Turn a NotFound result into a 404 response."""
    if isinstance(result, Err):
        raise HTTPException(status_code=404, detail=result.error.to_detail())
    return result.value


@app.get("/air_quality", response_model=List[AirQualityData])
def get_all_air_quality_data(service: AirQualityService = Depends(get_service)):
    """Fetch every record in ascending id order."""
    return service.get_all_air_quality_data()


@app.post("/air_quality", response_model=AirQualityData)
def add_air_quality_data(payload: AirQualityUpdatePayload, service: AirQualityService = Depends(get_service)):
    """Create a record; id and timestamp are assigned by the store."""
    return service.add_air_quality_data(payload)


@app.delete("/air_quality", response_model=int)
def delete_air_quality_data_by_location(
    location: str = Query(..., description="Exact location of the records to delete"),
    service: AirQualityService = Depends(get_service)
):
    """Delete all records at exactly the given location and return how many were removed."""
    return unwrap(service.delete_air_quality_data_by_location(location))


@app.get("/air_quality/search", response_model=List[AirQualityData])
def search_air_quality_data_by_location(
    location: str = Query(..., description="Case-sensitive substring of the location"),
    service: AirQualityService = Depends(get_service)
):
    logging.info(f"Searching air quality data with location containing: {location}")
    return service.search_air_quality_data_by_location(location)


@app.get("/air_quality/weather", response_model=List[AirQualityData])
def get_air_quality_data_by_weather_conditions(
    min_temperature: float = Query(...),
    max_temperature: float = Query(...),
    min_humidity: float = Query(...),
    max_humidity: float = Query(...),
    min_wind_speed: float = Query(...),
    max_wind_speed: float = Query(...),
    service: AirQualityService = Depends(get_service)
):
    """Records whose temperature, humidity and wind speed all fall within the inclusive ranges."""
    return service.get_air_quality_data_by_weather_conditions(min_temperature, max_temperature,
                                                              min_humidity, max_humidity,
                                                              min_wind_speed, max_wind_speed)


@app.get("/air_quality/pollutant", response_model=List[AirQualityData])
def get_air_quality_data_by_pollutant_level(
    pollutant: str = Query(..., description="Pollutant name, e.g. pm25"),
    min_level: float = Query(...),
    max_level: float = Query(...),
    service: AirQualityService = Depends(get_service)
):
    """Records that report the pollutant with a level in the inclusive range."""
    return service.get_air_quality_data_by_pollutant_level(pollutant, min_level, max_level)


@app.get("/air_quality/time_range", response_model=List[AirQualityData])
def get_air_quality_data_by_timestamp_range(
    start_timestamp: int = Query(..., ge=0, le=U64_MAX, description="Start, nanoseconds since epoch"),
    end_timestamp: int = Query(..., ge=0, le=U64_MAX, description="End, nanoseconds since epoch"),
    service: AirQualityService = Depends(get_service)
):
    return service.get_air_quality_data_by_timestamp_range(start_timestamp, end_timestamp)


@app.get("/air_quality/recent", response_model=List[AirQualityData])
def get_recent_air_quality_data(
    n: int = Query(..., ge=0, description="Maximum number of records to return"),
    service: AirQualityService = Depends(get_service)
):
    """The n most recently written records, newest first."""
    return service.get_recent_air_quality_data(n)


@app.get("/air_quality/{record_id}", response_model=AirQualityData)
def get_air_quality_data(record_id: int = Path(..., ge=0, le=U64_MAX),
                         service: AirQualityService = Depends(get_service)):
    return unwrap(service.get_air_quality_data(record_id))


@app.put("/air_quality/{record_id}", response_model=AirQualityData)
def update_air_quality_data(payload: AirQualityUpdatePayload,
                            record_id: int = Path(..., ge=0, le=U64_MAX),
                            service: AirQualityService = Depends(get_service)):
    """Replace a record's fields; omitted pollutant levels and weather are reset."""
    return unwrap(service.update_air_quality_data(record_id, payload))


@app.delete("/air_quality/{record_id}", response_model=AirQualityData)
def delete_air_quality_data(record_id: int = Path(..., ge=0, le=U64_MAX),
                            service: AirQualityService = Depends(get_service)):
    return unwrap(service.delete_air_quality_data(record_id))


@app.get("/average_air_quality_index", response_model=float)
def get_average_air_quality_index(
    location: str = Query(..., description="Exact location"),
    service: AirQualityService = Depends(get_service)
):
    return unwrap(service.get_average_air_quality_index(location))


@app.get("/health_tier/{air_quality_index}", response_model=str)
def get_health_tier(air_quality_index: int = Path(..., ge=0, le=U32_MAX)):
    return AirQualityService.get_health_tier(air_quality_index)


@app.get("/health_recommendations/{air_quality_index}", response_model=HealthRecommendation)
def get_health_recommendations(air_quality_index: int = Path(..., ge=0, le=U32_MAX)):
    return HealthRecommendation(
        air_quality_index=air_quality_index,
        tier=AirQualityService.get_health_tier(air_quality_index),
        recommendation=AirQualityService.get_health_recommendations(air_quality_index),
    )


if __name__ == "__main__" :
    uvicorn.run(app, host = API_HOST, port = API_PORT, log_level=LOG_LEVEL.lower())
