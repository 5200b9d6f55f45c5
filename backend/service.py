# file: backend/service.py

import logging
import threading
from typing import Callable, List
from sqlalchemy.engine import Engine

from backend import queries
from backend.database import AirQualityStorage, IdCounter, create_session_factory
from backend.errors import Err, NotFound, Ok, Result
from backend.models import AirQualityData, AirQualityUpdatePayload, WeatherData
from backend.utils import get_current_timestamp, get_health_recommendations, get_health_tier


class AirQualityService:
    """Owns the record store and id counter. One lock serializes every operation.

    Update replaces ``pollutant_levels`` and ``weather_conditions`` wholesale: when the
    payload omits them they are reset to empty / zero, not merged with the stored values.
    """

    def __init__(self, storage: AirQualityStorage, counter: IdCounter,
                 clock: Callable[[], int] = get_current_timestamp) -> None:
        self.storage = storage
        self.counter = counter
        self.clock = clock
        self._lock = threading.RLock()

    @classmethod
    def from_engine(cls, engine: Engine, clock: Callable[[], int] = get_current_timestamp) -> "AirQualityService":
        session_factory = create_session_factory(engine)
        return cls(AirQualityStorage(session_factory), IdCounter(session_factory), clock)

    # point operations

    def get_air_quality_data(self, record_id: int) -> Result[AirQualityData]:
        with self._lock:
            record = self.storage.get(record_id)
        if record is None:
            logging.warning(f"Air quality data with id={record_id} not found")
            return Err(NotFound(msg=f"air quality data with id={record_id} not found"))
        return Ok(record)

    def add_air_quality_data(self, payload: AirQualityUpdatePayload) -> AirQualityData:
        with self._lock:
            record = AirQualityData(
                id=self.counter.next_id(),
                location=payload.location,
                timestamp=self.clock(),
                air_quality_index=payload.air_quality_index,
                health_recommendations=payload.health_recommendations,
                pollutant_levels=payload.pollutant_levels or {},
                weather_conditions=payload.weather_conditions or WeatherData(),
            )
            self.storage.put(record)
        logging.info(f"Added air quality data id={record.id} for location {record.location}")
        return record

    def update_air_quality_data(self, record_id: int, payload: AirQualityUpdatePayload) -> Result[AirQualityData]:
        with self._lock:
            current = self.storage.get(record_id)
            if current is None:
                logging.warning(f"Cannot update air quality data with id={record_id}: not found")
                return Err(NotFound(msg=f"couldn't update air quality data with id={record_id}. data not found"))
            record = AirQualityData(
                id=current.id,
                location=payload.location,
                timestamp=max(self.clock(), current.timestamp),
                air_quality_index=payload.air_quality_index,
                health_recommendations=payload.health_recommendations,
                pollutant_levels=payload.pollutant_levels or {},
                weather_conditions=payload.weather_conditions or WeatherData(),
            )
            self.storage.put(record)
        logging.info(f"Updated air quality data id={record_id}")
        return Ok(record)

    def delete_air_quality_data(self, record_id: int) -> Result[AirQualityData]:
        with self._lock:
            record = self.storage.remove(record_id)
        if record is None:
            logging.warning(f"Cannot delete air quality data with id={record_id}: not found")
            return Err(NotFound(msg=f"couldn't delete air quality data with id={record_id}. data not found."))
        logging.info(f"Deleted air quality data id={record_id}")
        return Ok(record)

    # scans

    def get_all_air_quality_data(self) -> List[AirQualityData]:
        with self._lock:
            return queries.all_records(self.storage.iterate())

    def search_air_quality_data_by_location(self, location: str) -> List[AirQualityData]:
        with self._lock:
            return queries.by_location_substring(self.storage.iterate(), location)

    def get_air_quality_data_by_weather_conditions(self, min_temperature: float, max_temperature: float,
                                                   min_humidity: float, max_humidity: float,
                                                   min_wind_speed: float, max_wind_speed: float
                                                   ) -> List[AirQualityData]:
        with self._lock:
            return queries.by_weather_conditions(self.storage.iterate(),
                                                 min_temperature, max_temperature,
                                                 min_humidity, max_humidity,
                                                 min_wind_speed, max_wind_speed)

    def get_air_quality_data_by_pollutant_level(self, pollutant: str, min_level: float,
                                                max_level: float) -> List[AirQualityData]:
        with self._lock:
            return queries.by_pollutant_level(self.storage.iterate(), pollutant, min_level, max_level)

    def get_air_quality_data_by_timestamp_range(self, start_timestamp: int,
                                                end_timestamp: int) -> List[AirQualityData]:
        with self._lock:
            return queries.by_timestamp_range(self.storage.iterate(), start_timestamp, end_timestamp)

    def get_recent_air_quality_data(self, n: int) -> List[AirQualityData]:
        with self._lock:
            return queries.most_recent(self.storage.iterate(), n)

    def get_average_air_quality_index(self, location: str) -> Result[float]:
        with self._lock:
            result = queries.average_index(self.storage.iterate(), location)
        if isinstance(result, Err):
            logging.warning(result.error.msg)
        return result

    @staticmethod
    def get_health_tier(air_quality_index: int) -> str:
        return get_health_tier(air_quality_index)

    @staticmethod
    def get_health_recommendations(air_quality_index: int) -> str:
        return get_health_recommendations(air_quality_index)

    # bulk mutation

    def delete_air_quality_data_by_location(self, location: str) -> Result[int]:
        """Remove every record at exactly ``location``. No match is NotFound, not zero."""
        with self._lock:
            ids_to_delete = queries.ids_at_location(self.storage.iterate(), location)
            if not ids_to_delete:
                logging.warning(f"No data found for location {location}")
                return Err(NotFound(msg=f"No data found for location {location}"))
            for record_id in ids_to_delete:
                self.storage.remove(record_id)
        logging.info(f"Deleted {len(ids_to_delete)} air quality records for location {location}")
        return Ok(len(ids_to_delete))
