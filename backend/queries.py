# file: backend/queries.py
"""Read-only scans over a store snapshot.

Every function takes the output of ``AirQualityStorage.iterate()`` (ascending id
order) and returns records in that order unless it ranks them. Inverted or empty
ranges match nothing; they are never errors.
"""

from typing import Iterable, List, Tuple

from backend.errors import Err, NotFound, Ok, Result
from backend.models import AirQualityData

Snapshot = Iterable[Tuple[int, AirQualityData]]


def all_records(snapshot: Snapshot) -> List[AirQualityData]:
    return [record for _, record in snapshot]


def by_location_substring(snapshot: Snapshot, location: str) -> List[AirQualityData]:
    """Case-sensitive substring match on location."""
    return [record for _, record in snapshot if location in record.location]


def by_weather_conditions(snapshot: Snapshot,
                          min_temperature: float, max_temperature: float,
                          min_humidity: float, max_humidity: float,
                          min_wind_speed: float, max_wind_speed: float) -> List[AirQualityData]:
    """All three inclusive ranges must hold."""
    return [
        record
        for _, record in snapshot
        if min_temperature <= record.weather_conditions.temperature <= max_temperature
        and min_humidity <= record.weather_conditions.humidity <= max_humidity
        and min_wind_speed <= record.weather_conditions.wind_speed <= max_wind_speed
    ]


def by_pollutant_level(snapshot: Snapshot, pollutant: str,
                       min_level: float, max_level: float) -> List[AirQualityData]:
    """Records lacking the pollutant are excluded, not treated as zero."""
    return [
        record
        for _, record in snapshot
        if pollutant in record.pollutant_levels
        and min_level <= record.pollutant_levels[pollutant] <= max_level
    ]


def by_timestamp_range(snapshot: Snapshot, start_timestamp: int, end_timestamp: int) -> List[AirQualityData]:
    return [record for _, record in snapshot if start_timestamp <= record.timestamp <= end_timestamp]


def most_recent(snapshot: Snapshot, n: int) -> List[AirQualityData]:
    """Newest first; records with equal timestamps keep ascending id order."""
    if n <= 0:
        return []
    records = sorted(all_records(snapshot), key=lambda record: record.timestamp, reverse=True)
    return records[:n]


def average_index(snapshot: Snapshot, location: str) -> Result[float]:
    """Mean air_quality_index over records whose location equals ``location`` exactly."""
    indexes = [record.air_quality_index for _, record in snapshot if record.location == location]
    if not indexes:
        return Err(NotFound(msg=f"No data found for location {location}"))
    return Ok(sum(indexes) / len(indexes))


def ids_at_location(snapshot: Snapshot, location: str) -> List[int]:
    return [record_id for record_id, record in snapshot if record.location == location]
