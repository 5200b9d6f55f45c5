# file: backend/db_import.py
import json
import logging
from pydantic import ValidationError

from backend.database import AIR_QUALITY_DB_URL, create_db_engine
from backend.models import AirQualityUpdatePayload
from backend.service import AirQualityService


def import_from_json(service: AirQualityService, input_file: str = "air_quality_export.json") -> int:
    """Recreate records from an export file. The store assigns fresh ids and timestamps."""
    with open(input_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    entries = data["records"] if isinstance(data, dict) else data
    logging.info(f"Loaded {len(entries)} records from {input_file}")

    try:
        payloads = [AirQualityUpdatePayload.model_validate(entry) for entry in entries]
    except ValidationError as e:
        logging.error(f"Error importing data: {e}")
        raise

    for payload in payloads:
        service.add_air_quality_data(payload)
    logging.info(f"Imported {len(payloads)} records into the air quality store")
    return len(payloads)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    engine = create_db_engine(AIR_QUALITY_DB_URL)
    import_from_json(AirQualityService.from_engine(engine))
    engine.dispose()
