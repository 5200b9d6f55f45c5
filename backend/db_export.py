# file: backend/db_export.py

import json
import logging

from backend.database import AIR_QUALITY_DB_URL, create_db_engine
from backend.service import AirQualityService
from backend.utils import get_current_time, timestamp_to_iso


def export_to_json(service: AirQualityService, output_file: str = "air_quality_export.json") -> int:
    """Export all air quality records, ascending by id, to a JSON file."""
    records = service.get_all_air_quality_data()
    data = {
        "exported_at": get_current_time(),
        "count": len(records),
        "records": [{**record.model_dump(), "recorded_at": timestamp_to_iso(record.timestamp)} for record in records],
    }
    try:
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent = 2, ensure_ascii = False)
    except OSError as e:
        logging.error(f"Error exporting data: {e}")
        raise
    logging.info(f"Exported {len(records)} records to {output_file}")
    return len(records)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    engine = create_db_engine(AIR_QUALITY_DB_URL)
    export_to_json(AirQualityService.from_engine(engine))
    engine.dispose()
