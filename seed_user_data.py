# file: seed_user_data.py

import os
import json
import random
import logging
import requests
from dotenv import load_dotenv
from typing import Any, Dict, List

load_dotenv()

API_URL = os.getenv("AIR_QUALITY_API_URL", "http://localhost:8000")
headers = {"Content-Type" : "application/json"}


def generate_payloads(count: int, location: str = "iot_station_1", seed: int | None = None) -> List[Dict[str, Any]]:
    """Random-walk readings in realistic ranges, ready to POST to /air_quality."""
    rng = random.Random(seed)

    # Starting values in typical ranges (µg/m³)
    pm25 = rng.uniform(5.0, 50.0)
    pm10 = rng.uniform(10.0, 100.0)
    no2 = rng.uniform(1.0, 40.0)
    temperature = rng.uniform(-5.0, 30.0)
    humidity = rng.uniform(30.0, 90.0)

    payloads = []
    for _ in range(count):
        # Drift every value by +/- 1.0, never below 0
        pm25 = max(0.0, pm25 + rng.uniform(-1.0, 1.0))
        pm10 = max(0.0, pm10 + rng.uniform(-1.0, 1.0))
        no2 = max(0.0, no2 + rng.uniform(-1.0, 1.0))
        temperature += rng.uniform(-1.0, 1.0)
        humidity = min(100.0, max(0.0, humidity + rng.uniform(-1.0, 1.0)))

        air_quality_index = round(pm25 * 2)
        payloads.append({
            "location" : location,
            "air_quality_index" : air_quality_index,
            "health_recommendations" : f"Seeded reading with AQI {air_quality_index}",
            "pollutant_levels" : {"pm25" : round(pm25, 2), "pm10" : round(pm10, 2), "no2" : round(no2, 2)},
            "weather_conditions" : {"temperature" : round(temperature, 1), "humidity" : round(humidity, 1),
                                    "wind_speed" : round(rng.uniform(0.0, 12.0), 1)},
        })
    return payloads


def post_payloads(payloads: List[Dict[str, Any]], api_url: str = API_URL) -> int:
    """POST each payload; returns how many were stored."""
    url = f"{api_url}/air_quality"
    saved = 0
    for i, data in enumerate(payloads):
        try :
            response = requests.post(url, headers = headers, data = json.dumps(data))
            if response.status_code == 200 :
                saved += 1
                logging.info(f"Record {i + 1} saved with id {response.json()['id']}")
            else :
                logging.warning(f"Error for record {i + 1}: {response.status_code} - {response.text}")
        except requests.exceptions.RequestException as e :
            logging.error(f"Request failed for record {i + 1}: {e}")
    return saved


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    post_payloads(generate_payloads(5))
