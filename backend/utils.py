#file: backend/utils.py

from datetime import datetime, timedelta
import pytz
from typing import List, Tuple

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)

# (upper bound inclusive, tier, recommendation)
HEALTH_TIERS: List[Tuple[int, str, str]] = [
    (50, "good", "Air quality is good. No health implications."),
    (100, "moderate",
     "Air quality is moderate. People with respiratory or heart issues should limit outdoor activities."),
    (150, "unhealthy for sensitive groups",
     "Air quality is unhealthy for sensitive groups. Limit outdoor activities if you have health issues."),
    (200, "unhealthy", "Air quality is unhealthy. Everyone should limit prolonged outdoor exertion."),
    (300, "very unhealthy", "Air quality is very unhealthy. Health warnings of emergency conditions."),
]
HAZARDOUS = ("hazardous", "Air quality is hazardous. Everyone should avoid all outdoor activities.")


def get_current_time() -> str:
    """Get current UTC time as a formatted string."""
    return datetime.now(pytz.utc).isoformat()


def get_current_timestamp() -> int:
    """Get current UTC time as integer nanoseconds since the Unix epoch."""
    delta = datetime.now(pytz.utc) - EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000


def timestamp_to_iso(timestamp: int) -> str:
    """Format a nanosecond timestamp as an ISO 8601 UTC string (microsecond precision)."""
    return (EPOCH + timedelta(microseconds=timestamp // 1_000)).isoformat()


def _health_tier_entry(air_quality_index: int) -> Tuple[str, str]:
    for upper_bound, tier, recommendation in HEALTH_TIERS:
        if air_quality_index <= upper_bound:
            return tier, recommendation
    return HAZARDOUS


def get_health_tier(air_quality_index: int) -> str:
    """Map an index to its tier label. Boundary values belong to the lower tier."""
    return _health_tier_entry(air_quality_index)[0]


def get_health_recommendations(air_quality_index: int) -> str:
    """Advice sentence for the tier of the given index."""
    return _health_tier_entry(air_quality_index)[1]
