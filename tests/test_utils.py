# file: tests/test_utils.py

import pytest
from datetime import datetime

from backend.utils import (get_current_time, get_current_timestamp, get_health_recommendations, get_health_tier,
                           timestamp_to_iso)


@pytest.mark.parametrize("index, tier", [
    (0, "good"),
    (50, "good"),
    (51, "moderate"),
    (100, "moderate"),
    (101, "unhealthy for sensitive groups"),
    (150, "unhealthy for sensitive groups"),
    (151, "unhealthy"),
    (200, "unhealthy"),
    (201, "very unhealthy"),
    (300, "very unhealthy"),
    (301, "hazardous"),
    (2 ** 32 - 1, "hazardous"),
])
def test_health_tier_boundaries(index, tier):
    assert get_health_tier(index) == tier


def test_health_recommendations_follow_tier():
    assert get_health_recommendations(50).startswith("Air quality is good")
    assert get_health_recommendations(151).startswith("Air quality is unhealthy.")
    assert get_health_recommendations(301).startswith("Air quality is hazardous")


def test_current_timestamp_is_nanoseconds():
    before = datetime.fromisoformat(get_current_time())
    timestamp = get_current_timestamp()
    # 2020-01-01 .. 2100-01-01 in nanoseconds
    assert 1_577_836_800_000_000_000 < timestamp < 4_102_444_800_000_000_000
    assert datetime.fromisoformat(timestamp_to_iso(timestamp)) >= before.replace(microsecond=0)


def test_timestamp_to_iso():
    assert timestamp_to_iso(0) == "1970-01-01T00:00:00+00:00"
    assert timestamp_to_iso(1_700_000_000_123_456_789) == "2023-11-14T22:13:20.123456+00:00"
