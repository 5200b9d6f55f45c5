# file: tests/test_database.py

import logging

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from backend.database import (MAX_STORABLE_ID, AirQualityStorage, IdCounter, IdCounterRow, create_db_engine,
                              create_session_factory)
from backend.errors import IdCounterError
from backend.models import AirQualityData, WeatherData


def make_record(record_id, location="Poznań", timestamp=1_000, air_quality_index=10):
    return AirQualityData(
        id=record_id,
        location=location,
        timestamp=timestamp,
        air_quality_index=air_quality_index,
        health_recommendations="none",
        pollutant_levels={"pm10": 12.5},
        weather_conditions=WeatherData(temperature=20.0, humidity=50.0, wind_speed=3.0),
    )


@pytest.fixture
def failing_commits(engine):
    """Make every COMMIT on the engine fail the way a full disk would."""

    def fail_commit(conn):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    def install():
        event.listen(engine, "commit", fail_commit)

    yield install
    if event.contains(engine, "commit", fail_commit):
        event.remove(engine, "commit", fail_commit)


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def storage(session_factory):
    return AirQualityStorage(session_factory)


class TestIdCounter:

    def test_starts_at_zero(self, session_factory):
        counter = IdCounter(session_factory)
        assert counter.current() == 0
        assert counter.next_id() == 0

    def test_strictly_increasing(self, session_factory):
        counter = IdCounter(session_factory)
        ids = [counter.next_id() for _ in range(5)]
        assert ids == [0, 1, 2, 3, 4]
        assert counter.current() == 5

    def test_reopening_does_not_reset(self, session_factory):
        IdCounter(session_factory).next_id()
        assert IdCounter(session_factory).next_id() == 1

    def test_survives_process_restart(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'store.db'}"
        engine = create_db_engine(url)
        counter = IdCounter(create_session_factory(engine))
        counter.next_id()
        counter.next_id()
        engine.dispose()

        engine = create_db_engine(url)
        assert IdCounter(create_session_factory(engine)).next_id() == 2
        engine.dispose()

    def test_failed_commit_is_fatal_and_keeps_value(self, session_factory, failing_commits, caplog):
        counter = IdCounter(session_factory)
        counter.next_id()
        failing_commits()
        with pytest.raises(IdCounterError):
            counter.next_id()
        assert "Cannot increment id counter" in caplog.text
        assert counter.current() == 1

    def test_exhausted_counter_is_fatal(self, session_factory, caplog):
        counter = IdCounter(session_factory)
        with session_factory.begin() as session:
            session.get(IdCounterRow, counter.name).value = MAX_STORABLE_ID
        with pytest.raises(IdCounterError):
            counter.next_id()
        assert counter.current() == MAX_STORABLE_ID
        assert any(r.levelno == logging.ERROR and "exhausted" in r.getMessage() for r in caplog.records)


class TestAirQualityStorage:

    def test_get_missing_returns_none(self, storage):
        assert storage.get(3) is None

    def test_put_then_get(self, storage):
        record = make_record(3)
        storage.put(record)
        assert storage.get(3).model_dump() == record.model_dump()

    def test_put_overwrites(self, storage):
        storage.put(make_record(3, location="Łódź"))
        storage.put(make_record(3, location="Lublin"))
        assert storage.get(3).location == "Lublin"
        assert storage.count() == 1

    def test_remove_returns_prior_value(self, storage):
        storage.put(make_record(3))
        removed = storage.remove(3)
        assert removed.id == 3
        assert storage.get(3) is None
        assert storage.remove(3) is None

    def test_iterate_is_ordered_by_id(self, storage):
        for record_id in [5, 1, 3]:
            storage.put(make_record(record_id))
        snapshot = storage.iterate()
        assert [record_id for record_id, _ in snapshot] == [1, 3, 5]
        assert all(record_id == record.id for record_id, record in snapshot)

    def test_iterate_is_a_snapshot(self, storage):
        storage.put(make_record(1))
        snapshot = storage.iterate()
        storage.put(make_record(2))
        storage.remove(1)
        assert [record_id for record_id, _ in snapshot] == [1]

    def test_ids_beyond_sql_range_are_absent(self, storage):
        assert storage.get(MAX_STORABLE_ID + 1) is None
        assert storage.remove(MAX_STORABLE_ID + 1) is None

    def test_count(self, storage):
        assert storage.count() == 0
        storage.put(make_record(1))
        storage.put(make_record(2))
        assert storage.count() == 2

    def test_failed_put_is_logged_and_raised(self, storage, failing_commits, caplog):
        failing_commits()
        with pytest.raises(OperationalError):
            storage.put(make_record(1))
        assert "Error saving air quality data id=1" in caplog.text
        assert storage.get(1) is None

    def test_failed_remove_is_logged_and_raised(self, storage, failing_commits, caplog):
        storage.put(make_record(1))
        failing_commits()
        with pytest.raises(OperationalError):
            storage.remove(1)
        assert "Error removing air quality data id=1" in caplog.text
        assert storage.get(1).id == 1
