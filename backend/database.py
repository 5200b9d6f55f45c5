# file: backend/database.py

import os
import logging
from dotenv import load_dotenv
from sqlalchemy import BigInteger, Column, LargeBinary, String, create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from typing import List, Optional, Tuple

from backend.codec import decode_record, encode_record
from backend.errors import IdCounterError
from backend.models import AirQualityData

load_dotenv()

AIR_QUALITY_DB_URL = os.getenv("AIR_QUALITY_DB_URL", "sqlite:///air_quality.db")

# SQL INTEGER columns are signed 64-bit
MAX_STORABLE_ID = 2 ** 63 - 1

Base = declarative_base()


class IdCounterRow(Base):
    __tablename__ = "id_counter"

    name = Column(String(64), primary_key=True)
    value = Column(BigInteger, nullable=False, default=0)


class AirQualityRow(Base):
    __tablename__ = "air_quality_data"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    data = Column(LargeBinary, nullable=False)


def create_db_engine(url: str = AIR_QUALITY_DB_URL) -> Engine:
    """Create the engine and both tables (counter and record map) if missing."""
    kwargs = {}
    if url.startswith("sqlite"):
        # Endpoints run on a thread pool; access is serialized by the service lock
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)
    Base.metadata.create_all(engine)
    logging.info(f"Connected to air quality database at {engine.url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


class IdCounter:
    """Durable monotonic counter. Issued values are never reused."""

    def __init__(self, session_factory: sessionmaker, name: str = "air_quality_data") -> None:
        self._session_factory = session_factory
        self.name = name
        try:
            with self._session_factory.begin() as session:
                if session.get(IdCounterRow, name) is None:
                    session.add(IdCounterRow(name=name, value=0))
        except SQLAlchemyError as e:
            logging.error(f"Cannot create id counter {name}: {e}")
            raise IdCounterError(f"cannot create id counter {name}") from e

    def current(self) -> int:
        """Value the next call to next_id will return."""
        with self._session_factory() as session:
            return session.get(IdCounterRow, self.name).value

    def next_id(self) -> int:
        """Return the current value and durably store value + 1."""
        try:
            with self._session_factory.begin() as session:
                row = session.get(IdCounterRow, self.name, with_for_update=True)
                current_value = row.value
                if current_value >= MAX_STORABLE_ID:
                    logging.error(f"Id counter {self.name} exhausted at {current_value}")
                    raise IdCounterError(f"id counter {self.name} exhausted at {current_value}")
                row.value = current_value + 1
        except SQLAlchemyError as e:
            logging.error(f"Cannot increment id counter {self.name}: {e}")
            raise IdCounterError(f"cannot increment id counter {self.name}") from e
        return current_value


class AirQualityStorage:
    """Ordered durable map from record id to encoded AirQualityData."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get(self, record_id: int) -> Optional[AirQualityData]:
        if record_id > MAX_STORABLE_ID:
            return None
        with self._session_factory() as session:
            row = session.get(AirQualityRow, record_id)
            return decode_record(row.data) if row is not None else None

    def put(self, record: AirQualityData) -> None:
        """Insert or overwrite the record stored under record.id."""
        data = encode_record(record)
        try:
            with self._session_factory.begin() as session:
                session.merge(AirQualityRow(id=record.id, data=data))
        except SQLAlchemyError as e:
            logging.error(f"Error saving air quality data id={record.id}: {e}")
            raise

    def remove(self, record_id: int) -> Optional[AirQualityData]:
        if record_id > MAX_STORABLE_ID:
            return None
        try:
            with self._session_factory.begin() as session:
                row = session.get(AirQualityRow, record_id)
                if row is None:
                    return None
                record = decode_record(row.data)
                session.delete(row)
        except SQLAlchemyError as e:
            logging.error(f"Error removing air quality data id={record_id}: {e}")
            raise
        return record

    def iterate(self) -> List[Tuple[int, AirQualityData]]:
        """Snapshot of all entries in ascending id order."""
        with self._session_factory() as session:
            rows = session.execute(select(AirQualityRow.id, AirQualityRow.data).order_by(AirQualityRow.id)).all()
        return [(row_id, decode_record(data)) for row_id, data in rows]

    def count(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count()).select_from(AirQualityRow))
