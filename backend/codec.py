#file: backend/codec.py

import logging
from pydantic import ValidationError

from backend.errors import CorruptRecordError, RecordTooLargeError
from backend.models import AirQualityData

MAX_RECORD_SIZE = 8192


def encode_record(record: AirQualityData) -> bytes:
    """Serialize a record to UTF-8 JSON bytes, at most MAX_RECORD_SIZE long."""
    data = record.model_dump_json().encode("utf-8")
    if len(data) > MAX_RECORD_SIZE:
        logging.error(f"Encoded record {record.id} is {len(data)} bytes, limit is {MAX_RECORD_SIZE}")
        raise RecordTooLargeError(f"record id={record.id} exceeds {MAX_RECORD_SIZE} bytes")
    return data


def decode_record(data: bytes) -> AirQualityData:
    """Inverse of encode_record. Anything else in the store is a fatal error."""
    try:
        return AirQualityData.model_validate_json(data)
    except ValidationError as e:
        logging.error(f"Error decoding stored record: {e}")
        raise CorruptRecordError("stored record is not valid codec output") from e
