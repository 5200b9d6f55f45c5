#file: backend/errors.py

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")


class NotFound(BaseModel):
    """The only recoverable error kind: the requested id or location has no data."""
    msg: str

    def to_detail(self) -> dict:
        return {"NotFound": {"msg": self.msg}}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: NotFound


Result = Union[Ok[T], Err]


class StorageError(Exception):
    """Unrecoverable storage failure. Never reported to callers as NotFound."""


class RecordTooLargeError(StorageError):
    pass


class CorruptRecordError(StorageError):
    pass


class IdCounterError(StorageError):
    pass
