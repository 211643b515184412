"""State of a value fetched from somewhere else, such as an uploaded file.

The four states are mutually exclusive, so they are modelled as four variants
instead of a loading flag next to an optional value and an optional error.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class RemoteStatus(Enum):
    NOT_ASKED = "not_asked"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class NotAsked:
    status = RemoteStatus.NOT_ASKED


@dataclass(frozen=True)
class Loading:
    status = RemoteStatus.LOADING


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    status = RemoteStatus.SUCCESS


@dataclass(frozen=True)
class Failure:
    error: Any
    status = RemoteStatus.FAILURE


RemoteData = Union[NotAsked, Loading, Success[T], Failure]


def is_success(remote: "RemoteData") -> bool:
    return remote.status is RemoteStatus.SUCCESS


def with_default(default: T, remote: "RemoteData") -> T:
    if isinstance(remote, Success):
        return remote.value
    return default
