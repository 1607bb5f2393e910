from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Literal, TypeVar, Union

from ..domain.models import FailureKind, WeatherRecord

T = TypeVar("T")

RequestSource = Literal["geolocation", "city"]


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Loading:
    source: RequestSource


@dataclass(frozen=True, slots=True)
class GeoDenied:
    reason: FailureKind


@dataclass(frozen=True, slots=True)
class Loaded:
    record: WeatherRecord


AcquisitionState = Union[Idle, Loading, GeoDenied, Loaded]


@dataclass(frozen=True, slots=True)
class Notice:
    """User-facing message raised when a city search fails."""

    kind: FailureKind
    query: str


class StateStore(Generic[T]):
    """Holds one value and notifies subscribers synchronously on every set."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for callback in list(self._subscribers):
            callback(value)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
