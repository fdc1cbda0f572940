from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from hotel_schedule.application.exceptions import BookingBusyError


class SingleFlight:
    """At most one in-progress request per key."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._in_flight: set[str] = set()

    def is_busy(self, key: str) -> bool:
        return key in self._in_flight

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        if key in self._in_flight:
            raise BookingBusyError(f"{self._name} already in progress for booking {key}")
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)
