from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field, replace
from datetime import date, tzinfo
from typing import Any, TypeVar

from hotel_schedule.application.exceptions import (
    ApiError,
    BoardClosedError,
    BookingNotFoundError,
    NetworkError,
    ScheduleError,
)
from hotel_schedule.application.ports.booking_repository import BookingRepositoryPort
from hotel_schedule.application.use_cases.filter_bookings import filter_bookings, matches_day
from hotel_schedule.application.use_cases.time_slots import build_slots
from hotel_schedule.application.utils.calendar_time import UTC, day_strip
from hotel_schedule.domain.entities.booking import Booking, Direction
from hotel_schedule.domain.entities.filter_state import FilterState
from hotel_schedule.domain.entities.reference import Hotel, ReferenceLookup, Room
from hotel_schedule.domain.entities.time_slot import SlotBoard

T = TypeVar("T")


@dataclass(frozen=True)
class DailyCounts:
    arrivals: int = 0
    departures: int = 0


@dataclass(frozen=True)
class DayView:
    day: date
    slots: SlotBoard
    arrivals: int
    departures: int
    day_strip: list[date] = field(default_factory=list)
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return len(self.slots) == 0


class ScheduleBoard:
    """
    Canonical booking collection behind one calendar view.

    Holds the booking list, the hotel/room name lookup, the active filters
    and the selected booking. Writes arrive as keyed replacements, so
    responses for different bookings never overwrite each other. After
    `aclose()` in-flight requests are cancelled and late results are
    dropped.
    """

    def __init__(
        self,
        repository: BookingRepositoryPort,
        timezone: tzinfo | None = None,
        chronological: bool = False,
        strip_radius: int = 3,
    ) -> None:
        self._repository = repository
        self._timezone = timezone or UTC
        self._chronological = chronological
        self._strip_radius = strip_radius
        self._bookings: dict[str, Booking] = {}
        self._lookup = ReferenceLookup()
        self._filters = FilterState()
        self._selected: Booking | None = None
        self._tasks: set[asyncio.Future[Any]] = set()
        self._closed = False
        self._loaded = False
        self._errors: dict[str, str] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def repository(self) -> BookingRepositoryPort:
        return self._repository

    @property
    def timezone(self) -> tzinfo:
        return self._timezone

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def bookings(self) -> list[Booking]:
        return list(self._bookings.values())

    @property
    def lookup(self) -> ReferenceLookup:
        return self._lookup

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def selected(self) -> Booking | None:
        return self._selected

    @property
    def error(self) -> str | None:
        """Text of the read failures still outstanding, or None."""
        if not self._errors:
            return None
        return "; ".join(self._errors.values())

    # -- loading ---------------------------------------------------------

    async def load(self) -> None:
        """Fetch reference data and bookings. Failures keep the last good data."""
        await self.load_reference()
        await self.reload_bookings()

    async def load_reference(self) -> bool:
        try:
            hotels = await self.track(self._repository.list_hotels())
            rooms = await self.track(self._load_rooms(hotels))
        except (NetworkError, ApiError) as e:
            self._record_error("reference", "Failed to load hotels", e)
            return False
        self.set_reference(hotels, rooms)
        self._errors.pop("reference", None)
        return True

    async def reload_bookings(self) -> bool:
        try:
            bookings = await self.track(self._repository.list_bookings())
        except (NetworkError, ApiError) as e:
            self._record_error("bookings", "Failed to load bookings", e)
            return False
        self.set_bookings(bookings)
        self._errors.pop("bookings", None)
        return True

    async def seed_demo_data(self) -> bool:
        try:
            await self.track(self._repository.seed_mock_bookings())
        except (NetworkError, ApiError) as e:
            self._record_error("seed", "Failed to fetch mock bookings", e)
            return False
        self._errors.pop("seed", None)
        return await self.reload_bookings()

    async def _load_rooms(self, hotels: list[Hotel]) -> list[Room]:
        results = await asyncio.gather(
            *(self._repository.list_rooms(hotel.id) for hotel in hotels),
            return_exceptions=True,
        )
        rooms: list[Room] = []
        for hotel, result in zip(hotels, results):
            if isinstance(result, ScheduleError):
                self._logger.warning(
                    "Skipping rooms of hotel",
                    extra={"hotel_id": hotel.id, "error": str(result)},
                )
                continue
            if isinstance(result, BaseException):
                raise result
            rooms.extend(result)
        return rooms

    def _record_error(self, source: str, message: str, error: Exception) -> None:
        self._errors[source] = f"{message}: {error}"
        self._logger.error(message, extra={"error": str(error)})

    # -- in-flight tracking ----------------------------------------------

    async def track(self, awaitable: Awaitable[T]) -> T:
        """Run `awaitable` as work owned by this board, cancelled on close."""
        if self._closed:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise BoardClosedError("schedule board is closed")

        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        try:
            return await task
        finally:
            self._tasks.discard(task)

    async def aclose(self) -> None:
        self._closed = True
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._logger.info("Schedule board closed", extra={"reason": f"cancelled={len(pending)}"})

    # -- canonical collection --------------------------------------------

    def set_bookings(self, bookings: list[Booking]) -> None:
        if self._closed:
            self._logger.debug("Dropping booking list after close")
            return
        self._bookings = {booking.id: booking for booking in bookings}
        self._loaded = True
        if self._selected is not None:
            self._selected = self._bookings.get(self._selected.id)

    def set_reference(self, hotels: list[Hotel], rooms: list[Room]) -> None:
        if self._closed:
            return
        self._lookup = ReferenceLookup.build(hotels, rooms)

    def find(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def get(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking not found: {booking_id}")
        return booking

    def replace(self, booking: Booking) -> bool:
        """Swap in a new version of an existing booking. Returns False if not applied."""
        if self._closed:
            self._logger.debug("Dropping update after close", extra={"booking_id": booking.id})
            return False
        if booking.id not in self._bookings:
            self._logger.warning("Ignoring update for unknown booking", extra={"booking_id": booking.id})
            return False
        self._bookings[booking.id] = booking
        if self._selected is not None and self._selected.id == booking.id:
            self._selected = booking
        return True

    def select(self, booking_id: str) -> Booking:
        self._selected = self.get(booking_id)
        return self._selected

    def clear_selection(self) -> None:
        self._selected = None

    # -- filters ---------------------------------------------------------

    def update_filters(self, **changes: str) -> FilterState:
        self._filters = replace(self._filters, **changes)
        return self._filters

    def reset_filters(self) -> FilterState:
        self._filters = FilterState()
        return self._filters

    # -- views -----------------------------------------------------------

    def view(self, day: date) -> DayView:
        bookings = self.bookings
        checkins = filter_bookings(bookings, self._filters, day, Direction.CHECKIN, self._lookup, self._timezone)
        checkouts = filter_bookings(bookings, self._filters, day, Direction.CHECKOUT, self._lookup, self._timezone)

        visible = {b.id for b in checkins} | {b.id for b in checkouts}
        merged = [b for b in bookings if b.id in visible]

        return DayView(
            day=day,
            slots=build_slots(merged, day, chronological=self._chronological, timezone=self._timezone),
            arrivals=len(checkins),
            departures=len(checkouts),
            day_strip=day_strip(day, self._strip_radius),
            error=self.error,
        )

    def daily_counts(self, day: date) -> DailyCounts:
        """Unfiltered arrivals and departures for `day`."""
        bookings = self.bookings
        return DailyCounts(
            arrivals=sum(1 for b in bookings if matches_day(b, day, Direction.CHECKIN, self._timezone)),
            departures=sum(1 for b in bookings if matches_day(b, day, Direction.CHECKOUT, self._timezone)),
        )
