from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, tzinfo

from hotel_schedule.application.exceptions import ParseError
from hotel_schedule.application.utils.calendar_time import UTC, parse_calendar_date
from hotel_schedule.domain.entities.booking import Booking, Direction
from hotel_schedule.domain.entities.filter_state import FilterState
from hotel_schedule.domain.entities.reference import ReferenceLookup

logger = logging.getLogger(__name__)


def matches_day(booking: Booking, day: date, direction: Direction, timezone: tzinfo = UTC) -> bool:
    raw = booking.date_for(direction)
    try:
        return parse_calendar_date(raw, timezone) == day
    except ParseError as e:
        logger.debug(
            "Excluding booking with unparsable date",
            extra={"booking_id": booking.id, "direction": direction.value, "reason": str(e)},
        )
        return False


def searchable_fields(booking: Booking, lookup: ReferenceLookup) -> list[str]:
    return [
        booking.id,
        booking.customer_id or "",
        lookup.hotel_name(booking.hotel_id),
        lookup.room_name(booking.hotel_id, booking.room_id),
        booking.payment_status or "",
        booking.booking_status or "",
    ]


def matches_search(booking: Booking, query: str, lookup: ReferenceLookup) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in str(value).lower() for value in searchable_fields(booking, lookup))


def _facet_value(value: str | None) -> str:
    return (value or "").strip().casefold()


def matches_facets(booking: Booking, filters: FilterState) -> bool:
    """
    Every active facet must match. Values compare case-insensitively. A room
    facet written as "hotel_id:room_id" also pins the hotel.
    """
    for field_name, wanted in filters.active_facets().items():
        if field_name == "room_id" and ":" in wanted:
            hotel_id, _, room_id = wanted.partition(":")
            if _facet_value(booking.hotel_id) != _facet_value(hotel_id):
                return False
            wanted = room_id
        if _facet_value(getattr(booking, field_name)) != _facet_value(wanted):
            return False
    return True


def filter_bookings(
    bookings: Iterable[Booking],
    filters: FilterState,
    day: date,
    direction: Direction,
    lookup: ReferenceLookup | None = None,
    timezone: tzinfo = UTC,
) -> list[Booking]:
    """
    Bookings whose `direction` date falls on `day` and that pass every
    active facet and the free-text search. Call once per direction.
    """
    lookup = lookup or ReferenceLookup()
    return [
        booking
        for booking in bookings
        if matches_day(booking, day, direction, timezone)
        and matches_facets(booking, filters)
        and matches_search(booking, filters.search_query, lookup)
    ]
