from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, tzinfo

from hotel_schedule.application.exceptions import ParseError
from hotel_schedule.application.utils.calendar_time import (
    UTC,
    display_hour_label,
    label_sort_key,
    parse_calendar_date,
    parse_clock,
)
from hotel_schedule.domain.entities.booking import Booking, BookingStatus, Direction, PaymentStatus
from hotel_schedule.domain.entities.time_slot import ColorTag, SlotBoard, TimeSlot

logger = logging.getLogger(__name__)

COLOR_HEX = {
    ColorTag.A: "#E0F2F1",
    ColorTag.B: "#90EE90",
    ColorTag.C: "#ADD8E6",
    ColorTag.D: "#CFD8DC",
    ColorTag.E: "#FFE0B2",
    ColorTag.F: "#F8BBD0",
    ColorTag.G: "#ECEFF1",
}


def checkin_color(booking: Booking) -> ColorTag:
    if booking.booking_status == BookingStatus.CHECKED_IN:
        return ColorTag.A
    if booking.payment_status == PaymentStatus.PAID:
        return ColorTag.B
    if booking.payment_status == PaymentStatus.UNPAID:
        return ColorTag.C
    return ColorTag.A


def checkout_color(booking: Booking) -> ColorTag:
    if booking.booking_status == BookingStatus.CHECKED_OUT:
        return ColorTag.D
    if booking.payment_status == PaymentStatus.PAID:
        return ColorTag.E
    if booking.payment_status == PaymentStatus.UNPAID:
        return ColorTag.F
    return ColorTag.G


def color_for(booking: Booking, direction: Direction) -> ColorTag:
    if direction == Direction.CHECKIN:
        return checkin_color(booking)
    return checkout_color(booking)


def make_slot(booking: Booking, direction: Direction, day: date, timezone: tzinfo = UTC) -> TimeSlot | None:
    """Slot for one booking/direction on `day`, or None when it does not apply."""
    try:
        if parse_calendar_date(booking.date_for(direction), timezone) != day:
            return None
        hour, minute = parse_clock(booking.time_for(direction))
    except ParseError as e:
        logger.debug(
            "Skipping slot candidate",
            extra={"booking_id": booking.id, "direction": direction.value, "reason": str(e)},
        )
        return None

    return TimeSlot(
        id=f"{direction.value}-{booking.id}",
        booking_id=booking.id,
        direction=direction,
        minute_of_day=hour * 60 + minute,
        display_hour=display_hour_label(hour),
        color_tag=color_for(booking, direction),
    )


def build_slots(
    bookings: Iterable[Booking],
    day: date,
    *,
    chronological: bool = False,
    timezone: tzinfo = UTC,
) -> SlotBoard:
    """
    Group the check-in and check-out events of `day` into hour buckets.

    Bookings must already be facet filtered. Each booking can contribute a
    check-in slot, a check-out slot, both or neither; candidates with a
    missing or malformed time are dropped. Buckets are keyed by display
    label and sorted by minute inside. Labels are ordered as strings unless
    `chronological` is set.
    """
    slots_by_time: dict[str, list[TimeSlot]] = {}
    for booking in bookings:
        for direction in (Direction.CHECKIN, Direction.CHECKOUT):
            slot = make_slot(booking, direction, day, timezone)
            if slot is None:
                continue
            slots_by_time.setdefault(slot.display_hour, []).append(slot)

    for slots in slots_by_time.values():
        slots.sort(key=lambda s: s.minute_of_day)

    if chronological:
        labels = sorted(slots_by_time, key=label_sort_key)
    else:
        labels = sorted(slots_by_time)

    return SlotBoard(slots_by_time=slots_by_time, ordered_time_labels=labels)
