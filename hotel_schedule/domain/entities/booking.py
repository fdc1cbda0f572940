from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CHECKED_IN = "CheckedIn"
    CHECKED_OUT = "CheckedOut"
    CANCELLED = "Cancelled"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"


class Direction(str, Enum):
    CHECKIN = "checkin"
    CHECKOUT = "checkout"


@dataclass(frozen=True)
class Booking:
    id: str
    hotel_id: str | None = None
    room_id: str | None = None
    customer_id: str | None = None
    book_in: str | None = None  # calendar date as received, e.g. "2025-03-05"
    book_out: str | None = None
    eta: str | None = None  # "HH:MM", 24-hour, may be malformed
    etd: str | None = None
    booking_status: str | None = None  # BookingStatus value, unknown values kept raw
    payment_status: str | None = None  # PaymentStatus value, unknown values kept raw
    optimal_price: float | None = None
    pricing_method: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    def date_for(self, direction: Direction) -> str | None:
        return self.book_in if direction == Direction.CHECKIN else self.book_out

    def time_for(self, direction: Direction) -> str | None:
        return self.eta if direction == Direction.CHECKIN else self.etd

    def with_status(self, status: BookingStatus) -> Booking:
        return replace(self, booking_status=status.value)

    def with_price(self, price: float | None, pricing_method: str | None = None) -> Booking:
        return replace(
            self,
            optimal_price=price,
            pricing_method=pricing_method if pricing_method is not None else self.pricing_method,
        )
