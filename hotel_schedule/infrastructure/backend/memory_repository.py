from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta

from hotel_schedule.application.exceptions import ApiError
from hotel_schedule.application.ports.booking_repository import BookingRepositoryPort
from hotel_schedule.domain.entities.booking import Booking, BookingStatus
from hotel_schedule.domain.entities.price_entry import PriceQuote
from hotel_schedule.domain.entities.reference import Hotel, Room


class MemoryBookingRepository(BookingRepositoryPort):
    def __init__(
        self,
        bookings: list[Booking] | None = None,
        hotels: list[Hotel] | None = None,
        rooms: list[Room] | None = None,
        prices: dict[str, PriceQuote] | None = None,
    ) -> None:
        self._bookings: dict[str, Booking] = {b.id: b for b in bookings or []}
        self._hotels = list(hotels or [])
        self._rooms = list(rooms or [])
        self._prices = dict(prices or {})
        self.calls: list[tuple[str, str | None]] = []
        self._logger = logging.getLogger(__name__)

    async def list_bookings(self) -> list[Booking]:
        self.calls.append(("list_bookings", None))
        return list(self._bookings.values())

    async def list_hotels(self) -> list[Hotel]:
        self.calls.append(("list_hotels", None))
        return list(self._hotels)

    async def list_rooms(self, hotel_id: str) -> list[Room]:
        self.calls.append(("list_rooms", hotel_id))
        return [room for room in self._rooms if room.hotel_id == hotel_id]

    async def get_optimal_price(self, booking_id: str) -> PriceQuote:
        self.calls.append(("get_optimal_price", booking_id))
        booking = self._require(booking_id)
        quote = self._prices.get(booking_id)
        if quote is None:
            if booking.optimal_price is None:
                raise ApiError("Booking data is incomplete", status_code=400)
            quote = PriceQuote(optimal_price=booking.optimal_price, pricing_method=booking.pricing_method)
        return quote

    async def update_optimal_price(self, booking_id: str, price: float) -> None:
        self.calls.append(("update_optimal_price", booking_id))
        self._bookings[booking_id] = replace(self._require(booking_id), optimal_price=price)

    async def update_status(self, booking_id: str, status: BookingStatus) -> None:
        self.calls.append(("update_status", booking_id))
        self._bookings[booking_id] = self._require(booking_id).with_status(status)
        self._logger.info("Mock booking status updated", extra={"booking_id": booking_id, "status": status.value})

    async def seed_mock_bookings(self) -> None:
        self.calls.append(("seed_mock_bookings", None))
        hotels, rooms, bookings, prices = demo_data(date.today())
        self._hotels = hotels
        self._rooms = rooms
        self._bookings.update({b.id: b for b in bookings})
        self._prices.update(prices)

    def _require(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise ApiError("Booking not found", status_code=404)
        return booking


def demo_data(today: date) -> tuple[list[Hotel], list[Room], list[Booking], dict[str, PriceQuote]]:
    """A small hotel with a handful of arrivals and departures around `today`."""
    hotels = [Hotel(id="h1", name="Harbor View"), Hotel(id="h2", name="Old Town Inn")]
    rooms = [
        Room(id="r101", hotel_id="h1", name="Deluxe 101"),
        Room(id="r102", hotel_id="h1", name="Suite 102"),
        Room(id="r201", hotel_id="h2", name="Twin 201"),
    ]
    yesterday = (today - timedelta(days=1)).isoformat()
    iso_today = today.isoformat()
    tomorrow = (today + timedelta(days=1)).isoformat()
    bookings = [
        Booking(
            id="demo-1", hotel_id="h1", room_id="r101", customer_id="c-anna",
            book_in=iso_today, book_out=tomorrow, eta="14:00", etd="11:00",
            booking_status=BookingStatus.CONFIRMED.value, payment_status="Paid",
        ),
        Booking(
            id="demo-2", hotel_id="h1", room_id="r102", customer_id="c-ben",
            book_in=iso_today, book_out=tomorrow, eta="09:15", etd="12:00",
            booking_status=BookingStatus.PENDING.value, payment_status="Unpaid",
        ),
        Booking(
            id="demo-3", hotel_id="h2", room_id="r201", customer_id="c-chen",
            book_in=yesterday, book_out=iso_today, eta="18:30", etd="10:45",
            booking_status=BookingStatus.CHECKED_IN.value, payment_status="Paid",
        ),
        Booking(
            id="demo-4", hotel_id="h2", room_id="r201", customer_id="c-dana",
            book_in=iso_today, book_out=tomorrow, eta="late", etd="10:00",
            booking_status=BookingStatus.CANCELLED.value, payment_status="Unpaid",
        ),
    ]
    prices = {
        "demo-1": PriceQuote(optimal_price=180.0, pricing_method="nightly"),
        "demo-2": PriceQuote(optimal_price=95.5, pricing_method="hourly"),
        "demo-3": PriceQuote(optimal_price=120.0, pricing_method="nightly"),
    }
    return hotels, rooms, bookings, prices
