from __future__ import annotations

import asyncio
from collections.abc import Callable

import pytest

from hotel_schedule.application.use_cases.lifecycle import BookingLifecycleController
from hotel_schedule.application.use_cases.price_override import PriceOverrideCache
from hotel_schedule.application.use_cases.schedule_board import ScheduleBoard
from hotel_schedule.domain.entities.booking import Booking, BookingStatus
from hotel_schedule.domain.entities.price_entry import PriceQuote
from hotel_schedule.domain.entities.reference import Hotel, Room
from hotel_schedule.infrastructure.backend.memory_repository import MemoryBookingRepository

HOTELS = [Hotel(id="h1", name="Harbor View"), Hotel(id="h2", name="Old Town Inn")]
ROOMS = [
    Room(id="r1", hotel_id="h1", name="Deluxe 101"),
    Room(id="r2", hotel_id="h1", name="Suite 102"),
    Room(id="r9", hotel_id="h2", name="Twin 201"),
]


def _make_booking(**overrides) -> Booking:
    fields = {
        "id": "b1",
        "hotel_id": "h1",
        "room_id": "r1",
        "customer_id": "c-anna",
        "book_in": "2025-03-05",
        "book_out": "2025-03-07",
        "eta": "14:00",
        "etd": "11:00",
        "booking_status": BookingStatus.CONFIRMED.value,
        "payment_status": "Paid",
    }
    fields.update(overrides)
    return Booking(**fields)


@pytest.fixture()
def make_booking() -> Callable[..., Booking]:
    return _make_booking


class ScriptedRepository(MemoryBookingRepository):
    """Memory repository whose calls can be made to fail or to wait on a gate."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.failures: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}

    async def _step(self, name: str) -> None:
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        error = self.failures.get(name)
        if error is not None:
            raise error

    async def list_bookings(self):
        await self._step("list_bookings")
        return await super().list_bookings()

    async def list_hotels(self):
        await self._step("list_hotels")
        return await super().list_hotels()

    async def list_rooms(self, hotel_id):
        await self._step(f"list_rooms:{hotel_id}")
        return await super().list_rooms(hotel_id)

    async def get_optimal_price(self, booking_id):
        await self._step("get_optimal_price")
        return await super().get_optimal_price(booking_id)

    async def update_optimal_price(self, booking_id, price):
        await self._step("update_optimal_price")
        return await super().update_optimal_price(booking_id, price)

    async def update_status(self, booking_id, status):
        await self._step("update_status")
        return await super().update_status(booking_id, status)


@pytest.fixture()
def repository() -> ScriptedRepository:
    return ScriptedRepository(
        bookings=[
            _make_booking(),
            _make_booking(
                id="b2",
                room_id="r2",
                customer_id="c-ben",
                eta="09:15",
                payment_status="Unpaid",
                booking_status=BookingStatus.PENDING.value,
            ),
            _make_booking(
                id="b3",
                hotel_id="h2",
                room_id="r9",
                customer_id="c-chen",
                book_in="2025-03-03",
                book_out="2025-03-05",
                etd="10:30",
                booking_status=BookingStatus.CHECKED_IN.value,
            ),
        ],
        hotels=HOTELS,
        rooms=ROOMS,
        prices={
            "b1": PriceQuote(optimal_price=180.0, pricing_method="nightly"),
            "b2": PriceQuote(optimal_price=95.5, pricing_method="hourly"),
        },
    )


@pytest.fixture()
def loaded_board(repository: ScriptedRepository) -> ScheduleBoard:
    board = ScheduleBoard(repository=repository)
    asyncio.run(board.load())
    return board


@pytest.fixture()
def lifecycle(repository: ScriptedRepository, loaded_board: ScheduleBoard) -> BookingLifecycleController:
    return BookingLifecycleController(repository=repository, board=loaded_board)


@pytest.fixture()
def prices(repository: ScriptedRepository, loaded_board: ScheduleBoard) -> PriceOverrideCache:
    return PriceOverrideCache(repository=repository, board=loaded_board)
