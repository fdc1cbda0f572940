from __future__ import annotations

from abc import ABC, abstractmethod

from hotel_schedule.domain.entities.booking import Booking, BookingStatus
from hotel_schedule.domain.entities.price_entry import PriceQuote
from hotel_schedule.domain.entities.reference import Hotel, Room


class BookingRepositoryPort(ABC):
    """
    Backend collaborator for bookings and their reference data.

    Implementations raise NetworkError / RequestTimeoutError / ApiError;
    nothing else should escape.
    """

    @abstractmethod
    async def list_bookings(self) -> list[Booking]:
        """Fetch all bookings, flattened with the backend key as id."""
        raise NotImplementedError

    @abstractmethod
    async def list_hotels(self) -> list[Hotel]:
        raise NotImplementedError

    @abstractmethod
    async def list_rooms(self, hotel_id: str) -> list[Room]:
        raise NotImplementedError

    @abstractmethod
    async def get_optimal_price(self, booking_id: str) -> PriceQuote:
        raise NotImplementedError

    @abstractmethod
    async def update_optimal_price(self, booking_id: str, price: float) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update_status(self, booking_id: str, status: BookingStatus) -> None:
        raise NotImplementedError

    @abstractmethod
    async def seed_mock_bookings(self) -> None:
        """Ask the backend to (re)seed demo bookings."""
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
