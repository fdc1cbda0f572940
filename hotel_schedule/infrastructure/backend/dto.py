from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hotel_schedule.domain.entities.booking import Booking
from hotel_schedule.domain.entities.price_entry import PriceQuote
from hotel_schedule.domain.entities.reference import Hotel, Room


def _soft_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _soft_price(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) else None


class Envelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool | None = None
    data: Any = None
    error: Any = None
    message: Any = None

    def failure_text(self) -> str:
        return str(self.error or self.message or "Request failed")


class BookingRecordDTO(BaseModel):
    """One value of the `bookings` map returned by GET /booking/list."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    hotel_id: str | None = Field(None, alias="hotelId")
    room_id: str | None = Field(None, alias="roomId")
    customer_id: str | None = Field(None, alias="customerId")
    book_in: str | None = Field(None, alias="bookIn")
    book_out: str | None = Field(None, alias="bookOut")
    eta: str | None = None
    etd: str | None = None
    booking_status: str | None = Field(None, alias="bookingStatus")
    payment_status: str | None = Field(None, alias="paymentStatus")
    optimal_price: float | None = Field(None, alias="optimalPrice")
    pricing_method: str | None = Field(None, alias="pricingMethod")

    @field_validator(
        "hotel_id",
        "room_id",
        "customer_id",
        "book_in",
        "book_out",
        "eta",
        "etd",
        "booking_status",
        "payment_status",
        "pricing_method",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _soft_str(value)

    @field_validator("optimal_price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> float | None:
        return _soft_price(value)

    def to_entity(self, booking_id: str) -> Booking:
        return Booking(
            id=booking_id,
            hotel_id=self.hotel_id,
            room_id=self.room_id,
            customer_id=self.customer_id,
            book_in=self.book_in,
            book_out=self.book_out,
            eta=self.eta,
            etd=self.etd,
            booking_status=self.booking_status,
            payment_status=self.payment_status,
            optimal_price=self.optimal_price,
            pricing_method=self.pricing_method,
            extra=dict(self.model_extra or {}),
        )


class BookingListDTO(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    bookings: dict[str, Any]
    checkins_today: int | None = Field(None, alias="checkinsToday")
    checkouts_today: int | None = Field(None, alias="checkoutsToday")

    def to_entities(self) -> list[Booking]:
        """Flatten the keyed map, injecting each key as the booking id."""
        out: list[Booking] = []
        for key, record in self.bookings.items():
            if not isinstance(record, dict):
                continue
            out.append(BookingRecordDTO.model_validate(record).to_entity(str(key)))
        return out


class HotelDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""

    @field_validator("id", "name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    def to_entity(self) -> Hotel:
        return Hotel(id=self.id, name=self.name)


class RoomDTO(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    room_name: str = Field("", alias="RoomName")

    @field_validator("id", "room_name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    def to_entity(self, hotel_id: str) -> Room:
        return Room(id=self.id, hotel_id=hotel_id, name=self.room_name)


class OptimalPriceDTO(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    optimal_price: float | None = Field(None, alias="optimalPrice")
    pricing_method: str | None = Field(None, alias="pricingMethod")

    @field_validator("optimal_price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> float | None:
        return _soft_price(value)

    @field_validator("pricing_method", mode="before")
    @classmethod
    def _coerce_method(cls, value: Any) -> str | None:
        return _soft_str(value)

    def to_quote(self) -> PriceQuote:
        return PriceQuote(optimal_price=self.optimal_price, pricing_method=self.pricing_method)
