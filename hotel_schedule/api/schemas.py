from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from hotel_schedule.application.use_cases.time_slots import COLOR_HEX
from hotel_schedule.domain.entities.booking import Booking
from hotel_schedule.domain.entities.price_entry import PriceEntry, PriceStatus
from hotel_schedule.domain.entities.reference import ReferenceLookup
from hotel_schedule.domain.entities.time_slot import TimeSlot


class BookingSchema(BaseModel):
    id: str
    hotel_id: str | None = None
    hotel_name: str = ""
    room_id: str | None = None
    room_name: str = ""
    customer_id: str | None = None
    book_in: str | None = None
    book_out: str | None = None
    eta: str | None = None
    etd: str | None = None
    booking_status: str | None = None
    payment_status: str | None = None
    optimal_price: float | None = None
    pricing_method: str | None = None

    @classmethod
    def from_entity(cls, booking: Booking, lookup: ReferenceLookup) -> BookingSchema:
        return cls(
            id=booking.id,
            hotel_id=booking.hotel_id,
            hotel_name=lookup.hotel_name(booking.hotel_id),
            room_id=booking.room_id,
            room_name=lookup.room_name(booking.hotel_id, booking.room_id),
            customer_id=booking.customer_id,
            book_in=booking.book_in,
            book_out=booking.book_out,
            eta=booking.eta,
            etd=booking.etd,
            booking_status=booking.booking_status,
            payment_status=booking.payment_status,
            optimal_price=booking.optimal_price,
            pricing_method=booking.pricing_method,
        )


class BookingDetailSchema(BaseModel):
    booking: BookingSchema
    available_action: str | None = None


class TimeSlotSchema(BaseModel):
    id: str
    booking_id: str
    direction: str
    minute_of_day: int
    display_hour: str
    color_tag: str
    color: str
    room_id: str | None = None
    customer_id: str | None = None

    @classmethod
    def from_entity(cls, slot: TimeSlot, booking: Booking | None) -> TimeSlotSchema:
        return cls(
            id=slot.id,
            booking_id=slot.booking_id,
            direction=slot.direction.value,
            minute_of_day=slot.minute_of_day,
            display_hour=slot.display_hour,
            color_tag=slot.color_tag.value,
            color=COLOR_HEX[slot.color_tag],
            room_id=booking.room_id if booking else None,
            customer_id=booking.customer_id if booking else None,
        )


class BucketSchema(BaseModel):
    label: str
    slots: list[TimeSlotSchema]


class CountsSchema(BaseModel):
    arrivals: int = 0
    departures: int = 0


class ScheduleResponseSchema(BaseModel):
    day: date
    buckets: list[BucketSchema] = Field(default_factory=list)
    filtered: CountsSchema
    totals: CountsSchema
    day_strip: list[date] = Field(default_factory=list)
    previous_week: date | None = None
    next_week: date | None = None
    message: str | None = None
    error: str | None = None


class FilterSchema(BaseModel):
    search_query: str = ""
    hotel_filter: str = ""
    room_filter: str = ""
    payment_status_filter: str = ""
    booking_status_filter: str = ""


class StatusUpdateSchema(BaseModel):
    status: str


class PriceUpdateSchema(BaseModel):
    price: float | str


class PriceEntrySchema(BaseModel):
    booking_id: str
    status: PriceStatus
    price: float | None = None
    pricing_method: str | None = None
    draft: str | None = None
    error: str | None = None

    @classmethod
    def from_entity(cls, entry: PriceEntry) -> PriceEntrySchema:
        return cls(
            booking_id=entry.booking_id,
            status=entry.status,
            price=entry.price,
            pricing_method=entry.pricing_method,
            draft=entry.draft,
            error=entry.error,
        )
