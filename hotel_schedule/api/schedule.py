from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from hotel_schedule.api.schemas import (
    BookingDetailSchema,
    BookingSchema,
    BucketSchema,
    CountsSchema,
    FilterSchema,
    PriceEntrySchema,
    PriceUpdateSchema,
    ScheduleResponseSchema,
    StatusUpdateSchema,
    TimeSlotSchema,
)
from hotel_schedule.application.exceptions import (
    ApiError,
    BoardClosedError,
    BookingBusyError,
    BookingNotFoundError,
    NetworkError,
    RequestTimeoutError,
    ScheduleError,
    ValidationError,
)
from hotel_schedule.application.use_cases.lifecycle import BookingLifecycleController
from hotel_schedule.application.use_cases.price_override import PriceOverrideCache
from hotel_schedule.application.use_cases.schedule_board import ScheduleBoard
from hotel_schedule.application.utils.calendar_time import shift_day
from hotel_schedule.core.config import settings
from hotel_schedule.wiring.dependencies import get_board, get_lifecycle_controller, get_price_cache

router = APIRouter()
logger = logging.getLogger(__name__)


def _http_error(e: ScheduleError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, BookingNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, BookingBusyError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, RequestTimeoutError):
        return HTTPException(status_code=504, detail=str(e))
    if isinstance(e, (ApiError, NetworkError)):
        return HTTPException(status_code=502, detail=str(e))
    if isinstance(e, BoardClosedError):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


async def _ensure_loaded(board: ScheduleBoard) -> None:
    if not board.loaded:
        await board.load()


def _today(board: ScheduleBoard) -> date:
    return datetime.now(board.timezone).date()


@router.get("/schedule", response_model=ScheduleResponseSchema)
async def get_schedule(
    day: date | None = Query(None, description="Calendar day, YYYY-MM-DD. Defaults to today."),
    board: ScheduleBoard = Depends(get_board),
):
    await _ensure_loaded(board)
    target = day or _today(board)
    view = board.view(target)
    totals = board.daily_counts(target)

    buckets = []
    for label, slots in view.slots.iter_buckets():
        buckets.append(
            BucketSchema(
                label=label,
                slots=[TimeSlotSchema.from_entity(slot, _find(board, slot.booking_id)) for slot in slots],
            )
        )

    message = None
    if view.is_empty:
        filters = board.filters
        if filters.active_facets() or filters.search_query.strip():
            message = "No bookings match your filters."
        else:
            message = "No bookings for this day."

    return ScheduleResponseSchema(
        day=target,
        buckets=buckets,
        filtered=CountsSchema(arrivals=view.arrivals, departures=view.departures),
        totals=CountsSchema(arrivals=totals.arrivals, departures=totals.departures),
        day_strip=view.day_strip,
        previous_week=shift_day(target, -settings.WEEK_JUMP_DAYS),
        next_week=shift_day(target, settings.WEEK_JUMP_DAYS),
        message=message,
        error=view.error,
    )


def _find(board: ScheduleBoard, booking_id: str):
    try:
        return board.get(booking_id)
    except BookingNotFoundError:
        return None


@router.put("/schedule/filters", response_model=FilterSchema)
async def update_filters(req: FilterSchema, board: ScheduleBoard = Depends(get_board)):
    state = board.update_filters(**req.model_dump())
    return FilterSchema(**asdict(state))


@router.delete("/schedule/filters", response_model=FilterSchema)
async def reset_filters(board: ScheduleBoard = Depends(get_board)):
    state = board.reset_filters()
    return FilterSchema(**asdict(state))


@router.post("/schedule/reload")
async def reload_schedule(board: ScheduleBoard = Depends(get_board)) -> dict[str, object]:
    await board.load()
    return {"bookings": len(board.bookings), "error": board.error}


@router.post("/schedule/seed")
async def seed_schedule(board: ScheduleBoard = Depends(get_board)) -> dict[str, object]:
    await board.seed_demo_data()
    return {"bookings": len(board.bookings), "error": board.error}


@router.get("/bookings/{booking_id}", response_model=BookingDetailSchema)
async def get_booking(
    booking_id: str,
    board: ScheduleBoard = Depends(get_board),
    lifecycle: BookingLifecycleController = Depends(get_lifecycle_controller),
):
    await _ensure_loaded(board)
    try:
        booking = board.select(booking_id)
    except ScheduleError as e:
        raise _http_error(e)
    return BookingDetailSchema(
        booking=BookingSchema.from_entity(booking, board.lookup),
        available_action=lifecycle.available_action(booking),
    )


@router.post("/bookings/{booking_id}/status", response_model=BookingDetailSchema)
async def update_status(
    booking_id: str,
    req: StatusUpdateSchema,
    board: ScheduleBoard = Depends(get_board),
    lifecycle: BookingLifecycleController = Depends(get_lifecycle_controller),
):
    await _ensure_loaded(board)
    try:
        booking = await lifecycle.transition(booking_id, req.status)
    except ScheduleError as e:
        logger.warning("Status update rejected", extra={"booking_id": booking_id, "status": req.status, "error": str(e)})
        raise _http_error(e)
    return BookingDetailSchema(
        booking=BookingSchema.from_entity(booking, board.lookup),
        available_action=lifecycle.available_action(booking),
    )


@router.get("/bookings/{booking_id}/price", response_model=PriceEntrySchema)
async def get_price(
    booking_id: str,
    board: ScheduleBoard = Depends(get_board),
    prices: PriceOverrideCache = Depends(get_price_cache),
):
    await _ensure_loaded(board)
    try:
        entry = await prices.load(booking_id)
    except ScheduleError as e:
        raise _http_error(e)
    return PriceEntrySchema.from_entity(entry)


@router.post("/bookings/{booking_id}/price/refresh", response_model=PriceEntrySchema)
async def refresh_price(
    booking_id: str,
    board: ScheduleBoard = Depends(get_board),
    prices: PriceOverrideCache = Depends(get_price_cache),
):
    await _ensure_loaded(board)
    try:
        entry = await prices.refresh(booking_id)
    except ScheduleError as e:
        raise _http_error(e)
    return PriceEntrySchema.from_entity(entry)


@router.post("/bookings/{booking_id}/price/edit", response_model=PriceEntrySchema)
async def edit_price(booking_id: str, prices: PriceOverrideCache = Depends(get_price_cache)):
    await _ensure_loaded(prices.board)
    try:
        entry = prices.edit(booking_id)
    except ScheduleError as e:
        raise _http_error(e)
    return PriceEntrySchema.from_entity(entry)


@router.delete("/bookings/{booking_id}/price/edit", response_model=PriceEntrySchema)
async def cancel_price_edit(booking_id: str, prices: PriceOverrideCache = Depends(get_price_cache)):
    await _ensure_loaded(prices.board)
    try:
        entry = prices.cancel_edit(booking_id)
    except ScheduleError as e:
        raise _http_error(e)
    return PriceEntrySchema.from_entity(entry)


@router.put("/bookings/{booking_id}/price", response_model=PriceEntrySchema)
async def save_price(
    booking_id: str,
    req: PriceUpdateSchema,
    board: ScheduleBoard = Depends(get_board),
    prices: PriceOverrideCache = Depends(get_price_cache),
):
    await _ensure_loaded(board)
    try:
        entry = await prices.save(booking_id, req.price)
    except ScheduleError as e:
        raise _http_error(e)
    return PriceEntrySchema.from_entity(entry)
