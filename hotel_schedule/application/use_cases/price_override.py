from __future__ import annotations

import logging
import math
from dataclasses import replace

from hotel_schedule.application.exceptions import ApiError, NetworkError, ValidationError
from hotel_schedule.application.ports.booking_repository import BookingRepositoryPort
from hotel_schedule.application.use_cases.schedule_board import ScheduleBoard
from hotel_schedule.application.utils.single_flight import SingleFlight
from hotel_schedule.domain.entities.price_entry import PriceEntry, PriceStatus


def validate_price(value: float | int | str | None) -> float:
    """Finite, non-negative price from a number or numeric string."""
    if isinstance(value, bool) or value is None:
        raise ValidationError("Price is required")
    try:
        price = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Price must be a number, got {value!r}") from e
    if not math.isfinite(price):
        raise ValidationError("Price must be a finite number")
    if price < 0:
        raise ValidationError("Price cannot be negative")
    return price


def _format_draft(price: float | None) -> str:
    if price is None:
        return ""
    return f"{price:g}"


class PriceOverrideCache:
    """
    Session cache of optimal prices with a manual override workflow.

    One PriceEntry per booking id moves through
    unloaded -> loading -> loaded -> editing -> saving -> loaded.
    """

    def __init__(self, repository: BookingRepositoryPort, board: ScheduleBoard) -> None:
        self._repository = repository
        self._board = board
        self._entries: dict[str, PriceEntry] = {}
        self._saving = SingleFlight("price save")
        self._logger = logging.getLogger(__name__)

    @property
    def board(self) -> ScheduleBoard:
        return self._board

    def entry(self, booking_id: str) -> PriceEntry:
        entry = self._entries.get(booking_id)
        if entry is not None:
            return entry
        booking = self._board.get(booking_id)
        if booking.optimal_price is not None:
            return PriceEntry(
                booking_id=booking_id,
                status=PriceStatus.LOADED,
                price=booking.optimal_price,
                pricing_method=booking.pricing_method,
            )
        return PriceEntry(booking_id=booking_id)

    def _set(self, entry: PriceEntry) -> PriceEntry:
        self._entries[entry.booking_id] = entry
        return entry

    async def load(self, booking_id: str) -> PriceEntry:
        current = self.entry(booking_id)
        if current.price is not None and current.status != PriceStatus.UNLOADED:
            return self._set(current)
        return await self._fetch(current)

    async def refresh(self, booking_id: str) -> PriceEntry:
        return await self._fetch(self.entry(booking_id))

    async def _fetch(self, current: PriceEntry) -> PriceEntry:
        booking_id = current.booking_id
        self._set(replace(current, status=PriceStatus.LOADING, error=None))
        try:
            quote = await self._board.track(self._repository.get_optimal_price(booking_id))
        except (NetworkError, ApiError) as e:
            self._logger.warning("Optimal price fetch failed", extra={"booking_id": booking_id, "error": str(e)})
            fallback = PriceStatus.LOADED if current.price is not None else PriceStatus.UNLOADED
            return self._set(replace(current, status=fallback, error=str(e)))

        booking = self._board.find(booking_id)
        if booking is not None:
            self._board.replace(booking.with_price(quote.optimal_price, quote.pricing_method))
        return self._set(
            PriceEntry(
                booking_id=booking_id,
                status=PriceStatus.LOADED,
                price=quote.optimal_price,
                pricing_method=quote.pricing_method,
            )
        )

    def edit(self, booking_id: str) -> PriceEntry:
        current = self.entry(booking_id)
        return self._set(replace(current, status=PriceStatus.EDITING, draft=_format_draft(current.price), error=None))

    def cancel_edit(self, booking_id: str) -> PriceEntry:
        current = self.entry(booking_id)
        status = PriceStatus.LOADED if current.price is not None else PriceStatus.UNLOADED
        return self._set(replace(current, status=status, draft=None, error=None))

    async def save(self, booking_id: str, new_price: float | int | str) -> PriceEntry:
        """
        Persist a manual price. Bad input raises ValidationError before any
        request and leaves the entry untouched; a failed request returns the
        entry to editing with the typed value kept and re-raises.
        """
        price = validate_price(new_price)
        current = self.entry(booking_id)
        draft = new_price if isinstance(new_price, str) else _format_draft(price)

        with self._saving.hold(booking_id):
            self._set(replace(current, status=PriceStatus.SAVING, draft=draft, error=None))
            try:
                await self._board.track(self._repository.update_optimal_price(booking_id, price))
            except (NetworkError, ApiError) as e:
                self._logger.error("Price save failed", extra={"booking_id": booking_id, "error": str(e)})
                self._set(replace(current, status=PriceStatus.EDITING, draft=draft, error=str(e)))
                raise

        booking = self._board.find(booking_id)
        if booking is not None:
            self._board.replace(booking.with_price(price))
        self._logger.info("Optimal price overridden", extra={"booking_id": booking_id})
        return self._set(replace(current, status=PriceStatus.LOADED, price=price, draft=None, error=None))
