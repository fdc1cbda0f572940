from __future__ import annotations

import logging

from hotel_schedule.application.exceptions import InvalidTransition
from hotel_schedule.application.ports.booking_repository import BookingRepositoryPort
from hotel_schedule.application.use_cases.schedule_board import ScheduleBoard
from hotel_schedule.application.utils.single_flight import SingleFlight
from hotel_schedule.domain.entities.booking import Booking, BookingStatus

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CHECKED_IN}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CHECKED_IN}),
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.CHECKED_OUT}),
    BookingStatus.CHECKED_OUT: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

ACTION_LABELS = {
    BookingStatus.CHECKED_IN: "Check In",
    BookingStatus.CHECKED_OUT: "Check Out",
}


def _as_status(value: str | BookingStatus | None) -> BookingStatus | None:
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(value)
    except ValueError:
        return None


def allowed_targets(current: str | BookingStatus | None) -> frozenset[BookingStatus]:
    status = _as_status(current)
    if status is None:
        return frozenset()
    return ALLOWED_TRANSITIONS[status]


def next_status(current: str | BookingStatus | None) -> BookingStatus | None:
    targets = allowed_targets(current)
    return next(iter(targets)) if targets else None


def validate_transition(booking: Booking, target: str | BookingStatus) -> BookingStatus:
    target_status = _as_status(target)
    if target_status is None:
        raise InvalidTransition(f"Unknown booking status: {target!r}")
    if target_status not in allowed_targets(booking.booking_status):
        raise InvalidTransition(
            f"Cannot move booking {booking.id} from {booking.booking_status} to {target_status.value}"
        )
    return target_status


class BookingLifecycleController:
    def __init__(self, repository: BookingRepositoryPort, board: ScheduleBoard) -> None:
        self._repository = repository
        self._board = board
        self._in_flight = SingleFlight("status update")
        self._logger = logging.getLogger(__name__)

    @property
    def board(self) -> ScheduleBoard:
        return self._board

    def is_busy(self, booking_id: str) -> bool:
        return self._in_flight.is_busy(booking_id)

    def available_action(self, booking: Booking) -> str | None:
        """Label of the single action offered for `booking`, if any."""
        if self._in_flight.is_busy(booking.id):
            return None
        target = next_status(booking.booking_status)
        return ACTION_LABELS.get(target) if target else None

    async def transition(self, booking_id: str, target: str | BookingStatus) -> Booking:
        """
        Move a booking to `target` through the repository.

        The local record changes only after the backend confirms. Raises
        InvalidTransition before any request, BookingBusyError while another
        update for the same booking is pending, and repository errors as-is.
        """
        booking = self._board.get(booking_id)
        target_status = validate_transition(booking, target)

        with self._in_flight.hold(booking_id):
            self._logger.info(
                "Updating booking status",
                extra={"booking_id": booking_id, "status": target_status.value},
            )
            await self._board.track(self._repository.update_status(booking_id, target_status))

        # apply to the current record, not the copy read before the request;
        # a reload may have dropped it, in which case replace() ignores the update
        current = self._board.find(booking_id) or booking
        updated = current.with_status(target_status)
        self._board.replace(updated)
        return updated
