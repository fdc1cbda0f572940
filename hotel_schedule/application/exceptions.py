class ScheduleError(RuntimeError):
    """Base class for errors raised by the schedule core."""
    pass


class NetworkError(ScheduleError):
    """Raised when the backend cannot be reached or answers non-2xx without a parseable body."""
    pass


class RequestTimeoutError(NetworkError):
    """Raised when a backend request exceeds the client-side timeout."""
    pass


class ApiError(ScheduleError):
    """Raised when the backend answers with a structured failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(ScheduleError):
    """Raised for locally detected bad input (price, status, time string)."""
    pass


class InvalidTransition(ValidationError):
    """Raised when a booking status change is not allowed from the current status."""
    pass


class ParseError(ScheduleError):
    """Raised for malformed date/time fields in a booking record."""
    pass


class BookingNotFoundError(ScheduleError):
    pass


class BookingBusyError(ScheduleError):
    """Raised when a request for the same booking is already in flight."""
    pass


class BoardClosedError(ScheduleError):
    """Raised when work is started on a schedule board that was already closed."""
    pass
