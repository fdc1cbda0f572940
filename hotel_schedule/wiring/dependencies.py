from functools import lru_cache
import logging
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hotel_schedule.core.config import settings
from hotel_schedule.application.ports.booking_repository import BookingRepositoryPort
from hotel_schedule.application.use_cases.lifecycle import BookingLifecycleController
from hotel_schedule.application.use_cases.price_override import PriceOverrideCache
from hotel_schedule.application.use_cases.schedule_board import ScheduleBoard
from hotel_schedule.application.utils.calendar_time import UTC
from hotel_schedule.infrastructure.backend.memory_repository import MemoryBookingRepository
from hotel_schedule.infrastructure.backend.rest_repository import RestBookingRepository


_board: ScheduleBoard | None = None
_lifecycle: BookingLifecycleController | None = None
_price_cache: PriceOverrideCache | None = None


@lru_cache
def get_repository() -> BookingRepositoryPort:
    logger = logging.getLogger(__name__)
    if not settings.BACKEND_BASE_URL.strip():
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MemoryBookingRepository (BACKEND_BASE_URL empty, ENV=dev/local)")
            return MemoryBookingRepository()
        raise ValueError("BACKEND_BASE_URL is required outside dev/local.")

    logger.info("Using RestBookingRepository base_url=%s", settings.BACKEND_BASE_URL)
    return RestBookingRepository()


def get_timezone() -> tzinfo:
    if settings.SCHEDULE_TIMEZONE.strip().upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(settings.SCHEDULE_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logging.getLogger(__name__).warning("Unknown SCHEDULE_TIMEZONE=%s, using UTC", settings.SCHEDULE_TIMEZONE)
        return UTC


def get_board() -> ScheduleBoard:
    global _board
    if _board is None or _board.closed:
        _board = ScheduleBoard(
            repository=get_repository(),
            timezone=get_timezone(),
            chronological=settings.SLOT_BUCKET_ORDER.lower() == "clock",
            strip_radius=settings.DAY_STRIP_RADIUS,
        )
    return _board


def get_lifecycle_controller() -> BookingLifecycleController:
    global _lifecycle
    board = get_board()
    if _lifecycle is None or _lifecycle.board is not board:
        _lifecycle = BookingLifecycleController(repository=get_repository(), board=board)
    return _lifecycle


def get_price_cache() -> PriceOverrideCache:
    global _price_cache
    board = get_board()
    if _price_cache is None or _price_cache.board is not board:
        _price_cache = PriceOverrideCache(repository=get_repository(), board=board)
    return _price_cache


def get_container() -> dict[str, object]:
    return {
        "board": get_board(),
        "lifecycle": get_lifecycle_controller(),
        "prices": get_price_cache(),
    }


async def shutdown() -> None:
    global _board, _lifecycle, _price_cache
    if _board is not None:
        await _board.aclose()
    if get_repository.cache_info().currsize:
        await get_repository().aclose()
        get_repository.cache_clear()
    _board = None
    _lifecycle = None
    _price_cache = None
