"""
Tests for the optimal price cache and the manual override workflow.
"""

import asyncio
import math

import pytest

from hotel_schedule.application.exceptions import ApiError, BookingBusyError, NetworkError, ValidationError
from hotel_schedule.application.use_cases.price_override import PriceOverrideCache, validate_price
from hotel_schedule.application.use_cases.schedule_board import ScheduleBoard
from hotel_schedule.domain.entities.price_entry import PriceStatus


def _calls(repository, name):
    return [call for call in repository.calls if call[0] == name]


def test_validate_price_accepts_numbers_and_numeric_text():
    assert validate_price(120) == 120.0
    assert validate_price(0) == 0.0
    assert validate_price(" 99.5 ") == 99.5


@pytest.mark.parametrize("raw", [-1, "-5", math.nan, math.inf, "abc", "", None, True])
def test_validate_price_rejects(raw):
    with pytest.raises(ValidationError):
        validate_price(raw)


def test_first_load_fetches_and_later_loads_hit_the_cache(prices, repository, loaded_board):
    first = asyncio.run(prices.load("b1"))
    second = asyncio.run(prices.load("b1"))

    assert first.status == PriceStatus.LOADED
    assert first.price == 180.0
    assert first.pricing_method == "nightly"
    assert second == first
    assert _calls(repository, "get_optimal_price") == [("get_optimal_price", "b1")]
    assert loaded_board.get("b1").optimal_price == 180.0


def test_price_carried_on_booking_skips_the_fetch(prices, repository, loaded_board):
    loaded_board.replace(loaded_board.get("b2").with_price(70.0, "flat"))

    entry = asyncio.run(prices.load("b2"))

    assert entry.price == 70.0
    assert entry.pricing_method == "flat"
    assert _calls(repository, "get_optimal_price") == []


def test_refresh_always_fetches(prices, repository):
    asyncio.run(prices.load("b1"))
    asyncio.run(prices.refresh("b1"))

    assert len(_calls(repository, "get_optimal_price")) == 2


def test_failed_refresh_keeps_the_old_price(prices, repository):
    asyncio.run(prices.load("b1"))
    repository.failures["get_optimal_price"] = NetworkError("connection refused")

    entry = asyncio.run(prices.refresh("b1"))

    assert entry.status == PriceStatus.LOADED
    assert entry.price == 180.0
    assert "connection refused" in entry.error


def test_failed_first_load_stays_unloaded(prices, repository):
    repository.failures["get_optimal_price"] = ApiError("Booking data is incomplete", status_code=400)

    entry = asyncio.run(prices.load("b2"))

    assert entry.status == PriceStatus.UNLOADED
    assert entry.price is None
    assert entry.error


def test_edit_seeds_draft_and_cancel_reverts(prices):
    asyncio.run(prices.load("b2"))

    editing = prices.edit("b2")
    assert editing.status == PriceStatus.EDITING
    assert editing.draft == "95.5"

    reverted = prices.cancel_edit("b2")
    assert reverted.status == PriceStatus.LOADED
    assert reverted.draft is None
    assert reverted.price == 95.5


def test_save_updates_cache_and_board(prices, repository, loaded_board):
    asyncio.run(prices.load("b1"))
    prices.edit("b1")

    entry = asyncio.run(prices.save("b1", "150"))

    assert entry.status == PriceStatus.LOADED
    assert entry.price == 150.0
    assert entry.draft is None
    assert loaded_board.get("b1").optimal_price == 150.0
    assert loaded_board.get("b1").pricing_method == "nightly"
    assert _calls(repository, "update_optimal_price") == [("update_optimal_price", "b1")]


@pytest.mark.parametrize("raw", [-1, math.nan, "-5"])
def test_invalid_price_sends_no_request(prices, repository, loaded_board, raw):
    asyncio.run(prices.load("b1"))
    before = prices.edit("b1")

    with pytest.raises(ValidationError):
        asyncio.run(prices.save("b1", raw))

    assert _calls(repository, "update_optimal_price") == []
    assert prices.entry("b1") == before
    assert loaded_board.get("b1").optimal_price == 180.0


def test_failed_save_returns_to_editing_with_draft(prices, repository, loaded_board):
    asyncio.run(prices.load("b1"))
    prices.edit("b1")
    repository.failures["update_optimal_price"] = ApiError("Failed to update price", status_code=500)

    with pytest.raises(ApiError):
        asyncio.run(prices.save("b1", "42.5"))

    entry = prices.entry("b1")
    assert entry.status == PriceStatus.EDITING
    assert entry.draft == "42.5"
    assert entry.price == 180.0
    assert "Failed to update price" in entry.error
    assert loaded_board.get("b1").optimal_price == 180.0


def test_second_save_while_pending_is_rejected(repository):
    async def scenario():
        board = ScheduleBoard(repository=repository)
        await board.load()
        cache = PriceOverrideCache(repository=repository, board=board)
        gate = asyncio.Event()
        repository.gates["update_optimal_price"] = gate

        first = asyncio.ensure_future(cache.save("b1", 150))
        await asyncio.sleep(0)

        assert cache.entry("b1").status == PriceStatus.SAVING
        with pytest.raises(BookingBusyError):
            await cache.save("b1", 160)

        gate.set()
        saved = await first
        again = await cache.save("b1", 170)
        return board, saved, again

    board, saved, again = asyncio.run(scenario())

    assert saved.price == 150.0
    assert again.price == 170.0
    assert board.get("b1").optimal_price == 170.0
    assert _calls(repository, "update_optimal_price") == [
        ("update_optimal_price", "b1"),
        ("update_optimal_price", "b1"),
    ]


def test_save_for_booking_dropped_by_reload(repository):
    async def scenario():
        board = ScheduleBoard(repository=repository)
        await board.load()
        cache = PriceOverrideCache(repository=repository, board=board)
        gate = asyncio.Event()
        repository.gates["update_optimal_price"] = gate

        pending = asyncio.ensure_future(cache.save("b2", 80))
        await asyncio.sleep(0)
        board.set_bookings([b for b in board.bookings if b.id != "b2"])
        gate.set()
        return board, await pending

    board, entry = asyncio.run(scenario())

    assert entry.status == PriceStatus.LOADED
    assert entry.price == 80.0
    assert board.find("b2") is None
