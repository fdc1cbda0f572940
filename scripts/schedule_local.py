#!/usr/bin/env python3
"""
Local schedule harness (no HTTP server).

Usage:
  python3 scripts/schedule_local.py --demo
  python3 scripts/schedule_local.py --day 2025-03-05 --search paid

What it does:
- Loads bookings through the configured repository (or the in-memory demo data)
- Applies the given filters
- Prints the check-in/check-out hour buckets for the chosen day
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hotel_schedule.application.use_cases.schedule_board import ScheduleBoard  # noqa: E402
from hotel_schedule.application.use_cases.time_slots import COLOR_HEX  # noqa: E402
from hotel_schedule.infrastructure.backend.memory_repository import MemoryBookingRepository  # noqa: E402
from hotel_schedule.wiring.dependencies import get_board, shutdown  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print the booking schedule for one day.")
    parser.add_argument("--day", type=date.fromisoformat, default=None, help="YYYY-MM-DD, defaults to today")
    parser.add_argument("--demo", action="store_true", help="use in-memory demo bookings")
    parser.add_argument("--search", default="", help="free-text search")
    parser.add_argument("--hotel", default="", help="hotel id facet")
    parser.add_argument("--room", default="", help="room id facet")
    parser.add_argument("--payment", default="", help="payment status facet (Paid/Unpaid)")
    parser.add_argument("--status", default="", help="booking status facet")
    return parser.parse_args(argv)


def _print_view(board: ScheduleBoard, day: date) -> None:
    view = board.view(day)
    print(f"\nSchedule for {day.strftime('%A, %B %d, %Y')}")
    print("-" * 60)
    print("Days: " + "  ".join(d.strftime("%a %d") for d in view.day_strip))
    print(f"Arrivals: {view.arrivals}   Departures: {view.departures}")
    if view.error:
        print(f"! {view.error}")
    print("-" * 60)

    if view.is_empty:
        print("No bookings for this day.")
        return

    for label, slots in view.slots.iter_buckets():
        print(label)
        for slot in slots:
            booking = board.get(slot.booking_id)
            print(
                f"    [{slot.direction.value:8}] {booking.id:<12} room={booking.room_id or '-':<8} "
                f"customer={booking.customer_id or '-':<10} {COLOR_HEX[slot.color_tag]}"
            )


async def _run(args: argparse.Namespace) -> None:
    if args.demo:
        board = ScheduleBoard(repository=MemoryBookingRepository())
        await board.seed_demo_data()
        await board.load_reference()
    else:
        board = get_board()
        await board.load()

    board.update_filters(
        search_query=args.search,
        hotel_filter=args.hotel,
        room_filter=args.room,
        payment_status_filter=args.payment,
        booking_status_filter=args.status,
    )
    day = args.day or date.today()
    try:
        _print_view(board, day)
    finally:
        await board.aclose()
        await shutdown()


def main(argv: list[str] | None = None) -> int:
    asyncio.run(_run(_parse_args(argv)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
