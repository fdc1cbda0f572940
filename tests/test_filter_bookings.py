from datetime import date
from itertools import product

from hotel_schedule.application.use_cases.filter_bookings import (
    filter_bookings,
    matches_day,
    matches_facets,
    matches_search,
)
from hotel_schedule.domain.entities.booking import BookingStatus, Direction
from hotel_schedule.domain.entities.filter_state import FilterState
from hotel_schedule.domain.entities.reference import Hotel, ReferenceLookup, Room

DAY = date(2025, 3, 5)

LOOKUP = ReferenceLookup.build(
    [Hotel(id="h1", name="Harbor View"), Hotel(id="h2", name="Old Town Inn")],
    [Room(id="r1", hotel_id="h1", name="Deluxe 101"), Room(id="r9", hotel_id="h2", name="Twin 201")],
)


def _ids(bookings):
    return [b.id for b in bookings]


def test_direction_selects_the_date_field(make_booking):
    arriving = make_booking(id="arrive", book_in="2025-03-05", book_out="2025-03-07")
    leaving = make_booking(id="leave", book_in="2025-03-01", book_out="2025-03-05")

    assert _ids(filter_bookings([arriving, leaving], FilterState(), DAY, Direction.CHECKIN)) == ["arrive"]
    assert _ids(filter_bookings([arriving, leaving], FilterState(), DAY, Direction.CHECKOUT)) == ["leave"]


def test_unparsable_date_is_excluded(make_booking):
    broken = make_booking(book_in="someday")

    assert matches_day(broken, DAY, Direction.CHECKIN) is False
    assert filter_bookings([broken], FilterState(), DAY, Direction.CHECKIN) == []


def test_facets_are_conjunctive(make_booking):
    bookings = [
        make_booking(id="paid-h1", hotel_id="h1", payment_status="Paid"),
        make_booking(id="unpaid-h1", hotel_id="h1", payment_status="Unpaid"),
        make_booking(id="paid-h2", hotel_id="h2", room_id="r9", payment_status="Paid"),
    ]
    filters = FilterState(hotel_filter="h1", payment_status_filter="Paid")

    assert _ids(filter_bookings(bookings, filters, DAY, Direction.CHECKIN)) == ["paid-h1"]


def test_all_means_no_constraint(make_booking):
    bookings = [make_booking(id="one"), make_booking(id="two", hotel_id="h2")]
    filters = FilterState(hotel_filter="all", room_filter="", payment_status_filter="Any")

    assert filters.active_facets() == {}
    assert _ids(filter_bookings(bookings, filters, DAY, Direction.CHECKIN)) == ["one", "two"]


def test_search_is_case_insensitive_over_names(make_booking):
    booking = make_booking(id="b-77", hotel_id="h2", room_id="r9", customer_id="c-zoe")

    assert matches_search(booking, "old town", LOOKUP)
    assert matches_search(booking, "TWIN", LOOKUP)
    assert matches_search(booking, "zoe", LOOKUP)
    assert matches_search(booking, "b-77", LOOKUP)
    assert matches_search(booking, "   ", LOOKUP)
    assert not matches_search(booking, "harbor", LOOKUP)


def test_search_covers_statuses(make_booking):
    booking = make_booking(payment_status="Unpaid", booking_status=BookingStatus.CHECKED_IN.value)

    assert matches_search(booking, "unpaid", ReferenceLookup())
    assert matches_search(booking, "checkedin", ReferenceLookup())


def test_search_without_lookup_falls_back_to_ids(make_booking):
    booking = make_booking(hotel_id="h1")

    assert not matches_search(booking, "harbor", ReferenceLookup())


def test_status_filter_with_no_matches_is_empty(make_booking):
    bookings = [make_booking(id="a"), make_booking(id="b", booking_status=BookingStatus.PENDING.value)]
    filters = FilterState(booking_status_filter=BookingStatus.CANCELLED.value)

    assert filter_bookings(bookings, filters, DAY, Direction.CHECKIN) == []


def test_result_keeps_input_order(make_booking):
    bookings = [make_booking(id=name) for name in ("c", "a", "b")]

    assert _ids(filter_bookings(bookings, FilterState(), DAY, Direction.CHECKIN)) == ["c", "a", "b"]


def test_membership_is_the_conjunction_of_all_predicates(make_booking):
    bookings = [
        make_booking(id=f"{hotel}-{pay}-{day}", hotel_id=hotel, payment_status=pay, book_in=day)
        for hotel, pay, day in product(("h1", "h2"), ("Paid", "Unpaid"), ("2025-03-05", "2025-03-06"))
    ]
    filters = FilterState(search_query="h", hotel_filter="h2", payment_status_filter="Unpaid")

    result = filter_bookings(bookings, filters, DAY, Direction.CHECKIN, LOOKUP)

    expected = [
        b.id
        for b in bookings
        if matches_day(b, DAY, Direction.CHECKIN)
        and matches_facets(b, filters)
        and matches_search(b, filters.search_query, LOOKUP)
    ]
    assert _ids(result) == expected == ["h2-Unpaid-2025-03-05"]


def test_facet_values_ignore_case_and_padding(make_booking):
    bookings = [make_booking(id="paid", payment_status="Paid"), make_booking(id="unpaid", payment_status="Unpaid")]

    assert _ids(filter_bookings(bookings, FilterState(payment_status_filter="paid"), DAY, Direction.CHECKIN)) == ["paid"]
    assert _ids(filter_bookings(bookings, FilterState(hotel_filter=" h1 "), DAY, Direction.CHECKIN)) == ["paid", "unpaid"]


def test_room_facet_can_be_pinned_to_a_hotel(make_booking):
    bookings = [
        make_booking(id="harbor-7", hotel_id="h1", room_id="r7"),
        make_booking(id="oldtown-7", hotel_id="h2", room_id="r7"),
    ]

    assert _ids(filter_bookings(bookings, FilterState(room_filter="r7"), DAY, Direction.CHECKIN)) == ["harbor-7", "oldtown-7"]
    assert _ids(filter_bookings(bookings, FilterState(room_filter="h2:r7"), DAY, Direction.CHECKIN)) == ["oldtown-7"]
