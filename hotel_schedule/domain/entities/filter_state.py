from __future__ import annotations

from dataclasses import dataclass

ANY = ("", "all", "any")


@dataclass(frozen=True)
class FilterState:
    search_query: str = ""
    hotel_filter: str = ""
    room_filter: str = ""
    payment_status_filter: str = ""
    booking_status_filter: str = ""

    def active_facets(self) -> dict[str, str]:
        """Facets that constrain the result, keyed by field name."""
        facets = {
            "hotel_id": self.hotel_filter,
            "room_id": self.room_filter,
            "payment_status": self.payment_status_filter,
            "booking_status": self.booking_status_filter,
        }
        return {key: value for key, value in facets.items() if not is_any(value)}


def is_any(value: str | None) -> bool:
    return value is None or value.strip().lower() in ANY
