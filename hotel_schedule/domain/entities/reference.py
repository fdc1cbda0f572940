from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Hotel:
    id: str
    name: str


@dataclass(frozen=True)
class Room:
    id: str
    hotel_id: str
    name: str


@dataclass(frozen=True)
class ReferenceLookup:
    """Read-only name lookup for hotels and their rooms."""

    hotel_names: dict[str, str] = field(default_factory=dict)
    room_names: dict[tuple[str, str], str] = field(default_factory=dict)

    @classmethod
    def build(cls, hotels: list[Hotel], rooms: list[Room]) -> ReferenceLookup:
        return cls(
            hotel_names={hotel.id: hotel.name for hotel in hotels},
            room_names={(room.hotel_id, room.id): room.name for room in rooms},
        )

    def hotel_name(self, hotel_id: str | None) -> str:
        if not hotel_id:
            return ""
        return self.hotel_names.get(hotel_id, "")

    def room_name(self, hotel_id: str | None, room_id: str | None) -> str:
        if not hotel_id or not room_id:
            return ""
        return self.room_names.get((hotel_id, room_id), "")
