from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from hotel_schedule.domain.entities.booking import Direction


class ColorTag(str, Enum):
    A = "A"  # check-in done, also the check-in fallback
    B = "B"  # check-in, paid
    C = "C"  # check-in, unpaid
    D = "D"  # check-out done
    E = "E"  # check-out, paid
    F = "F"  # check-out, unpaid
    G = "G"  # check-out fallback


@dataclass(frozen=True)
class TimeSlot:
    id: str
    booking_id: str
    direction: Direction
    minute_of_day: int
    display_hour: str
    color_tag: ColorTag


@dataclass(frozen=True)
class SlotBoard:
    slots_by_time: dict[str, list[TimeSlot]] = field(default_factory=dict)
    ordered_time_labels: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return sum(len(slots) for slots in self.slots_by_time.values())

    def iter_buckets(self):
        for label in self.ordered_time_labels:
            yield label, self.slots_by_time[label]
