from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PriceStatus(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    EDITING = "editing"
    SAVING = "saving"


@dataclass(frozen=True)
class PriceEntry:
    booking_id: str
    status: PriceStatus = PriceStatus.UNLOADED
    price: float | None = None
    pricing_method: str | None = None
    draft: str | None = None  # user-typed value while editing
    error: str | None = None


@dataclass(frozen=True)
class PriceQuote:
    optimal_price: float | None
    pricing_method: str | None = None
