from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from hotel_schedule.application.exceptions import ApiError, NetworkError, RequestTimeoutError
from hotel_schedule.application.ports.booking_repository import BookingRepositoryPort
from hotel_schedule.core.config import settings
from hotel_schedule.domain.entities.booking import Booking, BookingStatus
from hotel_schedule.domain.entities.price_entry import PriceQuote
from hotel_schedule.domain.entities.reference import Hotel, Room
from hotel_schedule.infrastructure.backend.dto import (
    BookingListDTO,
    Envelope,
    HotelDTO,
    OptimalPriceDTO,
    RoomDTO,
)


class RestBookingRepository(BookingRepositoryPort):
    """
    Booking backend reached over JSON/HTTP.

    Error mapping:
    - timeout -> RequestTimeoutError
    - connection failure, or non-2xx without a JSON error body -> NetworkError
    - non-2xx with a JSON error body, or `success: false` -> ApiError
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url if base_url is not None else settings.BACKEND_BASE_URL).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
        )
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("BACKEND_BASE_URL is required for the REST booking repository")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_bookings(self) -> list[Booking]:
        try:
            body = await self._request("GET", "/booking/list")
        except ApiError as e:
            # the backend answers 404 when the booking table is empty
            if e.status_code == 404:
                return []
            raise
        if not isinstance(body, dict) or "bookings" not in body:
            raise ApiError("Invalid response structure: bookings field missing")
        try:
            return BookingListDTO.model_validate(body).to_entities()
        except PydanticValidationError as e:
            raise ApiError(f"Malformed booking list: {e.error_count()} errors") from e

    async def list_hotels(self) -> list[Hotel]:
        data = await self._request_data("GET", "/api/hotels/ids")
        try:
            return [HotelDTO.model_validate(item).to_entity() for item in data or []]
        except PydanticValidationError as e:
            raise ApiError(f"Malformed hotel list: {e.error_count()} errors") from e

    async def list_rooms(self, hotel_id: str) -> list[Room]:
        data = await self._request_data("GET", f"/api/hotels/{_segment(hotel_id)}/rooms")
        try:
            return [RoomDTO.model_validate(item).to_entity(hotel_id) for item in data or []]
        except PydanticValidationError as e:
            raise ApiError(f"Malformed room list: {e.error_count()} errors") from e

    async def get_optimal_price(self, booking_id: str) -> PriceQuote:
        data = await self._request_data("GET", f"/booking/{_segment(booking_id)}/optimal-price")
        if not isinstance(data, dict):
            raise ApiError("Optimal price response has no data")
        return OptimalPriceDTO.model_validate(data).to_quote()

    async def update_optimal_price(self, booking_id: str, price: float) -> None:
        await self._request("PUT", f"/booking/{_segment(booking_id)}", json={"optimalPrice": price})
        self._logger.info("Optimal price saved", extra={"booking_id": booking_id})

    async def update_status(self, booking_id: str, status: BookingStatus) -> None:
        await self._request("PUT", f"/booking/{_segment(booking_id)}/status", json={"status": status.value})
        self._logger.info("Booking status saved", extra={"booking_id": booking_id, "status": status.value})

    async def seed_mock_bookings(self) -> None:
        await self._request("GET", "/booking/fetch-mock")

    async def _request_data(self, method: str, path: str) -> Any:
        """Request an enveloped endpoint and return its `data`; requires `success`."""
        body = await self._request(method, path)
        envelope = Envelope.model_validate(body if isinstance(body, dict) else {})
        if not envelope.success:
            raise ApiError(envelope.failure_text())
        return envelope.data

    async def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.TimeoutException as e:
            self._logger.error("Backend request timed out", extra={"url": url, "error": str(e)})
            raise RequestTimeoutError(f"{method} {path} timed out") from e
        except httpx.RequestError as e:
            self._logger.error("Backend unreachable", extra={"url": url, "error": str(e)})
            raise NetworkError(f"{method} {path} failed: {e}") from e

        body = _json_or_none(response)

        if response.status_code >= 400:
            self._logger.error(
                "Backend request failed",
                extra={"url": url, "status": response.status_code, "error": response.text[:200]},
            )
            if isinstance(body, dict) and (body.get("error") or body.get("message")):
                raise ApiError(Envelope.model_validate(body).failure_text(), status_code=response.status_code)
            raise NetworkError(f"{method} {path} failed with HTTP {response.status_code}")

        if isinstance(body, dict) and body.get("success") is False:
            raise ApiError(Envelope.model_validate(body).failure_text(), status_code=response.status_code)

        return body


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _json_or_none(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
