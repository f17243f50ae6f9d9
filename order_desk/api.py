"""HTTP client for the order listing and cash settlement endpoints."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from order_desk.config import API_BASE_URL, HTTP_TIMEOUT_SECONDS, ORDERS_LIST_PATH, ORDERS_PAY_CASH_PATH
from order_desk.models import OrderPage
from order_desk.query_state import FilterState, request_params

logger = logging.getLogger(__name__)

PAY_CASH_FALLBACK_MESSAGE = "Failed to mark the order as paid."


class OrdersApiError(Exception):
    """A backend call did not succeed; ``message`` is fit to show the user."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Prefer the backend's ``{"error": ...}`` body over the fallback text."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str) and error.strip():
            return error
    return fallback


def _wire_amount(amount: float) -> int | float:
    if float(amount).is_integer():
        return int(amount)
    return amount


class OrdersClient:
    """Async client for the admin orders API.

    No retries are attempted; every failure surfaces as ``OrdersApiError``
    and it is up to the user to try again.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        timeout: float | None = HTTP_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> OrdersClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def fetch_orders(self, filters: FilterState) -> OrderPage:
        """Read one page of orders for the given filters."""
        params = request_params(filters)
        try:
            response = await self._client.get(
                ORDERS_LIST_PATH,
                params=params,
                headers={"Cache-Control": "no-store"},
            )
        except httpx.RequestError as exc:
            raise OrdersApiError(f"Orders service unreachable: {exc}") from exc

        if not response.is_success:
            fallback = f"Failed to load orders ({response.status_code})"
            raise OrdersApiError(_error_message(response, fallback), response.status_code)

        try:
            return OrderPage.from_dict(response.json())
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("orders_malformed params=%s error=%r", params, exc)
            raise OrdersApiError("Orders service returned an unreadable page.", response.status_code) from exc

    async def pay_cash(self, order_id: str, amount: float) -> dict[str, Any]:
        """Record a CASH payment of ``amount`` against ``order_id``."""
        path = ORDERS_PAY_CASH_PATH.format(order_id=quote(order_id, safe=""))
        try:
            response = await self._client.post(path, json={"amount": _wire_amount(amount)})
        except httpx.RequestError as exc:
            raise OrdersApiError(f"Orders service unreachable: {exc}") from exc

        if not response.is_success:
            raise OrdersApiError(_error_message(response, PAY_CASH_FALLBACK_MESSAGE), response.status_code)

        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"result": body}
