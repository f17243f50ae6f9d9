"""Shared fixtures: order payloads and an in-memory orders backend."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from order_desk.api import OrdersClient
from order_desk.config import ORDERS_LIST_PATH

BASE_URL = "http://orders.test"


def order_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "ord-1",
        "code": "ORD-20261017-0001",
        "queueNumber": "A-01",
        "serviceDate": "2026-10-17",
        "status": "OPEN",
        "diningType": "DINE_IN",
        "subtotal": 50000,
        "discount": 0,
        "tax": 0,
        "total": 50000,
        "createdAt": "2026-10-17T10:05:03",
        "customerName": "Budi",
        "items": [
            {"id": "it-1", "productId": "p-1", "name": "Nasi Goreng", "qty": 2, "price": 25000, "total": 50000},
        ],
        "payments": [],
    }
    payload.update(overrides)
    return payload


def cash_payment_payload(amount: int = 50000) -> dict[str, Any]:
    return {"id": "pay-1", "method": "CASH", "amount": amount, "paidAt": "2026-10-17T10:30:00"}


class FakeOrdersBackend:
    """Stands in for the admin orders API and records every request it gets."""

    def __init__(self, orders: list[dict[str, Any]] | None = None) -> None:
        self.orders = list(orders if orders is not None else [order_payload()])
        self.list_requests: list[httpx.Request] = []
        self.pay_requests: list[httpx.Request] = []
        self.list_status = 200
        self.list_body: Any = None
        self.pay_status = 200
        self.pay_body: Any = {"ok": True}
        self.per_page_cap: int | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path == ORDERS_LIST_PATH:
            self.list_requests.append(request)
            if self.list_status != 200:
                return httpx.Response(self.list_status, json=self.list_body)
            params = request.url.params
            per_page = int(params.get("perPage", "10"))
            if self.per_page_cap is not None:
                per_page = min(per_page, self.per_page_cap)
            return httpx.Response(
                200,
                json={
                    "items": self.orders,
                    "page": int(params.get("page", "1")),
                    "perPage": per_page,
                    "total": len(self.orders),
                },
            )

        if request.method == "POST" and request.url.path.endswith("/pay-cash"):
            self.pay_requests.append(request)
            if self.pay_status != 200:
                return httpx.Response(self.pay_status, json=self.pay_body)
            order_id = request.url.path.split("/")[-2]
            amount = json.loads(request.content)["amount"]
            for order in self.orders:
                if order["id"] == order_id:
                    order["status"] = "PAID"
                    order["payments"] = [cash_payment_payload(amount)]
            return httpx.Response(200, json=self.pay_body)

        return httpx.Response(404, json={"error": "not found"})

    def client(self) -> OrdersClient:
        return OrdersClient(BASE_URL, transport=httpx.MockTransport(self.handler))

    @property
    def last_list_params(self) -> dict[str, str]:
        return dict(self.list_requests[-1].url.params)


@pytest.fixture
def backend() -> FakeOrdersBackend:
    return FakeOrdersBackend()
