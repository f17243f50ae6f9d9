"""Domain models for the order desk."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OrderStatus(str, Enum):
    OPEN = "OPEN"
    AWAITING_PAYMENT = "AWAITING_PAYMENT"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class DiningType(str, Enum):
    DINE_IN = "DINE_IN"
    TAKE_AWAY = "TAKE_AWAY"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    QRIS = "QRIS"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"


# Statuses that still accept a payment.
SETTLEABLE_STATUSES = frozenset({OrderStatus.OPEN, OrderStatus.AWAITING_PAYMENT})


@dataclass(frozen=True)
class OrderItem:
    """One line of an order as priced by the backend."""

    id: str
    product_id: str
    name: str
    qty: int
    price: int
    total: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OrderItem:
        return cls(
            id=str(data["id"]),
            product_id=str(data["productId"]),
            name=str(data["name"]),
            qty=int(data["qty"]),
            price=int(data["price"]),
            total=int(data["total"]),
        )


@dataclass(frozen=True)
class Payment:
    """A payment already recorded against an order."""

    id: str
    method: PaymentMethod
    amount: int
    paid_at: str
    ref_code: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Payment:
        ref_code = data.get("refCode")
        return cls(
            id=str(data["id"]),
            method=PaymentMethod(data["method"]),
            amount=int(data["amount"]),
            paid_at=str(data["paidAt"]),
            ref_code=str(ref_code) if ref_code is not None else None,
        )


@dataclass(frozen=True)
class Order:
    """An order row exactly as supplied by the listing service.

    Totals are never recomputed here; ``total`` is trusted as sent.
    """

    id: str
    code: str
    queue_number: str
    service_date: str
    status: OrderStatus
    dining_type: DiningType
    subtotal: int
    discount: int
    tax: int
    total: int
    created_at: str
    customer_name: str
    items: tuple[OrderItem, ...] = field(default_factory=tuple)
    payments: tuple[Payment, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Order:
        return cls(
            id=str(data["id"]),
            code=str(data["code"]),
            queue_number=str(data.get("queueNumber") or ""),
            service_date=str(data.get("serviceDate") or ""),
            status=OrderStatus(data["status"]),
            dining_type=DiningType(data["diningType"]),
            subtotal=int(data.get("subtotal") or 0),
            discount=int(data.get("discount") or 0),
            tax=int(data.get("tax") or 0),
            total=int(data["total"]),
            created_at=str(data["createdAt"]),
            customer_name=str(data.get("customerName") or ""),
            items=tuple(OrderItem.from_dict(item) for item in data.get("items") or []),
            payments=tuple(Payment.from_dict(payment) for payment in data.get("payments") or []),
        )

    @property
    def is_cash_settleable(self) -> bool:
        """Open for cash settlement: still unpaid and no payment recorded yet."""
        return self.status in SETTLEABLE_STATUSES and not self.payments


@dataclass(frozen=True)
class OrderPage:
    """One page of the order listing."""

    items: tuple[Order, ...]
    page: int
    per_page: int
    total: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OrderPage:
        return cls(
            items=tuple(Order.from_dict(item) for item in data.get("items") or []),
            page=int(data["page"]),
            per_page=int(data["perPage"]),
            total=int(data["total"]),
        )

    @property
    def last_page(self) -> int:
        """Highest reachable page number; zero when there are no rows."""
        if self.per_page <= 0:
            return 0
        return math.ceil(self.total / self.per_page)
