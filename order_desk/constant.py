"""Editable display labels and user-facing messages."""

from __future__ import annotations

STATUS_LABELS: dict[str, str] = {
    "all": "All statuses",
    "OPEN": "OPEN",
    "AWAITING_PAYMENT": "AWAITING_PAYMENT",
    "PAID": "PAID",
    "CANCELLED": "CANCELLED",
}

DINING_LABELS: dict[str, str] = {
    "all": "All service types",
    "DINE_IN": "Dine-in",
    "TAKE_AWAY": "Take-away",
}

RANGE_LABELS: dict[str, str] = {
    "today": "Today",
    "7d": "7 days",
    "30d": "30 days",
    "all": "All time",
}

# Badge variants: secondary for unpaid, default for paid, destructive for cancelled.
STATUS_BADGE_STYLES: dict[str, str] = {
    "OPEN": "bold #e6e6e6 on #3a3f4b",
    "AWAITING_PAYMENT": "bold #e6e6e6 on #3a3f4b",
    "PAID": "bold #0b1f0f on #5fbf72",
    "CANCELLED": "bold #ffffff on #b23a48",
}

DINING_BADGE_STYLE = "bold #2f6db5 on #dbe7f6"

MESSAGES: dict[str, str] = {
    "amount_short": "Amount received is less than the total.",
    "not_settleable": "This order is already paid or has a non-cash payment.",
    "settled": "Order marked as PAID (Cash).",
    "settle_disabled_hint": "Cash settlement is disabled because the order is already paid or has a non-cash payment.",
    "loading": "Loading orders…",
    "empty": "No orders found",
    "no_payments": "No payments yet",
    "no_selection": "Select an order first.",
}
