"""Formatting and badge helpers shared by the list and the detail panel."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from order_desk.constant import DINING_BADGE_STYLE, DINING_LABELS, STATUS_BADGE_STYLES, STATUS_LABELS
from order_desk.models import DiningType, OrderStatus


def format_idr(amount: float) -> str:
    """Format an amount as Rupiah without fraction digits, e.g. ``Rp 50.000``."""
    value = int(round(amount))
    sign = "-" if value < 0 else ""
    return f"{sign}Rp {abs(value):,}".replace(",", ".")


def format_timestamp(raw: str) -> str:
    """Render an ISO-8601 timestamp in local time; unparseable input is returned as-is."""
    try:
        moment = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return raw
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime("%d/%m/%Y %H.%M.%S")


def status_badge(status: OrderStatus) -> Text:
    return Text(f" {STATUS_LABELS[status.value]} ", style=STATUS_BADGE_STYLES[status.value])


def dining_badge(dining: DiningType) -> Text:
    return Text(f" {DINING_LABELS[dining.value]} ", style=DINING_BADGE_STYLE)
