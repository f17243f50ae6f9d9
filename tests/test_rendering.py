"""Formatting helpers used by the list and detail views."""
import pytest

from order_desk.models import DiningType, OrderStatus
from order_desk.rendering import dining_badge, format_idr, format_timestamp, status_badge


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "Rp 0"),
        (500, "Rp 500"),
        (50000, "Rp 50.000"),
        (1250000, "Rp 1.250.000"),
        (20000.4, "Rp 20.000"),
        (-15000, "-Rp 15.000"),
    ],
)
def test_format_idr(amount, expected):
    assert format_idr(amount) == expected


def test_format_timestamp_naive():
    assert format_timestamp("2026-10-17T10:05:03") == "17/10/2026 10.05.03"


def test_format_timestamp_with_zone_is_converted_to_local():
    rendered = format_timestamp("2026-10-17T03:05:03Z")
    assert rendered.startswith(("16/10/2026", "17/10/2026", "18/10/2026"))
    assert rendered.endswith(".05.03")


def test_format_timestamp_garbage_passthrough():
    assert format_timestamp("yesterday") == "yesterday"


def test_badges():
    assert status_badge(OrderStatus.AWAITING_PAYMENT).plain.strip() == "AWAITING_PAYMENT"
    assert dining_badge(DiningType.TAKE_AWAY).plain.strip() == "Take-away"
