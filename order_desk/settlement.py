"""Cash settlement workflow for the order selected in the detail panel.

States: CLOSED (nothing selected), VIEWING (a snapshot is held and the cash
input is editable) and SUBMITTING (a pay-cash call is in flight and every
mutation is refused). A successful submission goes straight back to CLOSED;
a failed one returns to VIEWING with the typed amount intact.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

from order_desk.api import PAY_CASH_FALLBACK_MESSAGE, OrdersApiError
from order_desk.constant import MESSAGES
from order_desk.models import Order

logger = logging.getLogger(__name__)

PayCash = Callable[[str, float], Awaitable[Any]]


class PanelState(str, Enum):
    CLOSED = "closed"
    VIEWING = "viewing"
    SUBMITTING = "submitting"


class Outcome(str, Enum):
    SETTLED = "settled"
    REJECTED = "rejected"
    FAILED = "failed"
    IGNORED = "ignored"


@dataclass(frozen=True)
class SettlementResult:
    outcome: Outcome
    message: str = ""

    @property
    def settled(self) -> bool:
        return self.outcome is Outcome.SETTLED


@dataclass(frozen=True)
class CashQuote:
    """Tendered cash compared against the order total.

    Exactly one of ``change`` and ``shortfall`` is meaningful, chosen by
    ``sufficient``; the other is zero.
    """

    tendered: float | None
    total: int

    @property
    def sufficient(self) -> bool:
        return self.tendered is not None and self.tendered >= self.total

    @property
    def change(self) -> float:
        if not self.sufficient:
            return 0
        return self.tendered - self.total

    @property
    def shortfall(self) -> float:
        if self.sufficient:
            return 0
        if self.tendered is None:
            return self.total
        return max(0, self.total - self.tendered)


@dataclass
class SelectedOrder:
    """Detached copy of one order plus the panel's transient fields."""

    order: Order
    cash_input: str = ""
    submitting: bool = False


def parse_tendered(raw: str) -> float | None:
    """Parse the cash input; blank means 0, anything non-finite means None."""
    text = raw.strip()
    if not text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


class CashSettlement:
    """Holds the selected-order snapshot and drives one cash settlement at a time."""

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._selected: SelectedOrder | None = None
        self.on_change = on_change

    @property
    def selected(self) -> SelectedOrder | None:
        return self._selected

    @property
    def state(self) -> PanelState:
        if self._selected is None:
            return PanelState.CLOSED
        if self._selected.submitting:
            return PanelState.SUBMITTING
        return PanelState.VIEWING

    @property
    def can_settle(self) -> bool:
        return self._selected is not None and self._selected.order.is_cash_settleable

    @property
    def quote(self) -> CashQuote | None:
        if self._selected is None:
            return None
        return CashQuote(parse_tendered(self._selected.cash_input), self._selected.order.total)

    @property
    def settle_enabled(self) -> bool:
        quote = self.quote
        return self.state is PanelState.VIEWING and self.can_settle and quote is not None and quote.sufficient

    def open(self, order: Order, *, prefill_total: bool = False) -> bool:
        """Select ``order``. Refused while a submission is in flight."""
        if self.state is PanelState.SUBMITTING:
            return False
        cash_input = str(order.total) if prefill_total else ""
        self._selected = SelectedOrder(order=order, cash_input=cash_input)
        self._changed()
        return True

    def close(self) -> bool:
        """Drop the snapshot. Refused while a submission is in flight."""
        if self.state is PanelState.SUBMITTING:
            return False
        if self._selected is not None:
            self._selected = None
            self._changed()
        return True

    def set_cash_input(self, raw: str) -> bool:
        if self.state is not PanelState.VIEWING:
            return False
        if self._selected.cash_input != raw:
            self._selected.cash_input = raw
            self._changed()
        return True

    def fill_total(self) -> bool:
        if self.state is not PanelState.VIEWING:
            return False
        return self.set_cash_input(str(self._selected.order.total))

    async def submit(self, pay_cash: PayCash) -> SettlementResult:
        """Validate the tendered cash and record it as the order's payment.

        Re-entrant calls while SUBMITTING are ignored, so however many times
        this is triggered, at most one ``pay_cash`` call is in flight.
        """
        if self.state is not PanelState.VIEWING:
            logger.debug("settle_ignored state=%s", self.state.value)
            return SettlementResult(Outcome.IGNORED)

        selected = self._selected
        order = selected.order
        if not self.can_settle:
            logger.info("settle_rejected order_id=%s reason=not_settleable", order.id)
            return SettlementResult(Outcome.REJECTED, MESSAGES["not_settleable"])

        quote = self.quote
        if not quote.sufficient:
            logger.info("settle_rejected order_id=%s reason=short input=%r", order.id, selected.cash_input)
            return SettlementResult(Outcome.REJECTED, MESSAGES["amount_short"])

        selected.submitting = True
        self._changed()
        logger.info("settle_submit order_id=%s amount=%s total=%d", order.id, quote.tendered, order.total)
        settled = False
        try:
            await pay_cash(order.id, quote.tendered)
            settled = True
        except OrdersApiError as exc:
            logger.warning("settle_failed order_id=%s status=%s error=%r", order.id, exc.status_code, exc.message)
            return SettlementResult(Outcome.FAILED, exc.message or PAY_CASH_FALLBACK_MESSAGE)
        finally:
            selected.submitting = False
            if not settled:
                self._changed()

        self._selected = None
        self._changed()
        logger.info("settle_done order_id=%s", order.id)
        return SettlementResult(Outcome.SETTLED, MESSAGES["settled"])

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
