"""Order list loading with stale-response protection.

Loads overlap freely; each one is stamped with a generation number and only
the newest generation's outcome is handed back. Older responses, successful
or not, are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from order_desk.api import OrdersApiError
from order_desk.models import OrderPage
from order_desk.query_state import FilterState

logger = logging.getLogger(__name__)

FetchOrders = Callable[[FilterState], Awaitable[OrderPage]]


@dataclass(frozen=True)
class LoadTrigger:
    """Everything that, when changed, must cause a fresh list read."""

    filters: FilterState
    version: int


class OrderListLoader:
    """Run list reads and discard the ones a newer read has superseded."""

    def __init__(self, fetch_orders: FetchOrders) -> None:
        self._fetch_orders = fetch_orders
        self._generation = 0
        self._last_trigger: LoadTrigger | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def needs_load(self, trigger: LoadTrigger) -> bool:
        """True when ``trigger`` differs from the last one a load was started for."""
        return trigger != self._last_trigger

    async def load(self, trigger: LoadTrigger) -> OrderPage | None:
        """Fetch the page for ``trigger``.

        Returns ``None`` when a newer load started while this one was in
        flight. Raises ``OrdersApiError`` only for the newest load.
        """
        self._last_trigger = trigger
        self._generation += 1
        generation = self._generation
        logger.info("orders_load_start gen=%d filters=%s version=%d", generation, trigger.filters, trigger.version)

        try:
            page = await self._fetch_orders(trigger.filters)
        except OrdersApiError as exc:
            if generation != self._generation:
                logger.info("orders_load_stale gen=%d latest=%d error=%r", generation, self._generation, exc.message)
                return None
            logger.warning("orders_load_failed gen=%d status=%s error=%r", generation, exc.status_code, exc.message)
            raise

        if generation != self._generation:
            logger.info("orders_load_stale gen=%d latest=%d", generation, self._generation)
            return None

        logger.info("orders_load_done gen=%d rows=%d total=%d", generation, len(page.items), page.total)
        return page
