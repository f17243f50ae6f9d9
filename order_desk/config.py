"""Runtime configuration defaults for the backend connection and local state."""

from __future__ import annotations

import os

_API_URL_ENV = "ORDER_DESK_API_URL"
_HTTP_TIMEOUT_ENV = "ORDER_DESK_HTTP_TIMEOUT"
_DB_PATH_ENV = "ORDER_DESK_DB_PATH"
_LOG_PATH_ENV = "ORDER_DESK_LOG_PATH"
_LOG_LEVEL_ENV = "ORDER_DESK_LOG_LEVEL"


def _env_timeout() -> float | None:
    raw = os.environ.get(_HTTP_TIMEOUT_ENV, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


API_BASE_URL = os.environ.get(_API_URL_ENV, "").strip() or "http://localhost:3000"
ORDERS_LIST_PATH = "/api/admin/orders"
ORDERS_PAY_CASH_PATH = "/api/admin/orders/{order_id}/pay-cash"

# None leaves timing to the transport; the desk never gives up on its own.
HTTP_TIMEOUT_SECONDS = _env_timeout()

PAGE_PATH = "/admin/pesanan"

DEFAULT_STATUS = "all"
DEFAULT_DINING = "all"
DEFAULT_RANGE = "7d"
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100
PER_PAGE_CHOICES = (10, 20, 50)
MAX_PAGE_LINKS = 6

DB_PATH = os.environ.get(_DB_PATH_ENV, "").strip() or "data/order-desk.db"
LOG_PATH = os.environ.get(_LOG_PATH_ENV, "").strip() or "/tmp/order-desk.log"
LOG_LEVEL = os.environ.get(_LOG_LEVEL_ENV, "").strip().upper() or "INFO"

# Seconds a location must stay unchanged before it is saved.
LOCATION_SAVE_DELAY = 0.8
