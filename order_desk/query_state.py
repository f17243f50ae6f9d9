"""Address-bar codec: the location's query string is the only filter store.

``decode`` turns a query string into a typed ``FilterState`` (missing or
malformed fields fall back to defaults), ``encode`` writes one field back
and applies the first-page rule, and ``request_params`` shapes a state into
the listing service's query parameters.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qsl, quote_plus, urlencode

from order_desk.config import (
    DEFAULT_DINING,
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    DEFAULT_RANGE,
    DEFAULT_STATUS,
    MAX_PER_PAGE,
    PAGE_PATH,
)
from order_desk.models import DiningType, OrderStatus

ALL = "all"

QUERY_KEYS = ("q", "status", "dining", "range", "page", "perPage")
# Changing anything else sends the user back to page 1.
PAGINATION_KEYS = frozenset({"page", "perPage"})

STATUS_CHOICES = (ALL, *(status.value for status in OrderStatus))
DINING_CHOICES = (ALL, *(dining.value for dining in DiningType))
RANGE_CHOICES = ("today", "7d", "30d", ALL)


@dataclass(frozen=True)
class FilterState:
    """Typed view of the recognized query keys."""

    q: str = ""
    status: str = DEFAULT_STATUS
    dining: str = DEFAULT_DINING
    range: str = DEFAULT_RANGE
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE

    def value_for(self, key: str) -> str:
        """Return the field behind a query key, in its query-string form."""
        values = {
            "q": self.q,
            "status": self.status,
            "dining": self.dining,
            "range": self.range,
            "page": str(self.page),
            "perPage": str(self.per_page),
        }
        return values[key]


def split_location(location: str) -> tuple[str, str]:
    """Split ``/path?query`` into ``(path, query)``."""
    path, _, query = location.partition("?")
    return (path, query)


def make_location(query: str) -> str:
    return f"{PAGE_PATH}?{query}" if query else PAGE_PATH


def normalize_location(raw: str) -> str:
    """Pin any typed location to the orders page, keeping only its query."""
    raw = raw.strip()
    if "?" not in raw:
        # A bare "status=PAID" is a query, a bare "/anything" is a path.
        query = "" if raw.startswith("/") or "=" not in raw else raw
    else:
        _, query = split_location(raw)
    query = query.split("#", 1)[0]
    return make_location(query)


def _parse_pairs(query: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        # First occurrence wins, as URLSearchParams.get does.
        pairs.setdefault(key, value)
    return pairs


def _render(pairs: dict[str, str]) -> str:
    ordered = [(key, pairs[key]) for key in QUERY_KEYS if key in pairs]
    ordered.extend((key, value) for key, value in pairs.items() if key not in QUERY_KEYS)
    return urlencode(ordered, quote_via=quote_plus)


def _choice(raw: str | None, choices: tuple[str, ...], default: str) -> str:
    if raw in choices:
        return raw
    return default


def _positive_int(raw: str | None, default: int, maximum: int | None = None) -> int:
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    if value < 1:
        return default
    if maximum is not None and value > maximum:
        return maximum
    return value


def decode(query: str) -> FilterState:
    """Read a filter state from a query string. Never raises."""
    pairs = _parse_pairs(query)
    return FilterState(
        q=pairs.get("q", ""),
        status=_choice(pairs.get("status"), STATUS_CHOICES, DEFAULT_STATUS),
        dining=_choice(pairs.get("dining"), DINING_CHOICES, DEFAULT_DINING),
        range=_choice(pairs.get("range"), RANGE_CHOICES, DEFAULT_RANGE),
        page=_positive_int(pairs.get("page"), DEFAULT_PAGE),
        per_page=_positive_int(pairs.get("perPage"), DEFAULT_PER_PAGE, MAX_PER_PAGE),
    )


def encode(query: str, key: str, value: str) -> str:
    """Write ``key=value`` into a query string and return the new query string.

    An empty value removes the key. Every key outside ``PAGINATION_KEYS``
    also rewrites ``page`` to 1. Unrecognized keys already in the query are
    carried over untouched.
    """
    pairs = _parse_pairs(query)
    if value:
        pairs[key] = value
    else:
        pairs.pop(key, None)
    if key not in PAGINATION_KEYS:
        pairs["page"] = str(DEFAULT_PAGE)
    return _render(pairs)


def request_params(state: FilterState) -> dict[str, str]:
    """Query parameters for the listing service.

    Blank search and the "all" status/dining filters are left out so the
    service applies its own defaults instead of receiving empty strings.
    ``range`` is always sent, ``range=all`` included: the service defaults
    a missing range to its own window, which is not "all".
    """
    params: dict[str, str] = {}
    if state.q.strip():
        params["q"] = state.q
    if state.status != ALL:
        params["status"] = state.status
    if state.dining != ALL:
        params["dining"] = state.dining
    if state.range:
        params["range"] = state.range
    params["page"] = str(state.page)
    params["perPage"] = str(state.per_page)
    return params
