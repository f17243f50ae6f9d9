"""Main Textual app class."""

from __future__ import annotations

import logging
import sqlite3

from rich.text import Text
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.timer import Timer
from textual.widgets import Button, DataTable, Footer, Header, Input, Select, Static

from order_desk.api import OrdersApiError, OrdersClient
from order_desk.config import LOCATION_SAVE_DELAY, MAX_PAGE_LINKS, PAGE_PATH, PER_PAGE_CHOICES
from order_desk.constant import DINING_LABELS, MESSAGES, RANGE_LABELS, STATUS_LABELS
from order_desk.detail_modal import DetailModal
from order_desk.loader import LoadTrigger, OrderListLoader
from order_desk.models import Order, OrderPage
from order_desk.persistence import bootstrap_schema, save_location
from order_desk.query_state import (
    DINING_CHOICES,
    RANGE_CHOICES,
    STATUS_CHOICES,
    FilterState,
    decode,
    encode,
    make_location,
    normalize_location,
    split_location,
)
from order_desk.rendering import dining_badge, format_idr, format_timestamp, status_badge
from order_desk.settlement import CashSettlement, SettlementResult

logger = logging.getLogger(__name__)

# Select widget id -> query key.
_SELECT_KEYS = {
    "status": "status",
    "dining": "dining",
    "range": "range",
    "per-page": "perPage",
}


def _per_page_options(current: int) -> list[tuple[str, str]]:
    values = sorted(set(PER_PAGE_CHOICES) | {current})
    return [(f"{value} / page", str(value)) for value in values]


class OrderDeskApp(App):
    """Browse orders, inspect them and settle unpaid ones in cash."""

    TITLE = "Order Desk"
    SUB_TITLE = "Orders / Cash settlement"

    CSS = """
    Screen {
        layout: vertical;
    }

    #page {
        height: 1fr;
        padding: 0 1;
    }

    #address-bar {
        border: heavy $secondary;
        margin-bottom: 1;
    }

    #filters {
        height: auto;
        margin-bottom: 1;
    }

    #search {
        width: 1fr;
    }

    #status {
        width: 28;
    }

    #dining {
        width: 24;
    }

    #range, #per-page {
        width: 18;
    }

    #orders {
        height: 1fr;
        border: round $primary;
    }

    #list-status {
        height: 1;
        margin: 0 1;
    }

    #list-status.error {
        color: #ff6b6b;
    }

    #pager {
        height: auto;
        align-horizontal: center;
    }

    #pager Button {
        min-width: 5;
    }
    """

    location = reactive(PAGE_PATH, init=False)
    version = reactive(0, init=False)

    BINDINGS = [
        ("d", "open_detail", "Detail"),
        ("m", "mark_paid", "Mark paid (cash)"),
        ("r", "reload", "Reload"),
        Binding("left_square_bracket", "prev_page", "Prev page", key_display="["),
        Binding("right_square_bracket", "next_page", "Next page", key_display="]"),
        Binding("ctrl+l", "focus_address", "Address bar", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        client: OrdersClient | None = None,
        *,
        location: str = PAGE_PATH,
        remember_location: bool = True,
    ) -> None:
        super().__init__()
        self.client = client or OrdersClient()
        self.loader = OrderListLoader(self.client.fetch_orders)
        self.settlement = CashSettlement()
        self.remember_location = remember_location
        self.rows: tuple[Order, ...] = ()
        self.current_page: OrderPage | None = None
        self.list_message = ""
        self._per_page_values = set(PER_PAGE_CHOICES)
        self._pending_location: str | None = None
        self._save_timer: Timer | None = None
        self.set_reactive(OrderDeskApp.location, normalize_location(location))

    @property
    def filters(self) -> FilterState:
        _, query = split_location(self.location)
        return decode(query)

    def compose(self) -> ComposeResult:
        filters = self.filters
        yield Header()
        with Vertical(id="page"):
            yield Input(value=self.location, placeholder=PAGE_PATH, id="address-bar")
            with Horizontal(id="filters"):
                yield Input(value=filters.q, placeholder="Search code / customer…", id="search")
                yield Select(
                    [(STATUS_LABELS[value], value) for value in STATUS_CHOICES],
                    value=filters.status,
                    allow_blank=False,
                    id="status",
                )
                yield Select(
                    [(DINING_LABELS[value], value) for value in DINING_CHOICES],
                    value=filters.dining,
                    allow_blank=False,
                    id="dining",
                )
                yield Select(
                    [(RANGE_LABELS[value], value) for value in RANGE_CHOICES],
                    value=filters.range,
                    allow_blank=False,
                    id="range",
                )
                self._per_page_values |= {filters.per_page}
                yield Select(
                    _per_page_options(filters.per_page),
                    value=str(filters.per_page),
                    allow_blank=False,
                    id="per-page",
                )
                yield Button("Reset", id="reset")
            yield DataTable(id="orders", cursor_type="row", zebra_stripes=True)
            yield Static(id="list-status")
            with Horizontal(id="pager"):
                yield Button("‹ Prev", id="prev")
                for number in range(1, MAX_PAGE_LINKS + 1):
                    yield Button(str(number), id=f"page-{number}", classes="page-link")
                yield Button("Next ›", id="next")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#orders", DataTable)
        table.add_columns("Code", "No.", "Date", "Customer", "Type", "Status", "Total")
        table.focus()
        if self.remember_location:
            try:
                bootstrap_schema()
            except (sqlite3.Error, OSError) as exc:
                logger.warning("location_store_unavailable error=%r", exc)
                self.remember_location = False
        self._remember(self.location)
        self._refresh_pager()
        self._request_load()

    async def on_unmount(self) -> None:
        self._flush_location()
        await self.client.aclose()

    # Navigation: every filter write goes through the location.

    def navigate(self, raw: str) -> None:
        location = normalize_location(raw)
        logger.info("navigate location=%s", location)
        self.location = location
        # An unchanged location fires no watcher; still show the normalized text.
        address_bar = self.query_one("#address-bar", Input)
        if address_bar.value != location:
            with self.prevent(Input.Changed):
                address_bar.value = location

    def set_param(self, key: str, value: str) -> None:
        _, query = split_location(self.location)
        self.navigate(make_location(encode(query, key, value)))

    def watch_location(self, location: str) -> None:
        self._remember_later(location)
        self._sync_filter_widgets()
        self._request_load()

    def watch_version(self, version: int) -> None:
        logger.info("list_version version=%d", version)
        self._request_load()

    def _remember_later(self, location: str) -> None:
        if not self.remember_location:
            return
        self._pending_location = location
        if self._save_timer is not None:
            self._save_timer.stop()
        self._save_timer = self.set_timer(LOCATION_SAVE_DELAY, self._flush_location)

    def _flush_location(self) -> None:
        if self._save_timer is not None:
            self._save_timer.stop()
            self._save_timer = None
        location, self._pending_location = self._pending_location, None
        if location is not None:
            self._remember(location)

    def _remember(self, location: str) -> None:
        if not self.remember_location:
            return
        try:
            save_location(location)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("location_save_failed location=%s error=%r", location, exc)

    def _sync_filter_widgets(self) -> None:
        filters = self.filters
        with self.prevent(Input.Changed, Select.Changed):
            address_bar = self.query_one("#address-bar", Input)
            if address_bar.value != self.location:
                address_bar.value = self.location
            search = self.query_one("#search", Input)
            if search.value != filters.q:
                search.value = filters.q
            for widget_id, key in _SELECT_KEYS.items():
                select = self.query_one(f"#{widget_id}", Select)
                value = filters.value_for(key)
                if widget_id == "per-page" and filters.per_page not in self._per_page_values:
                    options = _per_page_options(filters.per_page)
                    self._per_page_values = {int(option_value) for _, option_value in options}
                    select.set_options(options)
                if select.value != value:
                    select.value = value

    @on(Input.Submitted, "#address-bar")
    def _address_submitted(self, event: Input.Submitted) -> None:
        self.navigate(event.value)
        self.query_one("#orders", DataTable).focus()

    @on(Input.Changed, "#search")
    def _search_changed(self, event: Input.Changed) -> None:
        if event.value != self.filters.q:
            self.set_param("q", event.value)

    @on(Select.Changed)
    def _select_changed(self, event: Select.Changed) -> None:
        key = _SELECT_KEYS.get(event.select.id or "")
        if key is None:
            return
        value = str(event.value)
        if value != self.filters.value_for(key):
            self.set_param(key, value)

    @on(Button.Pressed, "#reset")
    def _reset_pressed(self) -> None:
        self.navigate(PAGE_PATH)

    @on(Button.Pressed, "#prev")
    def _prev_pressed(self) -> None:
        self.action_prev_page()

    @on(Button.Pressed, "#next")
    def _next_pressed(self) -> None:
        self.action_next_page()

    @on(Button.Pressed, ".page-link")
    def _page_link_pressed(self, event: Button.Pressed) -> None:
        number = int((event.button.id or "page-1").removeprefix("page-"))
        self.set_param("page", str(number))

    def action_focus_address(self) -> None:
        self.query_one("#address-bar", Input).focus()

    def action_prev_page(self) -> None:
        page = self.filters.page
        if page > 1:
            self.set_param("page", str(page - 1))

    def action_next_page(self) -> None:
        page = self.filters.page
        if page < self._last_page():
            self.set_param("page", str(page + 1))

    # Loading.

    def action_reload(self) -> None:
        self._request_load(force=True)

    def _request_load(self, force: bool = False) -> None:
        trigger = LoadTrigger(filters=self.filters, version=self.version)
        if not force and not self.loader.needs_load(trigger):
            return
        self.load_orders(trigger)

    @work(exclusive=True, group="orders")
    async def load_orders(self, trigger: LoadTrigger) -> None:
        self._show_loading()
        try:
            page = await self.loader.load(trigger)
        except OrdersApiError as exc:
            self._show_load_error(exc.message)
            return
        if page is None:
            return
        self._show_page(page)

    def _show_loading(self) -> None:
        self.query_one("#orders", DataTable).loading = True
        self._set_list_message(MESSAGES["loading"])

    def _show_page(self, page: OrderPage) -> None:
        table = self.query_one("#orders", DataTable)
        table.clear()
        self.rows = page.items
        self.current_page = page
        for order in page.items:
            table.add_row(
                Text(order.code, style="bold"),
                order.queue_number,
                format_timestamp(order.created_at),
                order.customer_name,
                dining_badge(order.dining_type),
                status_badge(order.status),
                Text(format_idr(order.total), justify="right"),
                key=order.id,
            )
        table.loading = False
        if not page.items:
            self._set_list_message(MESSAGES["empty"])
        else:
            self._set_list_message(f"Page {page.page} of {max(1, page.last_page)} · {page.total} orders")
        self._refresh_pager()

    def _show_load_error(self, message: str) -> None:
        table = self.query_one("#orders", DataTable)
        table.clear()
        table.loading = False
        self.rows = ()
        self.current_page = None
        self._set_list_message(message, error=True)
        self.notify(message, title="Load failed", severity="error")
        self._refresh_pager()

    def _set_list_message(self, message: str, error: bool = False) -> None:
        self.list_message = message
        status = self.query_one("#list-status", Static)
        status.set_class(error, "error")
        status.update(message)

    def _last_page(self) -> int:
        # From the perPage the backend answered with, not the one requested.
        if self.current_page is None:
            return 0
        return self.current_page.last_page

    def _refresh_pager(self) -> None:
        page = self.filters.page
        last_page = self._last_page()
        links = max(1, min(MAX_PAGE_LINKS, last_page))
        self.query_one("#prev", Button).disabled = page <= 1
        self.query_one("#next", Button).disabled = page >= last_page
        for number in range(1, MAX_PAGE_LINKS + 1):
            button = self.query_one(f"#page-{number}", Button)
            button.display = number <= links
            button.variant = "primary" if number == page else "default"

    # Detail panel.

    def _cursor_order(self) -> Order | None:
        if not self.rows:
            return None
        row = self.query_one("#orders", DataTable).cursor_row
        if not (0 <= row < len(self.rows)):
            return None
        return self.rows[row]

    @on(DataTable.RowSelected, "#orders")
    def _row_selected(self) -> None:
        self.action_open_detail()

    def action_open_detail(self) -> None:
        order = self._cursor_order()
        if order is None:
            self.notify(MESSAGES["no_selection"], severity="warning")
            return
        self._open_panel(order, prefill_total=False)

    def action_mark_paid(self) -> None:
        order = self._cursor_order()
        if order is None:
            self.notify(MESSAGES["no_selection"], severity="warning")
            return
        if not order.is_cash_settleable:
            self.notify(MESSAGES["not_settleable"], severity="warning")
            return
        self._open_panel(order, prefill_total=True)

    def _open_panel(self, order: Order, *, prefill_total: bool) -> None:
        if not self.settlement.open(order, prefill_total=prefill_total):
            return
        logger.info("panel_open order_id=%s prefill=%s", order.id, prefill_total)
        self.push_screen(DetailModal(self.settlement, self.client.pay_cash), callback=self._panel_closed)

    def _panel_closed(self, result: SettlementResult | None) -> None:
        self.settlement.close()
        if result is None or not result.settled:
            return
        self.version += 1
        self.notify(result.message, title="Paid")
