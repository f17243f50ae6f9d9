"""Order detail sheet hosting the cash settlement form."""

from __future__ import annotations

from rich.text import Text
from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from order_desk.constant import MESSAGES
from order_desk.models import SETTLEABLE_STATUSES, Order
from order_desk.rendering import dining_badge, format_idr, format_timestamp, status_badge
from order_desk.settlement import CashSettlement, Outcome, PanelState, PayCash, SettlementResult


def _summary(order: Order) -> Text:
    text = Text()
    text.append("Code      ", style="dim")
    text.append(order.code, style="bold")
    text.append("\nCustomer  ", style="dim")
    text.append(order.customer_name or "—")
    text.append("\nStatus    ", style="dim")
    text.append_text(status_badge(order.status))
    text.append("\nType      ", style="dim")
    text.append_text(dining_badge(order.dining_type))
    text.append("\nTime      ", style="dim")
    text.append(format_timestamp(order.created_at))
    return text


def _items(order: Order) -> Text:
    text = Text()
    text.append("Items", style="bold")
    for item in order.items:
        text.append(f"\n{item.name}", style="bold")
        text.append(f"  {format_idr(item.total)}")
        text.append(f"\n  Qty {item.qty} × {format_idr(item.price)}", style="dim")
    return text


def _totals(order: Order) -> Text:
    text = Text()
    text.append(f"Subtotal  {format_idr(order.subtotal)}\n")
    text.append(f"Discount  -{format_idr(order.discount)}\n")
    text.append(f"Tax       {format_idr(order.tax)}\n")
    text.append(f"Total     {format_idr(order.total)}", style="bold")
    return text


def _payments(order: Order) -> Text:
    text = Text()
    text.append("Payments", style="bold")
    if not order.payments:
        text.append(f"\n{MESSAGES['no_payments']}", style="dim")
        return text
    for payment in order.payments:
        text.append(f"\n{payment.method.value}", style="bold")
        text.append(f"  {format_idr(payment.amount)}")
        text.append(f"\n  {payment.ref_code or '—'} · {format_timestamp(payment.paid_at)}", style="dim")
    return text


class DetailModal(ModalScreen[SettlementResult | None]):
    """Shows one order snapshot; dismisses with the settlement result on success."""

    BINDINGS = [
        ("escape", "close", "Close"),
        Binding("ctrl+s", "settle", "Mark as paid", priority=True),
    ]

    CSS = """
    DetailModal {
        align: right middle;
        background: $background 60%;
    }

    #detail-dialog {
        width: 64;
        height: 100%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #detail-title {
        text-style: bold;
        margin-bottom: 1;
    }

    .pane-title {
        text-style: bold;
    }

    .detail-box {
        border: round $surface;
        padding: 0 1;
        margin-bottom: 1;
    }

    #detail-totals {
        margin-bottom: 1;
    }

    #cash-box {
        height: auto;
        border: round $primary;
        padding: 0 1;
        margin-bottom: 1;
    }

    #cash-error {
        color: #ffb3b3;
    }

    #cash-hint {
        color: $text-muted;
        margin-bottom: 1;
    }

    #cash-actions, #detail-actions {
        height: auto;
        align-horizontal: right;
    }
    """

    def __init__(self, settlement: CashSettlement, pay_cash: PayCash) -> None:
        super().__init__()
        self.settlement = settlement
        self.pay_cash = pay_cash
        self.quote_line = ""
        self.error_line = ""

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="detail-dialog"):
            yield Static("Order Detail", id="detail-title")
            yield Static(id="detail-summary", classes="detail-box")
            yield Static(id="detail-items", classes="detail-box")
            yield Static(id="detail-totals")
            yield Static(id="detail-payments", classes="detail-box")
            with Vertical(id="cash-box"):
                yield Static("Mark Paid (Cash)", classes="pane-title")
                yield Label("Amount received")
                yield Input(id="cash-input", type="number")
                yield Static(id="cash-quote")
                yield Static(id="cash-error")
                with Horizontal(id="cash-actions"):
                    yield Button("Fill total", id="fill-total")
                    yield Button("Mark as Paid (Cash)", id="settle", variant="success")
            yield Static(id="cash-hint")
            with Horizontal(id="detail-actions"):
                yield Button("Close", id="close")

    def on_mount(self) -> None:
        self.settlement.on_change = self._refresh_content
        selected = self.settlement.selected
        if selected is None:
            return
        order = selected.order
        self.query_one("#detail-summary", Static).update(_summary(order))
        self.query_one("#detail-items", Static).update(_items(order))
        self.query_one("#detail-totals", Static).update(_totals(order))
        self.query_one("#detail-payments", Static).update(_payments(order))
        cash_input = self.query_one("#cash-input", Input)
        cash_input.placeholder = str(order.total)
        with self.prevent(Input.Changed):
            cash_input.value = selected.cash_input
        self._refresh_content()

    def on_unmount(self) -> None:
        if self.settlement.on_change == self._refresh_content:
            self.settlement.on_change = None

    @on(Input.Changed, "#cash-input")
    def _cash_changed(self, event: Input.Changed) -> None:
        self.error_line = ""
        self.settlement.set_cash_input(event.value)
        self._refresh_content()

    @on(Button.Pressed, "#fill-total")
    def _fill_total(self) -> None:
        self.error_line = ""
        self.settlement.fill_total()

    @on(Button.Pressed, "#settle")
    def _settle_pressed(self) -> None:
        self.action_settle()

    @on(Button.Pressed, "#close")
    def _close_pressed(self) -> None:
        self.action_close()

    def action_close(self) -> None:
        if not self.settlement.close():
            return
        self.dismiss(None)

    def action_settle(self) -> None:
        if self.settlement.state is not PanelState.VIEWING:
            return
        self.submit_settlement()

    @work(group="settlement")
    async def submit_settlement(self) -> None:
        result = await self.settlement.submit(self.pay_cash)
        if result.outcome is Outcome.SETTLED:
            self.dismiss(result)
            return
        if result.outcome is Outcome.IGNORED:
            return

        self.error_line = result.message
        severity = "warning" if result.outcome is Outcome.REJECTED else "error"
        self.notify(result.message, severity=severity)
        self._refresh_content()

    def _refresh_content(self) -> None:
        selected = self.settlement.selected
        if selected is None:
            return
        order = selected.order
        submitting = self.settlement.state is PanelState.SUBMITTING

        cash_box = self.query_one("#cash-box", Vertical)
        cash_box.display = self.settlement.can_settle
        hint = self.query_one("#cash-hint", Static)
        hint_visible = order.status in SETTLEABLE_STATUSES and not self.settlement.can_settle
        hint.display = hint_visible
        hint.update(MESSAGES["settle_disabled_hint"] if hint_visible else "")

        cash_input = self.query_one("#cash-input", Input)
        if cash_input.value != selected.cash_input:
            with self.prevent(Input.Changed):
                cash_input.value = selected.cash_input
        cash_input.disabled = submitting

        quote = self.settlement.quote
        quote_text = Text()
        if quote.sufficient:
            self.quote_line = f"Change: {format_idr(quote.change)}"
            quote_text.append("Change: ")
            quote_text.append(format_idr(quote.change), style="bold")
        else:
            self.quote_line = f"Short: {format_idr(quote.shortfall)}"
            quote_text.append(self.quote_line, style="bold #ff6b6b")
        self.query_one("#cash-quote", Static).update(quote_text)
        self.query_one("#cash-error", Static).update(self.error_line)

        settle = self.query_one("#settle", Button)
        settle.disabled = not self.settlement.settle_enabled
        settle.label = "Processing…" if submitting else "Mark as Paid (Cash)"
        self.query_one("#fill-total", Button).disabled = submitting
        self.query_one("#close", Button).disabled = submitting
