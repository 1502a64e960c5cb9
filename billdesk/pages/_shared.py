from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable

from nicegui import app, ui

from ..auth_guard import current_access, handle_api_error
from ..calculations import calculate_line, calculate_totals, plan_amount, validate_line_item
from ..errors import ApiError
from ..formatting import (
    customer_label,
    format_date,
    format_datetime,
    format_money,
    format_percent,
    parse_iso_date,
    price_item_label,
)
from ..integrations.api_client import ApiClient
from ..models import (
    Customer,
    Invoice,
    InvoiceStatus,
    LineItem,
    Order,
    OrderStatus,
    PlanFrequency,
    PlanStatus,
    PriceListItem,
    RecurringPlan,
    Role,
    Settings,
    User,
)
from ..styles import (
    C_NUMERIC,
    STYLE_CONTAINER,
    STYLE_DRAWER,
    STYLE_INPUT,
    STYLE_PAGE_TITLE,
    STYLE_SECTION_TITLE,
    STYLE_TEXT_HINT,
    STYLE_TEXT_MUTED,
)
from ..ui_components import (
    btn_danger,
    btn_primary,
    btn_secondary,
    card,
    confirm_dialog,
    format_status,
    kpi_card,
    page_header,
    risk_badge_class,
    severity_badge_class,
    status_badge,
    tone_badge_class,
    totals_block,
)

logger = logging.getLogger(__name__)

C_TABLE_HEADER = "w-full px-3 py-2 text-xs font-semibold uppercase tracking-wider text-slate-600 border-b border-slate-200"
C_TABLE_ROW = "w-full px-3 py-2 text-sm text-slate-800 border-b border-slate-200/70 items-center"
C_DIALOG_CARD = "w-full max-w-[92vw] max-h-[85vh] overflow-y-auto"

# Select value meaning "no filter".
ALL = "ALL"


def unless_all(value: Any) -> Any:
    return None if value in (ALL, None) else value


def set_page(name: str, **state: Any) -> None:
    for key, value in state.items():
        app.storage.user[key] = value
    app.storage.user["page"] = name
    ui.navigate.to("/")


def pop_state(key: str, default: Any = None) -> Any:
    return app.storage.user.pop(key, default)


def load(fn: Callable[..., Any], *args: Any, fallback: str = "Could not load data", default: Any = None, **kwargs: Any) -> Any:
    """Call a service function; on a backend error notify and return ``default``."""
    try:
        return fn(*args, **kwargs)
    except ApiError as exc:
        logger.warning("page.load_failed fn=%s status=%s", getattr(fn, "__name__", fn), exc.status_code)
        handle_api_error(exc, fallback)
        return default
    except Exception:
        logger.exception("page.load_error fn=%s", getattr(fn, "__name__", fn))
        ui.notify(fallback, type="negative")
        return default


def run_action(fn: Callable[..., Any], *args: Any, success: str | None = None, fallback: str = "Action failed", **kwargs: Any) -> bool:
    try:
        fn(*args, **kwargs)
    except ApiError as exc:
        handle_api_error(exc, fallback)
        return False
    except ValueError as exc:
        ui.notify(str(exc), type="warning")
        return False
    except Exception:
        logger.exception("page.action_error fn=%s", getattr(fn, "__name__", fn))
        ui.notify(fallback, type="negative")
        return False
    if success:
        ui.notify(success, type="positive")
    return True


def empty_row(text: str) -> None:
    with ui.row().classes(C_TABLE_ROW):
        ui.label(text).classes(STYLE_TEXT_MUTED)


def pager(page: Any, on_change: Callable[[int], None]) -> None:
    """Previous/next controls for a backend page object."""
    total_pages = max(int(page.total_pages or 0), 1)
    with ui.row().classes("w-full items-center justify-between px-3 py-2"):
        ui.label(f"{page.total_elements} entries").classes(STYLE_TEXT_HINT)
        with ui.row().classes("items-center gap-2"):
            prev_btn = ui.button(icon="chevron_left", on_click=lambda: on_change(page.page - 1)).props("flat dense")
            prev_btn.set_enabled(page.page > 0)
            ui.label(f"{page.page + 1} / {total_pages}").classes("text-sm text-slate-600")
            next_btn = ui.button(icon="chevron_right", on_click=lambda: on_change(page.page + 1)).props("flat dense")
            next_btn.set_enabled(not page.last)


def line_items_table(items: list[LineItem], currency: str | None, on_remove: Callable[[LineItem], None] | None = None) -> None:
    """Items with per-line amounts and document totals."""
    with card(pad="p-0", classes="w-full overflow-hidden"):
        with ui.row().classes(C_TABLE_HEADER):
            ui.label("Item").classes("flex-1")
            ui.label("Qty").classes("w-16 text-right")
            ui.label("Unit net").classes("w-24 text-right")
            ui.label("Disc.").classes("w-14 text-right")
            ui.label("VAT").classes("w-14 text-right")
            ui.label("Net").classes("w-24 text-right")
            ui.label("Gross").classes("w-24 text-right")
            if on_remove:
                ui.label("").classes("w-10")
        if not items:
            empty_row("No items yet")
        for item in items:
            amounts = calculate_line(item)
            with ui.row().classes(C_TABLE_ROW):
                with ui.column().classes("flex-1 gap-0"):
                    ui.label(item.name or "-").classes("font-medium")
                    if item.description:
                        ui.label(item.description).classes("text-xs text-slate-500")
                ui.label(f"{item.quantity or 0:g} {item.unit or ''}".strip()).classes(f"w-16 text-right {C_NUMERIC}")
                ui.label(format_money(item.unit_price_net, currency)).classes(f"w-24 text-right {C_NUMERIC}")
                ui.label(f"{item.discount_percent or 0:g}%").classes(f"w-14 text-right {C_NUMERIC}")
                ui.label(format_percent(item.vat_rate)).classes(f"w-14 text-right {C_NUMERIC}")
                ui.label(format_money(amounts.line_net, currency)).classes(f"w-24 text-right {C_NUMERIC}")
                ui.label(format_money(amounts.line_gross, currency)).classes(f"w-24 text-right {C_NUMERIC}")
                if on_remove:
                    ui.button(icon="delete", on_click=lambda _, x=item: on_remove(x)).props("flat dense").classes(
                        "w-10 text-rose-600"
                    )
    totals = calculate_totals(items)
    totals_block(
        format_money(totals.net, currency),
        format_money(totals.vat, currency),
        format_money(totals.gross, currency),
    )


class LineItemForm:
    """Inputs for one line item, prefilled from a price list item."""

    def __init__(self, price_items: list[PriceListItem], default_vat_rate: float | None = None) -> None:
        self.price_items = {int(p.id): p for p in price_items if p.id is not None}
        options = {pid: price_item_label(p.name, p.description) for pid, p in self.price_items.items()}
        with ui.column().classes("w-full gap-2"):
            self.price_item = ui.select(
                options,
                label="Price list item",
                with_input=True,
                on_change=lambda e: self._prefill(e.value),
            ).props("outlined dense clearable").classes(STYLE_INPUT)
            self.name = ui.input("Name").props("outlined dense").classes(STYLE_INPUT)
            self.description = ui.input("Description").props("outlined dense").classes(STYLE_INPUT)
            with ui.row().classes("w-full gap-2 no-wrap"):
                self.quantity = ui.number("Quantity", value=1, min=0, step=1).props("outlined dense").classes("flex-1")
                self.unit = ui.input("Unit").props("outlined dense").classes("w-24")
            with ui.row().classes("w-full gap-2 no-wrap"):
                self.unit_price_net = ui.number("Unit net price", min=0, step=0.01).props("outlined dense").classes("flex-1")
                self.discount_percent = ui.number("Discount %", value=0, min=0, max=100).props("outlined dense").classes("w-28")
                self.vat_rate = ui.number(
                    "VAT rate", value=default_vat_rate, min=0, max=1, step=0.01
                ).props("outlined dense").classes("w-28")
            self.preview = ui.label("").classes(f"text-sm text-slate-600 {C_NUMERIC}")
        for field in (self.quantity, self.unit_price_net, self.discount_percent, self.vat_rate):
            field.on_value_change(lambda _: self._update_preview())
        self._update_preview()

    def _prefill(self, price_item_id: Any) -> None:
        item = self.price_items.get(int(price_item_id)) if price_item_id is not None else None
        if item is None:
            return
        self.name.value = item.name
        self.description.value = item.description or ""
        self.unit.value = item.unit or ""
        self.unit_price_net.value = item.price_net
        self.vat_rate.value = item.vat_rate
        self._update_preview()

    def _update_preview(self) -> None:
        amounts = calculate_line(self.raw())
        self.preview.text = f"Line net {format_money(amounts.line_net)} · gross {format_money(amounts.line_gross)}"

    def raw(self) -> dict[str, Any]:
        return {
            "quantity": self.quantity.value,
            "unit_price_net": self.unit_price_net.value,
            "discount_percent": self.discount_percent.value,
            "vat_rate": self.vat_rate.value,
        }

    def read(self) -> tuple[LineItem | None, list[str]]:
        errors = validate_line_item(self.raw())
        if not (self.name.value or "").strip() and self.price_item.value is None:
            errors.insert(0, "Pick a price list item or enter a name")
        if errors:
            return None, errors
        item = LineItem(
            price_list_item_id=self.price_item.value,
            name=(self.name.value or "").strip() or None,
            description=(self.description.value or "").strip() or None,
            unit=(self.unit.value or "").strip() or None,
            quantity=float(self.quantity.value),
            unit_price_net=float(self.unit_price_net.value or 0),
            discount_percent=float(self.discount_percent.value or 0),
            vat_rate=float(self.vat_rate.value or 0),
        )
        return item, []

    def reset(self) -> None:
        self.price_item.value = None
        self.name.value = ""
        self.description.value = ""
        self.unit.value = ""
        self.quantity.value = 1
        self.unit_price_net.value = None
        self.discount_percent.value = 0
