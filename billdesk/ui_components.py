from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable

from nicegui import ui

from .models import InvoiceStatus, OrderStatus, PlanStatus
from .styles import (
    C_NUMERIC,
    STYLE_BADGE_BLUE,
    STYLE_BADGE_GRAY,
    STYLE_BADGE_GREEN,
    STYLE_BADGE_RED,
    STYLE_BADGE_YELLOW,
    STYLE_BTN_DANGER,
    STYLE_BTN_PRIMARY,
    STYLE_BTN_SECONDARY,
    STYLE_CARD,
    STYLE_CARD_HOVER,
    STYLE_PAGE_TITLE,
    STYLE_SECTION_TITLE,
    STYLE_TEXT_MUTED,
)


_STATUS_BADGES = {
    InvoiceStatus.DRAFT: STYLE_BADGE_GRAY,
    InvoiceStatus.ISSUED: STYLE_BADGE_BLUE,
    InvoiceStatus.SENT: STYLE_BADGE_YELLOW,
    InvoiceStatus.PAID: STYLE_BADGE_GREEN,
    InvoiceStatus.RETURNED: STYLE_BADGE_YELLOW,
    InvoiceStatus.OVERDUE: STYLE_BADGE_RED,
    InvoiceStatus.CANCELLED: STYLE_BADGE_GRAY,
    OrderStatus.CONFIRMED: STYLE_BADGE_BLUE,
    OrderStatus.INVOICED: STYLE_BADGE_YELLOW,
    OrderStatus.COMPLETED: STYLE_BADGE_GREEN,
    PlanStatus.ACTIVE: STYLE_BADGE_GREEN,
    PlanStatus.PAUSED: STYLE_BADGE_YELLOW,
    PlanStatus.EXPIRED: STYLE_BADGE_GRAY,
}

_SEVERITY_BADGES = {
    "high": STYLE_BADGE_RED,
    "medium": STYLE_BADGE_YELLOW,
    "low": STYLE_BADGE_BLUE,
}

_TONE_BADGES = {
    "error": STYLE_BADGE_RED,
    "warning": STYLE_BADGE_YELLOW,
    "info": STYLE_BADGE_BLUE,
}

_RISK_BADGES = {
    "High": STYLE_BADGE_RED,
    "Medium": STYLE_BADGE_YELLOW,
    "Low": STYLE_BADGE_GREEN,
}


def status_badge_class(status: Any) -> str:
    value = getattr(status, "value", status)
    for key, cls in _STATUS_BADGES.items():
        if key.value == value:
            return cls
    return STYLE_BADGE_GRAY


def format_status(status: Any) -> str:
    value = str(getattr(status, "value", status) or "")
    return value.replace("_", " ").capitalize()


def severity_badge_class(severity: str) -> str:
    return _SEVERITY_BADGES.get(severity, STYLE_BADGE_GRAY)


def risk_badge_class(risk: str) -> str:
    return _RISK_BADGES.get(risk, STYLE_BADGE_GRAY)


def tone_badge_class(tone: str) -> str:
    return _TONE_BADGES.get(tone, STYLE_BADGE_GRAY)


def status_badge(status: Any) -> None:
    ui.label(format_status(status)).classes(status_badge_class(status))


def kpi_card(label, value, icon, color, classes: str = "", hint: str | None = None):
    card_classes = f"{STYLE_CARD} {STYLE_CARD_HOVER} p-5 {classes} relative overflow-hidden min-h-[120px]".strip()
    with ui.card().classes(card_classes):
        ui.icon(icon).classes(f"absolute right-4 bottom-4 text-6xl {color} opacity-10")
        with ui.column().classes("gap-2"):
            with ui.row().classes("items-center gap-2"):
                ui.icon(icon).classes(f"text-base {color}")
                ui.label(label).classes("text-xs font-bold text-slate-400 uppercase tracking-wider")
            ui.label(value).classes(f"text-2xl font-bold text-slate-800 {C_NUMERIC}")
            if hint:
                ui.label(hint).classes("text-xs text-slate-500")


def page_header(title: str, subtitle: str | None = None):
    with ui.column().classes("gap-1"):
        ui.label(title).classes(STYLE_PAGE_TITLE)
        if subtitle:
            ui.label(subtitle).classes(STYLE_TEXT_MUTED)


@contextmanager
def card(pad: str = "p-5", classes: str = ""):
    with ui.card().classes(f"{STYLE_CARD} {pad} {classes}".strip()) as element:
        yield element


@contextmanager
def settings_card(title: str | None = None, classes: str = ""):
    with ui.card().classes(f"{STYLE_CARD} p-6 w-full {classes}".strip()) as card:
        if title:
            ui.label(title).classes(STYLE_SECTION_TITLE)
        yield card


@contextmanager
def settings_grid(columns: int | None = 2):
    responsive_classes = "grid grid-cols-1 gap-4 w-full"
    if columns:
        responsive_classes = f"{responsive_classes} md:grid-cols-{columns}"
    with ui.element("div").classes(responsive_classes):
        yield


def btn_primary(label: str, on_click: Callable | None = None, icon: str | None = None):
    return ui.button(label, icon=icon, on_click=on_click).props("flat no-caps").classes(STYLE_BTN_PRIMARY)


def btn_secondary(label: str, on_click: Callable | None = None, icon: str | None = None):
    return ui.button(label, icon=icon, on_click=on_click).props("flat no-caps").classes(STYLE_BTN_SECONDARY)


def btn_danger(label: str, on_click: Callable | None = None, icon: str | None = None):
    return ui.button(label, icon=icon, on_click=on_click).props("flat no-caps").classes(STYLE_BTN_DANGER)


def confirm_dialog(message: str, on_confirm: Callable[[], None], confirm_label: str = "Delete") -> ui.dialog:
    with ui.dialog() as dialog, ui.card().classes(f"{STYLE_CARD} p-6 gap-4"):
        ui.label(message).classes("text-sm text-slate-800")
        with ui.row().classes("w-full justify-end gap-2"):
            btn_secondary("Cancel", on_click=dialog.close)

            def _confirm() -> None:
                dialog.close()
                on_confirm()

            btn_danger(confirm_label, on_click=_confirm)
    return dialog


def totals_block(net: str, vat: str, gross: str) -> None:
    with ui.column().classes("items-end gap-1 w-full"):
        with ui.row().classes("gap-6"):
            ui.label("Net").classes(STYLE_TEXT_MUTED)
            ui.label(net).classes(C_NUMERIC)
        with ui.row().classes("gap-6"):
            ui.label("VAT").classes(STYLE_TEXT_MUTED)
            ui.label(vat).classes(C_NUMERIC)
        with ui.row().classes("gap-6"):
            ui.label("Gross").classes("text-sm font-semibold")
            ui.label(gross).classes(f"font-semibold {C_NUMERIC}")
