from __future__ import annotations

from ._shared import *
from .. import metrics
from ..services.invoices import list_all_invoices
from ..services.recurring import list_plans


def render_home(api: ApiClient) -> None:
    _CLS = {
        "kpi_grid": "grid grid-cols-1 sm:grid-cols-2 lg:grid-cols-4 gap-4 w-full",
        "two_col": "grid grid-cols-1 lg:grid-cols-2 gap-4 w-full",
        "row": "w-full items-center justify-between py-1",
        "bar_track": "w-full h-2 rounded-full bg-slate-100 overflow-hidden",
    }

    page_header("Overview", "What needs attention today")

    invoices = load(list_all_invoices, api, fallback="Could not load invoices", default=[])
    plans = load(list_plans, api, fallback="Could not load recurring plans", default=[])
    today = date.today()

    kpis = metrics.home_kpis(invoices, plans, today)
    with ui.element("div").classes(_CLS["kpi_grid"]):
        kpi_card("Open invoices", str(kpis.open_count), "receipt_long", "text-sky-600", hint=f"{kpis.due_this_week} due within 7 days")
        kpi_card("Overdue", format_money(kpis.overdue_amount), "warning", "text-rose-600", hint=f"{kpis.overdue_count} invoices")
        kpi_card("Recurring this month", format_money(kpis.recurring_revenue), "autorenew", "text-emerald-600")
        kpi_card(
            "Plans",
            f"{kpis.active_plans} active",
            "event_repeat",
            "text-amber-600",
            hint=f"{kpis.paused_plans} paused · {kpis.expiring_plans} expiring",
        )

    actions = metrics.today_actions(invoices, plans, today)
    with ui.element("div").classes(_CLS["two_col"]):
        with card():
            ui.label("Today").classes(STYLE_SECTION_TITLE)
            for label, count, target, status in (
                ("Issued but not sent", actions.unsent_issued, "invoices", InvoiceStatus.ISSUED.value),
                ("Overdue invoices", actions.overdue, "invoices", InvoiceStatus.OVERDUE.value),
                ("Returned invoices", actions.returned, "invoices", InvoiceStatus.RETURNED.value),
                ("Plan runs due today", actions.runs_today, "recurring", None),
            ):
                with ui.row().classes(_CLS["row"]):
                    ui.label(label).classes("text-sm text-slate-700")
                    ui.button(
                        str(count),
                        on_click=lambda _, t=target, s=status: set_page(t, invoice_status_filter=s),
                    ).props("flat dense no-caps").classes(f"font-semibold {C_NUMERIC}")

        with card():
            ui.label("Invoice funnel").classes(STYLE_SECTION_TITLE)
            funnel = metrics.invoice_funnel(invoices)
            peak = max((count for _, count in funnel), default=0) or 1
            for status, count in funnel:
                with ui.column().classes("w-full gap-1"):
                    with ui.row().classes(_CLS["row"]):
                        ui.label(format_status(status)).classes("text-sm text-slate-700")
                        ui.label(str(count)).classes(f"text-sm font-semibold {C_NUMERIC}")
                    with ui.element("div").classes(_CLS["bar_track"]):
                        ui.element("div").classes("h-2 bg-slate-900").style(f"width: {count / peak * 100:.0f}%")

    with ui.element("div").classes(_CLS["two_col"]):
        with card():
            ui.label("Cash-in forecast (30 days)").classes(STYLE_SECTION_TITLE)
            for bucket in metrics.cash_in_forecast(invoices, today):
                with ui.row().classes(_CLS["row"]):
                    ui.label(bucket.label).classes("text-sm text-slate-700")
                    ui.label(f"{format_money(bucket.amount)} · {bucket.count}").classes(f"text-sm {C_NUMERIC}")

        with card():
            ui.label("Collection performance").classes(STYLE_SECTION_TITLE)
            perf = metrics.collection_performance(invoices)
            for label, pct in (("Paid", perf.on_time_pct), ("Overdue", perf.overdue_pct), ("Returned", perf.returned_pct)):
                with ui.row().classes(_CLS["row"]):
                    ui.label(label).classes("text-sm text-slate-700")
                    ui.label(f"{pct}%").classes(f"text-sm font-semibold {C_NUMERIC}")
            ui.label(f"Based on {perf.total} invoices").classes(STYLE_TEXT_HINT)

    with card(pad="p-0", classes="w-full overflow-hidden"):
        with ui.row().classes("px-4 py-3 border-b border-slate-200"):
            ui.label("Top customers by revenue").classes(STYLE_SECTION_TITLE)
        with ui.row().classes(C_TABLE_HEADER):
            ui.label("Customer").classes("flex-1")
            ui.label("Revenue").classes("w-32 text-right")
            ui.label("Open").classes("w-16 text-right")
            ui.label("Overdue").classes("w-32 text-right")
            ui.label("Risk").classes("w-20 text-right")
        risks = metrics.top_risks(invoices)
        if not risks:
            empty_row("No invoices yet")
        for row in risks:
            with ui.row().classes(C_TABLE_ROW):
                ui.label(row.customer).classes("flex-1 font-medium")
                ui.label(format_money(row.revenue)).classes(f"w-32 text-right {C_NUMERIC}")
                ui.label(str(row.open)).classes(f"w-16 text-right {C_NUMERIC}")
                ui.label(f"{format_money(row.overdue_amount)} ({row.overdue_count})").classes(f"w-32 text-right {C_NUMERIC}")
                with ui.row().classes("w-20 justify-end"):
                    ui.label(row.risk).classes(risk_badge_class(row.risk))

    with ui.element("div").classes(_CLS["two_col"]):
        with card():
            ui.label("Recent activity").classes(STYLE_SECTION_TITLE)
            activity = metrics.recent_activity(invoices, plans)
            if not activity:
                ui.label("No activity yet").classes(STYLE_TEXT_HINT)
            for row in activity:
                with ui.row().classes(_CLS["row"]):
                    with ui.column().classes("gap-0"):
                        ui.label(row.title).classes("text-sm font-medium text-slate-800")
                        ui.label(row.detail).classes(STYLE_TEXT_MUTED)
                    ui.label(row.when.strftime("%Y-%m-%d %H:%M")).classes(f"text-xs {C_NUMERIC} text-slate-500")

        with card():
            ui.label("Alerts").classes(STYLE_SECTION_TITLE)
            alerts = metrics.home_alerts(invoices, plans)
            if not alerts:
                ui.label("Nothing needs attention").classes(STYLE_TEXT_HINT)
            for alert in alerts:
                with ui.row().classes(_CLS["row"]):
                    with ui.column().classes("gap-0"):
                        ui.label(alert.title).classes("text-sm font-medium text-slate-800")
                        ui.label(alert.detail).classes(STYLE_TEXT_MUTED)
                    ui.label(alert.tone.capitalize()).classes(tone_badge_class(alert.tone))
