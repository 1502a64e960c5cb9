from __future__ import annotations

from ._shared import *
from .. import metrics
from ..services.customers import list_customers
from ..services.invoices import list_all_invoices
from ..services.recurring import list_plans


def _section_header(title: str) -> None:
    with ui.row().classes("px-4 py-3 border-b border-slate-200 w-full"):
        ui.label(title).classes(STYLE_SECTION_TITLE)


def render_finance_dashboard(api: ApiClient) -> None:
    page_header("Finance", "Revenue, receivables and aging")
    invoices = load(list_all_invoices, api, fallback="Could not load invoices", default=[])
    today = date.today()

    summary = metrics.finance_summary(invoices)
    with ui.element("div").classes("grid grid-cols-1 sm:grid-cols-2 lg:grid-cols-5 gap-4 w-full"):
        kpi_card("Total billed", format_money(summary.total), "payments", "text-slate-700")
        kpi_card("Paid", format_money(summary.paid), "check_circle", "text-emerald-600")
        kpi_card("Open", format_money(summary.open), "hourglass_top", "text-sky-600")
        kpi_card("Overdue", format_money(summary.overdue), "warning", "text-rose-600")
        kpi_card("Late fees", format_money(summary.late_fees), "gavel", "text-amber-600")

    with card(pad="p-0", classes="w-full overflow-hidden"):
        _section_header("Revenue by month")
        with ui.row().classes(C_TABLE_HEADER):
            ui.label("Month").classes("w-28")
            ui.label("Net").classes("flex-1 text-right")
            ui.label("Gross").classes("flex-1 text-right")
            ui.label("Paid").classes("flex-1 text-right")
            ui.label("Outstanding").classes("flex-1 text-right")
            ui.label("").classes("w-32")
        for row in metrics.monthly_revenue(invoices, today=today):
            with ui.row().classes(C_TABLE_ROW):
                ui.label(row.label).classes("w-28")
                ui.label(format_money(row.net)).classes(f"flex-1 text-right {C_NUMERIC}")
                ui.label(format_money(row.gross)).classes(f"flex-1 text-right {C_NUMERIC}")
                ui.label(format_money(row.paid)).classes(f"flex-1 text-right text-emerald-700 {C_NUMERIC}")
                ui.label(format_money(row.outstanding)).classes(f"flex-1 text-right text-amber-700 {C_NUMERIC}")
                ui.linear_progress(value=row.outstanding_pct / 100, show_value=False).props("color=amber").classes("w-32")

    with card(pad="p-0", classes="w-full overflow-hidden"):
        _section_header("Accounts receivable aging")
        with ui.row().classes(C_TABLE_HEADER):
            ui.label("Days overdue").classes("flex-1")
            ui.label("Invoices").classes("w-24 text-right")
            ui.label("Amount").classes("w-36 text-right")
        for bucket in metrics.ar_aging(invoices, today):
            with ui.row().classes(C_TABLE_ROW):
                ui.label(bucket.label).classes("flex-1")
                ui.label(str(bucket.count)).classes(f"w-24 text-right {C_NUMERIC}")
                ui.label(format_money(bucket.amount)).classes(f"w-36 text-right {C_NUMERIC}")


def render_customer_health(api: ApiClient) -> None:
    page_header("Customer health", "Revenue, receivables and risk per customer")
    customers = load(list_customers, api, fallback="Could not load customers", default=[])
    invoices = load(list_all_invoices, api, fallback="Could not load invoices", default=[])
    plans = load(list_plans, api, fallback="Could not load recurring plans", default=[])

    rows = sorted(metrics.customer_health(customers, invoices, plans), key=lambda r: r.revenue, reverse=True)
    state = {"risk": "ALL"}

    ui.select(
        {"ALL": "All risks", "High": "High", "Medium": "Medium", "Low": "Low"},
        value="ALL",
        label="Risk",
        on_change=lambda e: (state.__setitem__("risk", e.value or "ALL"), render_rows.refresh()),
    ).props("outlined dense").classes("w-48")

    @ui.refreshable
    def render_rows() -> None:
        visible = [r for r in rows if state["risk"] == "ALL" or r.risk == state["risk"]]
        with card(pad="p-0", classes="w-full overflow-hidden"):
            with ui.row().classes(C_TABLE_HEADER):
                ui.label("Customer").classes("flex-1")
                ui.label("Revenue").classes("w-28 text-right")
                ui.label("Outstanding").classes("w-28 text-right")
                ui.label("Overdue").classes("w-28 text-right")
                ui.label("Recurring").classes("w-28 text-right")
                ui.label("Last payment").classes("w-28 text-right")
                ui.label("Risk").classes("w-20 text-right")
            if not visible:
                empty_row("No customers match")
            for row in visible:
                with ui.row().classes(C_TABLE_ROW):
                    ui.label(row.customer).classes("flex-1 font-medium")
                    ui.label(format_money(row.revenue)).classes(f"w-28 text-right {C_NUMERIC}")
                    ui.label(format_money(row.outstanding)).classes(f"w-28 text-right {C_NUMERIC}")
                    ui.label(format_money(row.overdue)).classes(f"w-28 text-right {C_NUMERIC}")
                    ui.label(format_money(row.recurring_value)).classes(f"w-28 text-right {C_NUMERIC}")
                    ui.label(format_date(row.last_payment)).classes("w-28 text-right text-slate-600")
                    with ui.row().classes("w-20 justify-end"):
                        ui.label(row.risk).classes(risk_badge_class(row.risk))

    render_rows()


def _plan_table(title: str, rows: list[metrics.PlanRow], empty_text: str) -> None:
    with card(pad="p-0", classes="w-full overflow-hidden"):
        _section_header(title)
        with ui.row().classes(C_TABLE_HEADER):
            ui.label("Plan").classes("w-24")
            ui.label("Customer").classes("flex-1")
            ui.label("Next run").classes("w-28")
            ui.label("Remaining").classes("w-24 text-right")
            ui.label("Amount").classes("w-28 text-right")
        if not rows:
            empty_row(empty_text)
        for row in rows:
            with ui.row().classes(C_TABLE_ROW):
                ui.label(row.plan).classes("w-24 font-medium")
                ui.label(row.customer or "-").classes("flex-1")
                ui.label(format_date(row.next_run)).classes("w-28")
                ui.label(str(row.remaining)).classes(f"w-24 text-right {C_NUMERIC}")
                ui.label(format_money(row.amount)).classes(f"w-28 text-right {C_NUMERIC}")


def render_recurring_dashboard(api: ApiClient) -> None:
    page_header("Recurring operations", "Upcoming runs and expiring plans")
    plans = load(list_plans, api, fallback="Could not load recurring plans", default=[])
    today = date.today()

    stats = metrics.recurring_metrics(plans, today)
    with ui.element("div").classes("grid grid-cols-2 lg:grid-cols-6 gap-4 w-full"):
        kpi_card("Active", str(stats.active), "play_circle", "text-emerald-600")
        kpi_card("Paused", str(stats.paused), "pause_circle", "text-amber-600")
        kpi_card("Expiring", str(stats.expiring), "timer", "text-rose-600")
        kpi_card("No items", str(stats.missing_items), "error", "text-rose-600")
        kpi_card("Due today", str(stats.due_today), "today", "text-sky-600")
        kpi_card("Due this week", str(stats.due_week), "date_range", "text-sky-600")

    _plan_table("Runs in the next 7 days", metrics.runs_due(plans, today), "No runs scheduled")
    _plan_table("Expiring plans", metrics.expiring_plans(plans), "No plans expiring")


def render_worklist(api: ApiClient) -> None:
    page_header("Worklist", "Open tasks across invoices, customers and plans")
    customers = load(list_customers, api, fallback="Could not load customers", default=[])
    invoices = load(list_all_invoices, api, fallback="Could not load invoices", default=[])
    plans = load(list_plans, api, fallback="Could not load recurring plans", default=[])

    items = metrics.worklist(customers, invoices, plans)
    counts = metrics.worklist_counts(items)
    state = {"severity": "ALL"}

    with ui.element("div").classes("grid grid-cols-2 lg:grid-cols-4 gap-4 w-full"):
        kpi_card("Open tasks", str(counts.total), "checklist", "text-slate-700")
        kpi_card("High", str(counts.high), "priority_high", "text-rose-600")
        kpi_card("Medium", str(counts.medium), "report", "text-amber-600")
        kpi_card("Low", str(counts.low), "info", "text-sky-600")

    ui.select(
        {"ALL": "All severities", "high": "High", "medium": "Medium", "low": "Low"},
        value="ALL",
        label="Severity",
        on_change=lambda e: (state.__setitem__("severity", e.value or "ALL"), render_items.refresh()),
    ).props("outlined dense").classes("w-48")

    @ui.refreshable
    def render_items() -> None:
        visible = [i for i in items if state["severity"] == "ALL" or i.severity == state["severity"]]
        with card(pad="p-0", classes="w-full overflow-hidden"):
            with ui.row().classes(C_TABLE_HEADER):
                ui.label("Type").classes("w-48")
                ui.label("Item").classes("flex-1")
                ui.label("Severity").classes("w-24")
                ui.label("").classes("w-32")
            if not visible:
                empty_row("Nothing to do")
            for item in visible:
                with ui.row().classes(C_TABLE_ROW):
                    ui.label(item.type).classes("w-48 text-slate-600")
                    with ui.column().classes("flex-1 gap-0"):
                        ui.label(item.title).classes("font-medium")
                        ui.label(item.detail or "").classes("text-xs text-slate-500")
                    with ui.row().classes("w-24"):
                        ui.label(item.severity.capitalize()).classes(severity_badge_class(item.severity))
                    with ui.row().classes("w-32 justify-end"):
                        btn_secondary(
                            item.action_label,
                            on_click=lambda _, x=item: set_page(x.target_page, invoice_status_filter=x.status_filter),
                        )

    render_items()
