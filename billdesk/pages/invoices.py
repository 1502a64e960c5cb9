from __future__ import annotations

from ._shared import *
from ..services.invoices import (
    create_invoice_from_order,
    delete_invoice,
    get_invoice,
    list_invoices_paged,
    update_invoice_status,
)
from ..services.orders import list_orders_paged
from ..services.recurring import create_plan_from_invoice


# Status actions offered in the invoice drawer.
INVOICE_TRANSITIONS = {
    InvoiceStatus.DRAFT: (("Issue", InvoiceStatus.ISSUED), ("Cancel", InvoiceStatus.CANCELLED)),
    InvoiceStatus.ISSUED: (("Mark sent", InvoiceStatus.SENT), ("Mark paid", InvoiceStatus.PAID)),
    InvoiceStatus.SENT: (("Mark paid", InvoiceStatus.PAID), ("Mark returned", InvoiceStatus.RETURNED)),
    InvoiceStatus.RETURNED: (("Resend", InvoiceStatus.SENT), ("Cancel", InvoiceStatus.CANCELLED)),
    InvoiceStatus.OVERDUE: (("Mark paid", InvoiceStatus.PAID),),
}


def invoice_pdf_url(invoice_id: int) -> str:
    return f"/files/invoices/{int(invoice_id)}/pdf"


def render_invoices(api: ApiClient) -> None:
    state = {
        "q": "",
        "status": pop_state("invoice_status_filter"),
        "recurring": None,
        "overdue_only": False,
        "page": 0,
        "invoice_id": None,
    }
    open_id = pop_state("invoice_open_id")

    with ui.row().classes("w-full items-center justify-between gap-3 flex-col sm:flex-row"):
        ui.label("Invoices").classes(STYLE_PAGE_TITLE)
        btn_primary("New from order", icon="add", on_click=lambda: open_from_order())

    # New invoice from order
    with ui.dialog() as order_dialog:
        with card(pad="p-5", classes=C_DIALOG_CARD + " w-[480px]"):
            ui.label("Create invoice from order").classes(STYLE_SECTION_TITLE)
            order_select = ui.select({}, label="Order", with_input=True).props("outlined dense").classes(STYLE_INPUT)
            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                btn_secondary("Cancel", on_click=order_dialog.close)

                def _create_from_order() -> None:
                    if order_select.value is None:
                        ui.notify("Pick an order", type="warning")
                        return
                    invoice = load(create_invoice_from_order, api, order_select.value, fallback="Could not create invoice")
                    if invoice is None:
                        return
                    ui.notify(f"Invoice {invoice.label} created", type="positive")
                    order_dialog.close()
                    render_list.refresh()
                    open_invoice(invoice.id)

                btn_primary("Create", on_click=_create_from_order)

    def open_from_order() -> None:
        page = load(
            list_orders_paged, api, size=100, fallback="Could not load orders"
        )
        orders = page.content if page else []
        order_select.options = {
            o.id: f"{o.order_number or f'#{o.id}'} · {o.customer_name} · {format_money(o.total_gross, o.currency)}"
            for o in orders
            if o.invoiceable
        }
        order_select.value = None
        order_select.update()
        order_dialog.open()

    # Recurring plan from invoice
    with ui.dialog() as plan_dialog:
        with card(pad="p-5", classes=C_DIALOG_CARD + " w-[480px]"):
            ui.label("Create recurring plan").classes(STYLE_SECTION_TITLE)
            ui.label("The plan copies this invoice's items.").classes(STYLE_TEXT_MUTED)
            plan_frequency = ui.select(
                [f.value for f in PlanFrequency], value=PlanFrequency.MONTHLY.value, label="Frequency"
            ).props("outlined dense").classes(STYLE_INPUT)
            plan_start = ui.input("Start date", value=date.today().isoformat()).props("outlined dense type=date").classes(STYLE_INPUT)
            plan_max = ui.number("Occurrences", value=12, min=1, step=1).props("outlined dense").classes(STYLE_INPUT)
            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                btn_secondary("Cancel", on_click=plan_dialog.close)

                def _create_plan() -> None:
                    if not plan_start.value or not plan_max.value:
                        ui.notify("Start date and occurrences are required", type="warning")
                        return
                    payload = {
                        "frequency": plan_frequency.value,
                        "startDate": plan_start.value,
                        "maxOccurrences": int(plan_max.value),
                    }
                    if run_action(create_plan_from_invoice, api, state["invoice_id"], payload, success="Recurring plan created"):
                        plan_dialog.close()

                btn_primary("Create plan", on_click=_create_plan)

    # Invoice drawer
    with ui.dialog().props("position=right full-height") as invoice_drawer, card(classes=STYLE_DRAWER + " h-full overflow-y-auto"):
        drawer_body = ui.column().classes("w-full gap-4")

    def open_invoice(invoice_id: int) -> None:
        state["invoice_id"] = invoice_id
        render_drawer()
        invoice_drawer.open()

    def _fact(label: str, value: str) -> None:
        with ui.column().classes("gap-0"):
            ui.label(label).classes("text-xs uppercase text-slate-400")
            ui.label(value).classes("text-sm text-slate-800")

    def render_drawer() -> None:
        inv = load(get_invoice, api, state["invoice_id"], fallback="Could not load invoice")
        drawer_body.clear()
        if inv is None:
            return
        with drawer_body:
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(f"Invoice {inv.label}").classes("text-lg font-semibold")
                status_badge(inv.status)

            with ui.element("div").classes("grid grid-cols-2 gap-3 w-full"):
                _fact("Customer", inv.customer_name or "-")
                _fact("Currency", inv.currency or "-")
                _fact("Due date", format_date(inv.due_date))
                _fact("Issued", format_datetime(inv.issued_at))
                _fact("Sent", format_datetime(inv.sent_at))
                _fact("Paid", format_datetime(inv.paid_at))
                _fact("Overdue", f"{inv.days_overdue or 0} days" if inv.is_overdue else "No")
                _fact("Type", "Recurring" if inv.recurring else "One-off")

            line_items_table(inv.items, inv.currency)

            with ui.row().classes("w-full gap-2 flex-wrap"):
                for label, target in INVOICE_TRANSITIONS.get(inv.status, ()):
                    btn_secondary(label, on_click=lambda _, t=target: _set_status(inv, t))

            with ui.row().classes("w-full justify-end gap-2"):
                btn_secondary(
                    "PDF", icon="picture_as_pdf", on_click=lambda: ui.navigate.to(invoice_pdf_url(inv.id), new_tab=True)
                )
                if not inv.recurring and inv.items:
                    btn_secondary("Make recurring", icon="autorenew", on_click=plan_dialog.open)
                if inv.status == InvoiceStatus.DRAFT:
                    btn_danger("Delete", icon="delete", on_click=lambda: _delete(inv))

    def _set_status(inv: Invoice, target: InvoiceStatus) -> None:
        if run_action(update_invoice_status, api, inv.id, target, success="Status updated"):
            render_drawer()
            render_list.refresh()

    def _delete(inv: Invoice) -> None:
        def _confirm() -> None:
            if run_action(delete_invoice, api, inv.id, success="Invoice deleted"):
                invoice_drawer.close()
                render_list.refresh()

        confirm_dialog(f"Delete invoice {inv.label}?", _confirm).open()

    # Filters
    def _set_filter(key: str, value) -> None:
        state[key] = value
        state["page"] = 0
        render_list.refresh()

    with ui.row().classes("gap-2 items-center flex-wrap w-full"):
        ui.input(
            "Search",
            placeholder="Invoice number, customer",
            on_change=lambda e: _set_filter("q", (e.value or "").strip()),
        ).props("outlined dense debounce=300").classes("w-full sm:w-64")
        ui.select(
            {ALL: "All statuses", **{s.value: format_status(s) for s in InvoiceStatus}},
            value=state["status"] or ALL,
            label="Status",
            on_change=lambda e: _set_filter("status", unless_all(e.value)),
        ).props("outlined dense").classes("w-full sm:w-44")
        ui.select(
            {ALL: "All types", "RECURRING": "Recurring", "ONE_OFF": "One-off"},
            value=ALL,
            label="Type",
            on_change=lambda e: _set_filter("recurring", None if e.value == ALL else e.value == "RECURRING"),
        ).props("outlined dense").classes("w-full sm:w-36")
        ui.checkbox("Overdue only", on_change=lambda e: _set_filter("overdue_only", bool(e.value)))

    def _go_to(page: int) -> None:
        state["page"] = max(page, 0)
        render_list.refresh()

    @ui.refreshable
    def render_list() -> None:
        page = load(
            list_invoices_paged,
            api,
            q=state["q"] or None,
            status=state["status"],
            recurring=state["recurring"],
            page=state["page"],
            fallback="Could not load invoices",
        )
        rows = page.content if page else []
        if state["overdue_only"]:
            rows = [inv for inv in rows if inv.is_overdue]
        with card(pad="p-0", classes="w-full overflow-hidden"):
            with ui.row().classes(C_TABLE_HEADER + " hidden sm:flex"):
                ui.label("Nr").classes("w-32")
                ui.label("Customer").classes("flex-1")
                ui.label("Due").classes("w-28")
                ui.label("Gross").classes("w-28 text-right")
                ui.label("Status").classes("w-28 text-right")
                ui.label("").classes("w-20")
            if not rows:
                empty_row("No invoices found")
            for inv in rows:
                with ui.row().classes(C_TABLE_ROW + " hover:bg-slate-50"):
                    ui.label(inv.label).classes("w-32 font-mono text-xs cursor-pointer").on(
                        "click", lambda _, x=inv.id: open_invoice(x)
                    )
                    with ui.row().classes("flex-1 items-center gap-2"):
                        ui.label(inv.customer_name or "-")
                        if inv.recurring:
                            ui.icon("autorenew").classes("text-sky-600 text-sm")
                    due_cls = "text-rose-600" if inv.is_overdue else "text-slate-600"
                    ui.label(format_date(inv.due_date)).classes(f"w-28 {due_cls}")
                    ui.label(format_money(inv.total_gross, inv.currency)).classes(f"w-28 text-right {C_NUMERIC}")
                    with ui.row().classes("w-28 justify-end"):
                        status_badge(inv.status)
                    with ui.row().classes("w-20 justify-end gap-1"):
                        ui.button(icon="visibility", on_click=lambda _, x=inv.id: open_invoice(x)).props("flat dense").classes(
                            "text-slate-500 hover:text-slate-900"
                        )
                        ui.button(
                            icon="picture_as_pdf",
                            on_click=lambda _, x=inv.id: ui.navigate.to(invoice_pdf_url(x), new_tab=True),
                        ).props("flat dense").classes("text-slate-500 hover:text-slate-900")
            if page is not None:
                pager(page, _go_to)

    render_list()
    if open_id:
        open_invoice(int(open_id))
