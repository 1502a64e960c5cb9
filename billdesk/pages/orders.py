from __future__ import annotations

from ._shared import *
from ..services.customers import list_customers
from ..services.invoices import create_invoice_from_order
from ..services.orders import (
    add_order_item,
    create_order,
    delete_order,
    get_order,
    list_orders_paged,
    remove_order_item,
    update_order_status,
)
from ..services.pricelist import list_active_price_items


def render_orders(api: ApiClient) -> None:
    state = {
        "q": "",
        "status": None,
        "customer_id": pop_state("order_customer_filter"),
        "page": 0,
        "order_id": None,
    }
    customers = load(list_customers, api, fallback="Could not load customers", default=[])
    customer_options = {int(c.id): customer_label(c.name, c.city) for c in customers if c.id is not None}

    with ui.row().classes("w-full items-center justify-between gap-3 flex-col sm:flex-row"):
        ui.label("Orders").classes(STYLE_PAGE_TITLE)
        btn_primary("New order", icon="add", on_click=lambda: create_dialog.open())

    # New order
    with ui.dialog() as create_dialog:
        with card(pad="p-5", classes=C_DIALOG_CARD + " w-[480px]"):
            ui.label("New order").classes(STYLE_SECTION_TITLE)
            new_customer = ui.select(customer_options, label="Customer", with_input=True).props("outlined dense").classes(STYLE_INPUT)
            new_currency = ui.input("Currency", value="EUR").props("outlined dense").classes(STYLE_INPUT)
            new_vat = ui.number("Default VAT rate", value=0.19, min=0, max=1, step=0.01).props("outlined dense").classes(STYLE_INPUT)
            new_notes = ui.textarea("Notes").props("outlined dense rows=2").classes(STYLE_INPUT)
            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                btn_secondary("Cancel", on_click=create_dialog.close)

                def _create() -> None:
                    if new_customer.value is None:
                        ui.notify("Pick a customer", type="warning")
                        return
                    if new_vat.value is not None and not 0 <= float(new_vat.value) <= 1:
                        ui.notify("VAT rate must be a fraction between 0 and 1", type="warning")
                        return
                    order = load(
                        create_order,
                        api,
                        new_customer.value,
                        currency=(new_currency.value or "").strip().upper() or None,
                        default_vat_rate=new_vat.value,
                        notes=(new_notes.value or "").strip() or None,
                        fallback="Could not create order",
                    )
                    if order is None:
                        return
                    ui.notify("Order created", type="positive")
                    create_dialog.close()
                    render_list.refresh()
                    open_order(order.id)

                btn_primary("Create", on_click=_create)

    # Order drawer
    with ui.dialog().props("position=right full-height") as order_drawer, card(classes=STYLE_DRAWER + " h-full overflow-y-auto"):
        drawer_body = ui.column().classes("w-full gap-4")

    price_items: list[PriceListItem] = []

    def open_order(order_id: int) -> None:
        state["order_id"] = order_id
        render_drawer()
        order_drawer.open()

    def render_drawer() -> None:
        order = load(get_order, api, state["order_id"], fallback="Could not load order")
        drawer_body.clear()
        if order is None:
            return
        if not price_items:
            price_items.extend(load(list_active_price_items, api, fallback="Could not load price list", default=[]))
        editable = order.status == OrderStatus.DRAFT

        with drawer_body:
            with ui.row().classes("w-full items-center justify-between"):
                with ui.column().classes("gap-0"):
                    ui.label(order.order_number or f"Order #{order.id}").classes("text-lg font-semibold")
                    ui.label(order.customer_name).classes(STYLE_TEXT_MUTED)
                status_badge(order.status)

            with ui.row().classes("w-full gap-4 text-sm text-slate-600"):
                ui.label(f"Created {format_datetime(order.created_at)}")
                if order.invoice_number or order.invoice_id:
                    ui.label(f"Invoice {order.invoice_number or order.invoice_id}")

            line_items_table(order.items, order.currency, on_remove=_remove_item if editable else None)

            if editable:
                with card(classes="w-full"):
                    ui.label("Add item").classes(STYLE_SECTION_TITLE)
                    form = LineItemForm(price_items, default_vat_rate=order.default_vat_rate)

                    def _add() -> None:
                        item, errors = form.read()
                        if errors:
                            ui.notify("; ".join(errors), type="warning")
                            return
                        if load(add_order_item, api, order.id, item, fallback="Could not add item") is not None:
                            ui.notify("Item added", type="positive")
                            render_drawer()
                            render_list.refresh()

                    btn_primary("Add item", icon="add", on_click=_add)

            with ui.row().classes("w-full items-center gap-2"):
                status_select = ui.select(
                    [s.value for s in OrderStatus],
                    value=order.status.value,
                    label="Status",
                ).props("outlined dense").classes("w-48")

                def _apply_status() -> None:
                    if status_select.value == order.status.value:
                        return
                    if run_action(update_order_status, api, order.id, OrderStatus(status_select.value), success="Status updated"):
                        render_drawer()
                        render_list.refresh()

                btn_secondary("Apply", on_click=_apply_status)

            with ui.row().classes("w-full justify-end gap-2"):
                if order.invoiceable:
                    btn_primary("Create invoice", icon="receipt_long", on_click=lambda: _invoice(order))
                if editable:
                    btn_danger("Delete", icon="delete", on_click=lambda: _delete(order))

    def _remove_item(item: LineItem) -> None:
        if item.id is None:
            return
        if run_action(remove_order_item, api, state["order_id"], item.id, success="Item removed"):
            render_drawer()
            render_list.refresh()

    def _invoice(order: Order) -> None:
        invoice = load(create_invoice_from_order, api, order.id, fallback="Could not create invoice")
        if invoice is None:
            return
        ui.notify(f"Invoice {invoice.label} created", type="positive")
        order_drawer.close()
        set_page("invoices", invoice_open_id=invoice.id)

    def _delete(order: Order) -> None:
        def _confirm() -> None:
            if run_action(delete_order, api, order.id, success="Order deleted"):
                order_drawer.close()
                render_list.refresh()

        confirm_dialog(f"Delete {order.order_number or f'order #{order.id}'}?", _confirm).open()

    # Filters
    def _set_filter(key: str, value) -> None:
        state[key] = value
        state["page"] = 0
        render_list.refresh()

    with ui.row().classes("gap-2 items-end flex-wrap w-full"):
        ui.input(
            "Search",
            placeholder="Order number, customer",
            on_change=lambda e: _set_filter("q", (e.value or "").strip()),
        ).props("outlined dense debounce=300").classes("w-full sm:w-64")
        ui.select(
            {ALL: "All statuses", **{s.value: format_status(s) for s in OrderStatus}},
            value=ALL,
            label="Status",
            on_change=lambda e: _set_filter("status", unless_all(e.value)),
        ).props("outlined dense").classes("w-full sm:w-44")
        ui.select(
            {ALL: "All customers", **customer_options},
            value=state["customer_id"] if state["customer_id"] in customer_options else ALL,
            label="Customer",
            with_input=True,
            on_change=lambda e: _set_filter("customer_id", unless_all(e.value)),
        ).props("outlined dense").classes("w-full sm:w-64")

    def _go_to(page: int) -> None:
        state["page"] = max(page, 0)
        render_list.refresh()

    @ui.refreshable
    def render_list() -> None:
        page = load(
            list_orders_paged,
            api,
            q=state["q"] or None,
            status=state["status"],
            customer_id=state["customer_id"],
            page=state["page"],
            fallback="Could not load orders",
        )
        with card(pad="p-0", classes="w-full overflow-hidden"):
            with ui.row().classes(C_TABLE_HEADER + " hidden sm:flex"):
                ui.label("Order").classes("w-32")
                ui.label("Customer").classes("flex-1")
                ui.label("Created").classes("w-28")
                ui.label("Gross").classes("w-28 text-right")
                ui.label("Status").classes("w-28 text-right")
            if page is None or not page.content:
                empty_row("No orders found")
                return
            for order in page.content:
                with ui.row().classes(C_TABLE_ROW + " cursor-pointer hover:bg-slate-50").on(
                    "click", lambda _, x=order.id: open_order(x)
                ):
                    ui.label(order.order_number or f"#{order.id}").classes("w-32 font-mono text-xs")
                    ui.label(order.customer_name or "-").classes("flex-1")
                    ui.label(format_date(order.created_at)).classes("w-28 text-slate-600")
                    gross = order.total_gross if order.total_gross is not None else order.totals.gross
                    ui.label(format_money(gross, order.currency)).classes(f"w-28 text-right {C_NUMERIC}")
                    with ui.row().classes("w-28 justify-end"):
                        status_badge(order.status)
            pager(page, _go_to)

    render_list()
