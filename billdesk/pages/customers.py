from __future__ import annotations

from ._shared import *
from ..services.customers import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)


_FIELDS = (
    ("name", "Name"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("street", "Street"),
    ("postal_code", "Postal code"),
    ("city", "City"),
    ("country_code", "Country code"),
    ("vat_id", "VAT ID"),
    ("tax_number", "Tax number"),
)


def render_customers(api: ApiClient) -> None:
    state = {"search": "", "editing": None}

    with ui.row().classes("w-full items-center justify-between gap-3 flex-col sm:flex-row"):
        ui.label("Customers").classes(STYLE_PAGE_TITLE)
        btn_primary("New customer", icon="add", on_click=lambda: open_form(None))

    with ui.dialog() as form_dialog:
        with card(pad="p-5", classes=C_DIALOG_CARD):
            form_title = ui.label("Customer").classes(STYLE_SECTION_TITLE)
            inputs = {}
            with ui.element("div").classes("grid grid-cols-1 md:grid-cols-2 gap-3 w-full"):
                for key, label in _FIELDS:
                    inputs[key] = ui.input(label).props("outlined dense").classes(STYLE_INPUT)
            terms_input = ui.number("Payment terms (days)", min=0, step=1).props("outlined dense").classes(STYLE_INPUT)
            notes_input = ui.textarea("Notes").props("outlined dense rows=2 auto-grow").classes(STYLE_INPUT)

            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                btn_secondary("Cancel", on_click=form_dialog.close)

                def _save() -> None:
                    values = {key: (inputs[key].value or "").strip() or None for key, _ in _FIELDS}
                    if not values["name"]:
                        ui.notify("Name is required", type="warning")
                        return
                    values["payment_terms_days"] = int(terms_input.value) if terms_input.value is not None else None
                    values["notes"] = (notes_input.value or "").strip() or None
                    customer = Customer(**values)
                    editing = state["editing"]
                    if editing is not None:
                        ok = run_action(update_customer, api, editing, customer, success="Customer saved")
                    else:
                        ok = run_action(create_customer, api, customer, success="Customer created")
                    if ok:
                        form_dialog.close()
                        render_list.refresh()

                btn_primary("Save", on_click=_save)

    with ui.dialog().props("position=right full-height") as details_drawer, card(classes="w-[420px] h-full"):
        details_body = ui.column().classes("w-full gap-2")

    def open_form(customer: Customer | None) -> None:
        state["editing"] = customer.id if customer else None
        form_title.text = "Edit customer" if customer else "New customer"
        for key, _ in _FIELDS:
            inputs[key].value = getattr(customer, key, None) or "" if customer else ""
        terms_input.value = customer.payment_terms_days if customer else None
        notes_input.value = (customer.notes or "") if customer else ""
        form_dialog.open()

    def open_details(customer: Customer) -> None:
        customer = load(get_customer, api, customer.id, fallback="Could not load customer", default=customer)
        details_body.clear()
        with details_body:
            ui.label(customer.name).classes("text-lg font-semibold")
            for key, label in _FIELDS[1:]:
                with ui.row().classes("w-full justify-between"):
                    ui.label(label).classes(STYLE_TEXT_MUTED)
                    ui.label(getattr(customer, key, None) or "-").classes("text-sm")
            with ui.row().classes("w-full justify-between"):
                ui.label("Payment terms").classes(STYLE_TEXT_MUTED)
                terms = customer.payment_terms_days
                ui.label(f"{terms} days" if terms is not None else "-").classes("text-sm")
            if customer.notes:
                ui.label(customer.notes).classes("text-sm text-slate-600 whitespace-pre-line")
            with ui.row().classes("w-full justify-end gap-2 mt-4"):
                btn_secondary("Edit", icon="edit", on_click=lambda: (details_drawer.close(), open_form(customer)))
                btn_secondary(
                    "Orders",
                    icon="shopping_cart",
                    on_click=lambda: set_page("orders", order_customer_filter=customer.id),
                )
        details_drawer.open()

    def open_delete(customer: Customer) -> None:
        def _delete() -> None:
            if run_action(delete_customer, api, customer.id, success="Customer deleted"):
                render_list.refresh()

        confirm_dialog(f"Delete customer {customer.name}?", _delete).open()

    ui.input(
        "Search",
        placeholder="Name, email, city",
        on_change=lambda e: (state.__setitem__("search", e.value or ""), render_list.refresh()),
    ).props("outlined dense debounce=300").classes("w-full sm:w-72")

    @ui.refreshable
    def render_list() -> None:
        customers = load(list_customers, api, state["search"], fallback="Could not load customers", default=[])
        with card(pad="p-0", classes="w-full overflow-hidden"):
            with ui.row().classes(C_TABLE_HEADER + " hidden sm:flex"):
                ui.label("Name").classes("flex-1")
                ui.label("Email").classes("w-64")
                ui.label("Orders").classes("w-20 text-right")
                ui.label("").classes("w-28")
            if not customers:
                empty_row("No customers found")
            for c in customers:
                with ui.row().classes(C_TABLE_ROW + " cursor-pointer hover:bg-slate-50"):
                    ui.label(customer_label(c.name, c.city)).classes("flex-1 font-medium text-slate-900").on(
                        "click", lambda _, x=c: open_details(x)
                    )
                    ui.label(c.email or "-").classes("w-64 text-slate-600")
                    ui.label(str(c.order_count or 0)).classes(f"w-20 text-right {C_NUMERIC}")
                    with ui.row().classes("w-28 justify-end gap-1"):
                        ui.button(icon="edit", on_click=lambda _, x=c: open_form(x)).props("flat dense").classes(
                            "text-slate-500 hover:text-slate-900"
                        )
                        ui.button(icon="delete", on_click=lambda _, x=c: open_delete(x)).props("flat dense").classes(
                            "text-rose-600 hover:text-rose-700"
                        )

    render_list()
