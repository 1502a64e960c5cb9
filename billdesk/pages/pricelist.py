from __future__ import annotations

from ._shared import *
from ..services.pricelist import (
    create_price_item,
    disable_price_item,
    get_price_item,
    list_price_items_paged,
    update_price_item,
)


PRICE_LIST_PDF_URL = "/files/pricelist.pdf"


def render_pricelist(api: ApiClient) -> None:
    state = {"q": "", "only_active": True, "page": 0, "editing": None}

    with ui.row().classes("w-full items-center justify-between gap-3 flex-col sm:flex-row"):
        ui.label("Price list").classes(STYLE_PAGE_TITLE)
        with ui.row().classes("gap-2"):
            btn_secondary("Export PDF", icon="picture_as_pdf", on_click=lambda: ui.navigate.to(PRICE_LIST_PDF_URL, new_tab=True))
            btn_primary("New item", icon="add", on_click=lambda: open_form(None))

    with ui.dialog() as form_dialog:
        with card(pad="p-5", classes=C_DIALOG_CARD + " w-[480px]"):
            form_title = ui.label("Price list item").classes(STYLE_SECTION_TITLE)
            name_input = ui.input("Name").props("outlined dense").classes(STYLE_INPUT)
            desc_input = ui.textarea("Description").props("outlined dense rows=2 auto-grow").classes(STYLE_INPUT)
            unit_input = ui.input("Unit", placeholder="h, pcs, month").props("outlined dense").classes(STYLE_INPUT)
            with ui.row().classes("w-full gap-2 no-wrap"):
                price_input = ui.number("Net price", min=0, step=0.01).props("outlined dense").classes("flex-1")
                vat_input = ui.number("VAT rate", value=0.19, min=0, max=1, step=0.01).props("outlined dense").classes("w-32")
            gross_hint = ui.label("").classes(f"{STYLE_TEXT_HINT} {C_NUMERIC}")
            active_input = ui.switch("Active", value=True)

            def _update_hint() -> None:
                amounts = calculate_line({"quantity": 1, "unit_price_net": price_input.value, "vat_rate": vat_input.value})
                gross_hint.text = f"Gross per unit: {format_money(amounts.line_gross)}"

            price_input.on_value_change(lambda _: _update_hint())
            vat_input.on_value_change(lambda _: _update_hint())

            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                btn_secondary("Cancel", on_click=form_dialog.close)

                def _save() -> None:
                    name = (name_input.value or "").strip()
                    if not name:
                        ui.notify("Name is required", type="warning")
                        return
                    errors = validate_line_item(
                        {"quantity": 1, "unit_price_net": price_input.value, "vat_rate": vat_input.value}
                    )
                    if price_input.value is None:
                        errors.insert(0, "Net price is required")
                    if errors:
                        ui.notify("; ".join(errors), type="warning")
                        return
                    item = PriceListItem(
                        name=name,
                        description=(desc_input.value or "").strip() or None,
                        unit=(unit_input.value or "").strip() or None,
                        price_net=float(price_input.value),
                        vat_rate=float(vat_input.value or 0),
                        active=bool(active_input.value),
                    )
                    if state["editing"] is not None:
                        ok = run_action(update_price_item, api, state["editing"], item, success="Item saved")
                    else:
                        ok = run_action(create_price_item, api, item, success="Item created")
                    if ok:
                        form_dialog.close()
                        render_list.refresh()

                btn_primary("Save", on_click=_save)

    def open_form(item: PriceListItem | None) -> None:
        if item is not None:
            item = load(get_price_item, api, item.id, fallback="Could not load item", default=item)
        state["editing"] = item.id if item else None
        form_title.text = "Edit item" if item else "New item"
        name_input.value = item.name if item else ""
        desc_input.value = (item.description or "") if item else ""
        unit_input.value = (item.unit or "") if item else ""
        price_input.value = item.price_net if item else None
        vat_input.value = item.vat_rate if item else 0.19
        active_input.value = item.active if item else True
        _update_hint()
        form_dialog.open()

    def open_disable(item: PriceListItem) -> None:
        def _disable() -> None:
            if run_action(disable_price_item, api, item.id, success="Item disabled"):
                render_list.refresh()

        confirm_dialog(f"Disable {item.name}? It stays on existing documents.", _disable, confirm_label="Disable").open()

    def _set_filter(key: str, value) -> None:
        state[key] = value
        state["page"] = 0
        render_list.refresh()

    with ui.row().classes("gap-2 items-center flex-wrap w-full"):
        ui.input(
            "Search",
            placeholder="Name or description",
            on_change=lambda e: _set_filter("q", (e.value or "").strip()),
        ).props("outlined dense debounce=300").classes("w-full sm:w-64")
        ui.switch("Active only", value=True, on_change=lambda e: _set_filter("only_active", bool(e.value)))

    def _go_to(page: int) -> None:
        state["page"] = max(page, 0)
        render_list.refresh()

    @ui.refreshable
    def render_list() -> None:
        page = load(
            list_price_items_paged,
            api,
            q=state["q"],
            only_active=True if state["only_active"] else None,
            page=state["page"],
            sort="name,asc",
            fallback="Could not load price list",
        )
        with card(pad="p-0", classes="w-full overflow-hidden"):
            with ui.row().classes(C_TABLE_HEADER + " hidden sm:flex"):
                ui.label("Item").classes("flex-1")
                ui.label("Unit").classes("w-16")
                ui.label("Net").classes("w-28 text-right")
                ui.label("VAT").classes("w-16 text-right")
                ui.label("Gross").classes("w-28 text-right")
                ui.label("").classes("w-24")
            if page is None or not page.content:
                empty_row("No price list items")
                return
            for item in page.content:
                gross = calculate_line({"quantity": 1, "unit_price_net": item.price_net, "vat_rate": item.vat_rate}).line_gross
                row_cls = "" if item.active else " opacity-50"
                with ui.row().classes(C_TABLE_ROW + row_cls):
                    ui.label(price_item_label(item.name, item.description)).classes("flex-1")
                    ui.label(item.unit or "-").classes("w-16 text-slate-600")
                    ui.label(format_money(item.price_net)).classes(f"w-28 text-right {C_NUMERIC}")
                    ui.label(format_percent(item.vat_rate)).classes(f"w-16 text-right {C_NUMERIC}")
                    ui.label(format_money(gross)).classes(f"w-28 text-right {C_NUMERIC}")
                    with ui.row().classes("w-24 justify-end gap-1"):
                        ui.button(icon="edit", on_click=lambda _, x=item: open_form(x)).props("flat dense").classes(
                            "text-slate-500 hover:text-slate-900"
                        )
                        if item.active:
                            ui.button(icon="block", on_click=lambda _, x=item: open_disable(x)).props("flat dense").classes(
                                "text-rose-600 hover:text-rose-700"
                            )
            pager(page, _go_to)

    render_list()
