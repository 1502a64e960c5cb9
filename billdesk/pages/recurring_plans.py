from __future__ import annotations

from ._shared import *
from .. import metrics
from ..services.customers import list_customers
from ..services.pricelist import list_active_price_items
from ..services.recurring import (
    build_plan_payload,
    create_plan,
    delete_plan,
    generate_now,
    list_plans,
    merge_plan_item,
    plan_item_errors,
    plan_items_read_only,
    set_plan_active,
    update_plan,
)


def render_recurring_plans(api: ApiClient) -> None:
    state: dict = {"plan_id": None, "items": [], "search": ""}
    customers = load(list_customers, api, fallback="Could not load customers", default=[])
    customer_options = {int(c.id): customer_label(c.name, c.city) for c in customers if c.id is not None}
    price_items = load(list_active_price_items, api, fallback="Could not load price list", default=[])

    with ui.row().classes("w-full items-center justify-between gap-3 flex-col sm:flex-row"):
        ui.label("Recurring plans").classes(STYLE_PAGE_TITLE)
        btn_primary("New plan", icon="add", on_click=lambda: open_form(None))

    with ui.dialog() as form_dialog:
        with card(pad="p-5", classes=C_DIALOG_CARD + " w-[760px]"):
            form_title = ui.label("Plan").classes(STYLE_SECTION_TITLE)
            with ui.element("div").classes("grid grid-cols-1 md:grid-cols-2 gap-3 w-full"):
                customer_input = ui.select(customer_options, label="Customer", with_input=True).props("outlined dense").classes(STYLE_INPUT)
                frequency_input = ui.select(
                    {f.value: format_status(f) for f in PlanFrequency},
                    value=PlanFrequency.MONTHLY.value,
                    label="Frequency",
                ).props("outlined dense").classes(STYLE_INPUT)
                start_input = ui.input("Start date").props("outlined dense type=date").classes(STYLE_INPUT)
                next_run_input = ui.input("Next run date").props("outlined dense type=date").classes(STYLE_INPUT)
                max_input = ui.number("Occurrences", value=12, min=1, step=1).props("outlined dense").classes(STYLE_INPUT)
            notes_input = ui.textarea("Notes").props("outlined dense rows=2 auto-grow").classes(STYLE_INPUT)

            start_input.on_value_change(
                lambda e: next_run_input.set_value(e.value) if e.value and not next_run_input.value else None
            )

            ui.separator()
            ui.label("Items").classes(STYLE_SECTION_TITLE)
            items_box = ui.column().classes("w-full gap-2")
            with ui.column().classes("w-full gap-2") as item_builder:
                item_form = LineItemForm(price_items)

                def _add_item() -> None:
                    item, errors = item_form.read()
                    if item is not None:
                        errors = plan_item_errors(item)
                    if errors:
                        ui.notify("; ".join(errors), type="warning")
                        return
                    state["items"], merged = merge_plan_item(state["items"], item)
                    ui.notify("Quantity updated" if merged else "Item added", type="positive")
                    item_form.reset()
                    render_items()

                btn_secondary("Add item", icon="add", on_click=_add_item)

            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                btn_secondary("Cancel", on_click=form_dialog.close)
                save_button = btn_primary("Create", on_click=lambda: _save())

    def render_items() -> None:
        read_only = plan_items_read_only(state["plan_id"], state["items"])
        items_box.clear()
        with items_box:
            if read_only and state["plan_id"] is not None:
                ui.label("Items of an existing plan cannot be changed.").classes(STYLE_TEXT_HINT)

            def _remove(item: LineItem) -> None:
                state["items"] = [i for i in state["items"] if i is not item]
                render_items()

            line_items_table(state["items"], None, on_remove=None if read_only else _remove)
        item_builder.set_visibility(not read_only)

    def _save() -> None:
        if customer_input.value is None:
            ui.notify("Pick a customer", type="warning")
            return
        read_only = plan_items_read_only(state["plan_id"], state["items"])
        try:
            payload = build_plan_payload(
                customer_id=customer_input.value,
                frequency=frequency_input.value,
                start_date=start_input.value,
                next_run_date=next_run_input.value or None,
                max_occurrences=int(max_input.value or 0),
                notes=(notes_input.value or "").strip() or None,
                items=None if read_only else state["items"],
            )
        except ValueError as exc:
            ui.notify(str(exc), type="warning")
            return
        if state["plan_id"] is not None:
            ok = run_action(update_plan, api, state["plan_id"], payload, success="Plan saved")
        else:
            ok = run_action(create_plan, api, payload, success="Plan created")
        if ok:
            form_dialog.close()
            render_list.refresh()

    def open_form(plan: RecurringPlan | None) -> None:
        state["plan_id"] = plan.id if plan else None
        state["items"] = [item.model_copy() for item in plan.items] if plan else []
        form_title.text = f"Edit plan #{plan.id}" if plan else "New plan"
        save_button.text = "Save" if plan else "Create"
        customer_input.value = plan.customer_id if plan else None
        frequency_input.value = plan.frequency.value if plan else PlanFrequency.MONTHLY.value
        start_input.value = plan.start_date if plan else date.today().isoformat()
        next_run_input.value = plan.next_run_date if plan else ""
        max_input.value = plan.max_occurrences if plan else 12
        notes_input.value = (plan.notes or "") if plan else ""
        item_form.reset()
        render_items()
        form_dialog.open()

    def _toggle(plan: RecurringPlan) -> None:
        active = metrics.plan_is_active(plan)
        if run_action(set_plan_active, api, plan.id, not active, success="Plan paused" if active else "Plan resumed"):
            render_list.refresh()

    def _generate(plan: RecurringPlan) -> None:
        invoice_id = load(generate_now, api, plan.id, fallback="Could not generate invoice")
        if invoice_id is None:
            return
        ui.notify(f"Invoice #{invoice_id} generated", type="positive")
        render_list.refresh()

    def _delete(plan: RecurringPlan) -> None:
        def _confirm() -> None:
            if run_action(delete_plan, api, plan.id, success="Plan deleted"):
                render_list.refresh()

        confirm_dialog(f"Delete plan #{plan.id} for {plan.customer_name}?", _confirm).open()

    ui.input(
        "Search",
        placeholder="Customer",
        on_change=lambda e: (state.__setitem__("search", (e.value or "").strip().lower()), render_list.refresh()),
    ).props("outlined dense debounce=300").classes("w-full sm:w-64")

    @ui.refreshable
    def render_list() -> None:
        plans = load(list_plans, api, fallback="Could not load recurring plans", default=[])
        if state["search"]:
            plans = [p for p in plans if state["search"] in (p.customer_name or "").lower()]
        with card(pad="p-0", classes="w-full overflow-hidden"):
            with ui.row().classes(C_TABLE_HEADER + " hidden sm:flex"):
                ui.label("Plan").classes("w-20")
                ui.label("Customer").classes("flex-1")
                ui.label("Frequency").classes("w-24")
                ui.label("Next run").classes("w-28")
                ui.label("Runs").classes("w-20 text-right")
                ui.label("Amount").classes("w-28 text-right")
                ui.label("Status").classes("w-24 text-right")
                ui.label("").classes("w-40")
            if not plans:
                empty_row("No recurring plans")
            for plan in plans:
                active = metrics.plan_is_active(plan)
                status = plan.status or (PlanStatus.ACTIVE if active else PlanStatus.PAUSED)
                with ui.row().classes(C_TABLE_ROW):
                    ui.label(f"#{plan.id}").classes("w-20 font-mono text-xs")
                    ui.label(plan.customer_name or "-").classes("flex-1")
                    ui.label(format_status(plan.frequency)).classes("w-24 text-slate-600")
                    ui.label(format_date(plan.next_run_date)).classes("w-28")
                    ui.label(f"{plan.generated_count}/{plan.max_occurrences}").classes(f"w-20 text-right {C_NUMERIC}")
                    ui.label(format_money(plan_amount(plan), plan.currency)).classes(f"w-28 text-right {C_NUMERIC}")
                    with ui.row().classes("w-24 justify-end"):
                        status_badge(status)
                    with ui.row().classes("w-40 justify-end gap-1"):
                        ui.button(icon="edit", on_click=lambda _, x=plan: open_form(x)).props("flat dense").classes(
                            "text-slate-500 hover:text-slate-900"
                        )
                        ui.button(
                            icon="pause" if active else "play_arrow", on_click=lambda _, x=plan: _toggle(x)
                        ).props("flat dense").classes("text-slate-500 hover:text-slate-900")
                        generate_btn = ui.button(icon="bolt", on_click=lambda _, x=plan: _generate(x)).props("flat dense").classes(
                            "text-amber-600 hover:text-amber-700"
                        )
                        generate_btn.set_enabled(active and metrics.remaining_occurrences(plan) > 0)
                        ui.button(icon="delete", on_click=lambda _, x=plan: _delete(x)).props("flat dense").classes(
                            "text-rose-600 hover:text-rose-700"
                        )

    render_list()
