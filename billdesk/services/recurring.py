from __future__ import annotations

from typing import Any

from ..integrations.api_client import ApiClient
from ..models import LineItem, PlanFrequency, RecurringPlan


def list_plans(client: ApiClient) -> list[RecurringPlan]:
    return [RecurringPlan.model_validate(row) for row in client.get("/api/recurring-plans") or []]


def create_plan(client: ApiClient, payload: dict[str, Any]) -> RecurringPlan:
    return RecurringPlan.model_validate(client.post("/api/recurring-plans", json=payload))


def update_plan(client: ApiClient, plan_id: int, payload: dict[str, Any]) -> RecurringPlan:
    return RecurringPlan.model_validate(client.put(f"/api/recurring-plans/{int(plan_id)}", json=payload))


def delete_plan(client: ApiClient, plan_id: int) -> None:
    client.delete(f"/api/recurring-plans/{int(plan_id)}")


def set_plan_active(client: ApiClient, plan_id: int, active: bool) -> None:
    client.patch(f"/api/recurring-plans/{int(plan_id)}/active", params={"active": bool(active)})


def generate_now(client: ApiClient, plan_id: int) -> int | None:
    """Runs the plan immediately; returns the id of the generated invoice."""
    data = client.post(f"/api/recurring-plans/{int(plan_id)}/generate-now")
    return int(data) if data is not None else None


def create_plan_from_invoice(client: ApiClient, invoice_id: int, payload: dict[str, Any]) -> RecurringPlan:
    data = client.post(f"/api/recurring-plans/from-invoice/{int(invoice_id)}", json=payload)
    return RecurringPlan.model_validate(data)


def plan_item_errors(item: LineItem) -> list[str]:
    """Plan items must reference the price list and carry a positive quantity."""
    errors: list[str] = []
    if item.price_list_item_id is None:
        errors.append("Pick a price list item")
    if (item.quantity or 0) <= 0:
        errors.append("Quantity must be greater than 0")
    return errors


def merge_plan_item(items: list[LineItem], item: LineItem) -> tuple[list[LineItem], bool]:
    """Add ``item`` to a plan's items.

    A second item for the same price list entry raises the existing item's
    quantity instead of adding a row. Returns the new list and whether it merged.
    """
    merged = [existing.model_copy() for existing in items]
    if item.price_list_item_id is not None:
        for existing in merged:
            if existing.price_list_item_id == item.price_list_item_id:
                existing.quantity = (existing.quantity or 0) + (item.quantity or 0)
                return merged, True
    merged.append(item)
    return merged, False


def plan_items_read_only(plan_id: int | None, items: list[LineItem]) -> bool:
    """Items of saved plans, or of plans holding items without a price list link, cannot be edited."""
    return plan_id is not None or any(item.price_list_item_id is None for item in items)


def build_plan_payload(
    *,
    customer_id: int,
    frequency: PlanFrequency | str,
    start_date: str,
    max_occurrences: int,
    next_run_date: str | None = None,
    notes: str | None = None,
    items: list[LineItem] | None = None,
) -> dict[str, Any]:
    if not start_date:
        raise ValueError("Start date is required")
    if int(max_occurrences) < 1:
        raise ValueError("Occurrences must be at least 1")
    payload: dict[str, Any] = {
        "customerId": int(customer_id),
        "frequency": PlanFrequency(frequency).value,
        "startDate": start_date,
        "nextRunDate": next_run_date or start_date,
        "maxOccurrences": int(max_occurrences),
    }
    if notes:
        payload["notes"] = notes
    if items is not None:
        if not items:
            raise ValueError("Add at least one item")
        if any((item.quantity or 0) <= 0 for item in items):
            raise ValueError("Quantity must be greater than 0")
        payload["items"] = [item.to_payload() for item in items]
    return payload
