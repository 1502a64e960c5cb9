from __future__ import annotations

from typing import Any

from ..integrations.api_client import ApiClient
from ..models import LineItem, Order, OrderStatus, Page


def list_orders_paged(
    client: ApiClient,
    *,
    q: str | None = None,
    status: OrderStatus | str | None = None,
    customer_id: int | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    page: int = 0,
    size: int = 20,
    sort: str | None = "createdAt,desc",
) -> Page[Order]:
    params: dict[str, Any] = {
        "q": q,
        "status": status.value if isinstance(status, OrderStatus) else status,
        "customerId": customer_id,
        "from": date_from,
        "to": date_to,
        "page": page,
        "size": size,
        "sort": sort,
    }
    return Page[Order].model_validate(client.get("/api/orders/paged", params=params) or {})


def create_order(
    client: ApiClient,
    customer_id: int,
    *,
    currency: str | None = None,
    default_vat_rate: float | None = None,
    notes: str | None = None,
) -> Order:
    payload = {
        "customerId": int(customer_id),
        "currency": currency,
        "defaultVatRate": default_vat_rate,
        "notes": notes,
    }
    payload = {key: value for key, value in payload.items() if value is not None}
    return Order.model_validate(client.post("/api/orders", json=payload))


def get_order(client: ApiClient, order_id: int) -> Order:
    return Order.model_validate(client.get(f"/api/orders/{int(order_id)}"))


def update_order_status(client: ApiClient, order_id: int, status: OrderStatus) -> Order:
    data = client.patch(f"/api/orders/{int(order_id)}/status", json={"status": OrderStatus(status).value})
    return Order.model_validate(data)


def delete_order(client: ApiClient, order_id: int) -> None:
    client.delete(f"/api/orders/{int(order_id)}")


def add_order_item(client: ApiClient, order_id: int, item: LineItem) -> Order:
    data = client.post(f"/api/orders/{int(order_id)}/items", json=item.to_payload())
    return Order.model_validate(data)


def remove_order_item(client: ApiClient, order_id: int, item_id: int) -> Order:
    return Order.model_validate(client.delete(f"/api/orders/{int(order_id)}/items/{int(item_id)}"))
