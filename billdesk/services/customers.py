from __future__ import annotations

from ..integrations.api_client import ApiClient
from ..models import Customer


def list_customers(client: ApiClient, search: str | None = None) -> list[Customer]:
    # Backend rejects an empty search; '%' matches everything.
    data = client.get("/api/customers", params={"search": (search or "").strip() or "%"})
    return [Customer.model_validate(row) for row in data or []]


def get_customer(client: ApiClient, customer_id: int) -> Customer:
    return Customer.model_validate(client.get(f"/api/customers/{int(customer_id)}"))


def create_customer(client: ApiClient, customer: Customer) -> Customer:
    return Customer.model_validate(client.post("/api/customers", json=customer.to_payload()))


def update_customer(client: ApiClient, customer_id: int, customer: Customer) -> Customer:
    data = client.put(f"/api/customers/{int(customer_id)}", json=customer.to_payload())
    return Customer.model_validate(data)


def delete_customer(client: ApiClient, customer_id: int) -> None:
    client.delete(f"/api/customers/{int(customer_id)}")
