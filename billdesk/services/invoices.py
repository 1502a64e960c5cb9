from __future__ import annotations

from typing import Any

from ..integrations.api_client import ApiClient
from ..models import Invoice, InvoiceStatus, Page


def list_invoices_paged(
    client: ApiClient,
    *,
    q: str | None = None,
    status: InvoiceStatus | str | None = None,
    customer_id: int | None = None,
    recurring: bool | None = None,
    recurring_plan_id: int | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    page: int = 0,
    size: int = 20,
    sort: str | None = "createdAt,desc",
) -> Page[Invoice]:
    params: dict[str, Any] = {
        "q": q,
        "status": status.value if isinstance(status, InvoiceStatus) else status,
        "customerId": customer_id,
        "recurring": recurring,
        "recurringPlanId": recurring_plan_id,
        "from": date_from,
        "to": date_to,
        "page": page,
        "size": size,
        "sort": sort,
    }
    return Page[Invoice].model_validate(client.get("/api/invoices/paged", params=params) or {})


def list_all_invoices(client: ApiClient, size: int = 500) -> list[Invoice]:
    """Newest invoices for dashboard aggregation (single page)."""
    return list_invoices_paged(client, q="%", page=0, size=size).content


def create_invoice_from_order(client: ApiClient, order_id: int) -> Invoice:
    return Invoice.model_validate(client.post(f"/api/orders/{int(order_id)}/invoice"))


def get_invoice(client: ApiClient, invoice_id: int) -> Invoice:
    return Invoice.model_validate(client.get(f"/api/invoices/{int(invoice_id)}"))


def update_invoice_status(client: ApiClient, invoice_id: int, status: InvoiceStatus) -> Invoice:
    data = client.patch(
        f"/api/invoices/{int(invoice_id)}/status",
        json={"status": InvoiceStatus(status).value},
    )
    return Invoice.model_validate(data)


def delete_invoice(client: ApiClient, invoice_id: int) -> None:
    client.delete(f"/api/invoices/{int(invoice_id)}")


def download_invoice_pdf(client: ApiClient, invoice_id: int) -> bytes:
    return client.get_bytes(f"/api/invoices/{int(invoice_id)}/pdf")
