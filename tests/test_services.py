import json
import sys
from pathlib import Path
import unittest

import httpx

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from billdesk.integrations.api_client import ApiClient  # noqa: E402
from billdesk.models import InvoiceStatus, LineItem, OrderStatus, Role  # noqa: E402
from billdesk.services import (  # noqa: E402
    auth,
    customers,
    invoices,
    orders,
    pricelist,
    recurring,
    roles,
    users,
)


class RecordingBackend:
    """Answers every request with ``data`` and remembers what was sent."""

    def __init__(self, data=None) -> None:
        self.data = data
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(200, json={"statusCode": 200, "data": self.data})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def client(self) -> ApiClient:
        return ApiClient("http://backend.test", token="t", transport=httpx.MockTransport(self))


class ServiceRequestTests(unittest.TestCase):
    def test_login_parses_roles(self) -> None:
        backend = RecordingBackend({"token": "abc", "roles": ["ADMIN"], "permissions": ["INVOICE_READ"]})
        result = auth.login(backend.client(), " admin@example.com ", "pw")
        self.assertEqual(result.token, "abc")
        self.assertEqual(result.roles, ["ADMIN"])
        self.assertEqual(json.loads(backend.last.content), {"email": "admin@example.com", "password": "pw"})

    def test_login_requires_credentials(self) -> None:
        backend = RecordingBackend()
        with self.assertRaises(ValueError):
            auth.login(backend.client(), "", "pw")
        self.assertEqual(backend.requests, [])

    def test_customer_search_defaults_to_wildcard(self) -> None:
        backend = RecordingBackend([{"id": 1, "name": "Acme"}])
        result = customers.list_customers(backend.client(), "  ")
        self.assertEqual(backend.last.url.params["search"], "%")
        self.assertEqual(result[0].name, "Acme")

        customers.list_customers(backend.client(), "acme")
        self.assertEqual(backend.last.url.params["search"], "acme")

    def test_orders_paged_params(self) -> None:
        backend = RecordingBackend({"content": [], "totalElements": 0})
        page = orders.list_orders_paged(backend.client(), status=OrderStatus.CONFIRMED, customer_id=4, page=2)
        params = backend.last.url.params
        self.assertEqual(backend.last.url.path, "/api/orders/paged")
        self.assertEqual(params["status"], "CONFIRMED")
        self.assertEqual(params["customerId"], "4")
        self.assertEqual(params["page"], "2")
        self.assertNotIn("q", params)
        self.assertEqual(page.content, [])

    def test_create_order_omits_missing_fields(self) -> None:
        backend = RecordingBackend({"id": 9, "customerId": 4})
        order = orders.create_order(backend.client(), 4, currency="EUR")
        self.assertEqual(json.loads(backend.last.content), {"customerId": 4, "currency": "EUR"})
        self.assertEqual(order.id, 9)

    def test_add_order_item_posts_camel_case(self) -> None:
        backend = RecordingBackend({"id": 9, "customerId": 4, "items": [{"id": 1, "quantity": 2}]})
        item = LineItem(price_list_item_id=3, quantity=2, unit_price_net=50, vat_rate=0.19)
        order = orders.add_order_item(backend.client(), 9, item)
        self.assertEqual(backend.last.url.path, "/api/orders/9/items")
        body = json.loads(backend.last.content)
        self.assertEqual(body["priceListItemId"], 3)
        self.assertEqual(body["unitPriceNet"], 50)
        self.assertEqual(len(order.items), 1)

    def test_invoice_status_update(self) -> None:
        backend = RecordingBackend({"id": 1, "customerId": 2, "status": "PAID"})
        invoice = invoices.update_invoice_status(backend.client(), 1, InvoiceStatus.PAID)
        self.assertEqual(backend.last.method, "PATCH")
        self.assertEqual(json.loads(backend.last.content), {"status": "PAID"})
        self.assertEqual(invoice.status, InvoiceStatus.PAID)

    def test_invoice_from_order(self) -> None:
        backend = RecordingBackend({"id": 11, "customerId": 2, "status": "DRAFT"})
        invoice = invoices.create_invoice_from_order(backend.client(), 5)
        self.assertEqual(backend.last.url.path, "/api/orders/5/invoice")
        self.assertEqual(invoice.id, 11)

    def test_active_price_items(self) -> None:
        backend = RecordingBackend({"content": [{"id": 1, "name": "Hour", "priceNet": 80}]})
        items = pricelist.list_active_price_items(backend.client())
        params = backend.last.url.params
        self.assertEqual(params["q"], "%")
        self.assertEqual(params["onlyActive"], "true")
        self.assertEqual(items[0].price_net, 80)

    def test_plan_toggle_and_generate(self) -> None:
        backend = RecordingBackend(42)
        client = backend.client()
        recurring.set_plan_active(client, 3, False)
        self.assertEqual(backend.last.url.path, "/api/recurring-plans/3/active")
        self.assertEqual(backend.last.url.params["active"], "false")
        self.assertEqual(recurring.generate_now(client, 3), 42)

    def test_role_names_are_upper_case(self) -> None:
        backend = RecordingBackend({"id": 1, "name": "ACCOUNTANT"})
        roles.create_role(backend.client(), " accountant ")
        self.assertEqual(json.loads(backend.last.content), {"name": "ACCOUNTANT"})
        with self.assertRaises(ValueError):
            roles.create_role(backend.client(), "  ")

    def test_role_rename_puts_upper_case_name(self) -> None:
        backend = RecordingBackend({"id": 4, "name": "BILLING"})
        role = roles.update_role(backend.client(), Role(id=4, name=" billing "))
        self.assertEqual(backend.last.method, "PUT")
        self.assertEqual(backend.last.url.path, "/api/roles")
        self.assertEqual(json.loads(backend.last.content), {"id": 4, "name": "BILLING"})
        self.assertEqual(role.name, "BILLING")
        with self.assertRaises(ValueError):
            roles.update_role(backend.client(), Role(id=4, name=""))

    def test_user_roles_are_names(self) -> None:
        backend = RecordingBackend(["ADMIN", "ACCOUNTANT"])
        self.assertEqual(roles.get_user_roles(backend.client(), 7), ["ADMIN", "ACCOUNTANT"])
        self.assertEqual(backend.last.method, "GET")
        self.assertEqual(backend.last.url.path, "/api/users/7/roles")
        self.assertEqual(roles.get_user_roles(RecordingBackend(None).client(), 7), [])

    def test_single_customer_and_price_item(self) -> None:
        backend = RecordingBackend({"id": 3, "name": "Acme", "email": None, "paymentTermsDays": 14})
        customer = customers.get_customer(backend.client(), 3)
        self.assertEqual(backend.last.url.path, "/api/customers/3")
        self.assertEqual(customer.payment_terms_days, 14)
        self.assertIsNone(customer.email)

        backend = RecordingBackend({"id": 5, "name": "Hour", "priceNet": 80, "active": None})
        item = pricelist.get_price_item(backend.client(), 5)
        self.assertEqual(backend.last.url.path, "/api/pricelist/5")
        self.assertEqual(item.price_net, 80)
        self.assertTrue(item.active)

    def test_plan_list_tolerates_null_fields(self) -> None:
        backend = RecordingBackend(
            [{"id": 1, "customerId": 2, "customerName": None, "items": None, "nextRunDate": None, "active": None}]
        )
        plans = recurring.list_plans(backend.client())
        self.assertEqual(plans[0].items, [])
        self.assertEqual(plans[0].customer_name, "")
        self.assertFalse(plans[0].active)

    def test_password_minimum_length(self) -> None:
        backend = RecordingBackend()
        with self.assertRaises(ValueError):
            users.update_password(backend.client(), "old", "short")
        self.assertEqual(backend.requests, [])
        users.update_password(backend.client(), "old", "long-enough")
        self.assertEqual(
            json.loads(backend.last.content), {"oldPassword": "old", "newPassword": "long-enough"}
        )


class PlanItemsTests(unittest.TestCase):
    def test_merge_same_price_item_adds_quantity(self) -> None:
        items = [LineItem(price_list_item_id=1, name="Hosting", quantity=1)]
        merged, was_merged = recurring.merge_plan_item(items, LineItem(price_list_item_id=1, quantity=2))
        self.assertTrue(was_merged)
        self.assertEqual(len(merged), 1)
        self.assertEqual(merged[0].quantity, 3)
        self.assertEqual(items[0].quantity, 1)

    def test_merge_new_item_appends(self) -> None:
        items = [LineItem(price_list_item_id=1, quantity=1)]
        merged, was_merged = recurring.merge_plan_item(items, LineItem(price_list_item_id=2, quantity=1))
        self.assertFalse(was_merged)
        self.assertEqual([i.price_list_item_id for i in merged], [1, 2])

    def test_items_read_only(self) -> None:
        linked = [LineItem(price_list_item_id=1, quantity=1)]
        self.assertFalse(recurring.plan_items_read_only(None, linked))
        self.assertTrue(recurring.plan_items_read_only(5, linked))
        self.assertTrue(recurring.plan_items_read_only(None, [LineItem(name="Custom", quantity=1)]))

    def test_payload_defaults_next_run_to_start(self) -> None:
        payload = recurring.build_plan_payload(
            customer_id=3,
            frequency="MONTHLY",
            start_date="2026-11-01",
            max_occurrences=12,
            items=[LineItem(price_list_item_id=1, quantity=1)],
        )
        self.assertEqual(payload["nextRunDate"], "2026-11-01")
        self.assertEqual(payload["frequency"], "MONTHLY")
        self.assertEqual(payload["items"], [{"priceListItemId": 1, "quantity": 1.0}])
        self.assertNotIn("notes", payload)

    def test_payload_without_items_when_read_only(self) -> None:
        payload = recurring.build_plan_payload(
            customer_id=3, frequency="WEEKLY", start_date="2026-11-01", next_run_date="2026-11-08",
            max_occurrences=4, notes="Cleaning",
        )
        self.assertNotIn("items", payload)
        self.assertEqual(payload["nextRunDate"], "2026-11-08")
        self.assertEqual(payload["notes"], "Cleaning")

    def test_payload_validation(self) -> None:
        with self.assertRaisesRegex(ValueError, "Start date"):
            recurring.build_plan_payload(customer_id=1, frequency="MONTHLY", start_date="", max_occurrences=1)
        with self.assertRaisesRegex(ValueError, "Occurrences"):
            recurring.build_plan_payload(customer_id=1, frequency="MONTHLY", start_date="2026-01-01", max_occurrences=0)
        with self.assertRaisesRegex(ValueError, "at least one item"):
            recurring.build_plan_payload(
                customer_id=1, frequency="MONTHLY", start_date="2026-01-01", max_occurrences=1, items=[]
            )
        with self.assertRaises(ValueError):
            recurring.build_plan_payload(customer_id=1, frequency="HOURLY", start_date="2026-01-01", max_occurrences=1)

    def test_plan_item_errors(self) -> None:
        self.assertEqual(recurring.plan_item_errors(LineItem(price_list_item_id=1, quantity=2)), [])
        self.assertEqual(
            recurring.plan_item_errors(LineItem(price_list_item_id=1, quantity=0)),
            ["Quantity must be greater than 0"],
        )
        self.assertEqual(
            recurring.plan_item_errors(LineItem(name="Custom", quantity=-1)),
            ["Pick a price list item", "Quantity must be greater than 0"],
        )

    def test_payload_rejects_non_positive_quantity(self) -> None:
        for quantity in (0, -2):
            with self.assertRaisesRegex(ValueError, "greater than 0"):
                recurring.build_plan_payload(
                    customer_id=1, frequency="MONTHLY", start_date="2026-01-01", max_occurrences=1,
                    items=[LineItem(price_list_item_id=1, quantity=quantity)],
                )


if __name__ == "__main__":
    unittest.main()
