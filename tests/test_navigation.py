import sys
from pathlib import Path
from types import SimpleNamespace

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from billdesk import main  # noqa: E402
from billdesk.pages import _shared  # noqa: E402


def test_shell_navigates_through_shared_set_page() -> None:
    assert main.set_page is _shared.set_page


def test_set_page_stores_state_and_navigates(monkeypatch) -> None:
    storage: dict = {}
    targets: list = []
    monkeypatch.setattr(_shared, "app", SimpleNamespace(storage=SimpleNamespace(user=storage)))
    monkeypatch.setattr(_shared, "ui", SimpleNamespace(navigate=SimpleNamespace(to=targets.append)))

    _shared.set_page("invoices", invoice_status_filter="OVERDUE")
    assert storage == {"invoice_status_filter": "OVERDUE", "page": "invoices"}
    assert targets == ["/"]


def test_admin_pages_hidden_without_permission() -> None:
    sections = dict(main.visible_nav(can_see_admin=False))
    assert "Admin" not in sections
    assert ("Invoices", "invoices") in sections["Billing"]
    assert "Admin" in dict(main.visible_nav(can_see_admin=True))


def test_resolve_page_falls_back_to_home() -> None:
    assert main.resolve_page("orders", can_see_admin=False) == "orders"
    assert main.resolve_page("users", can_see_admin=False) == "home"
    assert main.resolve_page("users", can_see_admin=True) == "users"
    assert main.resolve_page("nope", can_see_admin=True) == "home"
    assert main.resolve_page(None, can_see_admin=True) == "home"
