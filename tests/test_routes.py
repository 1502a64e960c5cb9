import sys
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from billdesk.auth_guard import session_token  # noqa: E402
from billdesk.integrations.api_client import ApiClient  # noqa: E402
from billdesk.routes import clear_pdf_cache, get_api_client, router  # noqa: E402


class FakeBackend:
    def __init__(self, routes: dict) -> None:
        self.routes = routes
        self.calls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request.url.path)
        return self.routes[request.url.path]()


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_pdf_cache()
    yield
    clear_pdf_cache()


def _app(backend: FakeBackend) -> TestClient:
    app = FastAPI()
    app.include_router(router)
    client = ApiClient("http://backend.test", token="t", transport=httpx.MockTransport(backend))
    app.dependency_overrides[get_api_client] = lambda: client
    return TestClient(app)


def test_requires_session_token() -> None:
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[session_token] = lambda: None
    response = TestClient(app).get("/files/invoices/1/pdf")
    assert response.status_code == 401


def test_invoice_pdf_is_cached() -> None:
    backend = FakeBackend({"/api/invoices/5/pdf": lambda: httpx.Response(200, content=b"%PDF-1.7 invoice")})
    client = _app(backend)

    first = client.get("/files/invoices/5/pdf")
    second = client.get("/files/invoices/5/pdf")

    assert first.status_code == 200
    assert first.content == b"%PDF-1.7 invoice"
    assert first.headers["content-type"] == "application/pdf"
    assert 'filename="invoice-5.pdf"' in first.headers["content-disposition"]
    assert second.content == b"%PDF-1.7 invoice"
    assert backend.calls == ["/api/invoices/5/pdf"]


def test_invoice_pdf_backend_error_is_bad_gateway() -> None:
    backend = FakeBackend({"/api/invoices/6/pdf": lambda: httpx.Response(500, json={"message": "render failed"})})
    response = _app(backend).get("/files/invoices/6/pdf")
    assert response.status_code == 502
    assert response.json()["detail"] == "render failed"


def test_invoice_pdf_expired_session() -> None:
    backend = FakeBackend({"/api/invoices/7/pdf": lambda: httpx.Response(401)})
    response = _app(backend).get("/files/invoices/7/pdf")
    assert response.status_code == 401


def test_failed_download_is_not_cached() -> None:
    responses = iter([httpx.Response(500), httpx.Response(200, content=b"%PDF-ok")])
    backend = FakeBackend({"/api/invoices/8/pdf": lambda: next(responses)})
    client = _app(backend)
    assert client.get("/files/invoices/8/pdf").status_code == 502
    assert client.get("/files/invoices/8/pdf").content == b"%PDF-ok"


def test_price_list_pdf_without_settings_access() -> None:
    backend = FakeBackend(
        {
            "/api/pricelist/paged": lambda: httpx.Response(
                200,
                json={"data": {"content": [{"id": 1, "name": "Hour", "priceNet": 80, "vatRate": 0.19}]}},
            ),
            "/api/settings": lambda: httpx.Response(403),
        }
    )
    response = _app(backend).get("/files/pricelist.pdf")
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")
    assert "attachment" in response.headers["content-disposition"]
    assert backend.calls == ["/api/pricelist/paged", "/api/settings"]
