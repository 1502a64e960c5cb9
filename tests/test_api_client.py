import json
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from billdesk.errors import ApiError, AuthenticationExpired, error_message  # noqa: E402
from billdesk.integrations.api_client import ApiClient  # noqa: E402


def _client(handler, token: str | None = "secret-token") -> ApiClient:
    return ApiClient("http://backend.test", token=token, transport=httpx.MockTransport(handler))


def test_unwraps_envelope_and_sends_bearer_token() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["path"] = request.url.path
        return httpx.Response(200, json={"statusCode": 200, "message": "ok", "data": [{"id": 1}]})

    with _client(handler) as client:
        assert client.get("/api/customers") == [{"id": 1}]
    assert seen == {"auth": "Bearer secret-token", "path": "/api/customers"}


def test_no_authorization_header_without_token() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert "Authorization" not in request.headers
        return httpx.Response(200, json={"data": {"token": "t"}})

    with _client(handler, token=None) as client:
        assert client.post("/api/auth/login", json={"email": "a@b.c"}) == {"token": "t"}


def test_plain_json_body_is_returned_as_is() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1, 2, 3])

    with _client(handler) as client:
        assert client.get("/api/anything") == [1, 2, 3]


def test_empty_body_returns_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    with _client(handler) as client:
        assert client.delete("/api/customers/1") is None


def test_params_drop_empty_values() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert dict(request.url.params) == {"q": "acme", "page": "0"}
        return httpx.Response(200, json={"data": {}})

    with _client(handler) as client:
        client.get("/api/orders/paged", params={"q": "acme", "status": None, "customerId": "", "page": 0})


def test_json_body_is_sent() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {"status": "PAID"}
        assert request.method == "PATCH"
        return httpx.Response(200, json={"data": {"id": 1}})

    with _client(handler) as client:
        assert client.patch("/api/invoices/1/status", json={"status": "PAID"}) == {"id": 1}


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failures_raise_authentication_expired(status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"message": "Token expired"})

    with _client(handler) as client:
        with pytest.raises(AuthenticationExpired) as info:
            client.get("/api/users/me")
    assert info.value.status_code == status
    assert info.value.message == "Token expired"


def test_server_error_carries_backend_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"statusCode": 409, "message": "Order already invoiced"})

    with _client(handler) as client:
        with pytest.raises(ApiError) as info:
            client.post("/api/orders/3/invoice")
    assert not isinstance(info.value, AuthenticationExpired)
    assert info.value.status_code == 409
    assert error_message(info.value, "fallback") == "Order already invoiced"


def test_error_without_message_uses_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with _client(handler) as client:
        with pytest.raises(ApiError) as info:
            client.get("/api/settings")
    assert info.value.message == "Request failed with status 500"


def test_transport_error_has_status_zero() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(ApiError) as info:
            client.get("/api/customers")
    assert info.value.status_code == 0
    assert "Backend not reachable" in info.value.message


def test_get_bytes_returns_raw_content() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"%PDF-1.4 fake", headers={"Content-Type": "application/pdf"})

    with _client(handler) as client:
        assert client.get_bytes("/api/invoices/1/pdf") == b"%PDF-1.4 fake"


def test_error_message_fallback_for_other_exceptions() -> None:
    assert error_message(RuntimeError("boom"), "Could not save") == "Could not save"
    assert error_message(None, "Could not save") == "Could not save"
