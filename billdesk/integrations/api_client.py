from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import api_base_url, api_timeout
from ..errors import ApiError, AuthenticationExpired, payload_message


logger = logging.getLogger(__name__)

_AUTH_STATUS_CODES = (401, 403)


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None and value != ""}


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """Thin JSON client for the billing backend.

    Every request carries ``Authorization: Bearer <token>`` when a token is set.
    Successful responses are unwrapped from the ``{statusCode, message, data}``
    envelope; failures raise :class:`ApiError` (401/403 raise
    :class:`AuthenticationExpired`).
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout_s: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        token = (token or "").strip()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout_s,
            transport=transport,
        )

    @classmethod
    def from_config(cls, token: str | None = None) -> "ApiClient":
        return cls(api_base_url(), token=token, timeout_s=api_timeout())

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        logger.debug("api.request method=%s path=%s", method, path)
        try:
            response = self._client.request(method, path, params=_clean_params(params), json=json)
        except httpx.RequestError as exc:
            logger.warning("api.unreachable method=%s path=%s error=%s", method, path, exc)
            raise ApiError(0, f"Backend not reachable: {exc}") from exc

        if response.status_code in _AUTH_STATUS_CODES:
            payload = _decode_body(response)
            logger.warning("api.auth_failed method=%s path=%s status=%s", method, path, response.status_code)
            raise AuthenticationExpired(
                response.status_code,
                payload_message(payload) or "Session expired, please log in again",
                payload,
            )
        if response.is_error:
            payload = _decode_body(response)
            logger.warning("api.failed method=%s path=%s status=%s", method, path, response.status_code)
            raise ApiError(
                response.status_code,
                payload_message(payload) or f"Request failed with status {response.status_code}",
                payload,
            )
        return response

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        response = self._send(method, path, params=params, json=json)
        payload = _decode_body(response)
        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return self.request("POST", path, params=params, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return self.request("PATCH", path, params=params, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def get_bytes(self, path: str) -> bytes:
        return self._send("GET", path).content
