from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """A backend call failed. ``status_code`` is 0 for transport errors."""

    def __init__(self, status_code: int, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload


class AuthenticationExpired(ApiError):
    """Backend answered 401/403; the session has to log in again."""


def payload_message(payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str):
        return payload.strip()
    return ""


def error_message(exc: BaseException | None, fallback: str) -> str:
    if exc is None:
        return fallback
    if isinstance(exc, ApiError):
        return payload_message(exc.payload) or (exc.message or "").strip() or fallback
    return fallback
