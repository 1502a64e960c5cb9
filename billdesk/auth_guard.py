import logging

from nicegui import app, ui

from .access import build_access
from .errors import AuthenticationExpired, error_message
from .integrations.api_client import ApiClient
from .models import LoginData

logger = logging.getLogger(__name__)

_SESSION_KEYS = ("token", "roles", "permissions", "user_email")


def session_token() -> str | None:
    return app.storage.user.get("token") or None


def session_roles() -> list[str]:
    return list(app.storage.user.get("roles") or [])


def store_login(login: LoginData, email: str) -> None:
    app.storage.user["token"] = login.token
    app.storage.user["roles"] = list(login.roles)
    app.storage.user["permissions"] = list(login.permissions)
    app.storage.user["user_email"] = email


def current_access() -> dict[str, bool]:
    return build_access(session_roles(), session_token())


def is_authenticated(*, redirect: bool = False) -> bool:
    if session_token():
        return True
    if redirect:
        ui.navigate.to("/login")
    return False


def require_auth() -> bool:
    return is_authenticated(redirect=True)


def clear_auth_session() -> None:
    for key in _SESSION_KEYS:
        app.storage.user.pop(key, None)


def api_client() -> ApiClient:
    return ApiClient.from_config(session_token())


def handle_api_error(exc: Exception, fallback: str = "Request failed") -> None:
    """Report a failed backend call; an expired session goes back to the login page."""
    if isinstance(exc, AuthenticationExpired):
        logger.info("auth.expired status=%s", exc.status_code)
        clear_auth_session()
        ui.notify(error_message(exc, "Session expired, please log in again"), type="warning")
        ui.navigate.to("/login")
        return
    ui.notify(error_message(exc, fallback), type="negative")
