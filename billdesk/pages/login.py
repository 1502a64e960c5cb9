from __future__ import annotations

from contextlib import contextmanager
import logging

from nicegui import app, ui

from ..auth_guard import store_login
from ..errors import ApiError, error_message
from ..integrations.api_client import ApiClient
from ..services.auth import login

ERROR_TEXT = "text-sm text-rose-600"
TITLE_TEXT = "text-2xl font-semibold text-slate-900 text-center"
SUBTITLE_TEXT = "text-sm text-slate-500 text-center"
INPUT_CLASSES = "w-full"
PRIMARY_BUTTON = "w-full bg-slate-900 text-white rounded-lg hover:bg-slate-800"
CARD_CLASSES = "w-full max-w-[400px] bg-white rounded-xl shadow-lg border border-slate-200 p-6"
BG_CLASSES = "min-h-screen w-full bg-slate-50 flex items-center justify-center px-4"
logger = logging.getLogger(__name__)


@contextmanager
def auth_layout(title: str, subtitle: str):
    with ui.element("div").classes(BG_CLASSES):
        with ui.column().classes("w-full items-center gap-6"):
            ui.label("billdesk").classes("text-lg font-semibold text-slate-900")
            with ui.column().classes(f"{CARD_CLASSES} gap-4"):
                ui.label(title).classes(TITLE_TEXT)
                if subtitle:
                    ui.label(subtitle).classes(SUBTITLE_TEXT)
                with ui.column().classes("w-full gap-4") as card:
                    yield card


def _error_label() -> ui.label:
    label = ui.label("").classes(ERROR_TEXT)
    label.set_visibility(False)
    return label


def _set_error(label: ui.label, message: str) -> None:
    label.text = message
    label.set_visibility(bool(message))


@ui.page("/login")
def login_page():
    with auth_layout("Welcome back", "Sign in to the billing admin"):
        with ui.column().classes("w-full gap-1"):
            email_input = ui.input("Email").props("outlined dense").classes(INPUT_CLASSES)
            email_error = _error_label()
        with ui.column().classes("w-full gap-1"):
            password_input = ui.input("Password").props("outlined dense type=password").classes(INPUT_CLASSES)
            password_error = _error_label()
        status_error = _error_label()

        def handle_login() -> None:
            _set_error(email_error, "")
            _set_error(password_error, "")
            _set_error(status_error, "")
            email = (email_input.value or "").strip()
            password = password_input.value or ""
            if not email:
                _set_error(email_error, "Email is required")
            if not password:
                _set_error(password_error, "Password is required")
            if not email or not password:
                return
            login_button.props("loading")
            try:
                with ApiClient.from_config() as client:
                    result = login(client, email, password)
            except ApiError as exc:
                logger.info("auth.login_failed email=%s status=%s", email, exc.status_code)
                _set_error(status_error, error_message(exc, "Invalid credentials"))
                return
            finally:
                login_button.props(remove="loading")
            if not result.token:
                _set_error(status_error, "Login failed: no token received")
                return
            store_login(result, email)
            app.storage.user["page"] = "home"
            ui.navigate.to("/")

        password_input.on("keydown.enter", handle_login)
        login_button = ui.button("Log in", on_click=handle_login).classes(PRIMARY_BUTTON)
