from __future__ import annotations

from ._shared import *
from ..services.settings import get_settings, update_settings
from ..services.users import get_current_user, update_password
from ..ui_components import settings_card, settings_grid


_TEXT_FIELDS = (
    ("company_name", "Company name", False),
    ("vat_id", "VAT ID", False),
    ("tax_number", "Tax number", False),
    ("currency", "Currency", False),
    ("invoice_number_format", "Invoice number format", False),
    ("quote_number_format", "Quote number format", False),
    ("company_address", "Company address", True),
    ("contact_info", "Contact info", True),
    ("bank_details", "Bank details", True),
    ("footer_text", "Footer text", True),
)


def render_settings(api: ApiClient) -> None:
    page_header("Settings", "Company details used on invoices")

    settings = load(get_settings, api, fallback="Could not load settings", default=Settings())
    inputs: dict[str, Any] = {}

    with settings_card("Company"):
        with settings_grid(2):
            for key, label, multiline in _TEXT_FIELDS:
                value = getattr(settings, key) or ""
                if multiline:
                    inputs[key] = ui.textarea(label, value=value).props("outlined dense rows=3 auto-grow").classes(STYLE_INPUT)
                else:
                    inputs[key] = ui.input(label, value=value).props("outlined dense").classes(STYLE_INPUT)
            vat_input = ui.number(
                "Default VAT rate", value=settings.default_vat_rate, min=0, max=1, step=0.01
            ).props("outlined dense").classes(STYLE_INPUT)
            late_fee_input = ui.number(
                "Late fee amount", value=settings.late_fee_amount, min=0, step=0.5
            ).props("outlined dense").classes(STYLE_INPUT)
            theme_input = ui.select(
                {"light": "Light", "dark": "Dark"}, value=settings.theme_mode or "light", label="Theme"
            ).props("outlined dense").classes(STYLE_INPUT)

        def _save() -> None:
            if vat_input.value is not None and not 0 <= float(vat_input.value) <= 1:
                ui.notify("VAT rate must be a fraction between 0 and 1 (0.19 for 19 %)", type="warning")
                return
            values = {key: (inputs[key].value or "").strip() or None for key, _, _ in _TEXT_FIELDS}
            if values["currency"]:
                values["currency"] = values["currency"].upper()
            updated = settings.model_copy(
                update={
                    **values,
                    "default_vat_rate": vat_input.value,
                    "late_fee_amount": late_fee_input.value,
                    "theme_mode": theme_input.value,
                }
            )
            run_action(update_settings, api, updated, success="Settings saved")

        with ui.row().classes("w-full justify-end"):
            btn_primary("Save", icon="save", on_click=_save)

    me = load(get_current_user, api, fallback="Could not load profile")
    with settings_card("Password"):
        if me is not None:
            ui.label(f"Signed in as {me.email}").classes(STYLE_TEXT_MUTED)
        with settings_grid(3):
            old_input = ui.input("Current password").props("outlined dense type=password").classes(STYLE_INPUT)
            new_input = ui.input("New password").props("outlined dense type=password").classes(STYLE_INPUT)
            confirm_input = ui.input("Confirm new password").props("outlined dense type=password").classes(STYLE_INPUT)

        def _change_password() -> None:
            if (new_input.value or "") != (confirm_input.value or ""):
                ui.notify("Passwords do not match", type="warning")
                return
            if run_action(update_password, api, old_input.value or "", new_input.value or "", success="Password changed"):
                old_input.value = ""
                new_input.value = ""
                confirm_input.value = ""

        with ui.row().classes("w-full justify-end"):
            btn_secondary("Change password", icon="lock", on_click=_change_password)
