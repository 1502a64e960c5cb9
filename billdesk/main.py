import logging

from nicegui import app, ui

from .auth_guard import api_client, clear_auth_session, current_access, require_auth
from .config import app_port, is_debug, storage_secret
from .env import load_env
from .logging_setup import setup_logging
from .pages import (
    render_customer_health,
    render_customers,
    render_finance_dashboard,
    render_home,
    render_invoices,
    render_orders,
    render_pricelist,
    render_recurring_dashboard,
    render_recurring_plans,
    render_settings,
    render_users,
    render_worklist,
    set_page,
)
from .routes import router
from .styles import APP_FONT_CSS, STYLE_BG, STYLE_CONTAINER, STYLE_NAV_ITEM, STYLE_NAV_ITEM_ACTIVE, STYLE_NAV_SECTION

logger = logging.getLogger(__name__)

PAGES = {
    "home": render_home,
    "finance": render_finance_dashboard,
    "customer_health": render_customer_health,
    "recurring_ops": render_recurring_dashboard,
    "worklist": render_worklist,
    "customers": render_customers,
    "orders": render_orders,
    "invoices": render_invoices,
    "pricelist": render_pricelist,
    "recurring": render_recurring_plans,
    "users": render_users,
    "settings": render_settings,
}
ADMIN_PAGES = {"users", "settings"}

NAV_SECTIONS = [
    ("Workspace", [("Home", "home"), ("Worklist", "worklist")]),
    ("Dashboards", [("Finance", "finance"), ("Customer health", "customer_health"), ("Recurring ops", "recurring_ops")]),
    ("Billing", [("Orders", "orders"), ("Invoices", "invoices"), ("Recurring plans", "recurring"), ("Price list", "pricelist")]),
    ("CRM", [("Customers", "customers")]),
    ("Admin", [("Users & roles", "users"), ("Settings", "settings")]),
]

app.include_router(router)


def visible_nav(can_see_admin: bool) -> list[tuple[str, list[tuple[str, str]]]]:
    sections = []
    for title, items in NAV_SECTIONS:
        shown = [(label, target) for label, target in items if can_see_admin or target not in ADMIN_PAGES]
        if shown:
            sections.append((title, shown))
    return sections


def resolve_page(name: str | None, can_see_admin: bool) -> str:
    if name not in PAGES:
        return "home"
    if name in ADMIN_PAGES and not can_see_admin:
        return "home"
    return name


def layout_wrapper(content_func, can_see_admin: bool):
    ui.add_head_html(APP_FONT_CSS)
    current = app.storage.user.get("page", "home")
    with ui.element("div").classes(STYLE_BG + " w-full"):
        with ui.row().classes("w-full min-h-screen no-wrap"):
            with ui.column().classes(
                "w-[240px] bg-white border-r border-slate-200 p-4 gap-6 sticky top-0 h-screen overflow-y-auto"
            ):
                with ui.row().classes("items-center gap-2 px-2"):
                    ui.icon("receipt_long").classes("text-slate-900")
                    ui.label("billdesk").classes("text-lg font-bold text-slate-900")
                ui.separator().classes("opacity-60")

                def nav_section(title: str, items: list[tuple[str, str]]):
                    ui.label(title).classes(STYLE_NAV_SECTION)
                    with ui.column().classes("gap-1 mt-1 w-full"):
                        for label, target in items:
                            cls = STYLE_NAV_ITEM_ACTIVE if current == target else STYLE_NAV_ITEM
                            ui.button(
                                label,
                                on_click=lambda t=target: set_page(t),
                            ).props("flat").classes(f"w-full justify-start normal-case {cls}")

                for title, items in visible_nav(can_see_admin):
                    nav_section(title, items)

            with ui.column().classes("flex-1 w-full"):
                with ui.row().classes("w-full justify-end items-center gap-3 px-6 py-4"):
                    ui.label(app.storage.user.get("user_email") or "").classes("text-sm text-slate-500")

                    def handle_logout() -> None:
                        clear_auth_session()
                        ui.navigate.to("/login")

                    ui.button("Logout", on_click=handle_logout).props("flat").classes(
                        "text-slate-500 hover:text-slate-900"
                    )
                content_func()


@ui.page("/")
def index():
    if not require_auth():
        return

    access = current_access()
    page = resolve_page(app.storage.user.get("page"), access["can_see_admin"])
    app.storage.user["page"] = page

    api = api_client()
    ui.context.client.on_disconnect(api.close)

    def content():
        with ui.column().classes(STYLE_CONTAINER):
            PAGES[page](api)

    layout_wrapper(content, access["can_see_admin"])


def main() -> None:
    load_env()
    setup_logging()
    logger.info("app.start port=%s debug=%s", app_port(), is_debug())
    ui.run(
        title="billdesk",
        port=app_port(),
        storage_secret=storage_secret(),
        favicon="🧾",
        reload=False,
        show=False,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
