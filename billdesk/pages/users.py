from __future__ import annotations

from ._shared import *
from ..services.roles import (
    assign_role,
    create_role,
    delete_role,
    get_user_roles,
    list_roles,
    remove_role,
    update_role,
)
from ..services.users import create_user, get_user, list_users


def render_users(api: ApiClient) -> None:
    state: dict = {"user_id": None, "role": None}

    with ui.row().classes("w-full items-center justify-between gap-3 flex-col sm:flex-row"):
        ui.label("Users & roles").classes(STYLE_PAGE_TITLE)
        with ui.row().classes("gap-2"):
            btn_secondary("New role", icon="admin_panel_settings", on_click=lambda: open_role_form())
            btn_primary("New user", icon="person_add", on_click=lambda: open_user_form())

    # New user
    with ui.dialog() as user_dialog:
        with card(pad="p-5", classes=C_DIALOG_CARD + " w-[440px]"):
            ui.label("New user").classes(STYLE_SECTION_TITLE)
            name_input = ui.input("Name").props("outlined dense").classes(STYLE_INPUT)
            email_input = ui.input("Email").props("outlined dense").classes(STYLE_INPUT)
            password_input = ui.input("Password").props("outlined dense type=password").classes(STYLE_INPUT)
            roles_input = ui.select({}, label="Roles", multiple=True).props("outlined dense use-chips").classes(STYLE_INPUT)
            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                btn_secondary("Cancel", on_click=user_dialog.close)

                def _create_user() -> None:
                    name = (name_input.value or "").strip()
                    email = (email_input.value or "").strip()
                    password = password_input.value or ""
                    if not name or not email or not password:
                        ui.notify("Name, email and password are required", type="warning")
                        return
                    if len(password) < 8:
                        ui.notify("Password must have at least 8 characters", type="warning")
                        return
                    if run_action(create_user, api, name, email, password, list(roles_input.value or []), success="User created"):
                        user_dialog.close()
                        render_list.refresh()

                btn_primary("Create", on_click=_create_user)

    def open_user_form() -> None:
        roles = load(list_roles, api, fallback="Could not load roles", default=[])
        roles_input.options = {r.name: r.name for r in roles}
        roles_input.update()
        name_input.value = ""
        email_input.value = ""
        password_input.value = ""
        roles_input.value = []
        user_dialog.open()

    # New or renamed role
    with ui.dialog() as role_dialog:
        with card(pad="p-5", classes=C_DIALOG_CARD + " w-[400px]"):
            role_title = ui.label("New role").classes(STYLE_SECTION_TITLE)
            role_name_input = ui.input("Role name", placeholder="ACCOUNTANT").props("outlined dense").classes(STYLE_INPUT)
            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                btn_secondary("Cancel", on_click=role_dialog.close)

                def _save_role() -> None:
                    role = state["role"]
                    if role is None:
                        ok = run_action(create_role, api, role_name_input.value, success="Role created")
                    else:
                        renamed = Role(id=role.id, name=role_name_input.value or "")
                        ok = run_action(update_role, api, renamed, success="Role renamed")
                    if ok:
                        role_dialog.close()
                        render_roles.refresh()
                        render_list.refresh()

                role_save_button = btn_primary("Create", on_click=_save_role)

    def open_role_form(role: Role | None = None) -> None:
        state["role"] = role
        role_title.text = "Rename role" if role else "New role"
        role_save_button.text = "Save" if role else "Create"
        role_name_input.value = role.name if role else ""
        role_dialog.open()

    # Role drawer
    with ui.dialog().props("position=right full-height") as role_drawer, card(classes="w-[420px] h-full"):
        drawer_body = ui.column().classes("w-full gap-3")

    def open_roles(user_id: int) -> None:
        state["user_id"] = user_id
        render_drawer()
        role_drawer.open()

    def render_drawer() -> None:
        user = load(get_user, api, state["user_id"], fallback="Could not load user")
        roles = load(list_roles, api, fallback="Could not load roles", default=[])
        drawer_body.clear()
        if user is None:
            return
        assigned = set(load(get_user_roles, api, user.id, fallback="Could not load user roles", default=[]))
        with drawer_body:
            ui.label(user.name or user.email).classes("text-lg font-semibold")
            ui.label(user.email).classes(STYLE_TEXT_MUTED)
            ui.separator()
            for role in roles:
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label(role.name).classes("text-sm font-medium")
                    if role.name in assigned:
                        btn_secondary("Remove", on_click=lambda _, r=role: _change(remove_role, r, "Role removed"))
                    else:
                        btn_primary("Assign", on_click=lambda _, r=role: _change(assign_role, r, "Role assigned"))

    def _change(action, role: Role, success: str) -> None:
        if run_action(action, api, state["user_id"], role.id, success=success):
            render_drawer()
            render_list.refresh()

    @ui.refreshable
    def render_list() -> None:
        users = load(list_users, api, fallback="Could not load users", default=[])
        with card(pad="p-0", classes="w-full overflow-hidden"):
            with ui.row().classes(C_TABLE_HEADER + " hidden sm:flex"):
                ui.label("Name").classes("w-48")
                ui.label("Email").classes("flex-1")
                ui.label("Roles").classes("w-64")
                ui.label("").classes("w-16")
            if not users:
                empty_row("No users")
            for user in users:
                with ui.row().classes(C_TABLE_ROW):
                    ui.label(user.name or "-").classes("w-48 font-medium")
                    ui.label(user.email).classes("flex-1 text-slate-600")
                    with ui.row().classes("w-64 gap-1"):
                        for role in user.roles:
                            ui.label(role.name).classes(severity_badge_class("low"))
                    with ui.row().classes("w-16 justify-end"):
                        ui.button(icon="manage_accounts", on_click=lambda _, x=user.id: open_roles(x)).props(
                            "flat dense"
                        ).classes("text-slate-500 hover:text-slate-900")

    @ui.refreshable
    def render_roles() -> None:
        roles = load(list_roles, api, fallback="Could not load roles", default=[])
        with card(classes="w-full"):
            ui.label("Roles").classes(STYLE_SECTION_TITLE)
            if not roles:
                ui.label("No roles defined").classes(STYLE_TEXT_MUTED)
            for role in roles:
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label(role.name).classes("text-sm")
                    with ui.row().classes("gap-1"):
                        ui.button(icon="edit", on_click=lambda _, r=role: open_role_form(r)).props("flat dense").classes(
                            "text-slate-500 hover:text-slate-900"
                        )
                        ui.button(icon="delete", on_click=lambda _, r=role: _delete_role(r)).props("flat dense").classes(
                            "text-rose-600 hover:text-rose-700"
                        )

    def _delete_role(role: Role) -> None:
        def _confirm() -> None:
            if run_action(delete_role, api, role.id, success="Role deleted"):
                render_roles.refresh()
                render_list.refresh()

        confirm_dialog(f"Delete role {role.name}?", _confirm).open()

    render_list()
    render_roles()
