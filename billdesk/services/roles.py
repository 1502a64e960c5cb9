from __future__ import annotations

from ..integrations.api_client import ApiClient
from ..models import Role


def _role_name(name: str | None) -> str:
    name = (name or "").strip().upper()
    if not name:
        raise ValueError("Role name is required")
    return name


def list_roles(client: ApiClient) -> list[Role]:
    return [Role.model_validate(row) for row in client.get("/api/roles") or []]


def create_role(client: ApiClient, name: str) -> Role:
    return Role.model_validate(client.post("/api/roles", json={"name": _role_name(name)}))


def update_role(client: ApiClient, role: Role) -> Role:
    payload = Role(id=role.id, name=_role_name(role.name)).to_payload()
    return Role.model_validate(client.put("/api/roles", json=payload))


def delete_role(client: ApiClient, role_id: int) -> None:
    client.delete(f"/api/roles/{int(role_id)}")


def get_user_roles(client: ApiClient, user_id: int) -> list[str]:
    """Names of the roles currently assigned to a user."""
    return [str(name) for name in client.get(f"/api/users/{int(user_id)}/roles") or []]


def assign_role(client: ApiClient, user_id: int, role_id: int) -> None:
    client.post(f"/api/users/{int(user_id)}/roles/{int(role_id)}")


def remove_role(client: ApiClient, user_id: int, role_id: int) -> None:
    client.delete(f"/api/users/{int(user_id)}/roles/{int(role_id)}")
