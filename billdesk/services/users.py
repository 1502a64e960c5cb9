from __future__ import annotations

from ..integrations.api_client import ApiClient
from ..models import User


def get_current_user(client: ApiClient) -> User:
    return User.model_validate(client.get("/api/users/me"))


def list_users(client: ApiClient) -> list[User]:
    return [User.model_validate(row) for row in client.get("/api/users/all") or []]


def get_user(client: ApiClient, user_id: int) -> User:
    return User.model_validate(client.get(f"/api/users/by-id/{int(user_id)}"))


def update_password(client: ApiClient, old_password: str, new_password: str) -> None:
    if not new_password or len(new_password) < 8:
        raise ValueError("New password must have at least 8 characters")
    client.put("/api/users/update-password", json={"oldPassword": old_password, "newPassword": new_password})


def create_user(
    client: ApiClient,
    name: str,
    email: str,
    password: str,
    roles: list[str] | None = None,
) -> User:
    payload = {"name": name.strip(), "email": email.strip(), "password": password}
    if roles:
        payload["roles"] = list(roles)
    return User.model_validate(client.post("/api/auth/register", json=payload))
