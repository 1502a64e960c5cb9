from __future__ import annotations

from typing import Iterable


ADMIN_ROLE = "ADMIN"


def build_access(roles: Iterable[str] | None, token: str | None) -> dict[str, bool]:
    role_set = {str(role).upper() for role in roles or []}
    return {
        "is_authenticated": bool(token),
        "can_see_admin": ADMIN_ROLE in role_set,
    }


def has_permission(permissions: Iterable[str] | None, required: str | Iterable[str]) -> bool:
    """True if ``required`` is granted; a list of permissions means any-of."""
    granted = set(permissions or [])
    if not granted:
        return False
    if isinstance(required, str):
        return required in granted
    return any(p in granted for p in required)
