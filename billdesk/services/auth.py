from __future__ import annotations

import logging

from ..integrations.api_client import ApiClient
from ..models import LoginData


logger = logging.getLogger(__name__)


def login(client: ApiClient, email: str, password: str) -> LoginData:
    email = (email or "").strip()
    if not email or not password:
        raise ValueError("Email and password are required")
    data = client.post("/api/auth/login", json={"email": email, "password": password})
    result = LoginData.model_validate(data or {})
    logger.info("auth.login email=%s roles=%s", email, ",".join(result.roles))
    return result
