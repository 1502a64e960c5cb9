from __future__ import annotations

from ..integrations.api_client import ApiClient
from ..models import Settings


def get_settings(client: ApiClient) -> Settings:
    return Settings.model_validate(client.get("/api/settings") or {})


def update_settings(client: ApiClient, settings: Settings) -> Settings:
    return Settings.model_validate(client.put("/api/settings", json=settings.to_payload()) or {})
