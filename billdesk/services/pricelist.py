from __future__ import annotations

from ..integrations.api_client import ApiClient
from ..models import Page, PriceListItem


def list_price_items_paged(
    client: ApiClient,
    *,
    q: str | None = None,
    only_active: bool | None = None,
    page: int = 0,
    size: int = 20,
    sort: str | None = None,
) -> Page[PriceListItem]:
    params = {
        # Backend needs a non-empty keyword.
        "q": (q or "").strip() or "%",
        "onlyActive": only_active,
        "page": page,
        "size": size,
        "sort": sort,
    }
    return Page[PriceListItem].model_validate(client.get("/api/pricelist/paged", params=params) or {})


def list_active_price_items(client: ApiClient, size: int = 500) -> list[PriceListItem]:
    return list_price_items_paged(client, only_active=True, size=size, sort="name,asc").content


def create_price_item(client: ApiClient, item: PriceListItem) -> PriceListItem:
    return PriceListItem.model_validate(client.post("/api/pricelist", json=item.to_payload()))


def update_price_item(client: ApiClient, item_id: int, item: PriceListItem) -> PriceListItem:
    return PriceListItem.model_validate(client.put(f"/api/pricelist/{int(item_id)}", json=item.to_payload()))


def get_price_item(client: ApiClient, item_id: int) -> PriceListItem:
    return PriceListItem.model_validate(client.get(f"/api/pricelist/{int(item_id)}"))


def disable_price_item(client: ApiClient, item_id: int) -> None:
    client.delete(f"/api/pricelist/{int(item_id)}")
