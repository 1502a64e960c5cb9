from __future__ import annotations

import logging
from typing import Iterator

from cachetools import TTLCache
from fastapi import APIRouter, Depends, HTTPException, Response

from .auth_guard import session_token
from .config import pdf_cache_ttl
from .errors import ApiError, AuthenticationExpired
from .integrations.api_client import ApiClient
from .services.invoices import download_invoice_pdf
from .services.pricelist import list_active_price_items
from .services.pricelist_pdf import render_price_list_pdf
from .services.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files")

_CACHE_MAXSIZE = 256
_invoice_pdf_cache: TTLCache | None = None


def _pdf_cache() -> TTLCache:
    global _invoice_pdf_cache
    if _invoice_pdf_cache is None:
        _invoice_pdf_cache = TTLCache(maxsize=_CACHE_MAXSIZE, ttl=pdf_cache_ttl())
    return _invoice_pdf_cache


def clear_pdf_cache() -> None:
    _pdf_cache().clear()


def get_api_client(token: str | None = Depends(session_token)) -> Iterator[ApiClient]:
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    client = ApiClient.from_config(token)
    try:
        yield client
    finally:
        client.close()


def _backend_failure(exc: ApiError) -> HTTPException:
    if isinstance(exc, AuthenticationExpired):
        return HTTPException(status_code=401, detail="Session expired")
    return HTTPException(status_code=502, detail=exc.message or "Backend request failed")


@router.get("/invoices/{invoice_id}/pdf")
def invoice_pdf(invoice_id: int, client: ApiClient = Depends(get_api_client)) -> Response:
    cached = _pdf_cache().get(invoice_id)
    if cached is not None:
        logger.debug("invoice_pdf.cache_hit invoice_id=%s", invoice_id)
        return Response(content=cached, media_type="application/pdf")

    try:
        pdf_bytes = download_invoice_pdf(client, invoice_id)
    except ApiError as exc:
        logger.warning("invoice_pdf.failed invoice_id=%s status=%s", invoice_id, exc.status_code)
        raise _backend_failure(exc) from exc

    _pdf_cache()[invoice_id] = pdf_bytes
    headers = {"Content-Disposition": f'inline; filename="invoice-{invoice_id}.pdf"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)


@router.get("/pricelist.pdf")
def price_list_pdf(client: ApiClient = Depends(get_api_client)) -> Response:
    try:
        items = list_active_price_items(client)
    except ApiError as exc:
        logger.warning("pricelist_pdf.failed status=%s", exc.status_code)
        raise _backend_failure(exc) from exc

    company_name = None
    currency = None
    try:
        settings = get_settings(client)
        company_name = settings.company_name
        currency = settings.currency
    except ApiError as exc:
        # Settings are admin-only.
        logger.info("pricelist_pdf.settings_unavailable status=%s", exc.status_code)

    pdf_bytes = render_price_list_pdf(items, company_name=company_name, currency=currency)
    headers = {"Content-Disposition": 'attachment; filename="price-list.pdf"'}
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)
