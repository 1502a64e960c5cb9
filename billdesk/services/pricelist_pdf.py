from __future__ import annotations

from datetime import date
from io import BytesIO
from typing import Any, Iterable

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from ..calculations import calculate_line
from ..formatting import format_money, format_percent


def _safe_str(x: Any) -> str:
    return (str(x) if x is not None else "").strip()


def _wrap_text(text: str, font: str, size: int, max_width: float) -> list[str]:
    text = _safe_str(text)
    if not text:
        return [""]
    words = text.replace("\n", " ").split()
    lines: list[str] = []
    cur = ""
    for w in words:
        cand = (cur + " " + w).strip() if cur else w
        if stringWidth(cand, font, size) <= max_width:
            cur = cand
        else:
            if cur:
                lines.append(cur)
            cur = w
    if cur:
        lines.append(cur)
    return lines or [""]


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def render_price_list_pdf(
    items: Iterable[Any],
    company_name: str | None = None,
    currency: str | None = None,
    locale: str | None = None,
) -> bytes:
    """Render the price list as an A4 table.

    ``items`` are :class:`~billdesk.models.PriceListItem` objects or plain dicts
    with ``name``, ``description``, ``unit``, ``price_net`` and ``vat_rate``.
    The gross column is the calculator's result for one unit.
    """
    rows = list(items)

    buf = BytesIO()
    c = Canvas(buf, pagesize=A4)
    w, h = A4

    margin_x = 18 * mm
    top = h - 18 * mm
    bottom = 18 * mm

    font = "Helvetica"
    font_b = "Helvetica-Bold"

    c.setTitle("Price list")
    c.setFont(font_b, 20)
    c.drawString(margin_x, top, "Price list")
    c.setFont(font, 9)
    c.drawRightString(w - margin_x, top + 2, date.today().isoformat())
    y = top - 16
    if _safe_str(company_name):
        c.setFont(font, 10)
        c.drawString(margin_x, y, _safe_str(company_name))
        y -= 18
    else:
        y -= 6

    table_x = margin_x
    table_w = w - 2 * margin_x
    col_desc = table_w * 0.46
    col_unit = table_w * 0.10
    col_net = table_w * 0.16
    col_vat = table_w * 0.10
    x_unit = table_x + col_desc
    x_net_r = x_unit + col_unit + col_net - 6
    x_vat_r = x_net_r + col_vat
    x_gross_r = table_x + table_w - 6

    row_h_min = 16
    line_h = 11

    def table_header(y0: float) -> float:
        c.setFont(font_b, 9)
        c.setLineWidth(0.5)
        c.rect(table_x, y0 - 14, table_w, 14, stroke=1, fill=0)
        c.drawString(table_x + 6, y0 - 11, "Item")
        c.drawString(x_unit + 6, y0 - 11, "Unit")
        c.drawRightString(x_net_r, y0 - 11, "Net")
        c.drawRightString(x_vat_r, y0 - 11, "VAT")
        c.drawRightString(x_gross_r, y0 - 11, "Gross")
        return y0 - 16

    y = table_header(y)

    if not rows:
        c.setFont(font, 9)
        c.drawString(table_x + 6, y - 12, "No active price list items.")

    for item in rows:
        name = _safe_str(_field(item, "name"))
        description = _safe_str(_field(item, "description"))
        c.setFont(font, 9)
        lines = _wrap_text(name, font_b, 9, col_desc - 12)
        desc_lines = _wrap_text(description, font, 8, col_desc - 12) if description else []
        needed_h = max(row_h_min, 8 + (len(lines) + len(desc_lines)) * line_h)

        if y - needed_h < bottom + 20:
            c.showPage()
            y = top
            y = table_header(y)

        c.rect(table_x, y - needed_h, table_w, needed_h, stroke=1, fill=0)

        ty = y - 12
        c.setFont(font_b, 9)
        for ln in lines:
            c.drawString(table_x + 6, ty, ln)
            ty -= line_h
        c.setFont(font, 8)
        for ln in desc_lines:
            c.drawString(table_x + 6, ty, ln)
            ty -= line_h

        price_net = _field(item, "price_net")
        vat_rate = _field(item, "vat_rate")
        amounts = calculate_line({"quantity": 1, "unit_price_net": price_net, "vat_rate": vat_rate})

        c.setFont(font, 9)
        c.drawString(x_unit + 6, y - 12, _safe_str(_field(item, "unit")))
        c.drawRightString(x_net_r, y - 12, format_money(price_net, currency, locale))
        c.drawRightString(x_vat_r, y - 12, format_percent(vat_rate))
        c.drawRightString(x_gross_r, y - 12, format_money(amounts.line_gross, currency, locale))

        y -= needed_h

    c.save()
    return buf.getvalue()
