from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from . import config


_CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "CHF": "CHF"}
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def format_money(value: Any, currency: str | None = None, locale: str | None = None) -> str:
    amount = float(value or 0)
    code = (currency or config.currency()).upper()
    symbol = _CURRENCY_SYMBOLS.get(code, code)
    loc = locale or config.locale()

    if loc == "de":
        text = f"{abs(amount):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
        return f"{'-' if amount < 0 else ''}{text} {symbol}"
    text = f"{abs(amount):,.2f}"
    if len(symbol) > 1:
        return f"{'-' if amount < 0 else ''}{symbol} {text}"
    return f"{'-' if amount < 0 else ''}{symbol}{text}"


def format_percent(rate: Any) -> str:
    """VAT rates travel as fractions: 0.19 -> '19%'."""
    if rate is None or rate == "":
        return ""
    return f"{round(float(rate) * 100)}%"


def _fromisoformat(text: str) -> datetime:
    # Backend timestamps may carry a "Z" suffix and up to nanosecond fractions.
    text = text.replace("Z", "+00:00")
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)
    return datetime.fromisoformat(text)


def parse_iso_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    if _DATE_ONLY.match(text):
        return date.fromisoformat(text)
    try:
        return _fromisoformat(text).date()
    except ValueError:
        return None


def parse_iso_datetime(value: Any) -> datetime | None:
    """Naive local datetime; a bare date maps to midnight."""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            if _DATE_ONLY.match(text):
                day = date.fromisoformat(text)
                return datetime(day.year, day.month, day.day)
            parsed = _fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_date(value: Any) -> str:
    parsed = parse_iso_date(value)
    return parsed.isoformat() if parsed else "-"


def format_datetime(value: Any) -> str:
    if not value:
        return "-"
    try:
        parsed = _fromisoformat(str(value))
    except ValueError:
        return str(value)
    return parsed.strftime("%Y-%m-%d %H:%M")


def customer_label(name: str | None = None, city: str | None = None) -> str:
    clean_name = (name or "").strip()
    clean_city = (city or "").strip()
    if clean_name and clean_city:
        return f"{clean_name} - {clean_city}"
    return clean_name or clean_city


def price_item_label(name: str | None = None, description: str | None = None, max_desc_length: int = 60) -> str:
    clean_name = (name or "").strip()
    clean_desc = (description or "").strip()
    if not clean_desc:
        return clean_name
    if len(clean_desc) > max_desc_length:
        clean_desc = f"{clean_desc[: max(0, max_desc_length - 3)]}..."
    if not clean_name:
        return clean_desc
    return f"{clean_name} - {clean_desc}"
