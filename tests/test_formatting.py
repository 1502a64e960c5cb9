import sys
from datetime import date, datetime, timezone
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from billdesk.formatting import (  # noqa: E402
    customer_label,
    format_date,
    format_datetime,
    format_money,
    format_percent,
    parse_iso_date,
    parse_iso_datetime,
    price_item_label,
)


def test_format_money_english() -> None:
    assert format_money(1234.5, "EUR", "en") == "€1,234.50"
    assert format_money(-5, "USD", "en") == "-$5.00"
    assert format_money(10, "CHF", "en") == "CHF 10.00"
    assert format_money(None, "EUR", "en") == "€0.00"


def test_format_money_german() -> None:
    assert format_money(1234.5, "EUR", "de") == "1.234,50 €"
    assert format_money(-0.5, "eur", "de") == "-0,50 €"


def test_format_money_uses_configured_currency(monkeypatch) -> None:
    monkeypatch.setenv("BD_CURRENCY", "gbp")
    monkeypatch.setenv("BD_LOCALE", "en")
    assert format_money(3) == "£3.00"


def test_format_percent() -> None:
    assert format_percent(0.19) == "19%"
    assert format_percent(0.07) == "7%"
    assert format_percent(None) == ""


def test_parse_iso_date() -> None:
    assert parse_iso_date("2026-10-19") == date(2026, 10, 19)
    assert parse_iso_date("2026-10-19T08:30:00Z") == date(2026, 10, 19)
    assert parse_iso_date("not a date") is None
    assert parse_iso_date("") is None
    assert format_date(None) == "-"
    assert format_datetime("2026-10-19T08:30:00") == "2026-10-19 08:30"


def test_parse_iso_fractional_seconds() -> None:
    assert parse_iso_date("2026-10-19T08:30:00.123456789Z") == date(2026, 10, 19)
    assert parse_iso_date("2026-10-19T08:30:00.5") == date(2026, 10, 19)
    assert format_datetime("2026-10-19T08:30:00.12345") == "2026-10-19 08:30"
    assert parse_iso_datetime("2026-10-19T08:30:00.1234567") == datetime(2026, 10, 19, 8, 30, 0, 123456)


def test_parse_iso_datetime() -> None:
    assert parse_iso_datetime("2026-10-19") == datetime(2026, 10, 19)
    assert parse_iso_datetime("2026-10-19T08:30:00") == datetime(2026, 10, 19, 8, 30)
    expected = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parse_iso_datetime("2026-10-19T08:30:00Z") == expected
    assert parse_iso_datetime(date(2026, 10, 19)) == datetime(2026, 10, 19)
    assert parse_iso_datetime(None) is None
    assert parse_iso_datetime("soon") is None


def test_labels() -> None:
    assert customer_label("Acme", "Berlin") == "Acme - Berlin"
    assert customer_label("Acme", "") == "Acme"
    assert price_item_label("Hour", "") == "Hour"
    long_label = price_item_label("Hour", "x" * 100, max_desc_length=10)
    assert long_label == "Hour - xxxxxxx..."
