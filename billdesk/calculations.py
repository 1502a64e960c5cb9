from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping


_QUANTITY_KEYS = ("quantity", "qty")
_PRICE_KEYS = ("unit_price_net", "unitPriceNet", "price_net", "priceNet")
_DISCOUNT_KEYS = ("discount_percent", "discountPercent")
_VAT_KEYS = ("vat_rate", "vatRate")


@dataclass(frozen=True)
class LineAmounts:
    line_net: float
    line_vat: float
    line_gross: float


@dataclass(frozen=True)
class DocumentTotals:
    net: float = 0.0
    vat: float = 0.0
    gross: float = 0.0


def _get(item: Any, keys: tuple[str, ...]) -> Any:
    if item is None:
        return None
    if isinstance(item, Mapping):
        for key in keys:
            if item.get(key) is not None:
                return item[key]
        return None
    for key in keys:
        value = getattr(item, key, None)
        if value is not None:
            return value
    return None


def _number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def _clamp_discount(value: float) -> float:
    return min(100.0, max(0.0, value))


def calculate_line(item: Any) -> LineAmounts:
    """Net, VAT and gross of one line item.

    Accepts a mapping (camelCase or snake_case keys) or any object with the
    matching attributes. Missing discount or VAT rate count as 0. Inputs are
    not validated; forms do that with :func:`validate_line_item`.
    """
    quantity = _number(_get(item, _QUANTITY_KEYS))
    unit_price = _number(_get(item, _PRICE_KEYS))
    discount = _clamp_discount(_number(_get(item, _DISCOUNT_KEYS)))
    vat_rate = _number(_get(item, _VAT_KEYS))

    line_net = quantity * unit_price * (1 - discount / 100)
    line_vat = line_net * vat_rate
    return LineAmounts(line_net=line_net, line_vat=line_vat, line_gross=line_net + line_vat)


def calculate_lines(items: Iterable[Any] | None) -> list[LineAmounts]:
    return [calculate_line(item) for item in items or []]


def sum_lines(lines: Iterable[LineAmounts]) -> DocumentTotals:
    net = 0.0
    vat = 0.0
    gross = 0.0
    for line in lines:
        net += line.line_net
        vat += line.line_vat
        gross += line.line_gross
    return DocumentTotals(net=net, vat=vat, gross=gross)


def calculate_totals(items: Iterable[Any] | None) -> DocumentTotals:
    return sum_lines(calculate_lines(items))


def summarize(items: Iterable[Any] | None) -> tuple[list[LineAmounts], DocumentTotals]:
    lines = calculate_lines(items)
    return lines, sum_lines(lines)


def plan_amount(plan: Any) -> float:
    """Gross amount one run of a recurring plan bills."""
    if isinstance(plan, Mapping):
        items = plan.get("items")
    else:
        items = getattr(plan, "items", None)
    return calculate_totals(items).gross


def validate_line_item(item: Any) -> list[str]:
    errors: list[str] = []

    quantity = _get(item, _QUANTITY_KEYS)
    try:
        quantity_value = float(quantity) if quantity not in (None, "") else None
    except (TypeError, ValueError):
        quantity_value = None
    if quantity_value is None:
        errors.append("Quantity is required")
    elif quantity_value < 0:
        errors.append("Quantity must not be negative")

    price = _get(item, _PRICE_KEYS)
    try:
        if price not in (None, "") and float(price) < 0:
            errors.append("Unit net price must not be negative")
    except (TypeError, ValueError):
        errors.append("Unit net price must be a number")

    discount = _get(item, _DISCOUNT_KEYS)
    try:
        if discount not in (None, "") and not 0 <= float(discount) <= 100:
            errors.append("Discount must be between 0 and 100 %")
    except (TypeError, ValueError):
        errors.append("Discount must be a number")

    vat_rate = _get(item, _VAT_KEYS)
    try:
        if vat_rate not in (None, "") and not 0 <= float(vat_rate) <= 1:
            errors.append("VAT rate must be a fraction between 0 and 1 (0.19 for 19 %)")
    except (TypeError, ValueError):
        errors.append("VAT rate must be a number")

    return errors
