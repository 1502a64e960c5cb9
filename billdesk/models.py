from __future__ import annotations

from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .calculations import DocumentTotals, LineAmounts, calculate_line, calculate_totals


T = TypeVar("T")


class ApiModel(BaseModel):
    """Backend DTO: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # The backend sends null for unset values; those fields keep their defaults.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class InvoiceStatus(str, Enum):
    DRAFT = "DRAFT"
    ISSUED = "ISSUED"
    SENT = "SENT"
    PAID = "PAID"
    RETURNED = "RETURNED"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


class OrderStatus(str, Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    INVOICED = "INVOICED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PlanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    EXPIRED = "EXPIRED"


class PlanFrequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


OPEN_INVOICE_STATUSES = (
    InvoiceStatus.ISSUED,
    InvoiceStatus.SENT,
    InvoiceStatus.RETURNED,
    InvoiceStatus.OVERDUE,
)


class Page(ApiModel, Generic[T]):
    content: List[T] = Field(default_factory=list)
    page: int = 0
    size: int = 0
    total_elements: int = 0
    total_pages: int = 0
    last: bool = True


class LoginData(ApiModel):
    token: str = ""
    roles: List[str] = Field(default_factory=list)
    permissions: List[str] = Field(default_factory=list)


class Customer(ApiModel):
    id: Optional[int] = None
    name: str = ""
    street: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country_code: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    vat_id: Optional[str] = None
    tax_number: Optional[str] = None
    payment_terms_days: Optional[int] = None
    notes: Optional[str] = None
    order_count: Optional[int] = None


class LineItem(ApiModel):
    id: Optional[int] = None
    price_list_item_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[float] = None
    unit_price_net: Optional[float] = None
    vat_rate: Optional[float] = None
    discount_percent: Optional[float] = None

    @property
    def amounts(self) -> LineAmounts:
        return calculate_line(self)

    @property
    def line_net(self) -> float:
        return self.amounts.line_net

    @property
    def line_vat(self) -> float:
        return self.amounts.line_vat

    @property
    def line_gross(self) -> float:
        return self.amounts.line_gross


class Order(ApiModel):
    id: int
    order_number: Optional[str] = None
    customer_id: int
    customer_name: str = ""
    status: OrderStatus = OrderStatus.DRAFT
    currency: Optional[str] = None
    default_vat_rate: Optional[float] = None
    notes: Optional[str] = None
    total_net: Optional[float] = None
    total_vat: Optional[float] = None
    total_gross: Optional[float] = None
    items: List[LineItem] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    invoice_id: Optional[int] = None
    invoice_number: Optional[str] = None

    @property
    def totals(self) -> DocumentTotals:
        return calculate_totals(self.items)

    @property
    def invoiceable(self) -> bool:
        """Has items and no invoice yet, in a status that still allows invoicing."""
        if self.invoice_id is not None or not self.items:
            return False
        return self.status not in (OrderStatus.CANCELLED, OrderStatus.INVOICED)


class Invoice(ApiModel):
    id: int
    invoice_number: Optional[str] = None
    customer_id: int
    customer_name: str = ""
    status: InvoiceStatus = InvoiceStatus.DRAFT
    recurring: bool = False
    recurring_plan_id: Optional[int] = None
    reminder_for_invoice_id: Optional[int] = None
    currency: Optional[str] = None
    total_net: Optional[float] = None
    total_vat: Optional[float] = None
    total_gross: Optional[float] = None
    issued_at: Optional[str] = None
    sent_at: Optional[str] = None
    paid_at: Optional[str] = None
    returned_at: Optional[str] = None
    due_date: Optional[str] = None
    payment_terms_days: Optional[int] = None
    overdue: bool = False
    days_overdue: Optional[int] = None
    items: List[LineItem] = Field(default_factory=list)
    created_at: Optional[str] = None

    @property
    def totals(self) -> DocumentTotals:
        return calculate_totals(self.items)

    @property
    def is_overdue(self) -> bool:
        return bool(self.overdue) or self.status == InvoiceStatus.OVERDUE

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_INVOICE_STATUSES

    @property
    def label(self) -> str:
        return self.invoice_number or f"#{self.id}"


class PriceListItem(ApiModel):
    id: Optional[int] = None
    name: str = ""
    description: Optional[str] = None
    unit: Optional[str] = None
    price_net: Optional[float] = None
    vat_rate: Optional[float] = None
    active: bool = True


class RecurringPlan(ApiModel):
    id: int
    customer_id: int
    customer_name: str = ""
    currency: Optional[str] = None
    payment_terms_days: Optional[int] = None
    frequency: PlanFrequency = PlanFrequency.MONTHLY
    start_date: str = ""
    next_run_date: str = ""
    last_run_date: Optional[str] = None
    max_occurrences: int = 0
    generated_count: int = 0
    remaining_occurrences: Optional[int] = None
    active: bool = False
    status: Optional[PlanStatus] = None
    notes: Optional[str] = None
    items: List[LineItem] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def totals(self) -> DocumentTotals:
        return calculate_totals(self.items)


class RoleRef(ApiModel):
    id: int
    name: str


class User(ApiModel):
    id: int
    name: str = ""
    email: str = ""
    profile_picture_url: Optional[str] = None
    roles: List[RoleRef] = Field(default_factory=list)


class Role(ApiModel):
    id: Optional[int] = None
    name: str


class Settings(ApiModel):
    id: Optional[int] = None
    company_name: Optional[str] = None
    company_address: Optional[str] = None
    contact_info: Optional[str] = None
    logo_path: Optional[str] = None
    vat_id: Optional[str] = None
    tax_number: Optional[str] = None
    default_vat_rate: Optional[float] = None
    late_fee_amount: Optional[float] = None
    currency: Optional[str] = None
    invoice_number_format: Optional[str] = None
    quote_number_format: Optional[str] = None
    footer_text: Optional[str] = None
    bank_details: Optional[str] = None
    theme_mode: Optional[str] = None
