"""Dashboard aggregations over invoices, plans and customers.

All functions are pure: they take already-loaded backend records and a
reference date, and return plain dataclasses for the pages to render.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from .calculations import plan_amount
from .formatting import format_money, parse_iso_date, parse_iso_datetime
from .models import Customer, Invoice, InvoiceStatus, PlanStatus, RecurringPlan


FUNNEL_STATUSES = (
    InvoiceStatus.ISSUED,
    InvoiceStatus.SENT,
    InvoiceStatus.PAID,
    InvoiceStatus.RETURNED,
    InvoiceStatus.OVERDUE,
)


@dataclass
class FinanceSummary:
    total: float = 0.0
    paid: float = 0.0
    open: float = 0.0
    overdue: float = 0.0
    late_fees: float = 0.0


@dataclass
class MonthRow:
    key: str
    label: str
    net: float = 0.0
    gross: float = 0.0
    paid: float = 0.0
    outstanding: float = 0.0

    @property
    def outstanding_pct(self) -> float:
        if not self.gross:
            return 0.0
        return min(100.0, self.outstanding / self.gross * 100)


@dataclass
class Bucket:
    label: str
    low: int
    high: float
    count: int = 0
    amount: float = 0.0

    def accepts(self, days: int) -> bool:
        return self.low <= days <= self.high


@dataclass
class HomeKpis:
    open_count: int = 0
    due_this_week: int = 0
    overdue_amount: float = 0.0
    overdue_count: int = 0
    recurring_revenue: float = 0.0
    active_plans: int = 0
    paused_plans: int = 0
    expiring_plans: int = 0


@dataclass
class TodayActions:
    unsent_issued: int = 0
    overdue: int = 0
    returned: int = 0
    runs_today: int = 0


@dataclass
class CollectionPerformance:
    on_time_pct: int = 0
    overdue_pct: int = 0
    returned_pct: int = 0
    total: int = 0


@dataclass
class RiskRow:
    customer: str
    revenue: float = 0.0
    open: int = 0
    overdue_count: int = 0
    overdue_amount: float = 0.0
    risk: str = "Low"


@dataclass
class CustomerHealthRow:
    customer_id: int | None
    customer: str
    revenue: float = 0.0
    outstanding: float = 0.0
    overdue: float = 0.0
    last_payment: str | None = None
    recurring_value: float = 0.0
    risk: str = "Low"


@dataclass
class RecurringMetrics:
    active: int = 0
    paused: int = 0
    expiring: int = 0
    missing_items: int = 0
    due_today: int = 0
    due_week: int = 0


@dataclass
class PlanRow:
    plan_id: int
    plan: str
    customer: str
    next_run: str
    remaining: int
    amount: float


@dataclass
class ActivityRow:
    key: str
    when: datetime
    title: str
    detail: str


@dataclass
class Alert:
    key: str
    title: str
    detail: str
    tone: str


@dataclass
class WorkItem:
    key: str
    type: str
    title: str
    detail: str
    severity: str
    action_label: str
    target_page: str
    status_filter: str | None = None


@dataclass
class WorklistCounts:
    total: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    by_type: dict[str, int] = field(default_factory=dict)


def _today(today: date | None) -> date:
    return today or date.today()


def _gross(invoice: Invoice) -> float:
    return float(invoice.total_gross or 0)


def _invoice_date(invoice: Invoice) -> date | None:
    return parse_iso_date(invoice.issued_at or invoice.created_at)


def _round_pct(part: int, total: int) -> int:
    return int(math.floor(part / total * 100 + 0.5))


def plan_is_active(plan: RecurringPlan) -> bool:
    return plan.status == PlanStatus.ACTIVE or bool(plan.active)


def plan_is_paused(plan: RecurringPlan) -> bool:
    return plan.status == PlanStatus.PAUSED or (not plan.active and plan.status != PlanStatus.EXPIRED)


def remaining_occurrences(plan: RecurringPlan) -> int:
    if plan.remaining_occurrences is not None:
        return int(plan.remaining_occurrences)
    return int(plan.max_occurrences or 0) - int(plan.generated_count or 0)


def _is_expiring(plan: RecurringPlan, threshold: int = 1) -> bool:
    return 0 <= remaining_occurrences(plan) <= threshold


def finance_summary(invoices: Iterable[Invoice]) -> FinanceSummary:
    summary = FinanceSummary()
    for inv in invoices:
        gross = _gross(inv)
        summary.total += gross
        if inv.status == InvoiceStatus.PAID:
            summary.paid += gross
        if inv.is_open:
            summary.open += gross
        if inv.is_overdue:
            summary.overdue += gross
        if inv.reminder_for_invoice_id:
            summary.late_fees += gross
    return summary


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def monthly_revenue(invoices: Sequence[Invoice], months: int = 12, today: date | None = None) -> list[MonthRow]:
    ref = _today(today)
    rows: list[MonthRow] = []
    by_key: dict[tuple[int, int], MonthRow] = {}
    for offset in range(-(months - 1), 1):
        year, month = _shift_month(ref.year, ref.month, offset)
        row = MonthRow(key=f"{year}-{month}", label=date(year, month, 1).strftime("%b %Y"))
        rows.append(row)
        by_key[(year, month)] = row

    for inv in invoices:
        issued = _invoice_date(inv)
        if issued is None:
            continue
        row = by_key.get((issued.year, issued.month))
        if row is None:
            continue
        row.net += float(inv.total_net or 0)
        row.gross += _gross(inv)
        if inv.status == InvoiceStatus.PAID:
            row.paid += _gross(inv)
        else:
            row.outstanding += _gross(inv)
    return rows


def ar_aging(invoices: Iterable[Invoice], today: date | None = None) -> list[Bucket]:
    """Open invoices by days past their due date. Not yet due is skipped."""
    ref = _today(today)
    buckets = [
        Bucket("0-30", 1, 30),
        Bucket("31-60", 31, 60),
        Bucket("61-90", 61, 90),
        Bucket("90+", 91, math.inf),
    ]
    for inv in invoices:
        if not inv.is_open:
            continue
        due = parse_iso_date(inv.due_date)
        if due is None:
            continue
        days = (ref - due).days
        if days <= 0:
            continue
        bucket = next((b for b in buckets if b.accepts(days)), None)
        if bucket:
            bucket.count += 1
            bucket.amount += _gross(inv)
    return buckets


def cash_in_forecast(invoices: Iterable[Invoice], today: date | None = None) -> list[Bucket]:
    """Open invoices by days until they fall due, over the next 30 days."""
    ref = _today(today)
    weeks = [
        Bucket("0-7 days", 0, 7),
        Bucket("8-14 days", 8, 14),
        Bucket("15-21 days", 15, 21),
        Bucket("22-30 days", 22, 30),
    ]
    for inv in invoices:
        if not inv.is_open:
            continue
        due = parse_iso_date(inv.due_date)
        if due is None:
            continue
        diff = (due - ref).days
        bucket = next((w for w in weeks if w.accepts(diff)), None)
        if bucket:
            bucket.count += 1
            bucket.amount += _gross(inv)
    return weeks


def home_kpis(
    invoices: Sequence[Invoice],
    plans: Sequence[RecurringPlan],
    today: date | None = None,
) -> HomeKpis:
    ref = _today(today)
    in_7_days = ref + timedelta(days=7)
    kpis = HomeKpis()

    for inv in invoices:
        if inv.is_open:
            kpis.open_count += 1
            due = parse_iso_date(inv.due_date)
            if due is not None and ref <= due <= in_7_days:
                kpis.due_this_week += 1
        if inv.is_overdue:
            kpis.overdue_count += 1
            kpis.overdue_amount += _gross(inv)
        if inv.recurring:
            issued = _invoice_date(inv)
            if issued is not None and (issued.year, issued.month) == (ref.year, ref.month):
                kpis.recurring_revenue += _gross(inv)

    kpis.active_plans = sum(1 for p in plans if plan_is_active(p))
    kpis.paused_plans = sum(1 for p in plans if plan_is_paused(p))
    kpis.expiring_plans = sum(1 for p in plans if _is_expiring(p))
    return kpis


def invoice_funnel(invoices: Sequence[Invoice]) -> list[tuple[InvoiceStatus, int]]:
    return [(status, sum(1 for inv in invoices if inv.status == status)) for status in FUNNEL_STATUSES]


def today_actions(
    invoices: Sequence[Invoice],
    plans: Sequence[RecurringPlan],
    today: date | None = None,
) -> TodayActions:
    ref = _today(today)
    return TodayActions(
        unsent_issued=sum(1 for inv in invoices if inv.status == InvoiceStatus.ISSUED and not inv.sent_at),
        overdue=sum(1 for inv in invoices if inv.is_overdue),
        returned=sum(1 for inv in invoices if inv.status == InvoiceStatus.RETURNED),
        runs_today=sum(
            1 for p in plans if plan_is_active(p) and parse_iso_date(p.next_run_date) == ref
        ),
    )


def collection_performance(invoices: Sequence[Invoice]) -> CollectionPerformance:
    count = len(invoices)
    total = count or 1
    paid = sum(1 for inv in invoices if inv.status == InvoiceStatus.PAID)
    overdue = sum(1 for inv in invoices if inv.is_overdue)
    returned = sum(1 for inv in invoices if inv.status == InvoiceStatus.RETURNED)
    return CollectionPerformance(
        on_time_pct=_round_pct(paid, total),
        overdue_pct=_round_pct(overdue, total),
        returned_pct=_round_pct(returned, total),
        total=count,
    )


def top_risks(invoices: Iterable[Invoice], limit: int = 5) -> list[RiskRow]:
    rows: dict[str, RiskRow] = {}
    for inv in invoices:
        name = inv.customer_name or "Unknown"
        row = rows.setdefault(name, RiskRow(customer=name))
        row.revenue += _gross(inv)
        if inv.is_open:
            row.open += 1
        if inv.is_overdue:
            row.overdue_count += 1
            row.overdue_amount += _gross(inv)

    for row in rows.values():
        if row.overdue_count == 0:
            row.risk = "Low"
        elif row.overdue_count == 1:
            row.risk = "Medium"
        else:
            row.risk = "High"
    return sorted(rows.values(), key=lambda r: r.revenue, reverse=True)[:limit]


def customer_health(
    customers: Iterable[Customer],
    invoices: Sequence[Invoice],
    plans: Iterable[RecurringPlan],
) -> list[CustomerHealthRow]:
    recurring_by_customer: dict[int, float] = {}
    for plan in plans:
        recurring_by_customer[plan.customer_id] = recurring_by_customer.get(plan.customer_id, 0.0) + plan_amount(plan)

    rows: list[CustomerHealthRow] = []
    for customer in customers:
        own = [inv for inv in invoices if inv.customer_id == customer.id]
        revenue = sum(_gross(inv) for inv in own)
        outstanding = sum(_gross(inv) for inv in own if inv.is_open)
        overdue = sum(_gross(inv) for inv in own if inv.is_overdue)
        payments = sorted(inv.paid_at for inv in own if inv.paid_at)

        if overdue > 0:
            risk = "High" if overdue > outstanding * 0.5 else "Medium"
        elif outstanding > 0:
            risk = "Medium"
        else:
            risk = "Low"

        rows.append(
            CustomerHealthRow(
                customer_id=customer.id,
                customer=customer.name,
                revenue=revenue,
                outstanding=outstanding,
                overdue=overdue,
                last_payment=payments[-1] if payments else None,
                recurring_value=recurring_by_customer.get(customer.id, 0.0) if customer.id is not None else 0.0,
                risk=risk,
            )
        )
    return rows


def recurring_metrics(plans: Sequence[RecurringPlan], today: date | None = None) -> RecurringMetrics:
    ref = _today(today)
    week = ref + timedelta(days=7)
    metrics = RecurringMetrics()
    for plan in plans:
        active = plan_is_active(plan)
        if active:
            metrics.active += 1
            next_run = parse_iso_date(plan.next_run_date)
            if next_run == ref:
                metrics.due_today += 1
            if next_run is not None and ref <= next_run <= week:
                metrics.due_week += 1
        if plan_is_paused(plan):
            metrics.paused += 1
        if _is_expiring(plan):
            metrics.expiring += 1
        if not plan.items:
            metrics.missing_items += 1
    return metrics


def _plan_row(plan: RecurringPlan) -> PlanRow:
    return PlanRow(
        plan_id=plan.id,
        plan=f"Plan #{plan.id}",
        customer=plan.customer_name,
        next_run=plan.next_run_date or "",
        remaining=remaining_occurrences(plan),
        amount=plan_amount(plan),
    )


def runs_due(plans: Iterable[RecurringPlan], today: date | None = None, days: int = 7) -> list[PlanRow]:
    ref = _today(today)
    until = ref + timedelta(days=days)
    rows = []
    for plan in plans:
        if not plan_is_active(plan):
            continue
        next_run = parse_iso_date(plan.next_run_date)
        if next_run is not None and ref <= next_run <= until:
            rows.append(_plan_row(plan))
    return sorted(rows, key=lambda r: r.next_run)


def expiring_plans(plans: Iterable[RecurringPlan], threshold: int = 2) -> list[PlanRow]:
    return [_plan_row(plan) for plan in plans if _is_expiring(plan, threshold)]


def recent_activity(
    invoices: Iterable[Invoice],
    plans: Iterable[RecurringPlan],
    limit: int = 8,
) -> list[ActivityRow]:
    """Newest invoice and plan events first."""
    rows: list[ActivityRow] = []
    for inv in invoices:
        customer = inv.customer_name or "-"
        events = (
            ("issued", "Invoice issued", inv.issued_at or inv.created_at, customer),
            ("sent", "Invoice sent", inv.sent_at, customer),
            ("paid", "Invoice paid", inv.paid_at, format_money(_gross(inv), inv.currency)),
            ("returned", "Invoice returned", inv.returned_at, customer),
        )
        for kind, title, stamp, suffix in events:
            when = parse_iso_datetime(stamp)
            if when is not None:
                rows.append(ActivityRow(f"inv-{kind}-{inv.id}", when, title, f"{inv.label} • {suffix}"))

    for plan in plans:
        detail = f"Plan #{plan.id} • {plan.customer_name or '-'}"
        created = parse_iso_datetime(plan.created_at)
        if created is not None:
            rows.append(ActivityRow(f"plan-created-{plan.id}", created, "Recurring plan created", detail))
        last_run = parse_iso_datetime(plan.last_run_date)
        if last_run is not None:
            rows.append(ActivityRow(f"plan-run-{plan.id}", last_run, "Recurring run generated", detail))

    rows.sort(key=lambda r: r.when, reverse=True)
    return rows[:limit]


def home_alerts(invoices: Sequence[Invoice], plans: Sequence[RecurringPlan]) -> list[Alert]:
    checks = (
        (
            "overdue", "Overdue invoices", "error",
            sum(1 for inv in invoices if inv.is_overdue), "{} invoices need attention",
        ),
        (
            "paused", "Plans paused", "warning",
            sum(1 for p in plans if plan_is_paused(p)), "{} recurring plans are paused",
        ),
        (
            "expiring", "Plans expiring soon", "info",
            sum(1 for p in plans if _is_expiring(p)), "{} plan(s) have 1 run left",
        ),
        (
            "payment-terms", "Missing payment terms", "warning",
            sum(1 for inv in invoices if inv.payment_terms_days is None), "{} invoice(s) without payment terms",
        ),
        (
            "plan-items", "Plans without items", "error",
            sum(1 for p in plans if not p.items), "{} plan(s) have no items",
        ),
        (
            "unsent", "Invoices not sent", "info",
            sum(1 for inv in invoices if inv.status == InvoiceStatus.ISSUED and not inv.sent_at),
            "{} issued invoice(s) without email sent",
        ),
    )
    return [Alert(key, title, template.format(count), tone) for key, title, tone, count, template in checks if count]


def worklist(
    customers: Iterable[Customer],
    invoices: Sequence[Invoice],
    plans: Sequence[RecurringPlan],
) -> list[WorkItem]:
    items: list[WorkItem] = []

    for inv in invoices:
        if inv.status == InvoiceStatus.RETURNED:
            items.append(WorkItem(
                f"returned-{inv.id}", "Returned invoice", inv.label, inv.customer_name,
                "medium", "Review", "invoices", InvoiceStatus.RETURNED.value,
            ))
    for inv in invoices:
        if inv.is_overdue:
            items.append(WorkItem(
                f"overdue-{inv.id}", "Overdue invoice", inv.label, inv.customer_name,
                "high", "Send reminder", "invoices", InvoiceStatus.OVERDUE.value,
            ))
    for inv in invoices:
        if inv.status == InvoiceStatus.ISSUED and not inv.sent_at:
            items.append(WorkItem(
                f"unsent-{inv.id}", "Unsent invoice", inv.label, inv.customer_name,
                "medium", "Send", "invoices", InvoiceStatus.ISSUED.value,
            ))
    for customer in customers:
        if not customer.email or customer.payment_terms_days is None:
            detail = "Missing email" if not customer.email else "Missing payment terms"
            items.append(WorkItem(
                f"customer-{customer.id}", "Missing customer data", customer.name, detail,
                "low", "Fix", "customers",
            ))
    for plan in plans:
        if not plan.items:
            items.append(WorkItem(
                f"plan-items-{plan.id}", "Plan has no items", f"Plan #{plan.id}", plan.customer_name,
                "high", "Review", "recurring",
            ))
    for plan in plans:
        if _is_expiring(plan):
            items.append(WorkItem(
                f"plan-expiring-{plan.id}", "Plan expiring", f"Plan #{plan.id}",
                f"{plan.customer_name} • {plan.next_run_date}", "medium", "Renew", "recurring",
            ))
    return items


def worklist_counts(items: Iterable[WorkItem]) -> WorklistCounts:
    counts = WorklistCounts()
    for item in items:
        counts.total += 1
        if item.severity == "high":
            counts.high += 1
        elif item.severity == "medium":
            counts.medium += 1
        else:
            counts.low += 1
        counts.by_type[item.type] = counts.by_type.get(item.type, 0) + 1
    return counts
