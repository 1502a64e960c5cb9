import sys
from datetime import date
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from billdesk import metrics  # noqa: E402
from billdesk.models import Customer, Invoice, InvoiceStatus, LineItem, RecurringPlan  # noqa: E402

TODAY = date(2026, 10, 19)


def _invoice(id_, status, gross, customer_id=1, customer_name="Acme", **extra) -> Invoice:
    return Invoice(
        id=id_,
        customer_id=customer_id,
        customer_name=customer_name,
        status=status,
        total_gross=gross,
        total_net=round(gross / 1.19, 2),
        **extra,
    )


def _plan(id_, active=True, status=None, next_run="2026-10-19", max_occ=12, generated=0, items=None, customer_id=1):
    return RecurringPlan(
        id=id_,
        customer_id=customer_id,
        customer_name="Acme",
        active=active,
        status=status,
        next_run_date=next_run,
        max_occurrences=max_occ,
        generated_count=generated,
        items=[LineItem(quantity=1, unit_price_net=100, vat_rate=0.19)] if items is None else items,
    )


class FinanceTests(unittest.TestCase):
    def test_finance_summary(self) -> None:
        invoices = [
            _invoice(1, "PAID", 100),
            _invoice(2, "SENT", 50),
            _invoice(3, "OVERDUE", 30),
            _invoice(4, "DRAFT", 20),
            _invoice(5, "ISSUED", 5, reminder_for_invoice_id=3),
        ]
        summary = metrics.finance_summary(invoices)
        self.assertAlmostEqual(summary.total, 205)
        self.assertAlmostEqual(summary.paid, 100)
        self.assertAlmostEqual(summary.open, 85)
        self.assertAlmostEqual(summary.overdue, 30)
        self.assertAlmostEqual(summary.late_fees, 5)

    def test_monthly_revenue_window(self) -> None:
        invoices = [
            _invoice(1, "PAID", 119, issued_at="2026-10-02"),
            _invoice(2, "SENT", 238, issued_at="2026-10-15T10:00:00"),
            _invoice(3, "PAID", 50, issued_at="2025-01-10"),
        ]
        rows = metrics.monthly_revenue(invoices, months=3, today=TODAY)
        self.assertEqual([r.key for r in rows], ["2026-8", "2026-9", "2026-10"])
        october = rows[-1]
        self.assertAlmostEqual(october.gross, 357)
        self.assertAlmostEqual(october.paid, 119)
        self.assertAlmostEqual(october.outstanding, 238)
        self.assertAlmostEqual(october.outstanding_pct, 238 / 357 * 100)
        self.assertEqual(rows[0].outstanding_pct, 0.0)

    def test_monthly_revenue_crosses_year(self) -> None:
        rows = metrics.monthly_revenue([], months=3, today=date(2026, 1, 5))
        self.assertEqual([r.key for r in rows], ["2025-11", "2025-12", "2026-1"])

    def test_ar_aging_buckets(self) -> None:
        invoices = [
            _invoice(1, "OVERDUE", 10, due_date="2026-10-09"),
            _invoice(2, "SENT", 20, due_date="2026-08-01"),
            _invoice(3, "ISSUED", 30, due_date="2026-06-01"),
            _invoice(4, "PAID", 40, due_date="2026-06-01"),
            _invoice(5, "ISSUED", 50, due_date="2026-11-01"),
            _invoice(6, "ISSUED", 60),
        ]
        buckets = {b.label: b for b in metrics.ar_aging(invoices, today=TODAY)}
        self.assertEqual(buckets["0-30"].count, 1)
        self.assertEqual(buckets["31-60"].count, 0)
        self.assertEqual(buckets["61-90"].amount, 20)
        self.assertEqual(buckets["90+"].amount, 30)

    def test_cash_in_forecast(self) -> None:
        invoices = [
            _invoice(1, "ISSUED", 10, due_date="2026-10-19"),
            _invoice(2, "SENT", 20, due_date="2026-10-29"),
            _invoice(3, "SENT", 30, due_date="2026-12-01"),
            _invoice(4, "OVERDUE", 40, due_date="2026-10-01"),
            _invoice(5, "PAID", 50, due_date="2026-10-20"),
        ]
        weeks = metrics.cash_in_forecast(invoices, today=TODAY)
        self.assertEqual([w.count for w in weeks], [1, 1, 0, 0])
        self.assertEqual(weeks[1].amount, 20)


class HomeTests(unittest.TestCase):
    def test_home_kpis(self) -> None:
        invoices = [
            _invoice(1, "SENT", 100, due_date="2026-10-22"),
            _invoice(2, "OVERDUE", 50, due_date="2026-10-01"),
            _invoice(3, "PAID", 119, recurring=True, issued_at="2026-10-03"),
            _invoice(4, "PAID", 119, recurring=True, issued_at="2026-09-03"),
        ]
        plans = [
            _plan(1),
            _plan(2, active=False),
            _plan(3, max_occ=12, generated=11),
        ]
        kpis = metrics.home_kpis(invoices, plans, today=TODAY)
        self.assertEqual(kpis.open_count, 2)
        self.assertEqual(kpis.due_this_week, 1)
        self.assertEqual(kpis.overdue_count, 1)
        self.assertAlmostEqual(kpis.overdue_amount, 50)
        self.assertAlmostEqual(kpis.recurring_revenue, 119)
        self.assertEqual(kpis.active_plans, 2)
        self.assertEqual(kpis.paused_plans, 1)
        self.assertEqual(kpis.expiring_plans, 1)

    def test_funnel_counts(self) -> None:
        invoices = [_invoice(1, "PAID", 1), _invoice(2, "PAID", 1), _invoice(3, "SENT", 1), _invoice(4, "DRAFT", 1)]
        funnel = dict(metrics.invoice_funnel(invoices))
        self.assertEqual(funnel[InvoiceStatus.PAID], 2)
        self.assertEqual(funnel[InvoiceStatus.SENT], 1)
        self.assertNotIn(InvoiceStatus.DRAFT, funnel)

    def test_today_actions(self) -> None:
        invoices = [
            _invoice(1, "ISSUED", 1),
            _invoice(2, "ISSUED", 1, sent_at="2026-10-18T09:00:00"),
            _invoice(3, "RETURNED", 1),
            _invoice(4, "OVERDUE", 1),
        ]
        plans = [_plan(1), _plan(2, next_run="2026-10-20"), _plan(3, active=False)]
        actions = metrics.today_actions(invoices, plans, today=TODAY)
        self.assertEqual(actions.unsent_issued, 1)
        self.assertEqual(actions.returned, 1)
        self.assertEqual(actions.overdue, 1)
        self.assertEqual(actions.runs_today, 1)

    def test_collection_performance_rounds(self) -> None:
        invoices = [_invoice(1, "PAID", 1), _invoice(2, "PAID", 1), _invoice(3, "RETURNED", 1)]
        perf = metrics.collection_performance(invoices)
        self.assertEqual(perf.on_time_pct, 67)
        self.assertEqual(perf.returned_pct, 33)
        self.assertEqual(perf.overdue_pct, 0)
        self.assertEqual(perf.total, 3)

    def test_collection_performance_empty(self) -> None:
        perf = metrics.collection_performance([])
        self.assertEqual((perf.on_time_pct, perf.overdue_pct, perf.returned_pct, perf.total), (0, 0, 0, 0))

    def test_top_risks(self) -> None:
        invoices = [
            _invoice(1, "OVERDUE", 100, customer_name="Beta"),
            _invoice(2, "OVERDUE", 100, customer_name="Beta"),
            _invoice(3, "OVERDUE", 500, customer_name="Acme"),
            _invoice(4, "PAID", 10, customer_name="Gamma"),
        ]
        rows = metrics.top_risks(invoices, limit=2)
        self.assertEqual([r.customer for r in rows], ["Acme", "Beta"])
        self.assertEqual([r.risk for r in rows], ["Medium", "High"])
        self.assertEqual(metrics.top_risks(invoices)[-1].risk, "Low")

    def test_recent_activity_newest_first(self) -> None:
        invoices = [
            _invoice(1, "SENT", 119, invoice_number="INV-1", issued_at="2026-10-01", sent_at="2026-10-02T09:15:00"),
            _invoice(2, "PAID", 238, customer_name="", issued_at="2026-10-05T08:00:00", paid_at="2026-10-18T12:00:00"),
            _invoice(3, "RETURNED", 50, issued_at="2026-09-01", returned_at="2026-10-10T07:00:00.123456789"),
        ]
        plan = _plan(4)
        plan.created_at = "2026-10-03T10:00:00"
        plan.last_run_date = "2026-10-17"
        rows = metrics.recent_activity(invoices, [plan])
        self.assertEqual(
            [r.key for r in rows],
            [
                "inv-paid-2",
                "plan-run-4",
                "inv-returned-3",
                "inv-issued-2",
                "plan-created-4",
                "inv-sent-1",
                "inv-issued-1",
                "inv-issued-3",
            ],
        )
        by_key = {r.key: r for r in rows}
        self.assertEqual(by_key["inv-sent-1"].title, "Invoice sent")
        self.assertEqual(by_key["inv-sent-1"].detail, "INV-1 • Acme")
        self.assertEqual(by_key["inv-issued-2"].detail, "#2 • -")
        self.assertTrue(by_key["inv-paid-2"].detail.startswith("#2 • "))
        self.assertIn("238", by_key["inv-paid-2"].detail)
        self.assertEqual(by_key["plan-run-4"].title, "Recurring run generated")
        self.assertEqual(by_key["plan-created-4"].detail, "Plan #4 • Acme")

    def test_recent_activity_limit_and_missing_dates(self) -> None:
        invoices = [_invoice(i, "ISSUED", 1, issued_at=f"2026-10-{i:02d}") for i in range(1, 11)]
        invoices.append(_invoice(11, "DRAFT", 1))
        rows = metrics.recent_activity(invoices, [_plan(1)], limit=3)
        self.assertEqual([r.key for r in rows], ["inv-issued-10", "inv-issued-9", "inv-issued-8"])

    def test_home_alerts(self) -> None:
        invoices = [
            _invoice(1, "OVERDUE", 10, payment_terms_days=14),
            _invoice(2, "ISSUED", 10),
            _invoice(3, "PAID", 10, payment_terms_days=14),
        ]
        plans = [_plan(1, active=False), _plan(2, max_occ=3, generated=2), _plan(3, items=[])]
        alerts = metrics.home_alerts(invoices, plans)
        self.assertEqual(
            [(a.key, a.tone) for a in alerts],
            [
                ("overdue", "error"),
                ("paused", "warning"),
                ("expiring", "info"),
                ("payment-terms", "warning"),
                ("plan-items", "error"),
                ("unsent", "info"),
            ],
        )
        self.assertEqual(alerts[0].detail, "1 invoices need attention")
        self.assertEqual(alerts[-1].detail, "1 issued invoice(s) without email sent")

    def test_home_alerts_empty_when_all_clear(self) -> None:
        invoices = [_invoice(1, "PAID", 10, payment_terms_days=14)]
        self.assertEqual(metrics.home_alerts(invoices, [_plan(1)]), [])


class CustomerHealthTests(unittest.TestCase):
    def test_risk_levels_and_recurring_value(self) -> None:
        customers = [
            Customer(id=1, name="Acme"),
            Customer(id=2, name="Beta"),
            Customer(id=3, name="Gamma"),
        ]
        invoices = [
            _invoice(1, "OVERDUE", 100, customer_id=1),
            _invoice(2, "SENT", 50, customer_id=2),
            _invoice(3, "PAID", 70, customer_id=3, paid_at="2026-09-01"),
            _invoice(4, "PAID", 30, customer_id=3, paid_at="2026-10-01"),
        ]
        plans = [_plan(1, customer_id=3), _plan(2, customer_id=3)]
        rows = {r.customer: r for r in metrics.customer_health(customers, invoices, plans)}
        self.assertEqual(rows["Acme"].risk, "High")
        self.assertEqual(rows["Beta"].risk, "Medium")
        self.assertEqual(rows["Gamma"].risk, "Low")
        self.assertAlmostEqual(rows["Gamma"].revenue, 100)
        self.assertEqual(rows["Gamma"].last_payment, "2026-10-01")
        self.assertAlmostEqual(rows["Gamma"].recurring_value, 238)
        self.assertEqual(rows["Acme"].recurring_value, 0.0)

    def test_same_name_customers_stay_apart(self) -> None:
        customers = [Customer(id=1, name="Acme"), Customer(id=2, name="Acme")]
        invoices = [_invoice(1, "OVERDUE", 100, customer_id=1)]
        rows = metrics.customer_health(customers, invoices, [])
        self.assertEqual([r.overdue for r in rows], [100, 0])


class RecurringTests(unittest.TestCase):
    def test_plan_state_helpers(self) -> None:
        self.assertTrue(metrics.plan_is_active(_plan(1, active=False, status="ACTIVE")))
        self.assertTrue(metrics.plan_is_paused(_plan(1, active=False)))
        self.assertFalse(metrics.plan_is_paused(_plan(1, active=False, status="EXPIRED")))
        self.assertEqual(metrics.remaining_occurrences(_plan(1, max_occ=5, generated=2)), 3)
        plan = _plan(1)
        plan.remaining_occurrences = 7
        self.assertEqual(metrics.remaining_occurrences(plan), 7)

    def test_recurring_metrics(self) -> None:
        plans = [
            _plan(1),
            _plan(2, next_run="2026-10-24"),
            _plan(3, next_run="2026-11-30", items=[]),
            _plan(4, active=False, max_occ=3, generated=3),
        ]
        result = metrics.recurring_metrics(plans, today=TODAY)
        self.assertEqual(result.active, 3)
        self.assertEqual(result.paused, 1)
        self.assertEqual(result.due_today, 1)
        self.assertEqual(result.due_week, 2)
        self.assertEqual(result.missing_items, 1)
        self.assertEqual(result.expiring, 1)

    def test_runs_due_sorted(self) -> None:
        plans = [_plan(1, next_run="2026-10-25"), _plan(2, next_run="2026-10-20"), _plan(3, next_run="2026-11-20")]
        rows = metrics.runs_due(plans, today=TODAY)
        self.assertEqual([r.plan_id for r in rows], [2, 1])
        self.assertEqual(rows[0].plan, "Plan #2")
        self.assertAlmostEqual(rows[0].amount, 119)

    def test_expiring_plans_threshold(self) -> None:
        plans = [_plan(1, max_occ=10, generated=8), _plan(2, max_occ=10, generated=7)]
        self.assertEqual([r.plan_id for r in metrics.expiring_plans(plans)], [1])
        self.assertEqual(len(metrics.expiring_plans(plans, threshold=3)), 2)


class WorklistTests(unittest.TestCase):
    def test_items_and_counts(self) -> None:
        customers = [
            Customer(id=1, name="Acme", email="a@acme.test", payment_terms_days=14),
            Customer(id=2, name="Beta", payment_terms_days=14),
            Customer(id=3, name="Gamma", email="g@gamma.test"),
        ]
        invoices = [
            _invoice(1, "RETURNED", 10, invoice_number="R-1"),
            _invoice(2, "OVERDUE", 10),
            _invoice(3, "ISSUED", 10),
            _invoice(4, "PAID", 10),
        ]
        plans = [_plan(1, items=[]), _plan(2, max_occ=2, generated=1)]
        items = metrics.worklist(customers, invoices, plans)
        keys = [item.key for item in items]
        self.assertEqual(
            keys,
            [
                "returned-1",
                "overdue-2",
                "unsent-3",
                "customer-2",
                "customer-3",
                "plan-items-1",
                "plan-expiring-2",
            ],
        )
        by_key = {item.key: item for item in items}
        self.assertEqual(by_key["returned-1"].title, "R-1")
        self.assertEqual(by_key["overdue-2"].status_filter, "OVERDUE")
        self.assertEqual(by_key["customer-2"].detail, "Missing email")
        self.assertEqual(by_key["customer-3"].detail, "Missing payment terms")
        self.assertEqual(by_key["plan-items-1"].target_page, "recurring")

        counts = metrics.worklist_counts(items)
        self.assertEqual(counts.total, 7)
        self.assertEqual(counts.high, 2)
        self.assertEqual(counts.medium, 3)
        self.assertEqual(counts.low, 2)
        self.assertEqual(counts.by_type["Missing customer data"], 2)


if __name__ == "__main__":
    unittest.main()
