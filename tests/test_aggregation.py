from datetime import datetime
from decimal import Decimal

from shopledger.services.aggregation import aggregate_monthly, month_label, summarize
from shopledger.services.filters import LedgerFilter, filter_expenses, filter_ledger
from shopledger.services.reconciliation import dedupe_ledger
from shopledger.services.records import ExpenseRecord, LedgerRow


def scenario():
    ledger = dedupe_ledger(
        [
            LedgerRow(1, datetime(2024, 1, 5), "80", "A", 2, Decimal("10"), Decimal("6")),
            LedgerRow(2, datetime(2024, 1, 5), "80", "A", 2, Decimal("10"), Decimal("6")),
            LedgerRow(3, datetime(2024, 2, 1), "90", "B", 1, Decimal("20"), Decimal("15")),
        ]
    )
    expenses = [ExpenseRecord(1, "Tea", 1, Decimal("3"), datetime(2024, 1, 10))]
    return ledger, expenses


def test_monthly_buckets_for_scenario():
    ledger, expenses = scenario()

    monthly = aggregate_monthly(ledger, expenses)

    assert [(m.month, m.profit, m.expense, m.net) for m in monthly] == [
        ("2024-01", Decimal("8"), Decimal("3"), Decimal("5")),
        ("2024-02", Decimal("5"), Decimal("0"), Decimal("5")),
    ]
    assert monthly[0].label == "Jan 2024"


def test_buckets_are_sorted_by_month():
    ledger = [
        LedgerRow(1, datetime(2024, 3, 1), "80", "A", 1, Decimal("2"), Decimal("1")),
        LedgerRow(2, datetime(2023, 12, 31), "80", "A", 1, Decimal("2"), Decimal("1")),
    ]

    assert [m.month for m in aggregate_monthly(ledger, [])] == ["2023-12", "2024-03"]


def test_totals_match_monthly_series():
    ledger, expenses = scenario()
    monthly = aggregate_monthly(ledger, expenses)

    summary = summarize(monthly, ledger, expenses)

    assert summary.total_profit == sum((row.profit for row in ledger), Decimal("0"))
    assert summary.total_expense == sum((m.expense for m in monthly), Decimal("0"))
    assert summary.net_total == summary.total_profit - summary.total_expense == Decimal("10")
    assert summary.total_sales == Decimal("40")
    assert (summary.ledger_rows, summary.expense_rows) == (2, 1)


def test_monthly_totals_match_filtered_rows_for_every_filter():
    ledger, expenses = scenario()
    ledger = ledger + [LedgerRow(9, None, "80", "A", 1, Decimal("50"), Decimal("10"))]
    expenses = expenses + [ExpenseRecord(2, "Misc", 1, Decimal("9"), None)]

    for criteria in (
        LedgerFilter(),
        LedgerFilter(gsm="80"),
        LedgerFilter(from_date="2024-02-01"),
        LedgerFilter(to_date="2024-01-31", description="A"),
    ):
        rows = filter_ledger(ledger, criteria)
        records = filter_expenses(expenses, criteria)
        monthly = aggregate_monthly(rows, records)

        assert sum((m.profit for m in monthly), Decimal("0")) == sum((row.profit for row in rows), Decimal("0"))
        assert sum((m.expense for m in monthly), Decimal("0")) == sum((r.amount for r in records), Decimal("0"))


def test_month_label():
    assert month_label("2024-11") == "Nov 2024"
