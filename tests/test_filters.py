from datetime import datetime, timedelta, timezone
from decimal import Decimal

from shopledger.services.aggregation import aggregate_monthly, summarize
from shopledger.services.filters import ALL, LedgerFilter, filter_expenses, filter_ledger
from shopledger.services.records import ExpenseRecord, LedgerRow, StockRef


def ledger() -> list[LedgerRow]:
    return [
        LedgerRow(1, datetime(2024, 1, 5), "80", "A", 2, Decimal("10"), Decimal("6")),
        LedgerRow(3, datetime(2024, 2, 1), "90", "B", 1, Decimal("20"), Decimal("15")),
        LedgerRow(4, None, "80", "A", 1, Decimal("10"), Decimal("6")),
    ]


def stock() -> list[StockRef]:
    return [
        StockRef(1, "80", "Paper", Decimal("6")),
        StockRef(2, "90", "Board", Decimal("15")),
    ]


def test_from_date_excludes_january():
    rows = filter_ledger(ledger(), LedgerFilter(from_date="2024-02-01"))
    monthly = aggregate_monthly(rows, [])

    assert [row.id for row in rows] == [3]
    assert summarize(monthly, rows, []).total_profit == Decimal("5")


def test_date_bounds_are_inclusive_on_both_ends():
    rows = [LedgerRow(1, datetime(2024, 1, 31, 23, 30), "80", "A", 1, Decimal("1"), Decimal("0"))]

    assert filter_ledger(rows, LedgerFilter(from_date="2024-01-31", to_date="2024-01-31")) == rows


def test_aware_timestamps_compare_on_local_day():
    ist = timezone(timedelta(hours=5, minutes=30))
    rows = [LedgerRow(1, datetime(2024, 1, 31, 20, 0, tzinfo=timezone.utc), "80", "A", 1, Decimal("1"), Decimal("0"))]

    assert filter_ledger(rows, LedgerFilter(to_date="2024-01-31"), tz=ist) == []
    assert filter_ledger(rows, LedgerFilter(from_date="2024-02-01"), tz=ist) == rows


def test_undated_rows_never_reach_a_view():
    assert [row.id for row in filter_ledger(ledger(), LedgerFilter())] == [1, 3]
    assert 4 not in [row.id for row in filter_ledger(ledger(), LedgerFilter(to_date="2030-01-01"))]


def test_unparseable_bound_fails_closed():
    assert filter_ledger(ledger(), LedgerFilter(from_date="not a date")) == []


def test_all_sentinel_and_blank_mean_no_filter():
    assert len(filter_ledger(ledger(), LedgerFilter(description=ALL, category=ALL, gsm=""))) == 2


def test_description_and_gsm_are_exact_matches():
    assert [r.id for r in filter_ledger(ledger(), LedgerFilter(description="B"))] == [3]
    assert [r.id for r in filter_ledger(ledger(), LedgerFilter(gsm="80"))] == [1]
    assert filter_ledger(ledger(), LedgerFilter(gsm="8")) == []


def test_category_is_looked_up_through_stock():
    rows = filter_ledger(ledger(), LedgerFilter(category="Board"), stock())

    assert [row.id for row in rows] == [3]
    assert filter_ledger(ledger(), LedgerFilter(category="Board")) == []


def test_filter_is_idempotent_and_commutative():
    by_date = LedgerFilter(from_date="2024-01-01", to_date="2024-12-31")
    by_gsm = LedgerFilter(gsm="80")

    once = filter_ledger(ledger(), by_date)
    assert filter_ledger(once, by_date) == once
    assert filter_ledger(filter_ledger(ledger(), by_date), by_gsm) == filter_ledger(
        filter_ledger(ledger(), by_gsm), by_date
    )


def test_expenses_only_honour_the_date_range():
    records = [
        ExpenseRecord(1, "Tea", 1, Decimal("3"), datetime(2024, 1, 10)),
        ExpenseRecord(2, "Rent", 1, Decimal("100"), datetime(2024, 2, 1)),
    ]

    result = filter_expenses(records, LedgerFilter(from_date="2024-02-01", gsm="80", description="A"))

    assert [record.id for record in result] == [2]


def test_undated_expenses_are_dropped_without_bounds():
    records = [
        ExpenseRecord(1, "Tea", 1, Decimal("3"), datetime(2024, 1, 10)),
        ExpenseRecord(2, "Misc", 1, Decimal("9"), None),
    ]

    assert [record.id for record in filter_expenses(records, LedgerFilter())] == [1]
