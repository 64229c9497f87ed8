"""Dashboard snapshot loading, the profit report pipeline and ledger cache sync."""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopledger.models.inventory import Bill, BillItem, Expense, ProfitLedgerEntry, StockItem
from shopledger.services.aggregation import MonthlyAggregate, ReportSummary, aggregate_monthly, summarize
from shopledger.services.filters import LedgerFilter, filter_expenses, filter_ledger
from shopledger.services.reconciliation import build_ledger, dedup_key, dedupe_ledger, ledger_row_from_cache
from shopledger.services.records import BillLineItem, ExpenseRecord, LedgerRow, StockRef

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DashboardSnapshot:
    bill_items: list[BillLineItem] = field(default_factory=list)
    stock: list[StockRef] = field(default_factory=list)
    expenses: list[ExpenseRecord] = field(default_factory=list)
    cached_ledger: list[LedgerRow] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ProfitReport:
    ledger: list[LedgerRow]
    expenses: list[ExpenseRecord]
    monthly: list[MonthlyAggregate]
    summary: ReportSummary
    unsynced: list[LedgerRow]


def _load(name: str, loader: Callable[[], list[T]], warnings: list[str]) -> list[T]:
    try:
        return loader()
    except SQLAlchemyError:
        logger.exception("Failed to load %s for profit dashboard", name)
        warnings.append(f"Failed to load {name}")
        return []


def load_snapshot(db: Session) -> DashboardSnapshot:
    """Load every collection independently; a failed one degrades to empty."""
    snapshot = DashboardSnapshot()

    def bill_items() -> list[BillLineItem]:
        rows = db.execute(
            select(
                BillItem.id,
                BillItem.bill_id,
                Bill.bill_date,
                BillItem.gsm_number,
                BillItem.description,
                BillItem.quantity,
                BillItem.price,
                BillItem.cost_price,
            )
            .join(Bill, Bill.id == BillItem.bill_id)
            .order_by(Bill.bill_date.asc(), BillItem.id.asc())
        ).mappings()
        return [BillLineItem.coerce(row) for row in rows]

    def stock() -> list[StockRef]:
        return [StockRef.coerce(item) for item in db.scalars(select(StockItem).order_by(StockItem.id.asc()))]

    def expenses() -> list[ExpenseRecord]:
        return [
            ExpenseRecord.coerce(expense)
            for expense in db.scalars(select(Expense).order_by(Expense.created_at.asc(), Expense.id.asc()))
        ]

    def cached_ledger() -> list[LedgerRow]:
        return [
            ledger_row_from_cache(entry)
            for entry in db.scalars(select(ProfitLedgerEntry).order_by(ProfitLedgerEntry.id.asc()))
        ]

    snapshot.bill_items = _load("bill items", bill_items, snapshot.warnings)
    snapshot.stock = _load("stock", stock, snapshot.warnings)
    snapshot.expenses = _load("expenses", expenses, snapshot.warnings)
    snapshot.cached_ledger = _load("profit ledger", cached_ledger, snapshot.warnings)
    if snapshot.warnings:
        db.rollback()
    return snapshot


def build_profit_report(
    snapshot: DashboardSnapshot,
    criteria: LedgerFilter,
    tz: tzinfo | None = None,
) -> ProfitReport:
    live = build_ledger(snapshot.bill_items, snapshot.stock)
    # Live rows go first so they win over their cached copies.
    ledger = dedupe_ledger(live + snapshot.cached_ledger, tz)

    cached_keys = {dedup_key(row, tz) for row in snapshot.cached_ledger}
    unsynced = [row for row in ledger if row.source == "bill" and dedup_key(row, tz) not in cached_keys]

    filtered_ledger = filter_ledger(ledger, criteria, snapshot.stock, tz)
    filtered_expenses = filter_expenses(snapshot.expenses, criteria, tz)
    monthly = aggregate_monthly(filtered_ledger, filtered_expenses, tz)
    return ProfitReport(
        ledger=filtered_ledger,
        expenses=filtered_expenses,
        monthly=monthly,
        summary=summarize(monthly, filtered_ledger, filtered_expenses),
        unsynced=unsynced,
    )


def ledger_entry_from_row(row: LedgerRow) -> ProfitLedgerEntry:
    return ProfitLedgerEntry(
        bill_item_id=row.id if row.source == "bill" else None,
        entry_date=row.date,
        gsm_number=row.gsm,
        description=row.description,
        quantity=row.qty,
        price=row.price,
        cost=row.cost,
        synced_at=datetime.now(),
    )


def insert_new_entries(db: Session, entries: Iterable[ProfitLedgerEntry], tz: tzinfo | None = None) -> int:
    """Add entries whose dedup key is not cached yet, nor earlier in ``entries``."""
    seen = {
        dedup_key(ledger_row_from_cache(entry), tz) for entry in db.scalars(select(ProfitLedgerEntry))
    }
    inserted = 0
    for entry in entries:
        key = dedup_key(ledger_row_from_cache(entry), tz)
        if key in seen:
            continue
        seen.add(key)
        db.add(entry)
        inserted += 1
    return inserted


def sync_profit_ledger(bind: Engine, rows: Sequence[LedgerRow], tz: tzinfo | None = None) -> int:
    """Write derived rows to the ledger cache. Fire-and-forget: errors are logged only.

    Keys are checked again here, since overlapping requests see the same
    uncached rows.
    """
    if not rows:
        return 0
    try:
        with Session(bind=bind) as db:
            inserted = insert_new_entries(db, [ledger_entry_from_row(row) for row in rows], tz)
            db.commit()
    except SQLAlchemyError:
        logger.exception("Profit ledger sync failed for %d rows", len(rows))
        return 0
    logger.info("Synced %d of %d rows to profit ledger", inserted, len(rows))
    return inserted
