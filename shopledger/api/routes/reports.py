import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status
from sqlalchemy import distinct, select
from sqlalchemy.orm import Session

from shopledger.api.deps import require_session
from shopledger.core.config import settings
from shopledger.db.database import get_db
from shopledger.models.inventory import BillItem, StockItem
from shopledger.schemas.reports import (
    ExpenseRowOut,
    LedgerRowOut,
    MonthlyAggregateOut,
    ProfitReportOut,
    ReportFilterOptionsOut,
    ReportFiltersIn,
    ReportSummaryOut,
)
from shopledger.services.exports import EXPORT_FORMATS, expense_export, ledger_export, monthly_export, render_export
from shopledger.services.filters import LedgerFilter
from shopledger.services.snapshot import ProfitReport, build_profit_report, load_snapshot, sync_profit_ledger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"], dependencies=[Depends(require_session)])

EXPORT_DATASETS = ("ledger", "expenses", "monthly")


def report_filters(
    from_date: str | None = Query(default=None),
    to_date: str | None = Query(default=None),
    description: str | None = Query(default=None),
    category: str | None = Query(default=None),
    gsm: str | None = Query(default=None),
) -> ReportFiltersIn:
    return ReportFiltersIn(
        from_date=from_date,
        to_date=to_date,
        description=description,
        category=category,
        gsm=gsm,
    )


def _run_report(
    db: Session,
    filters: ReportFiltersIn,
    background_tasks: BackgroundTasks,
) -> tuple[ProfitReport, list[str]]:
    snapshot = load_snapshot(db)
    report = build_profit_report(
        snapshot,
        LedgerFilter(
            from_date=filters.from_date,
            to_date=filters.to_date,
            description=filters.description,
            category=filters.category,
            gsm=filters.gsm,
        ),
        settings.report_tzinfo,
    )
    if settings.ledger_sync_enabled and report.unsynced:
        logger.debug("Scheduling profit ledger sync for %d rows", len(report.unsynced))
        background_tasks.add_task(sync_profit_ledger, db.get_bind(), report.unsynced, settings.report_tzinfo)
    return report, snapshot.warnings


@router.get("/profit", response_model=ProfitReportOut)
def profit_report(
    background_tasks: BackgroundTasks,
    filters: ReportFiltersIn = Depends(report_filters),
    db: Session = Depends(get_db),
):
    report, warnings = _run_report(db, filters, background_tasks)
    return ProfitReportOut(
        filters=filters,
        summary=ReportSummaryOut.from_summary(report.summary),
        monthly=[MonthlyAggregateOut.from_bucket(bucket) for bucket in report.monthly],
        ledger=[LedgerRowOut.from_row(row) for row in report.ledger],
        expenses=[ExpenseRowOut.from_record(record) for record in report.expenses],
        warnings=warnings,
    )


@router.get("/filters", response_model=ReportFilterOptionsOut)
def filter_options(db: Session = Depends(get_db)):
    descriptions = db.scalars(
        select(distinct(BillItem.description)).where(BillItem.description != "").order_by(BillItem.description)
    ).all()
    categories = db.scalars(
        select(distinct(StockItem.category)).where(StockItem.category.is_not(None)).order_by(StockItem.category)
    ).all()
    gsm_numbers = db.scalars(select(distinct(BillItem.gsm_number)).order_by(BillItem.gsm_number)).all()
    return ReportFilterOptionsOut(
        descriptions=list(descriptions),
        categories=[category for category in categories if category],
        gsm_numbers=list(gsm_numbers),
    )


@router.get("/profit/{dataset}/export/{fmt}")
def export_profit_report(
    dataset: str,
    fmt: str,
    background_tasks: BackgroundTasks,
    filters: ReportFiltersIn = Depends(report_filters),
    db: Session = Depends(get_db),
):
    if dataset not in EXPORT_DATASETS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown report dataset: {dataset}")
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unsupported export format: {fmt}")

    report, _ = _run_report(db, filters, background_tasks)
    tz = settings.report_tzinfo
    if dataset == "ledger":
        export = ledger_export(report.ledger, tz)
    elif dataset == "expenses":
        export = expense_export(report.expenses, tz)
    else:
        export = monthly_export(report.monthly)

    content, media_type, filename = render_export(export, fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
