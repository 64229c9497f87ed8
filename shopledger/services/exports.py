"""Tabular exports of the filtered dashboard views.

Each dataset is rendered once into a ``TabularExport`` (presentation strings,
money rounded to 2 places) and then serialized. CSV, XLSX, PDF and the print
page therefore always carry the same rows and cell values.
"""

import csv
import html
import io
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from shopledger.core.config import settings
from shopledger.services.aggregation import MonthlyAggregate
from shopledger.services.records import ExpenseRecord, LedgerRow, to_local

CENT = Decimal("0.01")


def money(value: Decimal | int | float | None) -> str:
    if value is None:
        value = Decimal("0")
    return str(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))


def format_timestamp(value: datetime | None, tz: tzinfo | None = None) -> str:
    if value is None:
        return ""
    return to_local(value, tz).strftime("%Y-%m-%d %H:%M")


def bill_number(bill_id: int) -> str:
    return f"INV-{bill_id:04d}"


@dataclass
class TabularExport:
    title: str
    filename: str
    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)
    preamble: list[str] = field(default_factory=list)
    footer: list[str] = field(default_factory=list)


def ledger_export(rows: Iterable[LedgerRow], tz: tzinfo | None = None) -> TabularExport:
    export = TabularExport(
        title="Profit Ledger",
        filename="profit_ledger",
        headers=["Date", "GSM", "Description", "Qty", "Price", "Cost", "Profit/Piece", "Total Profit"],
    )
    for row in rows:
        export.rows.append(
            [
                format_timestamp(row.date, tz),
                row.gsm,
                row.description,
                str(row.qty),
                money(row.price),
                money(row.cost),
                money(row.profit_per_piece),
                money(row.profit),
            ]
        )
    return export


def expense_export(records: Iterable[ExpenseRecord], tz: tzinfo | None = None) -> TabularExport:
    export = TabularExport(
        title="Expense Ledger",
        filename="expense_ledger",
        headers=["Date", "Item", "Qty", "Amount"],
    )
    for record in records:
        export.rows.append(
            [
                format_timestamp(record.created_at, tz),
                record.item,
                str(record.qty),
                money(record.amount),
            ]
        )
    return export


def monthly_export(monthly: Iterable[MonthlyAggregate]) -> TabularExport:
    export = TabularExport(
        title="Profit Report",
        filename="profit_report",
        headers=["Month", "Profit", "Expense", "Net"],
    )
    for bucket in monthly:
        export.rows.append([bucket.label, money(bucket.profit), money(bucket.expense), money(bucket.net)])
    return export


def bills_export(bills: Iterable[Any], tz: tzinfo | None = None) -> TabularExport:
    """One row per bill line; bills without lines still get a row."""
    export = TabularExport(
        title="Bills",
        filename="bills",
        headers=[
            "Bill No",
            "Customer",
            "Date",
            "Payment Mode",
            "Status",
            "GSM",
            "Description",
            "Qty",
            "Price",
            "Total",
        ],
    )
    for bill in bills:
        head = [
            bill_number(bill.id),
            bill.customer_name,
            format_timestamp(bill.bill_date, tz),
            bill.payment_mode or "-",
            bill.status,
        ]
        if not bill.items:
            export.rows.append(head + ["", "", "", "", money(bill.subtotal)])
            continue
        for item in bill.items:
            export.rows.append(
                head + [item.gsm_number, item.description, str(item.quantity), money(item.price), money(item.total)]
            )
    return export


def to_csv(export: TabularExport) -> str:
    sio = io.StringIO()
    writer = csv.writer(sio, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(export.headers)
    writer.writerows(export.rows)
    return sio.getvalue()


def to_xlsx(export: TabularExport) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = export.title[:31]
    ws.append(export.headers)
    header_fill = PatternFill(start_color="F3F3F3", end_color="F3F3F3", fill_type="solid")
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.fill = header_fill
    for row in export.rows:
        ws.append(row)

    for index, header in enumerate(export.headers, start=1):
        width = max([len(header)] + [len(row[index - 1]) for row in export.rows])
        ws.column_dimensions[get_column_letter(index)].width = min(60, width + 2)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def to_pdf(export: TabularExport, font_size: int | None = None) -> bytes:
    font_size = font_size or settings.pdf_font_size
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=26,
        rightMargin=26,
        topMargin=26,
        bottomMargin=26,
        title=export.title,
    )
    styles = getSampleStyleSheet()
    story = [Paragraph(html.escape(export.title), styles["Title"])]
    for line in export.preamble:
        story.append(Paragraph(html.escape(line), styles["Normal"]))
    story.append(Spacer(1, 8))

    table = Table([export.headers] + export.rows, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.35, colors.grey),
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f3f3f3")),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), font_size),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )
    story.append(table)
    for line in export.footer:
        story.append(Spacer(1, 6))
        story.append(Paragraph(html.escape(line), styles["Normal"]))

    doc.build(story)
    return buffer.getvalue()


def to_print_html(export: TabularExport) -> str:
    """Standalone page that opens the browser print dialog on load."""
    head = "".join(f"<th>{html.escape(h)}</th>" for h in export.headers)
    body = "".join(
        "<tr>" + "".join(f"<td>{html.escape(cell)}</td>" for cell in row) + "</tr>" for row in export.rows
    )
    preamble = "".join(f"<p>{html.escape(line)}</p>" for line in export.preamble)
    footer = "".join(f'<h3 style="text-align:right">{html.escape(line)}</h3>' for line in export.footer)
    title = html.escape(export.title)
    return (
        "<!DOCTYPE html><html><head>"
        f"<meta charset=\"utf-8\"><title>{title}</title>"
        "<style>"
        "body { font-family: Arial; padding: 20px; }"
        "table { border-collapse: collapse; width: 100%; }"
        "th, td { border: 1px solid #ddd; padding: 8px; }"
        "th { background: #f3f3f3; }"
        "</style></head><body>"
        f"<h2>{title}</h2>"
        f"{preamble}"
        f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"
        f"{footer}"
        "<script>window.print(); setTimeout(() => window.close(), 300);</script>"
        "</body></html>"
    )


@dataclass(frozen=True)
class ExportFormat:
    extension: str
    media_type: str
    render: Callable[[TabularExport], str | bytes]


EXPORT_FORMATS: dict[str, ExportFormat] = {
    "csv": ExportFormat("csv", "text/csv", to_csv),
    "xlsx": ExportFormat(
        "xlsx",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        to_xlsx,
    ),
    "pdf": ExportFormat("pdf", "application/pdf", to_pdf),
    "print": ExportFormat("html", "text/html", to_print_html),
}


def render_export(export: TabularExport, fmt: str) -> tuple[str | bytes, str, str]:
    """Return ``(content, media_type, filename)``; raises KeyError for unknown formats."""
    target = EXPORT_FORMATS[fmt]
    return target.render(export), target.media_type, f"{export.filename}.{target.extension}"
