import csv
import io
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

import pytest
from conftest import create_bill, create_stock

import shopledger.api.routes.reports as reports_routes
from shopledger.models import ProfitLedgerEntry


@pytest.fixture()
def seeded(client):
    create_stock(client, gsm_number="80", description="A", category="Paper", cost_price="6")
    create_stock(client, gsm_number="90", description="B", category="Board", cost_price="15")
    create_bill(client, [{"gsm_number": "80", "quantity": 2, "price": "10"}], bill_date="2024-01-05T10:00:00")
    create_bill(client, [{"gsm_number": "90", "quantity": 1, "price": "20"}], bill_date="2024-02-01T11:00:00")
    response = client.post(
        "/api/expenses",
        json={"item": "Tea", "amount": "3", "created_at": "2024-01-10T12:00:00"},
    )
    assert response.status_code == 201
    return client


def monthly_of(report):
    return [
        (m["month"], Decimal(m["profit"]), Decimal(m["expense"]), Decimal(m["net"]))
        for m in report["monthly"]
    ]


def test_profit_report(seeded):
    report = seeded.get("/api/reports/profit").json()

    assert monthly_of(report) == [
        ("2024-01", Decimal("8"), Decimal("3"), Decimal("5")),
        ("2024-02", Decimal("5"), Decimal("0"), Decimal("5")),
    ]
    assert Decimal(report["summary"]["total_profit"]) == Decimal("13")
    assert Decimal(report["summary"]["net_total"]) == Decimal("10")
    assert report["warnings"] == []


def test_from_date_filter(seeded):
    report = seeded.get("/api/reports/profit", params={"from_date": "2024-02-01"}).json()

    assert Decimal(report["summary"]["total_profit"]) == Decimal("5")
    assert Decimal(report["summary"]["total_expense"]) == Decimal("0")
    assert [row["gsm"] for row in report["ledger"]] == ["90"]
    assert report["filters"]["from_date"] == "2024-02-01"


def test_category_and_all_filters(seeded):
    board = seeded.get("/api/reports/profit", params={"category": "Board"}).json()
    everything = seeded.get("/api/reports/profit", params={"category": "All", "description": "All"}).json()

    assert [row["gsm"] for row in board["ledger"]] == ["90"]
    assert len(everything["ledger"]) == 2


def test_report_syncs_ledger_cache_once(seeded):
    seeded.get("/api/reports/profit")

    cached = seeded.get("/api/profit-ledger").json()
    assert len(cached) == 2
    assert sorted(Decimal(entry["profit"]) for entry in cached) == [Decimal("5"), Decimal("8")]

    again = seeded.get("/api/reports/profit").json()
    assert len(again["ledger"]) == 2
    assert Decimal(again["summary"]["total_profit"]) == Decimal("13")
    assert len(seeded.get("/api/profit-ledger").json()) == 2


def test_report_skips_sync_when_disabled(seeded, monkeypatch):
    monkeypatch.setattr(reports_routes, "settings", replace(reports_routes.settings, ledger_sync_enabled=False))

    seeded.get("/api/reports/profit")

    assert seeded.get("/api/profit-ledger").json() == []


def test_deleting_a_bill_drops_its_cached_rows(seeded):
    seeded.get("/api/reports/profit")
    bill_id = seeded.get("/api/billing").json()[0]["id"]

    seeded.delete(f"/api/billing/{bill_id}")

    report = seeded.get("/api/reports/profit").json()
    assert Decimal(report["summary"]["total_profit"]) == Decimal("8")


def test_filter_options(seeded):
    options = seeded.get("/api/reports/filters").json()

    assert options == {"descriptions": ["A", "B"], "categories": ["Board", "Paper"], "gsm_numbers": ["80", "90"]}


def test_export_monthly_csv(seeded):
    response = seeded.get("/api/reports/profit/monthly/export/csv")

    assert response.status_code == 200
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows == [
        ["Month", "Profit", "Expense", "Net"],
        ["Jan 2024", "8.00", "3.00", "5.00"],
        ["Feb 2024", "5.00", "0.00", "5.00"],
    ]


def test_export_filtered_ledger_xlsx(seeded):
    response = seeded.get("/api/reports/profit/ledger/export/xlsx", params={"gsm": "80"})

    assert response.status_code == 200
    assert 'filename="profit_ledger.xlsx"' in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"


def test_export_rejects_unknown_dataset_and_format(seeded):
    assert seeded.get("/api/reports/profit/bills/export/csv").status_code == 404
    assert seeded.get("/api/reports/profit/ledger/export/docx").status_code == 400


def test_bulk_insert_skips_known_rows(client):
    rows = [
        {"entry_date": "2024-01-05T00:00:00", "gsm_number": "80", "description": "A", "quantity": 2, "price": "10", "cost": "6"},
        {"entry_date": "2024-01-05T18:00:00", "gsm_number": "80", "description": "A", "quantity": 2, "price": "10.00", "cost": "6"},
        {"entry_date": "2024-02-01T00:00:00", "gsm_number": "90", "description": "B", "quantity": 1, "price": "20", "cost": "15"},
    ]

    first = client.post("/api/profit-ledger/bulk-insert", json={"rows": rows}).json()
    second = client.post("/api/profit-ledger/bulk-insert", json={"rows": rows}).json()

    assert first == {"received": 3, "inserted": 2, "skipped": 1}
    assert second == {"received": 3, "inserted": 0, "skipped": 3}
    assert len(client.get("/api/profit-ledger").json()) == 2


def test_bulk_insert_requires_entry_date(client):
    response = client.post(
        "/api/profit-ledger/bulk-insert",
        json={"rows": [{"gsm_number": "80", "description": "A", "quantity": 1, "price": "50", "cost": "10"}]},
    )

    assert response.status_code == 422


def test_undated_cached_row_keeps_totals_consistent(client, session_factory):
    create_bill(client, [{"gsm_number": "999", "description": "Cut", "quantity": 2, "price": "10", "cost_price": "6"}])
    with session_factory() as db:
        db.add(
            ProfitLedgerEntry(
                gsm_number="80",
                description="A",
                quantity=1,
                price=Decimal("50"),
                cost=Decimal("10"),
                synced_at=datetime(2024, 1, 1),
            )
        )
        db.commit()

    report = client.get("/api/reports/profit").json()

    ledger_total = sum((Decimal(row["profit"]) for row in report["ledger"]), Decimal("0"))
    monthly_total = sum((Decimal(m["profit"]) for m in report["monthly"]), Decimal("0"))
    assert ledger_total == monthly_total == Decimal(report["summary"]["total_profit"]) == Decimal("8")
