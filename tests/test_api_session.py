from dataclasses import replace
from decimal import Decimal

from conftest import create_stock

import shopledger.api.deps as deps

S1 = {"X-Session-Id": "s1"}
S2 = {"X-Session-Id": "s2"}


def test_bill_draft_is_scoped_per_session(client):
    response = client.post(
        "/api/session/bill-draft",
        json={"gsm_number": "80", "quantity": 2, "price": "10"},
        headers=S1,
    )

    assert response.status_code == 200
    assert Decimal(response.json()["subtotal"]) == Decimal("20")
    assert len(client.get("/api/session/bill-draft", headers=S1).json()["items"]) == 1
    assert client.get("/api/session/bill-draft", headers=S2).json()["items"] == []


def test_session_id_can_come_from_cookie(client):
    client.cookies.set("session_id", "cookie-session")
    client.post("/api/session/bill-draft", json={"gsm_number": "80", "quantity": 1, "price": "5"})

    assert len(client.get("/api/session/bill-draft", headers={"X-Session-Id": "cookie-session"}).json()["items"]) == 1
    client.cookies.clear()


def test_remove_and_clear_draft_items(client):
    for gsm in ("80", "90"):
        client.post("/api/session/bill-draft", json={"gsm_number": gsm, "quantity": 1, "price": "5"}, headers=S1)

    remaining = client.delete("/api/session/bill-draft/0", headers=S1).json()
    assert [item["gsm_number"] for item in remaining["items"]] == ["90"]
    assert client.delete("/api/session/bill-draft/5", headers=S1).status_code == 404

    cleared = client.delete("/api/session/bill-draft", headers=S1).json()
    assert cleared["items"] == []
    assert Decimal(cleared["subtotal"]) == Decimal("0")


def test_confirm_creates_bill_and_clears_draft(client):
    item = create_stock(client, gsm_number="80", description="A", stock=5)
    client.post("/api/session/bill-draft", json={"gsm_number": "80", "quantity": 2, "price": "10"}, headers=S1)

    response = client.post("/api/session/bill-draft/confirm", json={"customer_name": "Ravi"}, headers=S1)

    assert response.status_code == 201
    assert response.json()["items"][0]["description"] == "A"
    assert client.get(f"/api/stock/{item['id']}").json()["stock"] == 3
    assert client.get("/api/session/bill-draft", headers=S1).json()["items"] == []


def test_confirm_keeps_draft_when_stock_is_short(client):
    create_stock(client, gsm_number="80", stock=1)
    client.post("/api/session/bill-draft", json={"gsm_number": "80", "quantity": 2, "price": "10"}, headers=S1)

    response = client.post("/api/session/bill-draft/confirm", json={"customer_name": "Ravi"}, headers=S1)

    assert response.status_code == 400
    assert len(client.get("/api/session/bill-draft", headers=S1).json()["items"]) == 1


def test_confirm_empty_draft(client):
    response = client.post("/api/session/bill-draft/confirm", json={"customer_name": "Ravi"}, headers=S1)

    assert response.status_code == 400
    assert response.json()["detail"] == "Bill draft is empty"


def test_chart_preference(client):
    assert client.get("/api/session/preferences", headers=S1).json() == {"chart_type": "bar"}

    client.put("/api/session/preferences", json={"chart_type": "line"}, headers=S1)

    assert client.get("/api/session/preferences", headers=S1).json() == {"chart_type": "line"}
    assert client.get("/api/session/preferences", headers=S2).json() == {"chart_type": "bar"}
    assert client.put("/api/session/preferences", json={"chart_type": "pie"}, headers=S1).status_code == 422


def test_session_flag_is_enforced_when_enabled(client, monkeypatch):
    monkeypatch.setattr(deps, "settings", replace(deps.settings, session_auth_enabled=True, session_secret="s3cret"))

    denied = client.get("/api/stock")
    assert denied.status_code == 401
    assert denied.json()["detail"] == "Session is not authenticated"
    assert client.get("/api/stock", headers={"X-Session-Auth": "wrong"}).status_code == 401
    assert client.get("/api/stock", headers={"X-Session-Auth": "s3cret"}).status_code == 200
    assert client.get("/health").status_code == 200


def test_non_ascii_session_flag_is_rejected(client, monkeypatch):
    monkeypatch.setattr(deps, "settings", replace(deps.settings, session_auth_enabled=True, session_secret="s3cret"))

    response = client.get("/api/stock", headers={"X-Session-Auth": "sécret".encode("latin-1")})

    assert response.status_code == 401
