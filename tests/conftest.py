import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_AUTH_ENABLED"] = "false"
os.environ["LEDGER_SYNC_ENABLED"] = "true"
os.environ["REPORT_TIMEZONE"] = ""
os.environ["DATABASE_SSLMODE"] = "prefer"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import shopledger.models  # noqa: F401
from shopledger.db.database import Base, engine_options, get_db
from shopledger.main import app
from shopledger.services.view_cache import ViewStateCache, get_view_cache


@pytest.fixture()
def engine():
    engine = create_engine("sqlite://", **engine_options("sqlite://"))
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def view_cache():
    return ViewStateCache()


@pytest.fixture()
def client(session_factory, view_cache):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_view_cache] = lambda: view_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_stock(client, **overrides):
    payload = {
        "gsm_number": "80",
        "category": "Paper",
        "description": "A",
        "stock": 10,
        "cost_price": "6",
        "selling_price": "12",
    }
    payload.update(overrides)
    response = client.post("/api/stock", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def create_bill(client, items, bill_date="2024-01-05T10:00:00", customer_name="Walk-in"):
    response = client.post(
        "/api/billing",
        json={"customer_name": customer_name, "bill_date": bill_date, "items": items},
    )
    assert response.status_code == 201, response.text
    return response.json()
