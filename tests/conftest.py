"""Shared fixtures: a fresh in-memory database per test and an API client bound to it."""

import os

# before importing the app: never touch the on-disk database from tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from invoicing.db import get_session, init_db, make_engine
from invoicing.main import app


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine):
    def _session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_product(client):
    def _make(name: str = "Widget", price: float = 100) -> dict:
        resp = client.post("/trx/products", json={"name": name, "price": price})
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]
    return _make


@pytest.fixture
def make_invoice(client):
    def _make(lines, customer: str = "Acme", down_payment: float = 0, **extra) -> dict:
        body = {
            "customer": customer,
            "downPayment": down_payment,
            "products": [{"productId": pid, "quantity": qty} for pid, qty in lines],
            **extra,
        }
        resp = client.post("/trx/invoices", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]
    return _make
