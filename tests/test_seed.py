"""Demo data seeding."""

from sqlmodel import select

from invoicing import seed
from invoicing.models import Invoice, Product


def test_seed_populates_catalog_and_invoices(engine, session):
    seed.run(engine)
    assert len(session.exec(select(Product)).all()) == len(seed.PRODUTOS)
    assert len(session.exec(select(Invoice)).all()) == seed.FATURAS


def test_seed_is_rerunnable(engine, session):
    seed.run(engine)
    seed.run(engine)
    assert len(session.exec(select(Product)).all()) == len(seed.PRODUTOS)


def test_seeded_invoices_resolve(engine, client):
    seed.run(engine)
    data = client.get("/trx/invoices").json()["data"]
    assert len(data) == seed.FATURAS
    assert all(inv["unresolvedProducts"] == [] for inv in data)
    assert all(inv["grandPrice"] > 0 for inv in data)
