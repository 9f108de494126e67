"""App-level wiring (health check, CORS) and module conventions."""

import __future__

import pytest

from invoicing import aggregation, pdf, store


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_cors_headers(client):
    resp = client.get("/trx/products", headers={"Origin": "http://example.com"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"


def test_invalid_json_body_is_400(client):
    resp = client.post("/trx/products", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"] is True


@pytest.mark.parametrize("module", [aggregation, store, pdf])
def test_module_docstring_and_postponed_annotations(module):
    assert module.__doc__ and module.__doc__.strip()
    assert module.annotations is __future__.annotations
