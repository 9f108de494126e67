# invoicing/routes_invoices.py
from __future__ import annotations

from typing import Annotated, Sequence

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse, Response
from sqlmodel import Session

from .aggregation import PriceResolver, aggregate
from .config import ID_PATTERN
from .db import get_session
from .models import Invoice, InvoiceLine
from .pdf import generate_invoice_pdf
from .schemas import InvoiceCreate, InvoiceOut, InvoiceUpdate
from .store import InvoiceStore, ProductStore

router = APIRouter(prefix="/trx", tags=["invoices"])

InvoiceId = Annotated[str, Path(pattern=ID_PATTERN)]


class _Stores:
    def __init__(self, session: Session) -> None:
        self.invoices = InvoiceStore(session)
        self.products = ProductStore(session)


def _stores(session: Session = Depends(get_session)) -> _Stores:
    return _Stores(session)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _totals(invoice: Invoice, lines: Sequence[InvoiceLine], resolve: PriceResolver):
    return aggregate(
        ((line.product_id, line.quantity) for line in lines),
        resolve,
        down_payment=invoice.down_payment,
    )


def _resolved(stores: _Stores, invoice: Invoice) -> dict:
    """
    Lê os itens da fatura e resolve os preços *agora*.
    São leituras separadas: o catálogo pode mudar entre elas.
    """
    lines = stores.invoices.lines(invoice.id)
    resolve = stores.products.resolver(line.product_id for line in lines)
    totals = _totals(invoice, lines, resolve)
    return InvoiceOut.build(invoice, totals).model_dump(by_alias=True, mode="json")


def _split(payload: InvoiceCreate | InvoiceUpdate):
    fields = payload.model_dump(exclude_unset=True, exclude={"products"})
    lines = None
    if payload.products is not None:
        lines = [item.as_spec() for item in payload.products]
    return fields, lines


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------
@router.post("/invoices", status_code=201)
def create_invoice(payload: InvoiceCreate, stores: _Stores = Depends(_stores)) -> JSONResponse:
    fields, lines = _split(payload)
    invoice = stores.invoices.create(fields, lines)
    return JSONResponse(
        status_code=201,
        content={"error": False, "message": "Invoice created successfully", "data": _resolved(stores, invoice)},
    )


@router.get("/invoices")
def list_invoices(stores: _Stores = Depends(_stores)) -> dict:
    invoices = stores.invoices.list()
    lines_by_invoice = stores.invoices.lines_for(inv.id for inv in invoices)
    resolve = stores.products.resolver(
        line.product_id for lines in lines_by_invoice.values() for line in lines
    )
    data = [
        InvoiceOut.build(inv, _totals(inv, lines_by_invoice[inv.id], resolve)).model_dump(
            by_alias=True, mode="json"
        )
        for inv in invoices
    ]
    return {"error": False, "data": data}


@router.get("/invoices/{invoice_id}")
def get_invoice(invoice_id: InvoiceId, stores: _Stores = Depends(_stores)) -> dict:
    return _resolved(stores, stores.invoices.get(invoice_id))


@router.put("/invoices/{invoice_id}")
def update_invoice(payload: InvoiceUpdate, invoice_id: InvoiceId, stores: _Stores = Depends(_stores)) -> dict:
    fields, lines = _split(payload)
    invoice = stores.invoices.update(invoice_id, fields, lines)
    return _resolved(stores, invoice)


@router.delete("/invoices/{invoice_id}")
def delete_invoice(invoice_id: InvoiceId, stores: _Stores = Depends(_stores)) -> dict:
    stores.invoices.delete(invoice_id)
    return {"error": False, "message": "Invoice deleted successfully"}


@router.get("/generate-pdf/{invoice_id}", response_class=Response)
def generate_pdf(invoice_id: InvoiceId, stores: _Stores = Depends(_stores)) -> Response:
    invoice = stores.invoices.get(invoice_id)
    lines = stores.invoices.lines(invoice.id)
    totals = _totals(invoice, lines, stores.products.resolver(line.product_id for line in lines))
    content = generate_invoice_pdf(invoice, totals)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice-{invoice.id}.pdf"'},
    )
