# invoicing/main.py
from __future__ import annotations

import logging
from typing import Any, Sequence

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT
from .db import init_db
from .errors import InvoicingError, UnresolvedReference
from .routes_invoices import router as invoices_router
from .routes_products import router as products_router

# -----------------------------------------------------------------------------
# Config
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Invoicing API", version="1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(products_router)
app.include_router(invoices_router)

# Mensagens por campo; campo ausente usa _MISSING_MESSAGES quando houver
_MISSING_MESSAGES = {
    "name": "Name is required",
    "customer": "Customer name is required",
}
_FIELD_MESSAGES = {
    "name": "Name must be a string",
    "price": "Price must be a number",
    "customer": "Customer name must be a string",
    "downPayment": "Down payment must be a number",
    "products": "Products must be an array",
    "tanggalTerima": "Invalid date format for tanggalTerima",
    "tanggalSelesai": "Invalid date format for tanggalSelesai",
    "productId": "Invalid product ID",
    "quantity": "Quantity must be a non-negative number",
    "product_id": "Invalid product ID",
    "invoice_id": "Invalid invoice ID",
}

# -----------------------------------------------------------------------------
# Startup
# -----------------------------------------------------------------------------
@app.on_event("startup")
def _startup() -> None:
    """Cria as tabelas se ainda não existirem."""
    init_db()

# -----------------------------------------------------------------------------
# Error handlers
# -----------------------------------------------------------------------------
def _field_name(loc: Sequence[Any]) -> str:
    """('body', 'products', 0, 'productId') -> 'products[0].productId'"""
    parts = list(loc[1:]) if loc and loc[0] in ("body", "path", "query") else list(loc)
    name = ""
    for part in parts:
        if isinstance(part, int):
            name += f"[{part}]"
        else:
            name += f".{part}" if name else str(part)
    return name or "body"


def _field_message(err: dict) -> str:
    if err.get("type") == "value_error" and "error" in err.get("ctx", {}):
        return str(err["ctx"]["error"])
    leaf = next((p for p in reversed(err.get("loc", ())) if isinstance(p, str)), None)
    if err.get("type") == "missing" and leaf in _MISSING_MESSAGES:
        return _MISSING_MESSAGES[leaf]
    return _FIELD_MESSAGES.get(leaf, err.get("msg", "Invalid value"))


@app.exception_handler(RequestValidationError)
async def _validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": _field_message(err)}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": True, "errors": errors})


@app.exception_handler(UnresolvedReference)
async def _unresolved(_request: Request, exc: UnresolvedReference) -> JSONResponse:
    logger.warning("Fatura com produto inexistente: %s", exc.product_ids)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": f"Error generating PDF: {exc.message}",
            "unresolvedProducts": exc.product_ids,
        },
    )


@app.exception_handler(InvoicingError)
async def _invoicing_error(_request: Request, exc: InvoicingError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": True, "message": exc.message})


@app.exception_handler(Exception)
async def _unexpected(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Erro inesperado", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": True, "message": "Internal Server Error"})

# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------
@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


def run() -> None:
    uvicorn.run("invoicing.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
