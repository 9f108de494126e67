# invoicing/routes_products.py
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse
from sqlmodel import Session

from .config import ID_PATTERN
from .db import get_session
from .schemas import ProductCreate, ProductUpdate, product_out
from .store import ProductStore

router = APIRouter(prefix="/trx", tags=["products"])


def _store(session: Session = Depends(get_session)) -> ProductStore:
    return ProductStore(session)


ProductId = Annotated[str, Path(pattern=ID_PATTERN)]


@router.post("/products", status_code=201)
def create_product(payload: ProductCreate, store: ProductStore = Depends(_store)) -> JSONResponse:
    product = store.create(name=payload.name, price=payload.price)
    return JSONResponse(
        status_code=201,
        content={"error": False, "message": "Product added successfully.", "data": product_out(product)},
    )


@router.get("/products")
def list_products(store: ProductStore = Depends(_store)) -> list[dict]:
    """Catálogo ordenado por criação (mais antigo primeiro)."""
    return [product_out(p) for p in store.list()]


@router.get("/products/{product_id}")
def get_product(product_id: ProductId, store: ProductStore = Depends(_store)) -> dict:
    return product_out(store.get(product_id))


@router.put("/products/{product_id}")
def update_product(
    payload: ProductUpdate,
    product_id: ProductId,
    store: ProductStore = Depends(_store),
) -> dict:
    product = store.update(product_id, payload.model_dump(exclude_unset=True))
    return {"error": False, "message": "Product updated successfully", "product": product_out(product)}


@router.delete("/products/{product_id}")
def delete_product(product_id: ProductId, store: ProductStore = Depends(_store)) -> dict:
    store.delete(product_id)
    return {"error": False, "message": "Product deleted successfully"}
