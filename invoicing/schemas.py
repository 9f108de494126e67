# invoicing/schemas.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .aggregation import InvoiceTotals
from .config import ID_PATTERN
from .models import Invoice, Product


class CamelModel(BaseModel):
    # JSON em camelCase (timeStamp, downPayment, ...); aceita snake_case também.
    # NaN e infinito não são números válidos (preço, quantidade, DP)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


def _not_blank(value: str, message: str) -> str:
    if not value.strip():
        raise ValueError(message)
    return value


# -----------------------------------------------------------------------------
# Entrada
# -----------------------------------------------------------------------------
class ProductCreate(CamelModel):
    name: str
    price: float = 0.0

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _not_blank(v, "Name is required")


class ProductUpdate(CamelModel):
    name: Optional[str] = None
    price: Optional[float] = None

    @field_validator("name", "price", mode="before")
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name.capitalize()} cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _not_blank(v, "Name cannot be empty")


class LineItemIn(CamelModel):
    product_id: str = Field(pattern=ID_PATTERN)
    quantity: float = Field(ge=0)

    def as_spec(self) -> tuple[str, float]:
        return self.product_id, self.quantity


class InvoiceCreate(CamelModel):
    customer: str
    tanggal_terima: Optional[date] = None
    tanggal_selesai: Optional[date] = None
    down_payment: float
    products: List[LineItemIn]

    @field_validator("customer")
    @classmethod
    def _customer(cls, v: str) -> str:
        return _not_blank(v, "Customer name is required")


class InvoiceUpdate(CamelModel):
    customer: Optional[str] = None
    tanggal_terima: Optional[date] = None
    tanggal_selesai: Optional[date] = None
    down_payment: Optional[float] = None
    products: Optional[List[LineItemIn]] = None

    @field_validator("customer", "down_payment", "products", mode="before")
    @classmethod
    def _not_null(cls, v, info):
        # datas podem ser limpas com null; os demais campos não
        if v is None:
            raise ValueError(f"{to_camel(info.field_name)} cannot be null")
        return v

    @field_validator("customer")
    @classmethod
    def _customer(cls, v: str) -> str:
        return _not_blank(v, "Customer name cannot be empty")


# -----------------------------------------------------------------------------
# Saída
# -----------------------------------------------------------------------------
class ProductOut(CamelModel):
    id: str
    name: str
    price: float
    time_stamp: datetime
    created_at: datetime


class LineOut(CamelModel):
    product_id: str
    name: Optional[str]
    quantity: float
    price: Optional[float]
    total_price: Optional[float]
    resolved: bool


class InvoiceOut(CamelModel):
    id: str
    customer: str
    tanggal_terima: Optional[date]
    tanggal_selesai: Optional[date]
    down_payment: float
    products: List[LineOut]
    grand_price: Optional[float]
    balance_due: Optional[float]
    unresolved_products: List[str]
    time_stamp: datetime
    created_at: datetime

    @classmethod
    def build(cls, invoice: Invoice, totals: InvoiceTotals) -> "InvoiceOut":
        return cls(
            id=invoice.id,
            customer=invoice.customer,
            tanggal_terima=invoice.tanggal_terima,
            tanggal_selesai=invoice.tanggal_selesai,
            down_payment=invoice.down_payment,
            products=[
                LineOut(
                    product_id=line.product_id,
                    name=line.name,
                    quantity=line.quantity,
                    price=line.price,
                    total_price=line.total_price,
                    resolved=line.resolved,
                )
                for line in totals.lines
            ],
            grand_price=totals.grand_price,
            balance_due=totals.balance_due,
            unresolved_products=totals.unresolved,
            time_stamp=invoice.time_stamp,
            created_at=invoice.created_at,
        )


def product_out(product: Product) -> dict:
    out = ProductOut(
        id=product.id,
        name=product.name,
        price=product.price,
        time_stamp=product.time_stamp,
        created_at=product.created_at,
    )
    return out.model_dump(by_alias=True, mode="json")
