# invoicing/models.py
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(SQLModel, table=True):
    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str
    price: float = 0.0
    time_stamp: datetime = Field(default_factory=utcnow)  # atualizado a cada edição
    created_at: datetime = Field(default_factory=utcnow, index=True)


class Invoice(SQLModel, table=True):
    # grandPrice não é persistido: sempre calculado na leitura
    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    customer: str
    tanggal_terima: Optional[date] = None
    tanggal_selesai: Optional[date] = None
    down_payment: float = 0.0
    time_stamp: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow, index=True)


class InvoiceLine(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_id: str = Field(foreign_key="invoice.id", index=True, max_length=32)
    position: int
    product_id: str = Field(max_length=32)  # sem FK: o produto pode ser apagado
    quantity: float
