# invoicing/store.py
"""
Acesso aos dados (catálogo e faturas) sobre uma Session do SQLModel.

Cada método faz o próprio commit: a garantia é atômica por documento
(produto, ou fatura + seus itens), nunca entre documentos. Ler uma fatura e
depois resolver os preços dos produtos são duas leituras independentes.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional, Sequence, Tuple

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from .aggregation import PriceResolver, Resolved, table_resolver
from .errors import NotFound, StoreError
from .models import Invoice, InvoiceLine, Product, utcnow

logger = logging.getLogger(__name__)

LineSpec = Tuple[str, float]  # (productId, quantity)


@contextmanager
def _guard(session: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Falha no banco ao %s", action)
        raise StoreError() from exc


class ProductStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, name: str, price: float = 0.0) -> Product:
        product = Product(name=name, price=price)
        with _guard(self.session, "criar produto"):
            self.session.add(product)
            self.session.commit()
            self.session.refresh(product)
        return product

    def list(self) -> list[Product]:
        with _guard(self.session, "listar produtos"):
            stmt = select(Product).order_by(col(Product.created_at))
            return list(self.session.exec(stmt).all())

    def get(self, product_id: str) -> Product:
        with _guard(self.session, "buscar produto"):
            product = self.session.get(Product, product_id)
        if product is None:
            raise NotFound("Product not found")
        return product

    def update(self, product_id: str, fields: dict[str, Any]) -> Product:
        product = self.get(product_id)
        with _guard(self.session, "atualizar produto"):
            for key, value in fields.items():
                setattr(product, key, value)
            product.time_stamp = utcnow()
            self.session.add(product)
            self.session.commit()
            self.session.refresh(product)
        return product

    def delete(self, product_id: str) -> None:
        # sem cascata: faturas que referenciam o produto ficam intactas
        product = self.get(product_id)
        with _guard(self.session, "apagar produto"):
            self.session.delete(product)
            self.session.commit()

    def resolver(self, product_ids: Iterable[str]) -> PriceResolver:
        """Lê os preços atuais dos produtos pedidos (uma consulta)."""
        ids = list(set(product_ids))
        prices: dict[str, Resolved] = {}
        if ids:
            with _guard(self.session, "resolver preços"):
                stmt = select(Product).where(col(Product.id).in_(ids))
                for p in self.session.exec(stmt).all():
                    prices[p.id] = Resolved(price=p.price, name=p.name)
        return table_resolver(prices)


class InvoiceStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, fields: dict[str, Any], lines: Sequence[LineSpec]) -> Invoice:
        invoice = Invoice(**fields)
        with _guard(self.session, "criar fatura"):
            self.session.add(invoice)
            self.session.flush()  # libera invoice.id
            self._add_lines(invoice.id, lines)
            self.session.commit()
            self.session.refresh(invoice)
        return invoice

    def list(self) -> list[Invoice]:
        with _guard(self.session, "listar faturas"):
            stmt = select(Invoice).order_by(col(Invoice.created_at))
            return list(self.session.exec(stmt).all())

    def get(self, invoice_id: str) -> Invoice:
        with _guard(self.session, "buscar fatura"):
            invoice = self.session.get(Invoice, invoice_id)
        if invoice is None:
            raise NotFound("Invoice not found")
        return invoice

    def lines(self, invoice_id: str) -> list[InvoiceLine]:
        return self.lines_for([invoice_id]).get(invoice_id, [])

    def lines_for(self, invoice_ids: Iterable[str]) -> dict[str, list[InvoiceLine]]:
        ids = list(invoice_ids)
        out: dict[str, list[InvoiceLine]] = {i: [] for i in ids}
        if not ids:
            return out
        with _guard(self.session, "ler itens de fatura"):
            stmt = (
                select(InvoiceLine)
                .where(col(InvoiceLine.invoice_id).in_(ids))
                .order_by(col(InvoiceLine.invoice_id), col(InvoiceLine.position))
            )
            for line in self.session.exec(stmt).all():
                out[line.invoice_id].append(line)
        return out

    def update(
        self,
        invoice_id: str,
        fields: dict[str, Any],
        lines: Optional[Sequence[LineSpec]] = None,
    ) -> Invoice:
        """Atualiza só os campos enviados; `lines`, se vier, substitui todos os itens."""
        invoice = self.get(invoice_id)
        with _guard(self.session, "atualizar fatura"):
            for key, value in fields.items():
                setattr(invoice, key, value)
            invoice.time_stamp = utcnow()
            self.session.add(invoice)
            if lines is not None:
                self._drop_lines(invoice.id)
                self._add_lines(invoice.id, lines)
            self.session.commit()
            self.session.refresh(invoice)
        return invoice

    def delete(self, invoice_id: str) -> None:
        invoice = self.get(invoice_id)
        with _guard(self.session, "apagar fatura"):
            self._drop_lines(invoice.id)
            self.session.delete(invoice)
            self.session.commit()

    # -- helpers ---------------------------------------------------------------

    def _add_lines(self, invoice_id: str, lines: Sequence[LineSpec]) -> None:
        for position, (product_id, quantity) in enumerate(lines):
            self.session.add(
                InvoiceLine(
                    invoice_id=invoice_id,
                    position=position,
                    product_id=product_id,
                    quantity=quantity,
                )
            )

    def _drop_lines(self, invoice_id: str) -> None:
        self.session.exec(delete(InvoiceLine).where(col(InvoiceLine.invoice_id) == invoice_id))
