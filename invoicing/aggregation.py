# invoicing/aggregation.py
"""
Cálculo dos totais de uma fatura a partir dos preços *atuais* do catálogo.

- O preço de cada item é resolvido no momento da chamada, via `resolve`
  (injetado pelo chamador). Nada é cacheado nem persistido.
- Duas chamadas para a mesma fatura podem dar totais diferentes se o
  catálogo mudou entre elas.
- Item cujo produto sumiu (`Missing`) continua na lista, com price/totalPrice
  nulos; nesse caso grandPrice e balanceDue também ficam nulos e
  `unresolved` lista os ids faltantes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple, Union

from .errors import UnresolvedReference


@dataclass(frozen=True)
class Resolved:
    price: float
    name: str = ""


@dataclass(frozen=True)
class Missing:
    product_id: str


Resolution = Union[Resolved, Missing]
PriceResolver = Callable[[str], Resolution]


@dataclass(frozen=True)
class LineTotal:
    product_id: str
    quantity: float
    name: Optional[str] = None
    price: Optional[float] = None
    total_price: Optional[float] = None

    @property
    def resolved(self) -> bool:
        return self.price is not None


@dataclass(frozen=True)
class InvoiceTotals:
    lines: Tuple[LineTotal, ...]
    down_payment: float = 0.0

    @property
    def unresolved(self) -> list[str]:
        return [line.product_id for line in self.lines if not line.resolved]

    @property
    def grand_price(self) -> Optional[float]:
        if self.unresolved:
            return None
        # fsum: soma exata, independe da ordem dos itens
        return math.fsum(line.total_price for line in self.lines)

    @property
    def balance_due(self) -> Optional[float]:
        grand = self.grand_price
        if grand is None:
            return None
        return grand - self.down_payment

    def require_resolved(self) -> "InvoiceTotals":
        missing = self.unresolved
        if missing:
            raise UnresolvedReference(missing)
        return self


def aggregate(
    items: Iterable[Tuple[str, float]],
    resolve: PriceResolver,
    down_payment: float = 0.0,
) -> InvoiceTotals:
    """
    `items` são pares (productId, quantity) na ordem da fatura.
    A quantidade não é validada aqui (a API já garante >= 0).
    """
    lines = []
    for product_id, quantity in items:
        resolution = resolve(product_id)
        if isinstance(resolution, Missing):
            lines.append(LineTotal(product_id=product_id, quantity=quantity))
        elif isinstance(resolution, Resolved):
            lines.append(
                LineTotal(
                    product_id=product_id,
                    quantity=quantity,
                    name=resolution.name,
                    price=resolution.price,
                    total_price=resolution.price * quantity,
                )
            )
        else:
            raise TypeError(f"resolver devolveu {type(resolution).__name__}")
    return InvoiceTotals(lines=tuple(lines), down_payment=down_payment or 0.0)


def table_resolver(prices: dict[str, Resolved]) -> PriceResolver:
    """Resolver sobre um dicionário já carregado (id -> Resolved)."""
    def _resolve(product_id: str) -> Resolution:
        found = prices.get(product_id)
        return found if found is not None else Missing(product_id)
    return _resolve
