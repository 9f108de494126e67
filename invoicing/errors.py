# invoicing/errors.py
from __future__ import annotations

from typing import Sequence


class InvoicingError(Exception):
    """Base dos erros da API; `status_code` e `message` viram o envelope de erro."""

    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NotFound(InvoicingError):
    status_code = 404
    message = "Not found"


class UnresolvedReference(InvoicingError):
    """Item de fatura aponta para um produto que não existe mais."""

    status_code = 500

    def __init__(self, product_ids: Sequence[str]) -> None:
        self.product_ids = list(product_ids)
        super().__init__(f"Product not found: {', '.join(self.product_ids)}")


class StoreError(InvoicingError):
    status_code = 500
    message = "Internal Server Error"


class RenderError(InvoicingError):
    status_code = 500
    message = "Error generating PDF"
