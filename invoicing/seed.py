# invoicing/seed.py
from __future__ import annotations
from datetime import date, timedelta
from random import randint, choice, seed as rndseed
from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlmodel import Session, select
from .config import DATABASE_URL
from .db import engine as default_engine, init_db
from .models import Invoice, InvoiceLine, Product
from .store import InvoiceStore, ProductStore

# ---------- Parâmetros do seed (ajuste à vontade) ----------
PRODUTOS = [
    ("Cuci Kering", 7000), ("Cuci Setrika", 9000), ("Setrika Saja", 5000),
    ("Bed Cover", 35000), ("Selimut", 25000), ("Boneka", 15000),
    ("Jas", 30000), ("Karpet", 20000),
]
CLIENTES = ["Budi", "Siti", "Andi", "Dewi", "Rina", "Agus", "Acme"]
FATURAS = 20
ITENS_POR_FATURA_MIN = 1
ITENS_POR_FATURA_MAX = 4

rndseed(42)  # determinístico


def run(bind: Engine | None = None) -> None:
    bind = bind or default_engine
    init_db(bind)
    print(f"Usando DB em: {DATABASE_URL if bind is default_engine else bind.url}")

    with Session(bind) as s:
        # limpa na ordem certa (FKs)
        s.exec(delete(InvoiceLine))
        s.exec(delete(Invoice))
        s.exec(delete(Product))
        s.commit()

        products = ProductStore(s)
        invoices = InvoiceStore(s)

        catalog = [products.create(name=nome, price=preco) for nome, preco in PRODUTOS]

        inicio = date.today() - timedelta(days=60)
        for _ in range(FATURAS):
            terima = inicio + timedelta(days=randint(0, 55))
            itens = [
                (choice(catalog).id, randint(1, 5))
                for _ in range(randint(ITENS_POR_FATURA_MIN, ITENS_POR_FATURA_MAX))
            ]
            invoices.create(
                {
                    "customer": choice(CLIENTES),
                    "tanggal_terima": terima,
                    "tanggal_selesai": terima + timedelta(days=randint(1, 4)),
                    "down_payment": choice([0, 5000, 10000, 20000]),
                },
                itens,
            )

        # contagens finais
        def count(model): return len(s.exec(select(model)).all())
        print("Contagens após seed:")
        print("  produtos:", count(Product))
        print("  faturas :", count(Invoice))
        print("  itens   :", count(InvoiceLine))


if __name__ == "__main__":
    run()
    print("Seed OK ✔")
