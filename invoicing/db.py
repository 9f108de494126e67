# invoicing/db.py
from __future__ import annotations

from typing import Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from .config import DATABASE_URL


def _on_sqlite_connect(dbapi_conn, _conn_record):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys = ON;")
    cur.execute("PRAGMA journal_mode = WAL;")
    cur.execute("PRAGMA synchronous = NORMAL;")
    cur.close()


def make_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, future=True)

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # banco em memória: uma única conexão compartilhada (testes)
        kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    engine = create_engine(url, future=True, **kwargs)
    # registra o hook no Engine síncrono
    event.listen(engine, "connect", _on_sqlite_connect)
    return engine


engine = make_engine(DATABASE_URL)


def init_db(bind: Engine | None = None) -> None:
    from . import models  # noqa: F401  registra tabelas
    SQLModel.metadata.create_all(bind or engine)


def get_session() -> Iterator[Session]:
    """Dependência FastAPI: uma sessão por requisição."""
    with Session(engine) as session:
        yield session
