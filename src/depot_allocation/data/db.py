# src/depot_allocation/data/db.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from depot_allocation.utils.config import config

_engine: Optional[Engine] = None


def configure_engine(url: Optional[str] = None, **kwargs) -> Engine:
    """
    (Re)build the process-wide engine.

    In-memory SQLite shares one connection so every caller sees the same tables.
    """
    global _engine
    url = url or config.DATABASE_URL

    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs.setdefault("poolclass", StaticPool)
    elif url.startswith("mssql+pyodbc"):
        kwargs.setdefault("fast_executemany", True)

    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url, **kwargs)
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        return configure_engine()
    return _engine


@contextmanager
def get_connection() -> Iterator[Connection]:
    """One transaction per block: commit on success, rollback on error."""
    with get_engine().begin() as conn:
        yield conn
