"""Query/run helpers shared by the SQLite and PostgreSQL backends.

Statements are written once with ``?`` placeholders. They are rewritten into
SQLAlchemy bind parameters so each dialect renders its own placeholder style,
and each backend knows how to hand back the id of an inserted row.
"""

from __future__ import annotations

import itertools
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.engine import CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from .db import build_engine, get_engine, init_db

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\?")


@dataclass
class RunResult:
    """Outcome of a write: id of the inserted row (if any) and rows affected."""

    last_id: Optional[int]
    changes: int


def bind_placeholders(sql: str, params: Sequence[Any] = ()) -> Tuple[str, Dict[str, Any]]:
    """
    Turn ``?`` placeholders into named binds ``:p1, :p2, ...``.

    >>> bind_placeholders("SELECT * FROM expenses WHERE id = ?", [3])
    ('SELECT * FROM expenses WHERE id = :p1', {'p1': 3})
    """
    params = list(params or ())
    counter = itertools.count(1)
    statement = _PLACEHOLDER.sub(lambda _: f":p{next(counter)}", sql)

    expected = next(counter) - 1
    if expected != len(params):
        raise ValueError(f"statement expects {expected} parameters, got {len(params)}")

    return statement, {f"p{i}": value for i, value in enumerate(params, start=1)}


class Storage(ABC):
    """Runs parameterized statements against one engine, one transaction per call."""

    backend: str

    def __init__(self, engine: Engine):
        self.engine = engine

    def init(self) -> None:
        init_db(self.engine)

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        statement, values = bind_placeholders(sql, params)
        try:
            with self.engine.connect() as conn:
                result = conn.execute(text(statement), values)
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.error("SQL error: %s | query: %s", e, statement)
            raise

    def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        statement, values = bind_placeholders(self.prepare_write(sql), params)
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(statement), values)
                changes = result.rowcount
                return RunResult(last_id=self.last_insert_id(result), changes=changes)
        except SQLAlchemyError as e:
            logger.error("SQL error: %s | query: %s", e, statement)
            raise

    def prepare_write(self, sql: str) -> str:
        return sql

    @abstractmethod
    def last_insert_id(self, result: CursorResult) -> Optional[int]:
        ...

    def dispose(self) -> None:
        self.engine.dispose()


class SqliteStorage(Storage):
    """Embedded file database; every ``run`` is committed to the file before returning."""

    backend = "sqlite"

    def last_insert_id(self, result: CursorResult) -> Optional[int]:
        return result.lastrowid


class PostgresStorage(Storage):
    """Pooled PostgreSQL; inserts report their id through ``RETURNING id``."""

    backend = "postgresql"

    def prepare_write(self, sql: str) -> str:
        stripped = sql.strip().rstrip(";")
        if stripped.upper().startswith("INSERT") and "RETURNING" not in stripped.upper():
            return f"{stripped} RETURNING id"
        return sql

    def last_insert_id(self, result: CursorResult) -> Optional[int]:
        if not result.returns_rows:
            return None
        row = result.first()
        return row[0] if row else None


def create_storage(database_url: Optional[str] = None) -> Storage:
    """
    Pick the backend for ``database_url`` (or the configured database).

    PostgreSQL URLs get ``PostgresStorage``, anything sqlite gets ``SqliteStorage``.
    """
    engine = build_engine(database_url) if database_url else get_engine()
    dialect = engine.dialect.name
    if dialect == "postgresql":
        storage: Storage = PostgresStorage(engine)
    elif dialect == "sqlite":
        storage = SqliteStorage(engine)
    else:
        raise ValueError(f"unsupported database backend: {dialect}")

    logger.info("Using %s storage", storage.backend)
    return storage


_storage: Optional[Storage] = None


def get_storage() -> Storage:
    """Process-wide storage, selected on first use (FastAPI dependency)."""
    global _storage
    if _storage is None:
        _storage = create_storage()
    return _storage
