# expense_tracker/db.py
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base

from .config import get_database_url

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None


def _prepare_sqlite_path(database: Optional[str]) -> None:
    # sqlite won't create missing parent directories for us
    if not database or database == ":memory:":
        return
    Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def build_engine(database_url: str) -> Engine:
    url = make_url(database_url)

    connect_args = {}
    if url.drivername.startswith("sqlite"):
        _prepare_sqlite_path(url.database)
        connect_args = {"check_same_thread": False}

    return create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
    )


def get_engine() -> Engine:
    """Create (or return) the process-wide engine for the configured database."""
    global _engine
    if _engine is None:
        _engine = build_engine(get_database_url())
    return _engine


def init_db(engine: Optional[Engine] = None) -> None:
    """Create tables and indexes that don't exist yet."""
    from . import models  # noqa: F401  registers tables on Base.metadata

    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized (%s)", engine.dialect.name)
