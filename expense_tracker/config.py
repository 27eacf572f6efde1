# expense_tracker/config.py
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SQLITE_PATH = Path("data") / "expenses.sqlite"
DEFAULT_PORT = 3002


def normalize_database_url(url: str) -> str:
    # Render / Heroku hand out postgres://, SQLAlchemy wants postgresql+<driver>://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://") and "+psycopg" not in url and "+psycopg2" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def get_postgres_url() -> Optional[str]:
    """The PostgreSQL URL when ``DATABASE_URL`` is set, else None."""
    url = os.getenv("DATABASE_URL", "").strip()
    if not url:
        return None
    return normalize_database_url(url)


def get_sqlite_path() -> Path:
    return Path(os.getenv("SQLITE_PATH") or DEFAULT_SQLITE_PATH)


def get_database_url() -> str:
    """PostgreSQL when configured, otherwise the local SQLite file."""
    return get_postgres_url() or f"sqlite:///{get_sqlite_path()}"


def get_cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    if not origins or "*" in origins:
        return ["*"]
    return origins


def get_host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def get_port() -> int:
    return int(os.getenv("PORT", DEFAULT_PORT))


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_dir() -> Optional[str]:
    return os.getenv("LOG_DIR") or None
