from __future__ import annotations

import logging
from pathlib import Path

import pytest

from expense_tracker import config


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("postgres://u:p@db:5432/app", "postgresql+psycopg://u:p@db:5432/app"),
        ("postgresql://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
        ("postgresql+psycopg2://u:p@db/app", "postgresql+psycopg2://u:p@db/app"),
        ("postgresql+psycopg://u:p@db/app", "postgresql+psycopg://u:p@db/app"),
    ],
)
def test_normalize_database_url(raw: str, expected: str) -> None:
    assert config.normalize_database_url(raw) == expected


def test_sqlite_is_used_without_database_url(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "local.sqlite"))

    assert config.get_postgres_url() is None
    assert config.get_database_url() == f"sqlite:///{tmp_path / 'local.sqlite'}"


def test_default_sqlite_path(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("SQLITE_PATH", raising=False)

    assert config.get_database_url() == f"sqlite:///{Path('data') / 'expenses.sqlite'}"


def test_database_url_selects_postgres(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db/app")

    assert config.get_database_url() == "postgresql+psycopg://u:p@db/app"


def test_blank_database_url_is_ignored(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "   ")

    assert config.get_postgres_url() is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("*", ["*"]),
        ("http://localhost:5173, http://127.0.0.1:5173", ["http://localhost:5173", "http://127.0.0.1:5173"]),
        ("http://localhost:5173,*", ["*"]),
        (" , ", ["*"]),
    ],
)
def test_cors_origins(monkeypatch, raw: str, expected: list) -> None:
    monkeypatch.setenv("CORS_ORIGINS", raw)

    assert config.get_cors_origins() == expected


def test_port_and_log_level(monkeypatch) -> None:
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert config.get_port() == 3002
    assert config.get_log_level() == "DEBUG"

    monkeypatch.setenv("PORT", "8080")
    assert config.get_port() == 8080


def test_setup_logging_is_idempotent() -> None:
    from expense_tracker.log import LOGGER_NAME, setup_logging

    first = setup_logging()
    handlers = list(first.handlers)
    second = setup_logging()

    assert first is second is logging.getLogger(LOGGER_NAME)
    assert second.handlers == handlers
