"""Shared fixtures: every test gets its own SQLite file wired into the app."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from expense_tracker.main import app
from expense_tracker.storage import Storage, create_storage, get_storage


@pytest.fixture
def storage(tmp_path: Path) -> Storage:
    store = create_storage(f"sqlite:///{tmp_path / 'expenses.sqlite'}")
    store.init()
    yield store
    store.dispose()


@pytest.fixture
def client(storage: Storage) -> TestClient:
    app.dependency_overrides[get_storage] = lambda: storage
    # unhandled errors should come back as 500 responses, not raise in the test
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def add_expense(client: TestClient):
    def _add(description="Almoco", amount=12.5, category="alimentacao", date="2024-03-10"):
        response = client.post(
            "/api/expenses",
            json={"description": description, "amount": amount, "category": category, "date": date},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _add
