"""Fixtures for HTTP dashboard API tests (FastAPI)."""

from __future__ import annotations

from collections.abc import AsyncIterator, Generator
from dataclasses import dataclass
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

import issueboard.dashboard as dash_module
from issueboard.dashboard import create_app
from issueboard.db_store import SQLiteIssueStore
from tests._factory import make_record, make_store


@dataclass
class DashboardData:
    store: SQLiteIssueStore
    ids: dict[str, str]


@pytest.fixture
def dashboard_store(tmp_path: Path) -> Generator[SQLiteIssueStore, None, None]:
    """Store opened with check_same_thread=False, as the dashboard does."""
    s = make_store(tmp_path, check_same_thread=False)
    yield s
    s.close()


@pytest.fixture
async def dashboard_data(dashboard_store: SQLiteIssueStore) -> DashboardData:
    ids = {
        "login": await dashboard_store.insert(
            make_record("Login button broken", minutes=0, priority="high", description="Clicking login does nothing")
        ),
        "dashboard": await dashboard_store.insert(
            make_record("Dashboard loads slowly", minutes=1, status="in_progress")
        ),
        "export": await dashboard_store.insert(make_record("Export to CSV", minutes=2, status="done", priority="low")),
    }
    return DashboardData(store=dashboard_store, ids=ids)


@pytest.fixture
async def client(dashboard_data: DashboardData) -> AsyncIterator[AsyncClient]:
    """Test client backed by the seeded store."""
    dash_module._store = dashboard_data.store
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    dash_module._store = None
