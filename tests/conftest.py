"""Shared pytest fixtures for issueboard tests."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path

import pytest
from click.testing import CliRunner

from issueboard.core import DB_FILENAME, ISSUEBOARD_DIR_NAME, write_config
from issueboard.db_store import SQLiteIssueStore
from issueboard.repository import IssueRepository
from tests._factory import make_record, make_store


@dataclass
class PopulatedStore:
    """A store plus the ids of its seeded issues, keyed by short name."""

    store: SQLiteIssueStore
    ids: dict[str, str]


@pytest.fixture
def store(tmp_path: Path) -> Generator[SQLiteIssueStore, None, None]:
    """Fresh SQLiteIssueStore for each test."""
    s = make_store(tmp_path)
    yield s
    s.close()


@pytest.fixture
def repo(store: SQLiteIssueStore) -> IssueRepository:
    return IssueRepository(store)


@pytest.fixture
async def populated_store(store: SQLiteIssueStore) -> PopulatedStore:
    """Store seeded with four issues, one minute apart.

    Creates (oldest first):
    - login: "Login button broken", open/high, description mentions clicking
    - dashboard: "Dashboard loads slowly", in_progress/medium, assigned to alice
    - export: "Export to CSV", done/low
    - typo: "Login page typo", open/low
    """
    ids = {
        "login": await store.insert(
            make_record("Login button broken", minutes=0, priority="high", description="Clicking login does nothing")
        ),
        "dashboard": await store.insert(
            make_record("Dashboard loads slowly", minutes=1, status="in_progress", assigned_to="alice")
        ),
        "export": await store.insert(make_record("Export to CSV", minutes=2, status="done", priority="low")),
        "typo": await store.insert(make_record("Login page typo", minutes=3, priority="low")),
    }
    return PopulatedStore(store=store, ids=ids)


@pytest.fixture
def issueboard_project(tmp_path: Path) -> Path:
    """A tmp directory set up as an issueboard project (.issueboard/ with config + db).

    Returns the project root (parent of .issueboard/).
    """
    issueboard_dir = tmp_path / ISSUEBOARD_DIR_NAME
    issueboard_dir.mkdir()
    write_config(issueboard_dir, {"prefix": "proj", "version": 1})

    with SQLiteIssueStore(issueboard_dir / DB_FILENAME, prefix="proj") as s:
        s.initialize()

    return tmp_path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()
