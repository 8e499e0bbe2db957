"""Store and record builders shared by the test suites.

Importable from any test module (``from tests._factory import make_record``)
without reaching into a conftest.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

from issueboard.db_store import SQLiteIssueStore
from issueboard.types.core import ISOTimestamp, IssueRecord

BASE_TIME = datetime(2026, 1, 15, 10, 0, tzinfo=UTC)


def make_store(tmp_path: Path, *, prefix: str = "test", check_same_thread: bool = True) -> SQLiteIssueStore:
    """Initialized SQLiteIssueStore in *tmp_path*."""
    store = SQLiteIssueStore(tmp_path / "issueboard.db", prefix=prefix, check_same_thread=check_same_thread)
    store.initialize()
    return store


def make_record(title: str, *, minutes: int = 0, **overrides: Any) -> IssueRecord:
    """A complete store record created *minutes* after ``BASE_TIME``.

    Explicit timestamps keep newest-first ordering deterministic.
    """
    record = IssueRecord(
        title=title,
        description="",
        priority="medium",
        status="open",
        assigned_to="",
        created_at=ISOTimestamp((BASE_TIME + timedelta(minutes=minutes)).isoformat()),
        created_by="tester",
        created_by_email="tester@example.com",
    )
    record.update(overrides)  # type: ignore[typeddict-item]
    return record
