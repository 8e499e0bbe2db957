"""Fixtures for MCP server tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from issueboard.core import DB_FILENAME, ISSUEBOARD_DIR_NAME, write_config
from issueboard.db_store import SQLiteIssueStore


@pytest.fixture
def mcp_store(tmp_path: Path) -> Generator[SQLiteIssueStore, None, None]:
    """Set up a SQLiteIssueStore and patch the MCP module globals."""
    issueboard_dir = tmp_path / ISSUEBOARD_DIR_NAME
    issueboard_dir.mkdir()
    write_config(issueboard_dir, {"prefix": "mcp", "version": 1})

    s = SQLiteIssueStore(issueboard_dir / DB_FILENAME, prefix="mcp")
    s.initialize()

    import issueboard.mcp_server as mcp_mod

    original_store = mcp_mod.store
    mcp_mod.store = s

    yield s

    mcp_mod.store = original_store
    s.close()
