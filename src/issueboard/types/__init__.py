# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from core.py, db_store.py, or the repository; this prevents circular imports.
"""Typed return-value contracts for issueboard core and API layers."""

from __future__ import annotations

from issueboard.types.core import (
    ISOTimestamp,
    IssueDict,
    IssueRecord,
    ProjectConfig,
)

__all__ = [
    "ISOTimestamp",
    "IssueDict",
    "IssueRecord",
    "ProjectConfig",
]
