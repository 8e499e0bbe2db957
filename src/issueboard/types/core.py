# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from core.py, db_store.py, or the repository; this prevents circular imports.
"""Foundational TypedDicts shared by the store, the repository and the adapters."""

from __future__ import annotations

from typing import NewType, TypedDict

ISOTimestamp = NewType("ISOTimestamp", str)


class ProjectConfig(TypedDict, total=False):
    """Shape of .issueboard/config.json."""

    prefix: str
    version: int
    user: str
    email: str


class IssueRecord(TypedDict):
    """Store-native record shape handed to ``IssueStore.insert``.

    ``created_at`` is an ISO-8601 string; conversion to ``datetime``
    happens in ``decode_issue`` at the store boundary.
    """

    title: str
    description: str
    priority: str
    status: str
    assigned_to: str
    created_at: ISOTimestamp
    created_by: str
    created_by_email: str


class IssueDict(TypedDict):
    id: str
    title: str
    description: str
    priority: str
    status: str
    assigned_to: str
    created_at: ISOTimestamp
    created_by: str
    created_by_email: str
