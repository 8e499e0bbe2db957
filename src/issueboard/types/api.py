# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from core.py, db_store.py, or the repository; this prevents circular imports.
"""TypedDicts for MCP tool handler and dashboard route API responses."""

from __future__ import annotations

from typing import Literal, NotRequired, TypedDict

from issueboard.types.core import IssueDict


class SlimIssue(TypedDict):
    """Reduced issue shape for duplicate warnings."""

    id: str
    title: str
    status: str
    priority: str


class ErrorResponse(TypedDict):
    """Standard error envelope returned by MCP error paths."""

    error: str
    code: str


class TransitionError(TypedDict):
    """Extended error for invalid status transitions.

    Includes valid_transitions hint to guide the caller toward correct states.
    """

    error: str
    code: Literal["invalid_transition"]
    valid_transitions: NotRequired[list[str]]
    hint: NotRequired[str]


class CreateIssueResponse(TypedDict):
    """``create_issue`` / ``POST /issues`` response: the new issue plus duplicate hints."""

    issue: IssueDict
    similar: list[SlimIssue]


class SimilarResponse(TypedDict):
    title: str
    similar: list[SlimIssue]
    total: int


class IssueListResponse(TypedDict):
    issues: list[IssueDict]
    total: int
