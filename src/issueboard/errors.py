"""Error kinds raised by the issueboard core.

Each kind also derives from the builtin the rest of the code base already
catches for that situation (``ValueError`` for bad input, ``KeyError`` for
missing ids), so adapters can handle them either way.
"""

from __future__ import annotations


class IssueboardError(Exception):
    """Base class for every error raised by the core."""


class InvalidTransition(IssueboardError, ValueError):
    """A status change the lifecycle does not allow. Nothing was persisted."""

    def __init__(self, current: str, requested: str, message: str, *, issue_id: str | None = None) -> None:
        super().__init__(message)
        self.current = current
        self.requested = requested
        self.issue_id = issue_id
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFound(IssueboardError, KeyError):
    """The store has no issue with the requested id."""

    def __init__(self, issue_id: str) -> None:
        super().__init__(issue_id)
        self.issue_id = issue_id

    def __str__(self) -> str:
        # KeyError.__str__ repr()s its argument; keep the message readable.
        return f"Issue not found: {self.issue_id}"


class StoreUnavailable(IssueboardError, RuntimeError):
    """The backing store failed (locked, corrupt, unreachable). Not retried."""


class DecodeError(IssueboardError, ValueError):
    """A stored record is missing fields or carries values of the wrong type."""
