"""issueboard: issue tracker with lifecycle rules and duplicate detection."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("issueboard")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from issueboard.core import Issue, IssueFormData
from issueboard.db_store import IssueStore, SQLiteIssueStore
from issueboard.errors import DecodeError, InvalidTransition, NotFound, StoreUnavailable
from issueboard.repository import IssueRepository

__all__ = [
    "DecodeError",
    "InvalidTransition",
    "Issue",
    "IssueFormData",
    "IssueRepository",
    "IssueStore",
    "NotFound",
    "SQLiteIssueStore",
    "StoreUnavailable",
    "__version__",
]
