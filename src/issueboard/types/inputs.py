# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from core.py, db_store.py, or the repository; this prevents circular imports.
"""TypedDict contracts for MCP tool handler input arguments.

Each TypedDict mirrors the JSON Schema ``inputSchema`` on the corresponding
``mcp.types.Tool`` definition. ``TOOL_ARGS_MAP`` maps tool names to their
TypedDict class so the contract test can verify structural agreement.

The MCP SDK validates argument presence/types against JSON Schema before
handler invocation; ``cast()`` to these types is for static analysis only.
"""

# NOTE: Do NOT add ``from __future__ import annotations`` to this module.
# It breaks TypedDict.__required_keys__ / __optional_keys__ introspection
# on Python <3.14, which the contract test depends on.

from typing import NotRequired, TypedDict


class CreateIssueArgs(TypedDict):
    title: str
    description: NotRequired[str]
    priority: NotRequired[str]
    status: NotRequired[str]
    assigned_to: NotRequired[str]
    created_by: NotRequired[str]
    created_by_email: NotRequired[str]


class GetIssueArgs(TypedDict):
    id: str


class ListIssuesArgs(TypedDict):
    status: NotRequired[str]
    priority: NotRequired[str]


class UpdateStatusArgs(TypedDict):
    id: str
    status: str


class UpdatePriorityArgs(TypedDict):
    id: str
    priority: str


class UpdateIssueArgs(TypedDict):
    id: str
    title: NotRequired[str]
    description: NotRequired[str]
    priority: NotRequired[str]
    status: NotRequired[str]
    assigned_to: NotRequired[str]


class DeleteIssueArgs(TypedDict):
    id: str


class FindSimilarArgs(TypedDict):
    title: str


TOOL_ARGS_MAP: dict[str, type] = {
    "create_issue": CreateIssueArgs,
    "get_issue": GetIssueArgs,
    "list_issues": ListIssuesArgs,
    "update_status": UpdateStatusArgs,
    "update_priority": UpdatePriorityArgs,
    "update_issue": UpdateIssueArgs,
    "delete_issue": DeleteIssueArgs,
    "find_similar": FindSimilarArgs,
}
