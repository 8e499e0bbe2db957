"""MCP tools for issue CRUD, status/priority changes, and duplicate checks."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mcp.types import TextContent, Tool

from issueboard.core import VALID_PRIORITIES, VALID_STATUSES, IssueFormData
from issueboard.errors import IssueboardError
from issueboard.mcp_tools.common import _error_payload, _parse_args, _slim_issue, _text
from issueboard.similarity import SIMILAR_DISPLAY_LIMIT
from issueboard.types.api import CreateIssueResponse, IssueListResponse, SimilarResponse
from issueboard.types.inputs import (
    CreateIssueArgs,
    DeleteIssueArgs,
    FindSimilarArgs,
    GetIssueArgs,
    ListIssuesArgs,
    UpdateIssueArgs,
    UpdatePriorityArgs,
    UpdateStatusArgs,
)

_STATUS_SCHEMA = {"type": "string", "enum": list(VALID_STATUSES)}
_PRIORITY_SCHEMA = {"type": "string", "enum": list(VALID_PRIORITIES)}


def register() -> tuple[list[Tool], dict[str, Callable[..., Any]]]:
    """Return (tool_definitions, handler_map) for issue-domain tools."""
    tools = [
        Tool(
            name="create_issue",
            description=(
                "Create a new issue. The response lists up to 3 existing issues that look like duplicates; "
                "creation is never blocked by them."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Issue title"},
                    "description": {"type": "string", "description": "Issue description"},
                    "priority": {**_PRIORITY_SCHEMA, "default": "medium", "description": "Priority"},
                    "status": {**_STATUS_SCHEMA, "default": "open", "description": "Initial status"},
                    "assigned_to": {"type": "string", "description": "Assignee name or contact"},
                    "created_by": {"type": "string", "description": "Creator identity (default: mcp)"},
                    "created_by_email": {"type": "string", "description": "Creator display email"},
                },
                "required": ["title"],
            },
        ),
        Tool(
            name="get_issue",
            description="Get full details of an issue.",
            inputSchema={
                "type": "object",
                "properties": {"id": {"type": "string", "description": "Issue ID"}},
                "required": ["id"],
            },
        ),
        Tool(
            name="list_issues",
            description="List issues newest first. Status and priority filters combine with AND.",
            inputSchema={
                "type": "object",
                "properties": {
                    "status": {**_STATUS_SCHEMA, "description": "Filter by status"},
                    "priority": {**_PRIORITY_SCHEMA, "description": "Filter by priority"},
                },
            },
        ),
        Tool(
            name="update_status",
            description="Move an issue to a new status. open -> done is rejected; go through in_progress.",
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Issue ID"},
                    "status": {**_STATUS_SCHEMA, "description": "New status"},
                },
                "required": ["id", "status"],
            },
        ),
        Tool(
            name="update_priority",
            description="Change an issue's priority.",
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Issue ID"},
                    "priority": {**_PRIORITY_SCHEMA, "description": "New priority"},
                },
                "required": ["id", "priority"],
            },
        ),
        Tool(
            name="update_issue",
            description="Patch several fields at once. A status change follows the same rules as update_status.",
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Issue ID"},
                    "title": {"type": "string", "description": "New title"},
                    "description": {"type": "string", "description": "New description"},
                    "priority": {**_PRIORITY_SCHEMA, "description": "New priority"},
                    "status": {**_STATUS_SCHEMA, "description": "New status"},
                    "assigned_to": {"type": "string", "description": "New assignee (empty to clear)"},
                },
                "required": ["id"],
            },
        ),
        Tool(
            name="delete_issue",
            description="Delete an issue permanently.",
            inputSchema={
                "type": "object",
                "properties": {"id": {"type": "string", "description": "Issue ID"}},
                "required": ["id"],
            },
        ),
        Tool(
            name="find_similar",
            description="Find existing issues that look like duplicates of a prospective title.",
            inputSchema={
                "type": "object",
                "properties": {"title": {"type": "string", "description": "Prospective issue title"}},
                "required": ["title"],
            },
        ),
    ]

    handlers: dict[str, Callable[..., Any]] = {
        "create_issue": _handle_create_issue,
        "get_issue": _handle_get_issue,
        "list_issues": _handle_list_issues,
        "update_status": _handle_update_status,
        "update_priority": _handle_update_priority,
        "update_issue": _handle_update_issue,
        "delete_issue": _handle_delete_issue,
        "find_similar": _handle_find_similar,
    }

    return tools, handlers


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_create_issue(arguments: dict[str, Any]) -> list[TextContent]:
    from issueboard.mcp_server import _get_repository

    args = _parse_args(arguments, CreateIssueArgs)
    repo = _get_repository()
    try:
        form = IssueFormData(
            title=args["title"],
            description=args.get("description", ""),
            priority=args.get("priority", "medium"),  # type: ignore[arg-type]
            status=args.get("status", "open"),  # type: ignore[arg-type]
            assigned_to=args.get("assigned_to", ""),
        )
        issue, similar = await repo.create_with_similar(
            form,
            args.get("created_by", "mcp"),
            args.get("created_by_email", ""),
        )
    except (IssueboardError, ValueError, TypeError) as e:
        return _text(_error_payload(e))
    return _text(
        CreateIssueResponse(
            issue=issue.to_dict(),
            similar=[_slim_issue(s) for s in similar[:SIMILAR_DISPLAY_LIMIT]],
        )
    )


async def _handle_get_issue(arguments: dict[str, Any]) -> list[TextContent]:
    from issueboard.mcp_server import _get_repository

    args = _parse_args(arguments, GetIssueArgs)
    try:
        issue = await _get_repository().get(args["id"])
    except IssueboardError as e:
        return _text(_error_payload(e))
    return _text(issue.to_dict())


async def _handle_list_issues(arguments: dict[str, Any]) -> list[TextContent]:
    from issueboard.mcp_server import _get_repository

    args = _parse_args(arguments, ListIssuesArgs)
    try:
        issues = await _get_repository().list(status=args.get("status"), priority=args.get("priority"))
    except (IssueboardError, ValueError) as e:
        return _text(_error_payload(e))
    return _text(IssueListResponse(issues=[i.to_dict() for i in issues], total=len(issues)))


async def _handle_update_status(arguments: dict[str, Any]) -> list[TextContent]:
    from issueboard.mcp_server import _get_repository

    args = _parse_args(arguments, UpdateStatusArgs)
    try:
        issue = await _get_repository().update_status(args["id"], args["status"])
    except (IssueboardError, ValueError) as e:
        return _text(_error_payload(e))
    return _text(issue.to_dict())


async def _handle_update_priority(arguments: dict[str, Any]) -> list[TextContent]:
    from issueboard.mcp_server import _get_repository

    args = _parse_args(arguments, UpdatePriorityArgs)
    try:
        issue = await _get_repository().update_priority(args["id"], args["priority"])
    except (IssueboardError, ValueError) as e:
        return _text(_error_payload(e))
    return _text(issue.to_dict())


async def _handle_update_issue(arguments: dict[str, Any]) -> list[TextContent]:
    from issueboard.mcp_server import _get_repository

    args = _parse_args(arguments, UpdateIssueArgs)
    changes = {k: v for k, v in args.items() if k != "id"}
    try:
        issue = await _get_repository().update(args["id"], **changes)
    except (IssueboardError, ValueError, TypeError) as e:
        return _text(_error_payload(e))
    return _text(issue.to_dict())


async def _handle_delete_issue(arguments: dict[str, Any]) -> list[TextContent]:
    from issueboard.mcp_server import _get_repository

    args = _parse_args(arguments, DeleteIssueArgs)
    try:
        await _get_repository().delete(args["id"])
    except IssueboardError as e:
        return _text(_error_payload(e))
    return _text({"deleted": args["id"]})


async def _handle_find_similar(arguments: dict[str, Any]) -> list[TextContent]:
    from issueboard.mcp_server import _get_repository

    args = _parse_args(arguments, FindSimilarArgs)
    try:
        similar = await _get_repository().find_similar(args["title"])
    except IssueboardError as e:
        return _text(_error_payload(e))
    return _text(
        SimilarResponse(
            title=args["title"],
            similar=[_slim_issue(s) for s in similar],
            total=len(similar),
        )
    )
