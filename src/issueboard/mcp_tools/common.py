"""Pure helpers shared across MCP tool modules.

This module has NO dependency on ``mcp_server`` module globals, so it can
be imported freely without triggering circular-import issues.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar, cast

from mcp.types import TextContent

from issueboard.core import Issue
from issueboard.errors import DecodeError, InvalidTransition, NotFound, StoreUnavailable
from issueboard.types.api import ErrorResponse, SlimIssue, TransitionError
from issueboard.workflow import valid_transitions

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _parse_args(arguments: dict[str, Any], cls: type[_T]) -> _T:
    """Cast MCP arguments to a typed dict for static analysis.

    The MCP SDK validates argument presence/types against JSON Schema
    before handler invocation. This cast() provides type narrowing only.
    """
    return cast(_T, arguments)


def _text(content: object) -> list[TextContent]:
    if isinstance(content, str):
        return [TextContent(type="text", text=content)]
    return [TextContent(type="text", text=json.dumps(content, indent=2, default=str))]


def _slim_issue(issue: Issue) -> SlimIssue:
    """Return a lightweight dict for duplicate warnings."""
    return SlimIssue(id=issue.id, title=issue.title, status=issue.status, priority=issue.priority)


def _build_transition_error(exc: InvalidTransition) -> TransitionError:
    """Structured error with the statuses the caller can move to instead."""
    return TransitionError(
        error=str(exc),
        code="invalid_transition",
        valid_transitions=list(valid_transitions(exc.current)),
        hint=f"Move the issue to one of the valid transitions from '{exc.current}' first",
    )


def _error_payload(exc: Exception) -> TransitionError | ErrorResponse:
    """Map a core error onto the MCP error payload.

    Order matters: ``InvalidTransition`` and ``DecodeError`` are ``ValueError``s.
    """
    if isinstance(exc, InvalidTransition):
        return _build_transition_error(exc)
    if isinstance(exc, NotFound):
        return ErrorResponse(error=str(exc), code="not_found")
    if isinstance(exc, StoreUnavailable):
        return ErrorResponse(error=str(exc), code="store_unavailable")
    if isinstance(exc, DecodeError):
        logger.error("Corrupt issue record: %s", exc)
        return ErrorResponse(error=str(exc), code="decode_error")
    return ErrorResponse(error=str(exc), code="validation_error")
