"""Shared helpers for dashboard route modules."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fastapi.responses import JSONResponse
    from starlette.requests import Request

from issueboard.core import VALID_PRIORITIES, VALID_STATUSES
from issueboard.errors import DecodeError, InvalidTransition, NotFound, StoreUnavailable
from issueboard.workflow import valid_transitions

logger = logging.getLogger(__name__)


def _error_response(
    message: str,
    code: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Return a structured error response and log the error."""
    from fastapi.responses import JSONResponse

    logger.warning("API error [%s] %s: %s", status_code, code, message)
    return JSONResponse(
        {"error": {"message": message, "code": code, "details": details or {}}},
        status_code=status_code,
    )


async def _parse_json_body(request: Request) -> dict[str, Any] | JSONResponse:
    """Parse and validate a JSON object body, returning 400 on failure."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, ValueError, UnicodeDecodeError):
        return _error_response("Invalid JSON body", "VALIDATION_ERROR", 400)
    if not isinstance(body, dict):
        return _error_response("Request body must be a JSON object", "VALIDATION_ERROR", 400)
    return body


def _validate_enum_param(value: str | None, name: str) -> JSONResponse | None:
    """Reject a status/priority query param outside its enumeration."""
    allowed = VALID_STATUSES if name == "status" else VALID_PRIORITIES
    if value is not None and value not in allowed:
        return _error_response(
            f'Invalid value for {name}: "{value}". Must be one of {", ".join(allowed)}.',
            "VALIDATION_ERROR",
            400,
            {"param": name, "value": value},
        )
    return None


def _core_error_response(exc: Exception, issue_id: str | None = None) -> JSONResponse:
    """Translate a core error into the matching HTTP error envelope.

    Order matters: ``InvalidTransition`` is a ``ValueError`` and ``NotFound``
    is a ``KeyError``; ``DecodeError`` is a ``ValueError`` but a server fault.
    """
    if isinstance(exc, InvalidTransition):
        return _error_response(
            str(exc),
            "INVALID_TRANSITION",
            409,
            {"current": exc.current, "requested": exc.requested, "valid_transitions": valid_transitions(exc.current)},
        )
    if isinstance(exc, NotFound):
        return _error_response(f"Issue not found: {issue_id or exc.issue_id}", "ISSUE_NOT_FOUND", 404)
    if isinstance(exc, StoreUnavailable):
        return _error_response(str(exc), "STORE_UNAVAILABLE", 503)
    if isinstance(exc, DecodeError):
        return _error_response(str(exc), "DECODE_ERROR", 500)
    if isinstance(exc, (ValueError, TypeError)):
        return _error_response(str(exc), "VALIDATION_ERROR", 400)
    raise exc
