"""Issue route handlers for the dashboard API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

if TYPE_CHECKING:
    from fastapi import APIRouter

from issueboard.core import VALID_STATUSES, IssueFormData
from issueboard.dashboard_routes.common import (
    _core_error_response,
    _error_response,
    _parse_json_body,
    _validate_enum_param,
)
from issueboard.errors import IssueboardError
from issueboard.repository import IssueRepository
from issueboard.similarity import SIMILAR_DISPLAY_LIMIT
from issueboard.types.api import CreateIssueResponse, SimilarResponse, SlimIssue
from issueboard.workflow import valid_transitions

logger = logging.getLogger(__name__)

_FORM_FIELDS = ("title", "description", "priority", "status", "assigned_to")


def _slim(issue: Any) -> SlimIssue:
    return SlimIssue(id=issue.id, title=issue.title, status=issue.status, priority=issue.priority)


def create_router() -> APIRouter:
    """Build the APIRouter for issue endpoints.

    NOTE: All handlers are async and the store does its SQLite I/O inline,
    which serializes DB access on the event loop thread.
    """
    from fastapi import APIRouter, Depends
    from fastapi.responses import JSONResponse

    from issueboard.dashboard import _get_repository

    router = APIRouter()

    @router.get("/issues")
    async def api_issues(
        status: str | None = None,
        priority: str | None = None,
        repo: IssueRepository = Depends(_get_repository),
    ) -> JSONResponse:
        """Issues newest first, optionally filtered by status and/or priority."""
        for value, name in ((status, "status"), (priority, "priority")):
            err = _validate_enum_param(value, name)
            if err is not None:
                return err
        try:
            issues = await repo.list(status=status, priority=priority)
        except IssueboardError as e:
            return _core_error_response(e)
        return JSONResponse([i.to_dict() for i in issues])

    @router.post("/issues")
    async def api_create_issue(request: Request, repo: IssueRepository = Depends(_get_repository)) -> JSONResponse:
        body = await _parse_json_body(request)
        if isinstance(body, JSONResponse):
            return body
        if "title" not in body:
            return _error_response("title is required", "VALIDATION_ERROR", 400)
        form_args = {k: body[k] for k in _FORM_FIELDS if k in body}
        created_by = body.get("created_by")
        if created_by is None:
            return _error_response("created_by is required", "VALIDATION_ERROR", 400)
        try:
            form = IssueFormData(**form_args)
            issue, similar = await repo.create_with_similar(form, created_by, body.get("created_by_email", ""))
        except (IssueboardError, ValueError, TypeError) as e:
            return _core_error_response(e)
        result = CreateIssueResponse(
            issue=issue.to_dict(),
            similar=[_slim(s) for s in similar[:SIMILAR_DISPLAY_LIMIT]],
        )
        return JSONResponse(result, status_code=201)

    @router.get("/issue/{issue_id}")
    async def api_issue_detail(issue_id: str, repo: IssueRepository = Depends(_get_repository)) -> JSONResponse:
        try:
            issue = await repo.get(issue_id)
        except IssueboardError as e:
            return _core_error_response(e, issue_id)
        data: dict[str, Any] = dict(issue.to_dict())
        data["valid_transitions"] = valid_transitions(issue.status)
        return JSONResponse(data)

    @router.patch("/issue/{issue_id}")
    async def api_update_issue(issue_id: str, request: Request, repo: IssueRepository = Depends(_get_repository)) -> JSONResponse:
        body = await _parse_json_body(request)
        if isinstance(body, JSONResponse):
            return body
        try:
            issue = await repo.update(issue_id, **body)
        except (IssueboardError, ValueError, TypeError) as e:
            return _core_error_response(e, issue_id)
        return JSONResponse(issue.to_dict())

    @router.put("/issue/{issue_id}/status")
    async def api_update_status(issue_id: str, request: Request, repo: IssueRepository = Depends(_get_repository)) -> JSONResponse:
        body = await _parse_json_body(request)
        if isinstance(body, JSONResponse):
            return body
        status = body.get("status")
        if not isinstance(status, str):
            return _error_response("status is required", "VALIDATION_ERROR", 400)
        try:
            issue = await repo.update_status(issue_id, status)
        except (IssueboardError, ValueError) as e:
            return _core_error_response(e, issue_id)
        return JSONResponse(issue.to_dict())

    @router.put("/issue/{issue_id}/priority")
    async def api_update_priority(issue_id: str, request: Request, repo: IssueRepository = Depends(_get_repository)) -> JSONResponse:
        body = await _parse_json_body(request)
        if isinstance(body, JSONResponse):
            return body
        priority = body.get("priority")
        if not isinstance(priority, str):
            return _error_response("priority is required", "VALIDATION_ERROR", 400)
        try:
            issue = await repo.update_priority(issue_id, priority)
        except (IssueboardError, ValueError) as e:
            return _core_error_response(e, issue_id)
        return JSONResponse(issue.to_dict())

    @router.delete("/issue/{issue_id}")
    async def api_delete_issue(issue_id: str, repo: IssueRepository = Depends(_get_repository)) -> JSONResponse:
        try:
            await repo.delete(issue_id)
        except IssueboardError as e:
            return _core_error_response(e, issue_id)
        return JSONResponse({"deleted": issue_id})

    @router.get("/similar")
    async def api_similar(title: str = "", repo: IssueRepository = Depends(_get_repository)) -> JSONResponse:
        """Advisory duplicate check for a prospective title."""
        try:
            similar = await repo.find_similar(title)
        except IssueboardError as e:
            return _core_error_response(e)
        return JSONResponse(
            SimilarResponse(
                title=title,
                similar=[_slim(s) for s in similar],
                total=len(similar),
            )
        )

    @router.get("/transitions/{status}")
    async def api_transitions(status: str) -> JSONResponse:
        if status not in VALID_STATUSES:
            return _error_response(
                f'Unknown status "{status}". Valid statuses: {", ".join(VALID_STATUSES)}',
                "VALIDATION_ERROR",
                400,
            )
        return JSONResponse({"status": status, "valid_transitions": valid_transitions(status)})

    return router
