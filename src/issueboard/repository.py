"""IssueRepository: the caller-facing issue operations.

Orchestrates the pure pieces against an ``IssueStore``:

* the transition validator runs before any status change is persisted,
* the similarity matcher runs before a new issue is persisted (advisory),
* the filter builder shapes every listing query.

Holds no cache and no state besides the store; every read goes to the store.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from issueboard.core import MUTABLE_FIELDS, WRITE_ONCE_FIELDS, Issue, IssueFormData
from issueboard.errors import DecodeError, InvalidTransition, StoreUnavailable
from issueboard.filters import build_filter
from issueboard.similarity import MIN_TITLE_LENGTH, find_similar
from issueboard.types.core import ISOTimestamp, IssueRecord
from issueboard.validation import (
    sanitize_principal,
    validate_form,
    validate_priority,
    validate_status,
    validate_text,
    validate_title,
)
from issueboard.workflow import check_transition

if TYPE_CHECKING:
    from issueboard.db_store import IssueStore

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


class IssueRepository:
    """Create/read/update/delete issues with lifecycle validation applied."""

    def __init__(self, store: IssueStore) -> None:
        self.store = store

    # -- Create ----------------------------------------------------------------

    async def create(self, form: IssueFormData, creator_id: str, creator_email: str) -> Issue:
        """Persist a new issue stamped with creation time and principal.

        The status is taken as-is: there is no prior state to validate a
        transition against.
        """
        validate_form(form)
        created_by, err = sanitize_principal(creator_id, "creator_id")
        if err:
            raise ValueError(err)
        # The email is display-only; an absent one is stored as "".
        created_by_email = ""
        if creator_email:
            created_by_email, err = sanitize_principal(creator_email, "creator_email")
            if err:
                raise ValueError(err)

        record = IssueRecord(
            title=form.title,
            description=form.description,
            priority=form.priority,
            status=form.status,
            assigned_to=form.assigned_to,
            created_at=ISOTimestamp(_now().isoformat()),
            created_by=created_by,
            created_by_email=created_by_email,
        )
        issue_id = await self.store.insert(record)
        logger.info("Created issue %s (%s/%s) by %s", issue_id, form.status, form.priority, created_by)
        return await self.store.get(issue_id)

    async def create_with_similar(
        self, form: IssueFormData, creator_id: str, creator_email: str
    ) -> tuple[Issue, list[Issue]]:
        """Create an issue and report the pre-existing issues it may duplicate.

        The duplicate check never blocks creation: if the existing issues
        cannot be read, the failure is logged and no matches are reported.
        """
        validate_form(form)
        try:
            similar = await self.find_similar(form.title)
        except (DecodeError, StoreUnavailable) as e:
            logger.warning("Duplicate check skipped for %r: %s", form.title, e)
            similar = []
        if similar:
            logger.info("New issue %r resembles %d existing issue(s)", form.title, len(similar))
        issue = await self.create(form, creator_id, creator_email)
        return issue, similar

    # -- Read ------------------------------------------------------------------

    async def get(self, issue_id: str) -> Issue:
        return await self.store.get(issue_id)

    async def list(self, status: str | None = None, priority: str | None = None) -> list[Issue]:
        """Issues matching every given filter, newest first."""
        return await self.store.query(build_filter(status, priority))

    async def find_similar(self, candidate_title: str) -> list[Issue]:
        """Existing issues that look like duplicates of *candidate_title*.

        Reads every issue in the store. Acceptable for an advisory check, not
        for anything on a hot path.
        """
        if len(candidate_title) < MIN_TITLE_LENGTH:
            return []
        return find_similar(candidate_title, await self.store.get_all())

    # -- Update ----------------------------------------------------------------

    async def update_status(self, issue_id: str, next_status: str) -> Issue:
        """Move an issue to *next_status*.

        Raises ``InvalidTransition`` (nothing persisted) when the lifecycle
        forbids the move, ``NotFound`` for an unknown id.
        """
        validate_status(next_status)
        current = await self.store.get(issue_id)
        self._check_transition(current, next_status)
        await self.store.patch(issue_id, {"status": next_status})
        logger.info("Issue %s status %s -> %s", issue_id, current.status, next_status)
        return await self.store.get(issue_id)

    async def update_priority(self, issue_id: str, next_priority: str) -> Issue:
        validate_priority(next_priority)
        await self.store.patch(issue_id, {"priority": next_priority})
        logger.info("Issue %s priority -> %s", issue_id, next_priority)
        return await self.store.get(issue_id)

    async def update(self, issue_id: str, **changes: Any) -> Issue:
        """Patch any subset of the mutable fields in one write.

        All inputs are validated before anything is written; a forbidden
        status change rejects the whole patch.
        """
        write_once = sorted(set(changes) & WRITE_ONCE_FIELDS)
        if write_once:
            msg = f"Field(s) cannot be changed after creation: {', '.join(write_once)}"
            raise ValueError(msg)
        unknown = sorted(set(changes) - MUTABLE_FIELDS)
        if unknown:
            msg = f"Unknown field(s): {', '.join(unknown)}. Updatable fields: {', '.join(sorted(MUTABLE_FIELDS))}"
            raise ValueError(msg)

        if "title" in changes:
            validate_title(changes["title"])
        if "description" in changes:
            validate_text(changes["description"], "description")
        if "assigned_to" in changes:
            validate_text(changes["assigned_to"], "assigned_to")
        if "priority" in changes:
            validate_priority(changes["priority"])
        if "status" in changes:
            validate_status(changes["status"])

        current = await self.store.get(issue_id)
        if "status" in changes:
            self._check_transition(current, changes["status"])

        await self.store.patch(issue_id, changes)
        if changes:
            logger.info("Updated issue %s: %s", issue_id, ", ".join(sorted(changes)))
        return await self.store.get(issue_id)

    # -- Delete ----------------------------------------------------------------

    async def delete(self, issue_id: str) -> None:
        """Remove an issue. Deleting an unknown id raises ``NotFound``."""
        await self.store.remove(issue_id)
        logger.info("Deleted issue %s", issue_id)

    # -- Helpers ---------------------------------------------------------------

    @staticmethod
    def _check_transition(current: Issue, next_status: str) -> None:
        try:
            check_transition(current.status, next_status, issue_id=current.id)
        except InvalidTransition:
            logger.warning("Rejected transition %s -> %s for %s", current.status, next_status, current.id)
            raise

