"""Debounced duplicate check for interactive title entry.

A caller typing a title fires ``submit`` on every keystroke. Each call
cancels the pending check and schedules a fresh one after ``delay``
seconds, so only the title the caller settled on hits the store. A
superseded check never delivers its result.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from issueboard.similarity import MIN_TITLE_LENGTH

if TYPE_CHECKING:
    from issueboard.core import Issue
    from issueboard.repository import IssueRepository

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 0.5


class SimilarityCheck:
    """Caller-owned debounce timer around ``IssueRepository.find_similar``.

    Must be used from within a running event loop.
    """

    def __init__(
        self,
        repository: IssueRepository,
        *,
        delay: float = DEFAULT_DELAY,
        on_result: Callable[[str, list[Issue]], None] | None = None,
    ) -> None:
        if delay < 0:
            msg = f"delay must be >= 0, got {delay}"
            raise ValueError(msg)
        self._repository = repository
        self._delay = delay
        self._on_result = on_result
        self._task: asyncio.Task[list[Issue]] | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, title: str) -> asyncio.Task[list[Issue]]:
        """Replace any pending check with one for *title*."""
        self.cancel()
        self._generation += 1
        self._task = asyncio.create_task(self._run(title, self._generation))
        return self._task

    def cancel(self) -> None:
        """Drop the pending check, if any. Its result is discarded."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def latest(self) -> list[Issue]:
        """Wait for the most recent submission's result.

        Follows replacements made while waiting; returns ``[]`` when
        nothing is pending or the check was cancelled.
        """
        while self._task is not None:
            task = self._task
            try:
                return await task
            except asyncio.CancelledError:
                if task is self._task:
                    raise
        return []

    async def _run(self, title: str, generation: int) -> list[Issue]:
        if len(title) < MIN_TITLE_LENGTH:
            result: list[Issue] = []
        else:
            await asyncio.sleep(self._delay)
            result = await self._repository.find_similar(title)
        if generation != self._generation:
            logger.debug("Discarding superseded similarity result for %r", title)
            return result
        if self._on_result is not None:
            self._on_result(title, result)
        return result
