"""Issue lifecycle state machine.

Three states, no designated initial or terminal state: an issue may be
created in any status and reopened from ``done``. The single forbidden edge
is ``open -> done``; work has to be acknowledged as underway before it can
be closed.

Pure functions. No store, logging or adapter dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from issueboard.core import STATUS_LABELS, VALID_STATUSES, Status
from issueboard.errors import InvalidTransition

FORBIDDEN_TRANSITIONS: frozenset[tuple[str, str]] = frozenset({("open", "done")})

_FORBIDDEN_REASONS: dict[tuple[str, str], str] = {
    ("open", "done"): (
        f"An issue cannot move directly from {STATUS_LABELS['open']} to {STATUS_LABELS['done']}. "
        f"Please move it to '{STATUS_LABELS['in_progress']}' first."
    ),
}


@dataclass(frozen=True)
class TransitionResult:
    """Result of validating a specific state transition."""

    allowed: bool
    reason: str | None = None


def _require_status(value: str, name: str) -> None:
    if value not in VALID_STATUSES:
        msg = f"Invalid {name} status '{value}'. Valid statuses: {', '.join(VALID_STATUSES)}"
        raise ValueError(msg)


def validate_transition(current: str, requested: str) -> TransitionResult:
    """Check whether an issue in *current* may move to *requested*.

    No-op transitions are allowed. Raises ``ValueError`` for values outside
    the status enumeration.
    """
    _require_status(current, "current")
    _require_status(requested, "requested")
    if (current, requested) in FORBIDDEN_TRANSITIONS:
        return TransitionResult(allowed=False, reason=_FORBIDDEN_REASONS[(current, requested)])
    return TransitionResult(allowed=True)


def check_transition(current: str, requested: str, *, issue_id: str | None = None) -> None:
    """Raise ``InvalidTransition`` if *current* -> *requested* is not allowed."""
    result = validate_transition(current, requested)
    if not result.allowed:
        raise InvalidTransition(current, requested, result.reason or "", issue_id=issue_id)


def valid_transitions(current: str) -> list[Status]:
    """Statuses reachable from *current*, in enumeration order, excluding the no-op."""
    _require_status(current, "current")
    return [s for s in VALID_STATUSES if s != current and (current, s) not in FORBIDDEN_TRANSITIONS]
