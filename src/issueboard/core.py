"""Data model and project discovery for the issue tracker.

Convention-based discovery: each project has a `.issueboard/` directory
containing `issueboard.db` (SQLite) and `config.json` (ID prefix, default
principal).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Literal, get_args

from issueboard.types.core import ISOTimestamp, IssueDict, ProjectConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constrained-string Literal types
# ---------------------------------------------------------------------------

Status = Literal["open", "in_progress", "done"]
Priority = Literal["low", "medium", "high"]

VALID_STATUSES: tuple[Status, ...] = get_args(Status)
VALID_PRIORITIES: tuple[Priority, ...] = get_args(Priority)

STATUS_LABELS: dict[str, str] = {"open": "Open", "in_progress": "In Progress", "done": "Done"}

# Fields a caller may change after creation. Everything else is write-once.
MUTABLE_FIELDS: frozenset[str] = frozenset({"title", "description", "priority", "status", "assigned_to"})
WRITE_ONCE_FIELDS: frozenset[str] = frozenset({"id", "created_at", "created_by", "created_by_email"})

# ---------------------------------------------------------------------------
# Convention-based discovery
# ---------------------------------------------------------------------------

ISSUEBOARD_DIR_NAME = ".issueboard"
DB_FILENAME = "issueboard.db"
CONFIG_FILENAME = "config.json"


def find_issueboard_root(start: Path | None = None) -> Path:
    """Walk up from start (default cwd) looking for .issueboard/ directory.

    Returns the .issueboard/ directory path (not the project root).
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        candidate = parent / ISSUEBOARD_DIR_NAME
        if candidate.is_dir():
            return candidate
    msg = f"No {ISSUEBOARD_DIR_NAME}/ directory found in {current} or any parent"
    raise FileNotFoundError(msg)


def read_config(issueboard_dir: Path) -> ProjectConfig:
    """Read .issueboard/config.json. Returns defaults if missing or corrupt."""
    defaults = ProjectConfig(prefix="issueboard", version=1)
    config_path = issueboard_dir / CONFIG_FILENAME
    if not config_path.exists():
        return defaults
    try:
        result: ProjectConfig = json.loads(config_path.read_text())
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to read %s, using defaults: %s", config_path, exc)
        return defaults
    if not isinstance(result, dict):
        logger.warning("Ignoring %s: expected a JSON object", config_path)
        return defaults
    return result


def write_config(issueboard_dir: Path, config: dict[str, Any] | ProjectConfig) -> None:
    """Write .issueboard/config.json."""
    config_path = issueboard_dir / CONFIG_FILENAME
    config_path.write_text(json.dumps(config, indent=2) + "\n")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class IssueFormData:
    """Creation/update payload. Never carries the id or creation metadata."""

    title: str
    description: str = ""
    priority: Priority = "medium"
    status: Status = "open"
    assigned_to: str = ""


@dataclass
class Issue:
    id: str
    title: str
    description: str
    priority: Priority
    status: Status
    assigned_to: str
    created_at: datetime
    created_by: str
    created_by_email: str

    def to_dict(self) -> IssueDict:
        return IssueDict(
            id=self.id,
            title=self.title,
            description=self.description,
            priority=self.priority,
            status=self.status,
            assigned_to=self.assigned_to,
            created_at=ISOTimestamp(self.created_at.isoformat()),
            created_by=self.created_by,
            created_by_email=self.created_by_email,
        )

    def form(self) -> IssueFormData:
        """The caller-editable part of this issue."""
        return IssueFormData(
            title=self.title,
            description=self.description,
            priority=self.priority,
            status=self.status,
            assigned_to=self.assigned_to,
        )
