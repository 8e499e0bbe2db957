"""Issue Store contract and its SQLite adapter.

The repository only talks to a store through ``IssueStore``. The SQLite
adapter is the one shipped implementation: direct SQLite with WAL mode, no
daemon. Rows are strictly decoded into ``Issue`` objects at this boundary,
so a malformed record never reaches the core.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
import uuid
from collections.abc import Iterator, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from issueboard.core import (
    DB_FILENAME,
    MUTABLE_FIELDS,
    VALID_PRIORITIES,
    VALID_STATUSES,
    Issue,
    find_issueboard_root,
    read_config,
)
from issueboard.errors import DecodeError, NotFound, StoreUnavailable
from issueboard.filters import FilterSpec
from issueboard.types.core import IssueRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class IssueStore(Protocol):
    """Narrow CRUD contract consumed by ``IssueRepository``.

    Methods are coroutines; an adapter may suspend while talking to its
    backend. ``patch``/``remove``/``get`` raise ``NotFound`` for unknown ids;
    backend failures surface as ``StoreUnavailable``.
    """

    async def insert(self, record: IssueRecord) -> str: ...

    async def get(self, issue_id: str) -> Issue: ...

    async def get_all(self) -> list[Issue]: ...

    async def query(self, spec: FilterSpec) -> list[Issue]: ...

    async def patch(self, issue_id: str, fields: Mapping[str, Any]) -> None: ...

    async def remove(self, issue_id: str) -> None: ...


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

_STRING_FIELDS = ("id", "title", "description", "priority", "status", "assigned_to", "created_by", "created_by_email")


def decode_issue(row: Mapping[str, Any] | sqlite3.Row) -> Issue:
    """Convert a raw store record into an ``Issue``, failing closed.

    Raises ``DecodeError`` when a field is missing, has the wrong type, holds
    a value outside its enumeration, or the timestamp cannot be parsed.
    """
    data = dict(row)
    for name in (*_STRING_FIELDS, "created_at"):
        if name not in data:
            msg = f"Stored issue is missing field '{name}'"
            raise DecodeError(msg)
    for name in _STRING_FIELDS:
        if not isinstance(data[name], str):
            msg = f"Stored issue field '{name}' must be a string, got {type(data[name]).__name__}"
            raise DecodeError(msg)
    if data["status"] not in VALID_STATUSES:
        msg = f"Stored issue {data['id']} has unknown status '{data['status']}'"
        raise DecodeError(msg)
    if data["priority"] not in VALID_PRIORITIES:
        msg = f"Stored issue {data['id']} has unknown priority '{data['priority']}'"
        raise DecodeError(msg)

    raw_ts = data["created_at"]
    if isinstance(raw_ts, datetime):
        created_at = raw_ts
    elif isinstance(raw_ts, str):
        try:
            created_at = datetime.fromisoformat(raw_ts)
        except ValueError as exc:
            msg = f"Stored issue {data['id']} has unparseable created_at '{raw_ts}'"
            raise DecodeError(msg) from exc
    else:
        msg = f"Stored issue field 'created_at' must be a timestamp, got {type(raw_ts).__name__}"
        raise DecodeError(msg)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)

    return Issue(
        id=data["id"],
        title=data["title"],
        description=data["description"],
        priority=data["priority"],
        status=data["status"],
        assigned_to=data["assigned_to"],
        created_at=created_at,
        created_by=data["created_by"],
        created_by_email=data["created_by_email"],
    )


# ---------------------------------------------------------------------------
# SQLite adapter
# ---------------------------------------------------------------------------

SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS issues (
    id                TEXT PRIMARY KEY,
    title             TEXT NOT NULL,
    description       TEXT NOT NULL DEFAULT '',
    priority          TEXT NOT NULL DEFAULT 'medium',
    status            TEXT NOT NULL DEFAULT 'open',
    assigned_to       TEXT NOT NULL DEFAULT '',
    created_at        TEXT NOT NULL,
    created_by        TEXT NOT NULL,
    created_by_email  TEXT NOT NULL DEFAULT '',

    CHECK (priority IN ('low', 'medium', 'high')),
    CHECK (status IN ('open', 'in_progress', 'done'))
);

CREATE INDEX IF NOT EXISTS idx_issues_status ON issues(status, created_at);
CREATE INDEX IF NOT EXISTS idx_issues_priority ON issues(priority, created_at);
CREATE INDEX IF NOT EXISTS idx_issues_status_priority ON issues(status, priority, created_at);
CREATE INDEX IF NOT EXISTS idx_issues_created ON issues(created_at);
"""

CURRENT_SCHEMA_VERSION = 1

_INSERT_COLUMNS = ("title", "description", "priority", "status", "assigned_to", "created_at", "created_by", "created_by_email")


class SQLiteIssueStore:
    """``IssueStore`` over a single SQLite file.

    The coroutine methods run their SQLite I/O inline on the event-loop
    thread. This serializes access to the shared connection instead of
    racing on it from a thread pool.
    """

    def __init__(
        self,
        db_path: str | Path,
        *,
        prefix: str = "issueboard",
        check_same_thread: bool = True,
    ) -> None:
        self.db_path = Path(db_path)
        self.prefix = prefix
        self._conn: sqlite3.Connection | None = None
        self._check_same_thread = check_same_thread

    @classmethod
    def from_project(cls, project_path: Path | None = None) -> SQLiteIssueStore:
        """Create a store by discovering .issueboard/ from project_path (or cwd)."""
        issueboard_dir = find_issueboard_root(project_path)
        config = read_config(issueboard_dir)
        store = cls(issueboard_dir / DB_FILENAME, prefix=config.get("prefix", "issueboard"))
        store.initialize()
        return store

    def __enter__(self) -> SQLiteIssueStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(
                str(self.db_path),
                isolation_level="DEFERRED",
                check_same_thread=self._check_same_thread,
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA busy_timeout=5000")
        return self._conn

    def initialize(self) -> None:
        """Create tables (if new) and stamp the schema version."""
        current_version = self.get_schema_version()
        if current_version == 0:
            self.conn.executescript(SCHEMA_SQL)
            self.conn.execute(f"PRAGMA user_version = {CURRENT_SCHEMA_VERSION}")
        elif current_version > CURRENT_SCHEMA_VERSION:
            msg = (
                f"Database {self.db_path} has schema version {current_version}, "
                f"newer than this release supports ({CURRENT_SCHEMA_VERSION})"
            )
            raise StoreUnavailable(msg)
        self.conn.commit()

    def get_schema_version(self) -> int:
        """Return the current schema version from PRAGMA user_version."""
        result: int = self.conn.execute("PRAGMA user_version").fetchone()[0]
        return result

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @contextlib.contextmanager
    def _guard(self, op: str) -> Iterator[sqlite3.Connection]:
        """Roll back on any failure; report SQLite errors as ``StoreUnavailable``."""
        try:
            yield self.conn
        except sqlite3.Error as exc:
            self._rollback()
            logger.error("Store operation %s failed: %s", op, exc)
            msg = f"Issue store unavailable during {op}: {exc}"
            raise StoreUnavailable(msg) from exc
        except BaseException:
            self._rollback()
            raise

    def _rollback(self) -> None:
        if self._conn is not None and self._conn.in_transaction:
            with contextlib.suppress(sqlite3.Error):
                self._conn.rollback()

    def _generate_unique_id(self, conn: sqlite3.Connection) -> str:
        """Generate a unique ID using O(1) EXISTS checks against the PK index."""
        for _ in range(10):
            candidate = f"{self.prefix}-{uuid.uuid4().hex[:10]}"
            if conn.execute("SELECT 1 FROM issues WHERE id = ?", (candidate,)).fetchone() is None:
                return candidate
        return f"{self.prefix}-{uuid.uuid4().hex[:16]}"

    # -- IssueStore ------------------------------------------------------------

    async def insert(self, record: IssueRecord) -> str:
        with self._guard("insert") as conn:
            issue_id = self._generate_unique_id(conn)
            conn.execute(
                f"INSERT INTO issues (id, {', '.join(_INSERT_COLUMNS)}) VALUES (?, {', '.join('?' * len(_INSERT_COLUMNS))})",
                (issue_id, *(record[c] for c in _INSERT_COLUMNS)),  # type: ignore[literal-required]
            )
            conn.commit()
        logger.debug("Inserted issue %s", issue_id)
        return issue_id

    async def get(self, issue_id: str) -> Issue:
        with self._guard("get") as conn:
            row = conn.execute("SELECT * FROM issues WHERE id = ?", (issue_id,)).fetchone()
        if row is None:
            raise NotFound(issue_id)
        return decode_issue(row)

    async def get_all(self) -> list[Issue]:
        return await self.query(FilterSpec())

    async def query(self, spec: FilterSpec) -> list[Issue]:
        clause, params = spec.to_sql()
        with self._guard("query") as conn:
            rows = conn.execute(f"SELECT * FROM issues{clause}", params).fetchall()
        return [decode_issue(r) for r in rows]

    async def patch(self, issue_id: str, fields: Mapping[str, Any]) -> None:
        unknown = sorted(set(fields) - MUTABLE_FIELDS)
        if unknown:
            msg = f"Cannot patch field(s): {', '.join(unknown)}"
            raise ValueError(msg)
        with self._guard("patch") as conn:
            if not fields:
                exists = conn.execute("SELECT 1 FROM issues WHERE id = ?", (issue_id,)).fetchone()
                if exists is None:
                    raise NotFound(issue_id)
                return
            # Column names come from the MUTABLE_FIELDS whitelist checked above.
            assignments = ", ".join(f"{name} = ?" for name in fields)
            cursor = conn.execute(
                f"UPDATE issues SET {assignments} WHERE id = ?",
                [*fields.values(), issue_id],
            )
            if cursor.rowcount == 0:
                raise NotFound(issue_id)
            conn.commit()

    async def remove(self, issue_id: str) -> None:
        with self._guard("remove") as conn:
            cursor = conn.execute("DELETE FROM issues WHERE id = ?", (issue_id,))
            if cursor.rowcount == 0:
                raise NotFound(issue_id)
            conn.commit()
