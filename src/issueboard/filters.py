"""Query filter construction for issue listings.

``build_filter`` turns optional status/priority selections into a
``FilterSpec``: zero, one or two AND'd equality predicates plus a mandatory
newest-first ordering. A FilterSpec performs no I/O; store adapters render it
(``to_sql``) or evaluate it (``matches``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from issueboard.core import VALID_PRIORITIES, VALID_STATUSES

# Columns a predicate may reference. Rendered into SQL verbatim, so the set
# must stay hardcoded.
FILTERABLE_FIELDS: frozenset[str] = frozenset({"id", "status", "priority", "assigned_to", "created_by"})
ORDERABLE_FIELDS: frozenset[str] = frozenset({"created_at"})


@dataclass(frozen=True)
class Predicate:
    """Equality predicate ``field = value``."""

    field: str
    value: str
    op: Literal["="] = "="

    def __post_init__(self) -> None:
        if self.field not in FILTERABLE_FIELDS:
            msg = f"Cannot filter on '{self.field}'. Filterable fields: {', '.join(sorted(FILTERABLE_FIELDS))}"
            raise ValueError(msg)


@dataclass(frozen=True)
class FilterSpec:
    predicates: tuple[Predicate, ...] = ()
    order_by: str = "created_at"
    descending: bool = True

    def __post_init__(self) -> None:
        if self.order_by not in ORDERABLE_FIELDS:
            msg = f"Cannot order by '{self.order_by}'"
            raise ValueError(msg)

    def matches(self, record: Mapping[str, Any]) -> bool:
        """Evaluate the conjunction of predicates against *record*."""
        return all(record.get(p.field) == p.value for p in self.predicates)

    def to_sql(self) -> tuple[str, list[Any]]:
        """Render ``(" WHERE ... ORDER BY ...", params)``.

        Ties on the order-by column fall back to insertion order (``rowid``).
        """
        params: list[Any] = []
        conditions: list[str] = []
        for p in self.predicates:
            conditions.append(f"{p.field} = ?")
            params.append(p.value)
        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        direction = "DESC" if self.descending else "ASC"
        return f"{where} ORDER BY {self.order_by} {direction}, rowid ASC", params


def build_filter(status: str | None = None, priority: str | None = None) -> FilterSpec:
    """Map optional status/priority selections to a ``FilterSpec``.

    ``None`` means "any". Both set means both must match.
    """
    predicates: list[Predicate] = []
    if status is not None:
        if status not in VALID_STATUSES:
            msg = f"Invalid status '{status}'. Valid statuses: {', '.join(VALID_STATUSES)}"
            raise ValueError(msg)
        predicates.append(Predicate("status", status))
    if priority is not None:
        if priority not in VALID_PRIORITIES:
            msg = f"Invalid priority '{priority}'. Valid priorities: {', '.join(VALID_PRIORITIES)}"
            raise ValueError(msg)
        predicates.append(Predicate("priority", priority))
    return FilterSpec(predicates=tuple(predicates))
