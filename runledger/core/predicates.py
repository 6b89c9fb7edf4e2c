"""
Query Predicate Builder

Turns a declarative execution query into an immutable ExecutionPredicate
and, from there, into SQLAlchemy filter clauses on Execution.

Only dimensions that were actually supplied constrain the result. The one
exception is the accessible-workflow scope: a scoped predicate always
carries it, so a workflow_id outside the scope matches zero rows instead
of bypassing it.

Example:
    predicate = build_predicate(
        accessible_workflow_ids=[1, 2],
        statuses=["success"],
        started_after="2020-07-01",
    )
    clauses = to_clauses(predicate)
    session.query(Execution).filter(*clauses)
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, FrozenSet, Iterable, List, Optional, Tuple, Union

from sqlalchemy.sql.elements import ColumnElement

from ..models.execution import Execution
from .exceptions import QueryValidationError
from .statuses import ExecutionStatus, status_value

DateBound = Union[str, datetime, None]


@dataclass(frozen=True)
class ExecutionPredicate:
    """
    Filter over the executions table.

    accessible_workflow_ids=None means unscoped and is reserved for
    administrative queries; use unscoped_predicate() to build one.
    id_below / id_above are exclusive cursor bounds added by with_cursor().
    """

    accessible_workflow_ids: Optional[FrozenSet[int]]
    statuses: Optional[FrozenSet[str]] = None
    workflow_id: Optional[int] = None
    started_before: Optional[datetime] = None
    started_after: Optional[datetime] = None
    id_below: Optional[int] = None
    id_above: Optional[int] = None

    @property
    def is_scoped(self) -> bool:
        return self.accessible_workflow_ids is not None

    @property
    def is_narrowed(self) -> bool:
        """True when status, workflow or time filters restrict the scan"""
        return bool(
            self.statuses
            or self.workflow_id is not None
            or self.started_before is not None
            or self.started_after is not None
        )

    @property
    def has_cursor(self) -> bool:
        return self.id_below is not None or self.id_above is not None


# ============================================================================
# VALUE COERCION
# ============================================================================

def parse_date_bound(value: DateBound, field: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime into a naive UTC datetime.

    Accepts "2020-07-01", "2020-07-01T10:00:00", "2020-07-01 10:00:00.123",
    "2020-07-01T10:00:00Z" and explicit offsets. Aware values are
    converted to UTC before the zone is dropped, matching how timestamps
    are stored.

    Raises:
        QueryValidationError: If the value cannot be parsed
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise QueryValidationError(f"{field} must not be empty", field=field)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise QueryValidationError(
                f"{field} is not a valid ISO-8601 date: {value!r}", field=field
            )
    else:
        raise QueryValidationError(
            f"{field} must be a date string, got {type(value).__name__}", field=field
        )

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def coerce_id(value: Any, field: str) -> Optional[int]:
    """
    Execution and workflow ids are integers; numeric strings are accepted.

    Raises:
        QueryValidationError: For booleans, non-numeric strings and other types
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise QueryValidationError(f"{field} must be an id, got a boolean", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise QueryValidationError(f"{field} is not a valid id: {value!r}", field=field)


def _status_set(statuses: Optional[Iterable[Union[ExecutionStatus, str]]]) -> Optional[FrozenSet[str]]:
    if not statuses:
        return None
    return frozenset(status_value(s) for s in statuses)


# ============================================================================
# BUILDERS
# ============================================================================

def build_predicate(
    accessible_workflow_ids: Iterable[Any],
    statuses: Optional[Iterable[Union[ExecutionStatus, str]]] = None,
    workflow_id: Any = None,
    started_before: DateBound = None,
    started_after: DateBound = None,
) -> ExecutionPredicate:
    """
    Build a scoped predicate. All validation happens here, before any
    store access.
    """
    if accessible_workflow_ids is None:
        raise QueryValidationError(
            "accessible_workflow_ids is required", field="accessible_workflow_ids"
        )

    scope = frozenset(
        coerce_id(wid, "accessible_workflow_ids") for wid in accessible_workflow_ids
    )
    predicate = ExecutionPredicate(accessible_workflow_ids=scope)
    predicate = with_statuses(predicate, statuses)
    predicate = with_workflow(predicate, workflow_id)
    return with_started_bounds(predicate, started_before, started_after)


def unscoped_predicate(
    statuses: Optional[Iterable[Union[ExecutionStatus, str]]] = None,
) -> ExecutionPredicate:
    """Predicate without workflow scoping, for administrative queries only"""
    return with_statuses(ExecutionPredicate(accessible_workflow_ids=None), statuses)


def with_statuses(
    predicate: ExecutionPredicate,
    statuses: Optional[Iterable[Union[ExecutionStatus, str]]],
) -> ExecutionPredicate:
    return replace(predicate, statuses=_status_set(statuses))


def with_workflow(predicate: ExecutionPredicate, workflow_id: Any) -> ExecutionPredicate:
    return replace(predicate, workflow_id=coerce_id(workflow_id, "workflow_id"))


def with_started_bounds(
    predicate: ExecutionPredicate,
    started_before: DateBound,
    started_after: DateBound,
) -> ExecutionPredicate:
    return replace(
        predicate,
        started_before=parse_date_bound(started_before, "started_before"),
        started_after=parse_date_bound(started_after, "started_after"),
    )


def cursor_bounds(last_id: Any = None, first_id: Any = None) -> Tuple[Optional[int], Optional[int]]:
    """
    Validate a cursor pair into (id_below, id_above).

    Raises:
        QueryValidationError: Both cursors given, or a malformed id
    """
    if last_id is not None and first_id is not None:
        raise QueryValidationError(
            "range.lastId and range.firstId cannot be combined", field="range"
        )
    return coerce_id(last_id, "range.lastId"), coerce_id(first_id, "range.firstId")


def with_cursor(
    predicate: ExecutionPredicate,
    last_id: Any = None,
    first_id: Any = None,
) -> ExecutionPredicate:
    """
    Add exclusive id bounds: last_id keeps ids below it, first_id keeps
    ids above it. The two are mutually exclusive.
    """
    id_below, id_above = cursor_bounds(last_id, first_id)
    return replace(predicate, id_below=id_below, id_above=id_above)


# ============================================================================
# SQL TRANSLATION
# ============================================================================

def to_clauses(predicate: ExecutionPredicate) -> List[ColumnElement]:
    """SQLAlchemy clauses to AND together in Query.filter()"""
    clauses: List[ColumnElement] = []

    if predicate.accessible_workflow_ids is not None:
        clauses.append(Execution.workflow_id.in_(sorted(predicate.accessible_workflow_ids)))

    if predicate.workflow_id is not None:
        clauses.append(Execution.workflow_id == predicate.workflow_id)

    if predicate.statuses:
        clauses.append(Execution.status.in_(sorted(predicate.statuses)))

    if predicate.started_before is not None:
        clauses.append(Execution.started_at <= predicate.started_before)

    if predicate.started_after is not None:
        clauses.append(Execution.started_at >= predicate.started_after)

    if predicate.id_below is not None:
        clauses.append(Execution.id < predicate.id_below)

    if predicate.id_above is not None:
        clauses.append(Execution.id > predicate.id_above)

    return clauses
