"""
Core query components: predicates, pagination, counting, projection and
the ExecutionQueryService that composes them.
"""

from .exceptions import (
    RunLedgerException,
    QueryValidationError,
    DatabaseError,
    StoreUnavailableError,
)
from .service import ExecutionQueryService, build_query_service
from .statuses import ExecutionStatus, FINISHED_STATUSES, ACTIVE_STATUSES

__all__ = [
    "RunLedgerException",
    "QueryValidationError",
    "DatabaseError",
    "StoreUnavailableError",
    "ExecutionQueryService",
    "build_query_service",
    "ExecutionStatus",
    "FINISHED_STATUSES",
    "ACTIVE_STATUSES",
]
