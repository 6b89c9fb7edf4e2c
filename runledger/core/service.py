"""
Execution Query Service

Answers the three execution read paths:
1. find_latest_finished(n)  - newest finished runs, all workflows
2. find_all_active()        - every new/running/waiting run
3. find_range_with_count(q) - scoped, filtered, paginated page + total

The service is stateless; the store and directory are injected. The first
two operations are administrative and unscoped; anything acting on behalf
of a caller must go through find_range_with_count, which always enforces
accessibleWorkflowIds.

Example:
    with get_db() as db:
        service = build_query_service(db)
        result = service.find_range_with_count({
            "kind": "range",
            "status": ["success"],
            "accessibleWorkflowIds": [1, 2],
            "range": {"limit": 20},
        })
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..config import DEFAULT_COUNT_ESTIMATE_THRESHOLD, Settings
from ..schemas import ExecutionSummary, RangeQuery, RangeResult
from .counting import CountResolver
from .directory import WorkflowDirectory
from .exceptions import QueryValidationError
from .logging_config import query_context
from .pagination import PageRequest, fetch_page
from .predicates import build_predicate, unscoped_predicate
from .statuses import ACTIVE_STATUSES, FINISHED_STATUSES
from .store import ExecutionStore
from .summary import to_summaries

logger = logging.getLogger(__name__)


class ExecutionQueryService:
    """
    Read-only execution queries over an ExecutionStore and WorkflowDirectory.

    Validation always completes before the first store round trip. Store
    errors are not caught here.
    """

    def __init__(
        self,
        store: ExecutionStore,
        directory: WorkflowDirectory,
        estimate_threshold: int = DEFAULT_COUNT_ESTIMATE_THRESHOLD,
    ):
        """
        Args:
            store: Execution store collaborator
            directory: Workflow directory collaborator (names)
            estimate_threshold: Row estimate above which unfiltered counts
                may be reported as estimated
        """
        self.store = store
        self.directory = directory
        self.count_resolver = CountResolver(store, estimate_threshold)

    def _project(self, executions) -> List[ExecutionSummary]:
        if not executions:
            return []
        names = self.directory.names_of({e.workflow_id for e in executions})
        return to_summaries(executions, names)

    def find_latest_finished(self, n: int) -> List[ExecutionSummary]:
        """
        Up to n success/error executions, newest first, across all
        workflows. Returns fewer when fewer exist; n <= 0 returns [].
        """
        if n <= 0:
            return []

        with query_context():
            executions = self.store.fetch_filtered(
                unscoped_predicate(FINISHED_STATUSES), limit=n
            )
            logger.debug(
                f"find_latest_finished returned {len(executions)}/{n}",
                extra={"requested": n, "returned": len(executions)},
            )
            return self._project(executions)

    def find_all_active(self) -> List[ExecutionSummary]:
        """Every new, running or waiting execution. No limit, no pagination."""
        with query_context():
            executions = self.store.fetch_filtered(unscoped_predicate(ACTIVE_STATUSES))
            logger.debug(
                f"find_all_active returned {len(executions)}",
                extra={"returned": len(executions)},
            )
            return self._project(executions)

    def find_range_with_count(
        self,
        query: Union[RangeQuery, Mapping[str, Any]],
    ) -> RangeResult:
        """
        One page of executions plus the total matching the same filters.

        The count ignores range.limit and the cursor, so callers can tell
        how many rows remain by comparing it with what they have fetched.

        Raises:
            QueryValidationError: Malformed query, dates or cursors
            StoreUnavailableError: Store could not be reached
        """
        query = _validate_range_query(query)

        predicate = build_predicate(
            accessible_workflow_ids=query.accessible_workflow_ids,
            statuses=query.status,
            workflow_id=query.workflow_id,
            started_before=query.started_before,
            started_after=query.started_after,
        )
        page = PageRequest.create(
            query.range.limit,
            last_id=query.range.last_id,
            first_id=query.range.first_id,
        )

        with query_context():
            count = self.count_resolver.resolve(predicate)
            executions = fetch_page(self.store, predicate, page)
            results = self._project(executions)

            logger.info(
                f"Range query returned {len(results)} of {count.count} executions",
                extra={
                    "count": count.count,
                    "estimated": count.estimated,
                    "returned": len(results),
                    "limit": page.limit,
                    "last_id": page.last_id,
                    "first_id": page.first_id,
                },
            )

        return RangeResult(count=count.count, estimated=count.estimated, results=results)


def _validate_range_query(query: Union[RangeQuery, Mapping[str, Any]]) -> RangeQuery:
    if isinstance(query, RangeQuery):
        return query
    try:
        return RangeQuery.model_validate(query)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise QueryValidationError(
            f"Invalid range query: {field}: {first.get('msg')}", field=field or None
        ) from e


def build_query_service(
    db_session: Session,
    settings: Optional[Settings] = None,
) -> ExecutionQueryService:
    """Wire store, directory and service onto one session"""
    settings = settings or Settings.from_env()
    return ExecutionQueryService(
        store=ExecutionStore(db_session),
        directory=WorkflowDirectory(db_session),
        estimate_threshold=settings.count_estimate_threshold,
    )
