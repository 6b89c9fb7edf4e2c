"""
Count Resolver

Counts the executions matching a predicate, ignoring cursor and limit.

Exact COUNT(*) is the default. For an unscoped, unnarrowed scan (no
workflow scope, status, workflow or time filter) on a store that keeps
planner statistics, the statistical live-row estimate is used instead
once it exceeds the threshold, and the result is flagged estimated=True.
Callers must treat an estimated count as approximate.

Scoped predicates are always counted exactly. An empty scope counts 0
without a store round trip.
"""

import logging
from dataclasses import dataclass, replace

from .predicates import ExecutionPredicate
from .store import ExecutionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountResult:
    count: int
    estimated: bool = False


class CountResolver:

    def __init__(self, store: ExecutionStore, estimate_threshold: int):
        """
        Args:
            store: Execution store
            estimate_threshold: Live-row estimate above which unnarrowed
                counts are estimated instead of exact
        """
        self.store = store
        self.estimate_threshold = estimate_threshold

    def resolve(self, predicate: ExecutionPredicate) -> CountResult:
        # Cursor bounds never affect the total
        predicate = replace(predicate, id_below=None, id_above=None)

        # An empty scope can see nothing
        if predicate.is_scoped and not predicate.accessible_workflow_ids:
            return CountResult(count=0, estimated=False)

        # Table statistics cover every workflow, so scoped counts stay exact
        if not predicate.is_scoped and not predicate.is_narrowed:
            estimate = self.store.estimate_row_count()
            if estimate is not None and estimate > self.estimate_threshold:
                logger.debug(
                    f"Using estimated execution count {estimate}",
                    extra={"estimate": estimate, "threshold": self.estimate_threshold},
                )
                return CountResult(count=estimate, estimated=True)

        return CountResult(count=self.store.count_filtered(predicate), estimated=False)
