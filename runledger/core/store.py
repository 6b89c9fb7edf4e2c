"""
Execution Store

Read-only access to the executions table through a SQLAlchemy session.
Connection-level failures are logged and re-raised as
StoreUnavailableError; nothing is retried here.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func, text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from ..models.execution import Execution
from .exceptions import StoreUnavailableError
from .predicates import ExecutionPredicate, to_clauses

logger = logging.getLogger(__name__)


class ExecutionStore:
    """
    Executions table reader.

    Provides:
    - fetch_filtered: rows matching a predicate, newest first
    - count_filtered: exact COUNT over a predicate
    - list_ids_ordered: every id, oldest first (for establishing cursors)
    - estimate_row_count: planner statistics, PostgreSQL only
    """

    def __init__(self, db_session: Session):
        """
        Args:
            db_session: SQLAlchemy database session
        """
        self.db_session = db_session

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (OperationalError, InterfaceError) as e:
            logger.error(
                f"Execution store unavailable during {operation}: {e}",
                extra={"operation": operation},
            )
            raise StoreUnavailableError(f"Execution store unavailable: {e}") from e

    @property
    def dialect(self) -> str:
        return self.db_session.get_bind().dialect.name

    def fetch_filtered(
        self,
        predicate: ExecutionPredicate,
        limit: Optional[int] = None,
    ) -> List[Execution]:
        """
        Rows matching the predicate ordered by id descending.

        Args:
            predicate: Filter, cursor bounds included
            limit: Maximum number of rows, None for all
        """
        with self._guard("fetch_filtered"):
            query = (
                self.db_session.query(Execution)
                .filter(*to_clauses(predicate))
                .order_by(Execution.id.desc())
            )
            if limit is not None:
                query = query.limit(limit)
            return query.all()

    def count_filtered(self, predicate: ExecutionPredicate) -> int:
        with self._guard("count_filtered"):
            count = (
                self.db_session.query(func.count(Execution.id))
                .filter(*to_clauses(predicate))
                .scalar()
            )
            return int(count or 0)

    def list_ids_ordered(self) -> List[int]:
        """All execution ids in creation order (ascending)"""
        with self._guard("list_ids_ordered"):
            rows = self.db_session.query(Execution.id).order_by(Execution.id.asc()).all()
            return [row[0] for row in rows]

    def estimate_row_count(self) -> Optional[int]:
        """
        Approximate number of live rows from PostgreSQL statistics.

        Returns:
            The estimate, or None when the dialect has no such statistics
            or the table has not been analyzed yet.
        """
        if self.dialect != "postgresql":
            return None

        with self._guard("estimate_row_count"):
            estimate = self.db_session.execute(
                text(
                    "SELECT n_live_tup FROM pg_stat_all_tables "
                    "WHERE relname = :table_name AND schemaname = current_schema()"
                ),
                {"table_name": Execution.__tablename__},
            ).scalar()

        if estimate is None or estimate < 0:
            return None
        return int(estimate)
