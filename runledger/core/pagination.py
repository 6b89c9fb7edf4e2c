"""
Cursor Paginator

Pages are always ordered by execution id, newest first. Cursors are
exclusive id bounds:
- last_id: only ids below it ("older than this row")
- first_id: only ids above it ("newer than this row"), still newest first

Because ids only grow, walking backward with last_id is stable while new
executions are being inserted; walking forward with first_id may pick up
rows inserted since the previous page.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from ..models.execution import Execution
from .exceptions import QueryValidationError
from .predicates import ExecutionPredicate, cursor_bounds, with_cursor
from .store import ExecutionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageRequest:
    """Validated range.{limit, lastId, firstId}"""

    limit: int
    last_id: Optional[int] = None
    first_id: Optional[int] = None

    @classmethod
    def create(cls, limit: Any, last_id: Any = None, first_id: Any = None) -> "PageRequest":
        """
        Raises:
            QueryValidationError: Missing/non-integer limit, malformed ids,
                or both cursors given
        """
        if limit is None or isinstance(limit, bool) or not isinstance(limit, int):
            raise QueryValidationError("range.limit must be an integer", field="range.limit")
        last_id, first_id = cursor_bounds(last_id, first_id)
        return cls(limit=limit, last_id=last_id, first_id=first_id)

    @property
    def is_empty(self) -> bool:
        """A non-positive limit asks for nothing; not an error"""
        return self.limit <= 0

    def bound(self, predicate: ExecutionPredicate) -> ExecutionPredicate:
        return with_cursor(predicate, last_id=self.last_id, first_id=self.first_id)


def fetch_page(
    store: ExecutionStore,
    predicate: ExecutionPredicate,
    page: PageRequest,
) -> List[Execution]:
    """One page of rows matching predicate and the page's cursor"""
    if page.is_empty:
        return []
    return store.fetch_filtered(page.bound(predicate), limit=page.limit)


def iter_pages(
    store: ExecutionStore,
    predicate: ExecutionPredicate,
    page_size: int,
    last_id: Optional[int] = None,
) -> Iterator[List[Execution]]:
    """
    Walk backward through every matching row, one page at a time.

    Each page's oldest id becomes the next page's last_id. Stops after the
    first short page.
    """
    if page_size <= 0:
        raise QueryValidationError("page_size must be positive", field="page_size")

    cursor = last_id
    while True:
        page = fetch_page(store, predicate, PageRequest.create(page_size, last_id=cursor))
        if page:
            yield page
        if len(page) < page_size:
            return
        cursor = page[-1].id
        logger.debug(f"Advancing page cursor to {cursor}")
