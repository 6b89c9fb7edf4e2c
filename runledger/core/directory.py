"""
Workflow Directory

Resolves workflow ids to display names and computes which workflows a
principal may see (via workflow_shares).
"""

import logging
from typing import Dict, FrozenSet, Iterable, Optional

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from ..models.workflow import Workflow, WorkflowShare
from .exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class WorkflowDirectory:

    def __init__(self, db_session: Session):
        self.db_session = db_session

    def name_of(self, workflow_id: int) -> Optional[str]:
        """Display name, or None if the workflow does not exist"""
        return self.names_of([workflow_id]).get(workflow_id)

    def names_of(self, workflow_ids: Iterable[int]) -> Dict[int, str]:
        """Display names for several workflows in one round trip"""
        ids = sorted(set(workflow_ids))
        if not ids:
            return {}

        try:
            rows = (
                self.db_session.query(Workflow.id, Workflow.name)
                .filter(Workflow.id.in_(ids))
                .all()
            )
        except (OperationalError, InterfaceError) as e:
            logger.error(f"Workflow directory unavailable: {e}")
            raise StoreUnavailableError(f"Workflow directory unavailable: {e}") from e

        return {workflow_id: name for workflow_id, name in rows}

    def accessible_ids_for(self, principal: str) -> FrozenSet[int]:
        """Ids of every workflow shared with the principal"""
        try:
            rows = (
                self.db_session.query(WorkflowShare.workflow_id)
                .filter(WorkflowShare.principal == principal)
                .distinct()
                .all()
            )
        except (OperationalError, InterfaceError) as e:
            logger.error(f"Workflow directory unavailable: {e}")
            raise StoreUnavailableError(f"Workflow directory unavailable: {e}") from e

        accessible = frozenset(row[0] for row in rows)
        logger.debug(
            f"Principal {principal!r} can access {len(accessible)} workflows",
            extra={"principal": principal},
        )
        return accessible
