"""
Summary Projector

Pure mapping from Execution rows to ExecutionSummary. No I/O: the
workflow name is resolved by the caller and passed in.
"""

from datetime import datetime, timezone
from typing import Mapping, Optional

from ..models.execution import Execution
from ..schemas import ExecutionSummary


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Render as 'YYYY-MM-DD HH:MM:SS.mmm' in UTC, no zone suffix.

    Naive datetimes are taken to be UTC already. None stays None.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{value:%Y-%m-%d %H:%M:%S}.{value.microsecond // 1000:03d}"


def to_summary(execution: Execution, workflow_name: Optional[str]) -> ExecutionSummary:
    return ExecutionSummary(
        id=execution.id,
        workflow_id=execution.workflow_id,
        workflow_name=workflow_name,
        mode=execution.mode,
        retry_of=execution.retry_of,
        status=execution.status,
        started_at=format_timestamp(execution.started_at),
        stopped_at=format_timestamp(execution.stopped_at),
        wait_till=format_timestamp(execution.wait_till),
        retry_success_id=execution.retry_success_id,
    )


def to_summaries(executions, workflow_names: Mapping[int, str]):
    """Project rows in order; unknown workflows get workflow_name=None"""
    return [to_summary(e, workflow_names.get(e.workflow_id)) for e in executions]
