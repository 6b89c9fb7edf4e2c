"""
Execution status vocabulary.

Statuses are stored as plain strings. The enum names the values this
package gives meaning to; any other string is still a valid filter value
and simply matches whatever the store holds.
"""

from enum import Enum
from typing import Union


class ExecutionStatus(str, Enum):
    NEW = "new"
    RUNNING = "running"
    WAITING = "waiting"
    SUCCESS = "success"
    ERROR = "error"
    CANCELED = "canceled"
    UNKNOWN = "unknown"


# Terminal outcomes reported by find_latest_finished
FINISHED_STATUSES = frozenset({ExecutionStatus.SUCCESS.value, ExecutionStatus.ERROR.value})

# In-flight executions reported by find_all_active
ACTIVE_STATUSES = frozenset({
    ExecutionStatus.NEW.value,
    ExecutionStatus.RUNNING.value,
    ExecutionStatus.WAITING.value,
})


def status_value(status: Union[ExecutionStatus, str]) -> str:
    """Plain string for an enum member or a free-form status"""
    if isinstance(status, ExecutionStatus):
        return status.value
    return str(status)


def is_finished(status: Union[ExecutionStatus, str, None]) -> bool:
    return status is not None and status_value(status) in FINISHED_STATUSES


def is_active(status: Union[ExecutionStatus, str, None]) -> bool:
    return status is not None and status_value(status) in ACTIVE_STATUSES
