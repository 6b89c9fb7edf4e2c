import pytest

from runledger.core.statuses import (
    ACTIVE_STATUSES,
    FINISHED_STATUSES,
    ExecutionStatus,
    is_active,
    is_finished,
    status_value,
)


@pytest.mark.unit
def test_subsets_are_disjoint():
    assert FINISHED_STATUSES == {"success", "error"}
    assert ACTIVE_STATUSES == {"new", "running", "waiting"}
    assert not FINISHED_STATUSES & ACTIVE_STATUSES


@pytest.mark.unit
@pytest.mark.parametrize("status,finished,active", [
    (ExecutionStatus.SUCCESS, True, False),
    ("error", True, False),
    ("new", False, True),
    (ExecutionStatus.WAITING, False, True),
    ("canceled", False, False),
    ("unknown", False, False),
    ("archived", False, False),
    (None, False, False),
])
def test_membership(status, finished, active):
    assert is_finished(status) is finished
    assert is_active(status) is active


@pytest.mark.unit
def test_status_value():
    assert status_value(ExecutionStatus.RUNNING) == "running"
    assert status_value("custom") == "custom"
