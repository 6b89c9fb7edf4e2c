"""
Tests for the summary projector
"""

import pytest
from datetime import datetime, timedelta, timezone

from runledger.core.summary import format_timestamp, to_summary, to_summaries
from runledger.models import Execution


@pytest.mark.unit
class TestFormatTimestamp:

    def test_none_stays_none(self):
        assert format_timestamp(None) is None

    def test_midnight(self):
        assert format_timestamp(datetime(2020, 6, 1)) == "2020-06-01 00:00:00.000"

    def test_milliseconds_truncated_and_padded(self):
        assert format_timestamp(datetime(2021, 1, 2, 3, 4, 5, 7999)) == "2021-01-02 03:04:05.007"

    def test_aware_converted_to_utc(self):
        value = datetime(2020, 6, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(value) == "2020-06-01 00:00:00.000"


@pytest.mark.unit
def test_to_summary_maps_every_field():
    execution = Execution(
        id=17,
        workflow_id=3,
        status="waiting",
        mode="webhook",
        started_at=datetime(2020, 6, 1, 12, 30, 15, 123456),
        stopped_at=None,
        wait_till=datetime(2020, 6, 2),
        retry_of=11,
        retry_success_id=None,
    )

    summary = to_summary(execution, "Invoice Processing")

    assert summary.model_dump(by_alias=True) == {
        "id": 17,
        "workflowId": 3,
        "workflowName": "Invoice Processing",
        "mode": "webhook",
        "retryOf": 11,
        "status": "waiting",
        "startedAt": "2020-06-01 12:30:15.123",
        "stoppedAt": None,
        "waitTill": "2020-06-02 00:00:00.000",
        "retrySuccessId": None,
    }


@pytest.mark.unit
def test_to_summaries_keeps_order_and_tolerates_missing_names():
    rows = [
        Execution(id=2, workflow_id=1, status="success", mode="manual"),
        Execution(id=1, workflow_id=5, status="error", mode="manual"),
    ]

    summaries = to_summaries(rows, {1: "Known"})

    assert [s.id for s in summaries] == [2, 1]
    assert summaries[0].workflow_name == "Known"
    assert summaries[1].workflow_name is None
