"""
Tests for the cursor paginator
"""

import pytest
from unittest.mock import Mock

from runledger.core.exceptions import QueryValidationError
from runledger.core.pagination import PageRequest, fetch_page, iter_pages
from runledger.core.predicates import build_predicate, with_cursor


# ============================================================================
# PAGE REQUEST
# ============================================================================

@pytest.mark.unit
def test_page_request_coerces_cursor():
    page = PageRequest.create(20, last_id="15")

    assert page.limit == 20
    assert page.last_id == 15
    assert page.first_id is None


@pytest.mark.unit
@pytest.mark.parametrize("limit", [None, "10", 2.5, True])
def test_page_request_requires_integer_limit(limit):
    with pytest.raises(QueryValidationError):
        PageRequest.create(limit)


@pytest.mark.unit
def test_page_request_rejects_both_cursors():
    with pytest.raises(QueryValidationError) as exc_info:
        PageRequest.create(10, last_id=5, first_id=1)
    assert exc_info.value.field == "range"


@pytest.mark.unit
def test_page_request_and_with_cursor_reject_both_cursors_identically():
    with pytest.raises(QueryValidationError) as from_request:
        PageRequest.create(10, last_id=5, first_id=1)
    with pytest.raises(QueryValidationError) as from_predicate:
        with_cursor(build_predicate([1]), last_id=5, first_id=1)

    assert str(from_request.value) == str(from_predicate.value)
    assert from_request.value.field == from_predicate.value.field


@pytest.mark.unit
@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_limit_fetches_nothing(limit):
    store = Mock()

    rows = fetch_page(store, build_predicate([1]), PageRequest.create(limit))

    assert rows == []
    store.fetch_filtered.assert_not_called()


@pytest.mark.unit
def test_fetch_page_passes_bounded_predicate_and_limit():
    store = Mock()
    store.fetch_filtered.return_value = ["row"]
    predicate = build_predicate([1])

    rows = fetch_page(store, predicate, PageRequest.create(5, first_id=3))

    assert rows == ["row"]
    bounded = store.fetch_filtered.call_args.args[0]
    assert bounded.id_above == 3
    assert bounded.accessible_workflow_ids == frozenset({1})
    assert store.fetch_filtered.call_args.kwargs == {"limit": 5}


# ============================================================================
# AGAINST THE STORE
# ============================================================================

@pytest.mark.integration
def test_cursor_exclusivity(store, create_workflow, create_execution):
    """ids a < b < c < d: lastId=b -> {a}; firstId=a -> [d, c, b]"""
    workflow = create_workflow()
    a, b, c, d = (create_execution(workflow).id for _ in range(4))
    predicate = build_predicate([workflow.id])

    before_b = fetch_page(store, predicate, PageRequest.create(20, last_id=b))
    after_a = fetch_page(store, predicate, PageRequest.create(20, first_id=a))

    assert [e.id for e in before_b] == [a]
    assert [e.id for e in after_a] == [d, c, b]


@pytest.mark.integration
def test_backward_walk_is_stable_under_inserts(store, create_workflow, create_execution):
    workflow = create_workflow()
    created = [create_execution(workflow).id for _ in range(5)]
    predicate = build_predicate([workflow.id])

    first_page = fetch_page(store, predicate, PageRequest.create(2))
    # New rows land above every existing cursor
    create_execution(workflow)
    second_page = fetch_page(store, predicate, PageRequest.create(2, last_id=first_page[-1].id))

    assert [e.id for e in first_page] == [created[4], created[3]]
    assert [e.id for e in second_page] == [created[2], created[1]]


@pytest.mark.integration
def test_iter_pages_walks_everything_newest_first(store, create_workflow, create_execution):
    workflow = create_workflow()
    other = create_workflow()
    created = [create_execution(workflow).id for _ in range(7)]
    create_execution(other)

    pages = list(iter_pages(store, build_predicate([workflow.id]), page_size=3))

    assert [len(p) for p in pages] == [3, 3, 1]
    assert [e.id for page in pages for e in page] == list(reversed(created))


@pytest.mark.integration
def test_iter_pages_exact_multiple_ends_cleanly(store, create_workflow, create_execution):
    workflow = create_workflow()
    for _ in range(4):
        create_execution(workflow)

    pages = list(iter_pages(store, build_predicate([workflow.id]), page_size=2))

    assert [len(p) for p in pages] == [2, 2]


@pytest.mark.unit
def test_iter_pages_rejects_non_positive_size():
    with pytest.raises(QueryValidationError):
        next(iter_pages(Mock(), build_predicate([1]), page_size=0))
