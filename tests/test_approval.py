import pytest

from models.od_requests import RequestStatus
from services.approval import (
    ALL, BULK_ACTIONS, QueueFilters, SelectionSet, build_facets, can_transition, filter_requests,
)

ROWS = [
    {"od_id": 1, "name": "Alice Kumar", "reason": "Development", "year": 2026, "sec": "A"},
    {"od_id": 2, "name": "Bob Raj", "reason": "Design", "year": 2027, "sec": "B"},
    {"od_id": 3, "name": "Carol Singh", "reason": "Development", "year": 2026, "sec": "A"},
    {"od_id": 4, "name": "Dev Alin", "reason": "", "year": None, "sec": "C"},
]


def test_facets_lead_with_all_and_skip_empty_values():
    facets = build_facets(ROWS)
    assert facets["reasons"] == [ALL, "Development", "Design"]
    assert facets["years"] == [ALL, 2026, 2027]
    assert facets["sections"] == [ALL, "A", "B", "C"]
    assert facets["reason_counts"] == {ALL: 4, "Development": 2, "Design": 1}


def test_default_filters_return_everything():
    assert filter_requests(ROWS, QueueFilters()) == ROWS
    assert QueueFilters().is_default()
    assert not QueueFilters(section="A").is_default()


def test_filters_combine():
    rows = filter_requests(ROWS, QueueFilters(reason="Development", section="A"))
    assert [r["od_id"] for r in rows] == [1, 3]


def test_year_filter_compares_trimmed_strings():
    rows = filter_requests(ROWS, QueueFilters(year=" 2027 "))
    assert [r["od_id"] for r in rows] == [2]


def test_search_is_case_insensitive_on_name():
    rows = filter_requests(ROWS, QueueFilters(search="ALI"))
    assert [r["od_id"] for r in rows] == [1, 4]


def test_selection_toggle():
    selection = SelectionSet(clear_on_filter_change=False)
    selection.toggle(1)
    selection.toggle(3)
    selection.toggle(1)
    assert selection.ids == [3]
    assert 3 in selection and 1 not in selection


def test_toggle_all_selects_visible_then_clears():
    selection = SelectionSet(clear_on_filter_change=False)
    selection.toggle_all([1, 3])
    assert selection.ids == [1, 3]
    assert selection.all_selected([3, 1])
    selection.toggle_all([1, 3])
    assert len(selection) == 0


def test_toggle_all_replaces_a_different_selection_of_equal_size():
    selection = SelectionSet(clear_on_filter_change=False)
    selection.toggle(2)
    selection.toggle(4)
    selection.toggle_all([1, 3])
    assert selection.ids == [1, 3]


def test_selection_survives_filter_change_by_default():
    selection = SelectionSet()
    selection.toggle(2)
    selection.on_filter_change()
    assert selection.ids == [2]


def test_selection_can_be_cleared_on_filter_change():
    selection = SelectionSet(clear_on_filter_change=True)
    selection.toggle(2)
    selection.on_filter_change()
    assert selection.ids == []


def test_transitions():
    assert can_transition(RequestStatus.PENDING, RequestStatus.APPROVED)
    assert can_transition(RequestStatus.PENDING, RequestStatus.REJECTED)
    assert not can_transition(RequestStatus.APPROVED, RequestStatus.REJECTED)
    assert not can_transition(RequestStatus.REJECTED, RequestStatus.PENDING)


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        can_transition(2, 1)


def test_bulk_actions():
    assert set(BULK_ACTIONS) == {"bulk_approve", "bulk_reject", "modify_timings"}


def test_selection_seeded_from_ids_drops_duplicates():
    selection = SelectionSet([3, 1, 3], clear_on_filter_change=False)
    assert selection.ids == [3, 1]


def test_retain_drops_ids_that_left_the_queue():
    selection = SelectionSet([1, 2, 3], clear_on_filter_change=False)
    selection.retain([2, 3, 4])
    assert selection.ids == [2, 3]
