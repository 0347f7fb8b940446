"""Tests for the bulk selection tracker."""

import pytest

from agents.rents.selection import HeaderCheckboxState, SelectionTracker


@pytest.fixture
def filtered(make_rent):
    return [
        make_rent("r1", "Alice", ["alice@example.com"]),
        make_rent("r2", "Bob", ["bob@example.com"]),
        make_rent("r3", "Chloe", []),
    ]


def test_select_all_takes_every_eligible_rent(filtered):
    tracker = SelectionTracker()
    tracker.select_all(filtered)

    eligible = {r.id for r in filtered if r.occupant.has_contact_emails}
    assert tracker.selected == eligible == {"r1", "r2"}


def test_select_all_replaces_previous_selection(filtered):
    tracker = SelectionTracker()
    tracker.toggle("r1", True, filtered)
    tracker.select_all(filtered[1:])
    assert tracker.selected == {"r2"}


def test_clear_all(filtered):
    tracker = SelectionTracker()
    tracker.select_all(filtered)
    tracker.clear_all()
    assert len(tracker) == 0


def test_toggle_ineligible_is_noop(filtered):
    tracker = SelectionTracker()
    tracker.toggle("r1", True, filtered)

    changed = tracker.toggle("r3", True, filtered)

    assert changed is False
    assert tracker.selected == {"r1"}


def test_toggle_unknown_id_is_noop(filtered):
    tracker = SelectionTracker()
    assert tracker.toggle("nope", True, filtered) is False
    assert len(tracker) == 0


def test_uncheck_removes_unconditionally(filtered):
    tracker = SelectionTracker()
    tracker.select_all(filtered)

    assert tracker.toggle("r1", False, []) is True
    assert tracker.selected == {"r2"}


def test_stale_ids_are_not_pruned(filtered):
    tracker = SelectionTracker()
    tracker.select_all(filtered)
    narrowed = filtered[:1]

    tracker.toggle("r1", False, narrowed)

    assert "r2" in tracker


def test_selectable_count(filtered):
    assert SelectionTracker.selectable_count(filtered) == 2
    assert SelectionTracker.selectable_count([]) == 0


@pytest.mark.parametrize(
    "selected, expected",
    [
        (5, HeaderCheckboxState.CHECKED),
        (2, HeaderCheckboxState.INDETERMINATE),
        (0, HeaderCheckboxState.UNCHECKED),
    ],
)
def test_header_tri_state(make_rent, selected, expected):
    rents = [make_rent(f"r{i}", f"Tenant {i}", [f"t{i}@example.com"]) for i in range(5)]
    tracker = SelectionTracker()
    for rent in rents[:selected]:
        tracker.toggle(rent.id, True, rents)

    assert tracker.header_state(rents) is expected


def test_header_unchecked_for_empty_list():
    assert SelectionTracker().header_state([]) is HeaderCheckboxState.UNCHECKED


def test_ordered_ids_follow_display_order(filtered):
    tracker = SelectionTracker()
    tracker.toggle("r2", True, filtered)
    tracker.toggle("r1", True, filtered)
    assert tracker.ordered_ids(filtered) == ["r1", "r2"]
