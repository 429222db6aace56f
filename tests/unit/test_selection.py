from __future__ import annotations

from schooney.query.criteria import FilterCriteria
from schooney.query.filtering import filter_records
from schooney.query.selection import (
    EMPTY,
    PageSelectionState,
    page_selection_state,
    prune_selection,
    toggle,
    toggle_page,
)


def test_prune_drops_ids_hidden_by_filter(payment_records, payments_view):
    selection = frozenset({"1", "5", "10"})
    visible = filter_records(
        payment_records, payments_view, FilterCriteria(choices={"invoice_status": "overdue"})
    )

    assert prune_selection(selection, visible) == frozenset({"5", "10"})


def test_prune_of_empty_selection_is_empty(payment_records):
    assert prune_selection(EMPTY, payment_records) == EMPTY


def test_toggle_adds_and_removes():
    selection = toggle(EMPTY, "3")
    assert selection == frozenset({"3"})
    assert toggle(selection, "3") == EMPTY


def test_page_selection_state(payment_records):
    page = payment_records[:3]

    assert page_selection_state(EMPTY, page) is PageSelectionState.NONE
    assert page_selection_state(frozenset({"1"}), page) is PageSelectionState.PARTIAL
    assert page_selection_state(frozenset({"1", "2", "3", "9"}), page) is PageSelectionState.FULL
    assert page_selection_state(frozenset({"1"}), []) is PageSelectionState.NONE


def test_toggle_page_selects_then_clears(payment_records):
    page = payment_records[:3]
    keep = frozenset({"20"})

    selected = toggle_page(keep | {"1"}, page)
    assert selected == frozenset({"1", "2", "3", "20"})

    cleared = toggle_page(selected, page)
    assert cleared == keep
