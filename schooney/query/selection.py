"""
Selection set helpers for bulk actions.

A selection is a frozenset of record ids. It is pruned whenever the visible
(filtered) set changes so a bulk action never reaches a hidden record.
"""

from __future__ import annotations

import enum
from typing import Any, FrozenSet, Iterable

Selection = FrozenSet[str]

EMPTY: Selection = frozenset()


class PageSelectionState(str, enum.Enum):
    NONE = "none"
    PARTIAL = "partial"
    FULL = "full"


def _ids(records: Iterable[Any]) -> Selection:
    return frozenset(record.id for record in records)


def prune_selection(selection: Selection, visible: Iterable[Any]) -> Selection:
    """Drop ids no longer present in the visible records."""
    if not selection:
        return selection
    return selection & _ids(visible)


def toggle(selection: Selection, record_id: str) -> Selection:
    if record_id in selection:
        return selection - {record_id}
    return selection | {record_id}


def page_selection_state(selection: Selection, page_items: Iterable[Any]) -> PageSelectionState:
    page_ids = _ids(page_items)
    chosen = page_ids & selection
    if page_ids and chosen == page_ids:
        return PageSelectionState.FULL
    if chosen:
        return PageSelectionState.PARTIAL
    return PageSelectionState.NONE


def toggle_page(selection: Selection, page_items: Iterable[Any]) -> Selection:
    """Deselect the page when fully selected, otherwise select all of it."""
    items = tuple(page_items)
    page_ids = _ids(items)
    if page_selection_state(selection, items) is PageSelectionState.FULL:
        return selection - page_ids
    return selection | page_ids


__all__ = [
    "EMPTY",
    "PageSelectionState",
    "Selection",
    "page_selection_state",
    "prune_selection",
    "toggle",
    "toggle_page",
]
