"""
Filter stage: reduce a full record set to the records matching every active
criterion of a view.

Order of evaluation is fixed: the view's baseline predicate first, then the
text search, the dropdown choices and the date range, combined with AND.
The result is an ordered subsequence of the input (stable), so filtering an
already filtered set with the same criteria returns it unchanged.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple

from schooney.errors import UnknownFieldError
from schooney.query.criteria import ALL, FilterCriteria
from schooney.views.abstract import RecordView

Predicate = Callable[[Any], bool]


def _as_day(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def _search_predicate(fields: Tuple[str, ...], term: str) -> Predicate:
    needle = term.lower()

    def matches(record: Any) -> bool:
        for name in fields:
            value = getattr(record, name, None)
            if value is not None and needle in str(value).lower():
                return True
        return False

    return matches


def _choice_predicate(field_name: str, selected: str) -> Predicate:
    return lambda record: getattr(record, field_name, None) == selected


def _date_predicate(
    field_name: str, date_from: Optional[date], date_to: Optional[date]
) -> Predicate:
    def matches(record: Any) -> bool:
        day = _as_day(getattr(record, field_name, None))
        if day is None:
            return False
        if date_from is not None and day < date_from:
            return False
        if date_to is not None and day > date_to:
            return False
        return True

    return matches


def build_predicates(view: RecordView, criteria: FilterCriteria) -> List[Predicate]:
    """
    Translate criteria into the ordered predicate list for a view.

    Raises
    ------
    UnknownFieldError
        If the criteria name a filter key the view does not declare.
    """
    predicates: List[Predicate] = [view.baseline]

    term = criteria.search_term
    if term:
        predicates.append(_search_predicate(view.search_fields, term))

    for key, selected in criteria.choices.items():
        if key not in view.filters:
            raise UnknownFieldError(view.name, key, list(view.filters))
        if selected != ALL:
            predicates.append(_choice_predicate(view.filters[key].field, selected))

    if criteria.date_from is not None or criteria.date_to is not None:
        predicates.append(_date_predicate(view.date_field, criteria.date_from, criteria.date_to))

    return predicates


def filter_records(
    records: Sequence[Any], view: RecordView, criteria: FilterCriteria
) -> Tuple[Any, ...]:
    """
    Return the records satisfying all active criteria, in input order.

    Parameters
    ----------
    records : Sequence
        Full record set of the view.
    view : RecordView
        View declaring searchable fields, filters, date field and baseline.
    criteria : FilterCriteria
        Current selections; default criteria return the baseline set.
    """
    predicates = build_predicates(view, criteria)
    return tuple(record for record in records if all(p(record) for p in predicates))


__all__ = ["build_predicates", "filter_records"]
