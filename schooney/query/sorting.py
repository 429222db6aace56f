"""
Sort stage: order records by a single field with kind-aware comparison.

Comparison rules per `FieldKind`:
- NUMERIC: numeric value
- TIMESTAMP: the instant (datetime/date), never the display string
- TEXT: case-insensitive string
- GRADE: ordinal rank of the school grade label

Python's `sorted` is stable and stays stable with `reverse=True`, so records
with equal keys keep their input order in both directions. Missing values
sort after present ones when ascending.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Sequence, Tuple

from schooney.domain.grades import grade_rank
from schooney.domain.models import FieldKind
from schooney.errors import UnknownFieldError
from schooney.query.criteria import SortSpec

_KEY_FUNCS: Dict[FieldKind, Callable[[Any], Any]] = {
    FieldKind.NUMERIC: lambda value: value,
    FieldKind.TIMESTAMP: lambda value: value,
    FieldKind.TEXT: lambda value: str(value).lower(),
    FieldKind.GRADE: lambda value: grade_rank(str(value)),
}


def sort_key(field_name: str, kind: FieldKind) -> Callable[[Any], Tuple[int, Any]]:
    """Build a key function; (0, key) for present values, (1, None) for missing."""
    convert = _KEY_FUNCS[kind]

    def key(record: Any) -> Tuple[int, Any]:
        value = getattr(record, field_name, None)
        if value is None:
            return (1, 0)
        return (0, convert(value))

    return key


def sort_records(
    records: Sequence[Any],
    spec: SortSpec,
    sort_fields: Mapping[str, FieldKind],
    view_name: str = "view",
) -> Tuple[Any, ...]:
    """
    Return a new ordered tuple; the input sequence is never mutated.

    Raises
    ------
    UnknownFieldError
        If `spec.field` is not one of the view's sortable fields.
    """
    if spec.field is None:
        return tuple(records)
    if spec.field not in sort_fields:
        raise UnknownFieldError(view_name, spec.field, list(sort_fields))

    key = sort_key(spec.field, sort_fields[spec.field])
    return tuple(sorted(records, key=key, reverse=spec.direction == "desc"))


__all__ = ["sort_key", "sort_records"]
