from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from schooney.domain.models import FieldKind
from schooney.errors import UnknownFieldError
from schooney.query.criteria import SortSpec
from schooney.query.sorting import sort_records


def _sort(records, view, field, direction="asc"):
    return sort_records(records, SortSpec(field=field, direction=direction), view.sort_fields, view.name)


def test_no_field_keeps_natural_order(payment_records, payments_view):
    assert _sort(payment_records, payments_view, None) == tuple(payment_records)


def test_grade_sorts_by_rank_not_lexicographically(make_payment, payments_view):
    grades = ["Year 10", "Reception", "Martian", "Year 2", "Pre-nursery", "Nursery"]
    records = [make_payment(str(i), student_grade=g) for i, g in enumerate(grades, start=1)]

    ordered = _sort(records, payments_view, "student_grade")

    assert [p.student_grade for p in ordered] == [
        "Pre-nursery",
        "Nursery",
        "Reception",
        "Year 2",
        "Year 10",
        "Martian",
    ]


def test_text_sort_is_case_insensitive(make_payment, payments_view):
    records = [
        make_payment("1", student_name="bob"),
        make_payment("2", student_name="Alice"),
        make_payment("3", student_name="carol"),
    ]

    ordered = _sort(records, payments_view, "student_name")

    assert [p.student_name for p in ordered] == ["Alice", "bob", "carol"]


def test_numeric_sort_compares_values(make_payment, payments_view):
    records = [
        make_payment("1", amount=Decimal("9000")),
        make_payment("2", amount=Decimal("125000")),
        make_payment("3", amount=Decimal("42000")),
    ]

    ordered = _sort(records, payments_view, "amount", "desc")

    assert [p.id for p in ordered] == ["2", "3", "1"]


def test_timestamp_sort_uses_instant(make_payment, payments_view):
    records = [
        make_payment("1", transaction_date=datetime(2026, 10, 2, 9, 0)),
        make_payment("2", transaction_date=datetime(2026, 1, 15, 9, 0)),
        make_payment("3", transaction_date=datetime(2026, 10, 2, 8, 59)),
    ]

    ordered = _sort(records, payments_view, "transaction_date")

    assert [p.id for p in ordered] == ["2", "3", "1"]


@pytest.mark.parametrize("direction", ["asc", "desc"])
def test_sort_is_stable_for_equal_keys(make_payment, payments_view, direction):
    grades = ["Year 3", "Year 1", "Year 3", "Year 1", "Year 3"]
    records = [make_payment(str(i), student_grade=g) for i, g in enumerate(grades, start=1)]

    ordered = _sort(records, payments_view, "student_grade", direction)

    year_three = [p.id for p in ordered if p.student_grade == "Year 3"]
    year_one = [p.id for p in ordered if p.student_grade == "Year 1"]
    assert year_three == ["1", "3", "5"]
    assert year_one == ["2", "4"]


def test_ascending_reversed_equals_descending(sample_payments, payments_view):
    # invoice numbers are distinct, so the order is total
    ascending = _sort(sample_payments, payments_view, "invoice_number", "asc")
    descending = _sort(sample_payments, payments_view, "invoice_number", "desc")

    assert tuple(reversed(ascending)) == descending


def test_missing_values_sort_last_ascending_first_descending(make_payment):
    records = [
        make_payment("1", due_date=date(2026, 11, 2)),
        make_payment("2", due_date=None),
        make_payment("3", due_date=date(2026, 10, 30)),
    ]
    fields = {"due_date": FieldKind.TIMESTAMP}

    ascending = sort_records(records, SortSpec(field="due_date"), fields)
    descending = sort_records(records, SortSpec(field="due_date", direction="desc"), fields)

    assert [p.id for p in ascending] == ["3", "1", "2"]
    assert [p.id for p in descending] == ["2", "1", "3"]


def test_unknown_sort_field_raises(payment_records, payments_view):
    with pytest.raises(UnknownFieldError):
        _sort(payment_records, payments_view, "parent_email")


def test_sort_does_not_mutate_input(payment_records, payments_view):
    snapshot = list(payment_records)

    _sort(payment_records, payments_view, "invoice_number", "desc")

    assert payment_records == snapshot


def test_sort_spec_toggle():
    spec = SortSpec().toggled("amount")
    assert (spec.field, spec.direction) == ("amount", "asc")

    spec = spec.toggled("amount")
    assert spec.direction == "desc"

    spec = spec.toggled("student_name")
    assert (spec.field, spec.direction) == ("student_name", "asc")
