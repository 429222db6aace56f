from __future__ import annotations

import pytest

from schooney.domain.collection import RecordCollection
from schooney.domain.grades import (
    UNRANKED,
    grade_rank,
    school_level_for_grade,
    school_level_label,
    sorted_grades,
)
from schooney.errors import RecordCollectionError


@pytest.mark.parametrize(
    "grade, rank",
    [
        ("Pre-nursery", -2),
        ("Nursery", -1),
        ("Reception", 0),
        ("Year 1", 1),
        ("Year 10", 10),
        ("Kindergarten", UNRANKED),
    ],
)
def test_grade_rank(grade, rank):
    assert grade_rank(grade) == rank


@pytest.mark.parametrize(
    "grade, level",
    [("Nursery", "preprep"), ("Year 2", "preprep"), ("Year 3", "prep"), ("Year 8", "prep"), ("Year 9", "senior")],
)
def test_school_level_for_grade(grade, level):
    assert school_level_for_grade(grade) == level


def test_school_level_label():
    assert school_level_label("preprep") == "Preprep"


def test_sorted_grades():
    assert sorted_grades(["Year 10", "Year 2", "Zeta", "Reception", "Year 2", "Alpha"]) == [
        "Reception",
        "Year 2",
        "Year 10",
        "Alpha",
        "Zeta",
    ]


class TestRecordCollection:
    def test_keeps_insertion_order(self, payment_records):
        collection = RecordCollection(reversed(payment_records))

        assert [p.id for p in collection.records()][:3] == ["25", "24", "23"]
        assert len(collection) == 25

    def test_duplicate_id_raises(self, make_payment):
        with pytest.raises(RecordCollectionError):
            RecordCollection([make_payment("1"), make_payment("1")])

    def test_replace_keeps_position(self, payment_records):
        collection = RecordCollection(payment_records)
        updated = collection.get("2").model_copy(update={"email_status": "sent"})

        previous = collection.replace(updated)

        assert previous.email_status == "not_sent"
        assert collection.records()[1] is updated

    def test_replace_unknown_raises_with_readable_message(self, make_payment):
        collection = RecordCollection([make_payment("1")])

        with pytest.raises(RecordCollectionError) as excinfo:
            collection.replace(make_payment("2"))

        assert str(excinfo.value) == "Unknown record id '2'"

    def test_remove_and_next_id(self, payment_records):
        collection = RecordCollection(payment_records)

        collection.remove("25")

        assert "25" not in collection
        assert collection.next_id() == "25"
        assert RecordCollection().next_id() == "1"
