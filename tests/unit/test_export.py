from __future__ import annotations

import csv
import io
from datetime import date, datetime
from decimal import Decimal

import pytest

from schooney.engine import RecordQueryEngine
from schooney.query.criteria import FilterCriteria
from schooney.query.export import (
    CSV_MIME_TYPE,
    build_csv,
    build_export,
    export_filename,
    metadata_lines,
)
from schooney.utils.formatting import escape_csv_value, format_amount, slugify
from schooney.views.payments import PaymentHistoryView

EXPORTED_AT = datetime(2026, 10, 19, 8, 30, 5)
DEFAULT_FILENAME = "payment-history-tuition-all-all-all-grades-2026-10-19.csv"


def _data_rows(content, view):
    rows = list(csv.reader(io.StringIO(content)))
    header = [column.header for column in view.columns()]
    start = rows.index(header)
    return rows[start + 1 :]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", "plain"),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
        (None, ""),
        (42, "42"),
    ],
)
def test_escape_csv_value(value, expected):
    assert escape_csv_value(value) == expected


def test_amounts_are_plain_decimals():
    assert format_amount(Decimal("125000")) == "125000.00"
    assert format_amount(Decimal("1260.5")) == "1260.50"
    assert format_amount(None) == ""


def test_slugify():
    assert slugify("Year 10") == "year-10"
    assert slugify("not_sent") == "not_sent"
    assert slugify("QR Payment") == "qr-payment"


def test_default_filename(payments_view):
    assert export_filename(payments_view, FilterCriteria(), date(2026, 10, 19)) == DEFAULT_FILENAME


def test_filename_embeds_active_filters():
    view = PaymentHistoryView(report_type="afterschool")
    criteria = FilterCriteria(choices={"invoice_status": "overdue", "grade": "Year 10"})

    assert (
        export_filename(view, criteria, date(2026, 10, 19))
        == "payment-history-afterschool-overdue-all-year-10-2026-10-19.csv"
    )


def test_data_rows_reproduce_record_values(make_payment, payments_view):
    records = [
        make_payment("1", notes='Paid late, "again"\nsee ledger', amount=Decimal("125000")),
        make_payment(
            "2",
            reference_number="REF-0042",
            transaction_date=datetime(2026, 10, 1, 7, 5, 9),
            due_date=date(2026, 10, 16),
        ),
    ]

    content = build_csv(payments_view, records, FilterCriteria(), EXPORTED_AT)
    rows = _data_rows(content, payments_view)

    assert len(rows) == len(records)
    first, second = rows
    assert first[0] == "INV-2025-000001"
    assert first[2] == "ST000001"
    assert first[4] == "125000.00"
    assert first[-1] == 'Paid late, "again"\nsee ledger'
    assert second[10] == "2026-10-01 07:05:09"
    assert second[11] == "REF-0042"
    assert second[12] == "2026-10-16"


def test_metadata_block(make_payment, payments_view):
    records = [make_payment("1"), make_payment("2", amount=Decimal("125000"))]
    criteria = FilterCriteria(choices={"grade": "Year 10"}, date_from=date(2026, 10, 1))

    content = build_csv(payments_view, records, criteria, EXPORTED_AT, school_name="Test School")
    lines = content.split("\n")

    assert lines[0] == "Test School Payment History Export"
    assert lines[1] == "Export Date: 2026-10-19 08:30:05"
    assert lines[2] == "Report Type: Tuition Management"
    assert lines[3] == "Total Records: 2"
    assert lines[4] == "Total Amount (THB): 167000.00"
    assert "- Invoice Status: All Statuses" in lines
    assert "- Grade Level: Year 10" in lines
    assert "- School Level: All Levels" in lines
    assert "- Date Range: 2026-10-01 to No end date" in lines
    assert "- Search Term: No search applied" in lines


def test_metadata_then_blank_line_then_header(make_payment, payments_view):
    records = [make_payment("1")]
    criteria = FilterCriteria()

    content = build_csv(payments_view, records, criteria, EXPORTED_AT)
    lines = content.split("\n")
    metadata = metadata_lines(payments_view, records, criteria, EXPORTED_AT, "SISB Schooney")

    assert lines[len(metadata)] == ""
    assert lines[len(metadata) + 1].startswith("Invoice Number,Student Name,Student ID")


def test_metadata_line_with_comma_is_escaped(make_payment, payments_view):
    content = build_csv(
        payments_view, [make_payment("1")], FilterCriteria(search="Smith, John"), EXPORTED_AT
    )

    assert '"- Search Term: Smith, John"' in content.split("\n")


def test_export_covers_whole_filtered_set_not_one_page(payment_records, payments_view):
    engine = RecordQueryEngine(payments_view)
    result = engine.run(payment_records)
    assert len(result.page.items) == payments_view.default_page_size

    document = engine.export(result.filtered, FilterCriteria(), EXPORTED_AT, "SISB Schooney")

    assert document.record_count == len(payment_records)
    assert len(_data_rows(document.content, payments_view)) == len(payment_records)


def test_build_export_document(make_payment, payments_view):
    document = build_export(payments_view, [make_payment("1")], FilterCriteria(), EXPORTED_AT)

    assert document.filename == DEFAULT_FILENAME
    assert document.mime_type == CSV_MIME_TYPE
    assert document.record_count == 1
