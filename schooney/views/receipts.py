"""
Receipt view. Receipts can be e-mailed and downloaded only once they are
synced to NAV.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from schooney.domain.grades import GRADE_ORDER, school_level_label
from schooney.domain.models import FieldKind, ReceiptRecord
from schooney.utils.formatting import format_amount, format_date
from schooney.views.abstract import (
    AbstractRecordView,
    ChoiceFilter,
    ExportColumn,
    mark_email_sent,
    nav_synced_email_eligibility,
    total_amount,
)


def _grade_label(value: str) -> str:
    return value


class ReceiptsView(AbstractRecordView):
    """Receipts issued for paid invoices."""

    name = "receipts"
    title = "Receipt"
    noun = "receipts"
    record_type = ReceiptRecord
    search_fields = ("receipt_number", "invoice_number", "student_name", "student_id")
    filters: Dict[str, ChoiceFilter] = {
        "grade": ChoiceFilter(
            field="student_grade",
            label="Grade",
            all_label="All Grades",
            options=tuple(GRADE_ORDER),
            filename_all="all-grades",
            display=_grade_label,
        ),
        "school_level": ChoiceFilter(
            field="school_level",
            label="School Level",
            all_label="All Levels",
            options=("preprep", "prep", "senior"),
            display=school_level_label,
        ),
        "email_status": ChoiceFilter(
            field="email_status",
            label="Email Status",
            all_label="All",
            options=("sent", "pending", "not_sent", "failed"),
        ),
    }
    date_field = "transaction_date"
    sort_fields = {
        "receipt_number": FieldKind.TEXT,
        "student_name": FieldKind.TEXT,
        "student_grade": FieldKind.GRADE,
        "amount": FieldKind.NUMERIC,
        "transaction_date": FieldKind.TIMESTAMP,
    }
    filename_slug = "receipts"
    filename_filters = ("grade", "email_status")
    supports_email = True
    item_label = "receipt"

    def columns(self) -> List[ExportColumn]:
        return [
            ExportColumn("Receipt Number", lambda r: r.receipt_number),
            ExportColumn("Invoice Number", lambda r: r.invoice_number),
            ExportColumn("Student Name", lambda r: r.student_name),
            ExportColumn("Student ID", lambda r: r.student_id),
            ExportColumn("Grade", lambda r: r.student_grade),
            ExportColumn("Parent Name", lambda r: r.payer_name),
            ExportColumn("Parent Email", lambda r: r.parent_email),
            ExportColumn("Amount (THB)", lambda r: format_amount(r.amount)),
            ExportColumn("Payment Channel", lambda r: r.payment_channel),
            ExportColumn("Transaction Date", lambda r: format_date(r.transaction_date)),
            ExportColumn("Email Status", lambda r: r.email_status or "not_sent"),
            ExportColumn("NAV Sync Status", lambda r: r.nav_sync_status or "-"),
        ]

    def aggregate(self, records: Sequence[ReceiptRecord]) -> Optional[str]:
        return f"Total Amount (THB): {format_amount(total_amount(records))}"

    def email_eligibility(self, record: ReceiptRecord) -> Optional[str]:
        return nav_synced_email_eligibility(record)

    def download_eligibility(self, record: ReceiptRecord) -> Optional[str]:
        if record.nav_sync_status != "synced":
            return "Cannot download receipt. Receipt must be synced to NAV first."
        return None

    def mark_emailed(self, record: ReceiptRecord, sent_at: datetime) -> ReceiptRecord:
        return mark_email_sent(record, sent_at)

    def describe_record(self, record: ReceiptRecord) -> str:
        return f"receipt {record.receipt_number}"


__all__ = ["ReceiptsView"]
