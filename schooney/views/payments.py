"""
Payment history view.

Only payments that carry a NAV sync status are listed (fixed baseline
predicate). Reminder e-mails go through the bulk-send flow and are limited
by the daily quota.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Sequence

from schooney.domain.grades import GRADE_ORDER, school_level_label
from schooney.domain.models import FieldKind, PaymentRecord
from schooney.utils.formatting import format_amount, format_date, format_datetime
from schooney.views.abstract import (
    AbstractRecordView,
    ChoiceFilter,
    ExportColumn,
    capitalize_first,
    mark_email_sent,
    nav_synced_email_eligibility,
    total_amount,
)

ReportType = Literal["tuition", "afterschool"]

_REPORT_LABELS = {
    "tuition": "Tuition Management",
    "afterschool": "After School Management",
}


def _identity(value: str) -> str:
    return value


class PaymentHistoryView(AbstractRecordView):
    """
    Invoices with payment, e-mail and NAV sync status.

    Parameters
    ----------
    report_type : {"tuition", "afterschool"}
        Which back-office module the history belongs to; shown in the export
        metadata and embedded in the export filename.
    """

    name = "payments"
    title = "Payment History"
    noun = "payment records"
    record_type = PaymentRecord
    search_fields = ("invoice_number", "student_name", "student_id")
    filters: Dict[str, ChoiceFilter] = {
        "invoice_status": ChoiceFilter(
            field="invoice_status",
            label="Invoice Status",
            all_label="All Statuses",
            options=("paid", "unpaid", "overdue", "cancelled", "partial"),
        ),
        "email_status": ChoiceFilter(
            field="email_status",
            label="Email Sent",
            all_label="All",
            options=("sent", "pending", "not_sent", "failed"),
        ),
        "grade": ChoiceFilter(
            field="student_grade",
            label="Grade Level",
            all_label="All Grades",
            options=tuple(GRADE_ORDER),
            filename_all="all-grades",
            display=_identity,
        ),
        "school_level": ChoiceFilter(
            field="school_level",
            label="School Level",
            all_label="All Levels",
            options=("preprep", "prep", "senior"),
            display=school_level_label,
        ),
    }
    date_field = "transaction_date"
    sort_fields = {
        "invoice_number": FieldKind.TEXT,
        "student_name": FieldKind.TEXT,
        "student_grade": FieldKind.GRADE,
        "amount": FieldKind.NUMERIC,
        "invoice_status": FieldKind.TEXT,
        "transaction_date": FieldKind.TIMESTAMP,
    }
    filename_slug = "payment-history"
    filename_filters = ("invoice_status", "email_status", "grade")
    supports_email = True
    item_label = "invoice"

    def __init__(self, report_type: ReportType = "tuition") -> None:
        self.report_type = report_type

    def baseline(self, record: PaymentRecord) -> bool:
        return record.nav_sync_status is not None

    def columns(self) -> List[ExportColumn]:
        return [
            ExportColumn("Invoice Number", lambda p: p.invoice_number),
            ExportColumn("Student Name", lambda p: p.student_name),
            ExportColumn("Student ID", lambda p: p.student_id),
            ExportColumn("Grade Level", lambda p: p.student_grade),
            ExportColumn("Amount (THB)", lambda p: format_amount(p.amount)),
            ExportColumn("Payment Type", lambda p: "Yearly" if p.payment_type == "yearly" else "Termly"),
            ExportColumn("Payment Method", lambda p: p.payment_method),
            ExportColumn("Payment Channel", lambda p: p.payment_channel),
            ExportColumn("Payer Name", lambda p: p.payer_name),
            ExportColumn("Status", lambda p: capitalize_first(p.status)),
            ExportColumn("Transaction Date", lambda p: format_datetime(p.transaction_date)),
            ExportColumn("Reference Number", lambda p: p.reference_number or ""),
            ExportColumn("Due Date", lambda p: format_date(p.due_date)),
            ExportColumn("Notes", lambda p: p.notes or ""),
        ]

    def aggregate(self, records: Sequence[PaymentRecord]) -> Optional[str]:
        return f"Total Amount (THB): {format_amount(total_amount(records))}"

    def report_lines(self) -> List[str]:
        return [f"Report Type: {_REPORT_LABELS[self.report_type]}"]

    def filename_context(self) -> Optional[str]:
        return self.report_type

    def email_eligibility(self, record: PaymentRecord) -> Optional[str]:
        return nav_synced_email_eligibility(record)

    def download_eligibility(self, record: Any) -> Optional[str]:
        if record.nav_sync_status != "synced":
            return "Cannot download invoice. Invoice must be synced to NAV first."
        return None

    def mark_emailed(self, record: PaymentRecord, sent_at: datetime) -> PaymentRecord:
        return mark_email_sent(record, sent_at)

    def describe_record(self, record: PaymentRecord) -> str:
        return f"invoice {record.invoice_number}"


__all__ = ["PaymentHistoryView", "ReportType"]
