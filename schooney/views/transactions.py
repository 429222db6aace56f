"""
Payment transaction view (gateway-level records, read only).
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from schooney.domain.grades import GRADE_ORDER
from schooney.domain.models import FieldKind, TransactionRecord
from schooney.utils.formatting import format_amount, format_datetime
from schooney.views.abstract import AbstractRecordView, ChoiceFilter, ExportColumn, total_amount

TRANSACTION_CHANNELS = ("Credit Card", "QR Payment", "Bank Counter", "Bank Transfer")


def _as_is(value: str) -> str:
    return value


class TransactionsView(AbstractRecordView):
    name = "transactions"
    title = "Payment Transactions"
    noun = "transactions"
    record_type = TransactionRecord
    search_fields = ("invoice_number", "student_name", "student_id", "parent_email")
    filters: Dict[str, ChoiceFilter] = {
        "grade": ChoiceFilter(
            field="student_grade",
            label="Year Group",
            all_label="All Grades",
            options=tuple(GRADE_ORDER),
            filename_all="all-grades",
            display=_as_is,
        ),
        "channel": ChoiceFilter(
            field="payment_channel",
            label="Payment Channel",
            all_label="All Channels",
            options=TRANSACTION_CHANNELS,
            filename_all="all-channels",
            display=_as_is,
        ),
        "status": ChoiceFilter(
            field="payment_status",
            label="Payment Status",
            all_label="All Status",
            options=("success", "pending", "failed", "refunded"),
        ),
    }
    date_field = "transaction_date"
    sort_fields = {
        "invoice_number": FieldKind.TEXT,
        "student_name": FieldKind.TEXT,
        "student_grade": FieldKind.GRADE,
        "amount": FieldKind.NUMERIC,
        "total_amount": FieldKind.NUMERIC,
        "payment_status": FieldKind.TEXT,
        "transaction_date": FieldKind.TIMESTAMP,
    }
    filename_slug = "payment-transactions"
    filename_filters = ("channel", "status")

    def columns(self) -> List[ExportColumn]:
        return [
            ExportColumn("Invoice Number", lambda t: t.invoice_number),
            ExportColumn("Student Name", lambda t: t.student_name),
            ExportColumn("Student ID", lambda t: t.student_id),
            ExportColumn("Grade", lambda t: t.student_grade),
            ExportColumn("Parent Email", lambda t: t.parent_email),
            ExportColumn("Payment Channel", lambda t: t.payment_channel),
            ExportColumn("Status", lambda t: t.payment_status),
            ExportColumn("Amount (THB)", lambda t: format_amount(t.amount)),
            ExportColumn("Fee (THB)", lambda t: format_amount(t.fee)),
            ExportColumn("Total Amount (THB)", lambda t: format_amount(t.total_amount)),
            ExportColumn("Transaction Date", lambda t: format_datetime(t.transaction_date)),
            ExportColumn("Card Brand", lambda t: t.card_brand or ""),
            ExportColumn("Card Last Four", lambda t: t.card_last_four or ""),
            ExportColumn("Reference Number", lambda t: t.reference_number),
        ]

    def aggregate(self, records: Sequence[TransactionRecord]) -> Optional[str]:
        total = total_amount(records, "total_amount")
        return f"Total Amount incl. Fees (THB): {format_amount(total)}"

    def describe_record(self, record: TransactionRecord) -> str:
        return f"transaction {record.reference_number}"


__all__ = ["TRANSACTION_CHANNELS", "TransactionsView"]
