"""
Domain models for the Schooney record console.

Each back-office view works over one record kind: payment history,
receipts, payment transactions, the activity log and the user directory.
Records are immutable values; a state change (for example marking a
reminder e-mail as sent) produces a new record with the same `id` via
`model_copy(update=...)`.
"""
from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

SchoolLevel = Literal["preprep", "prep", "senior"]
PaymentType = Literal["yearly", "termly"]
PaymentChannel = Literal["credit_card", "qr_payment", "counter_bank"]
PaymentStatus = Literal["paid", "pending", "overdue", "cancelled"]
InvoiceStatus = Literal["paid", "unpaid", "overdue", "cancelled", "partial"]
EmailStatus = Literal["sent", "pending", "not_sent", "failed"]
NavSyncStatus = Literal["synced", "pending", "failed"]
ParentType = Literal["internal", "external"]
TransactionStatus = Literal["success", "pending", "failed", "refunded"]
ActivityAction = Literal["create", "update", "delete", "send_email", "download"]
UserRole = Literal["admin", "manager", "staff", "viewer"]
UserStatus = Literal["active", "inactive"]


class FieldKind(str, enum.Enum):
    """How a sortable field is compared."""

    NUMERIC = "numeric"
    TIMESTAMP = "timestamp"
    TEXT = "text"
    GRADE = "grade"


class _Record(BaseModel):
    """Shared configuration: frozen values with a string identifier."""

    id: str = Field(..., description="Identifier, unique within a record set.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }


class PaymentRecord(_Record):
    """
    One invoice payment as shown in the payment history view.
    """

    invoice_number: str
    student_name: str
    student_id: str
    student_grade: str
    student_room: str
    school_level: SchoolLevel
    amount: Decimal
    payment_type: PaymentType
    payment_method: str
    payment_channel: PaymentChannel
    payer_name: str
    parent_email: str
    status: PaymentStatus
    invoice_status: InvoiceStatus
    transaction_date: datetime
    last_email_sent_date: Optional[datetime] = None
    email_status: Optional[EmailStatus] = None
    nav_sync_status: Optional[NavSyncStatus] = None
    nav_sync_date: Optional[datetime] = None
    parent_type: Optional[ParentType] = None
    reference_number: Optional[str] = None
    payment_description: Optional[str] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    credit_note_used: bool = False
    credit_note_number: Optional[str] = None
    credit_note_amount: Optional[Decimal] = None


class ReceiptRecord(_Record):
    """
    A receipt issued for a paid invoice. Only NAV-synced receipts carry a
    receipt number; the others show "-".
    """

    receipt_number: str
    invoice_number: str
    student_name: str
    student_id: str
    student_grade: str
    student_room: str
    school_level: SchoolLevel
    amount: Decimal
    payment_type: PaymentType
    payment_method: str
    payment_channel: PaymentChannel
    payer_name: str
    parent_email: str
    transaction_date: datetime
    last_email_sent_date: Optional[datetime] = None
    email_status: Optional[EmailStatus] = None
    nav_sync_status: NavSyncStatus
    nav_sync_date: Optional[datetime] = None
    parent_type: Optional[ParentType] = None
    reference_number: Optional[str] = None
    payment_description: Optional[str] = None
    notes: Optional[str] = None


class TransactionRecord(_Record):
    """Gateway-level payment transaction with channel fee."""

    invoice_number: str
    student_name: str
    student_id: str
    student_grade: str
    parent_email: str
    payment_channel: str
    payment_status: TransactionStatus
    amount: Decimal
    fee: Decimal
    total_amount: Decimal
    transaction_date: datetime
    card_brand: Optional[str] = None
    card_last_four: Optional[str] = None
    payment_method: str
    reference_number: str


class ActivityLogEntry(_Record):
    """Audit trail entry for a back-office user action."""

    timestamp: datetime
    user: str
    user_id: str
    action: ActivityAction
    module: str
    target: str
    target_id: str
    details: str
    ip_address: str


class UserAccount(_Record):
    """Back-office user account."""

    first_name: str
    last_name: str
    email: str
    phone: str
    username: str
    role: UserRole
    status: UserStatus
    created_at: datetime
    last_login: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


ROLE_LABELS = {
    "admin": "Administrator",
    "manager": "Manager",
    "staff": "Staff",
    "viewer": "Viewer",
}

CHANNEL_LABELS = {
    "credit_card": "Credit Card",
    "qr_payment": "QR Payment",
    "counter_bank": "Bank Counter",
}


__all__ = [
    "FieldKind",
    "PaymentRecord",
    "ReceiptRecord",
    "TransactionRecord",
    "ActivityLogEntry",
    "UserAccount",
    "ROLE_LABELS",
    "CHANNEL_LABELS",
]
