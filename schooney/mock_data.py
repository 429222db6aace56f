"""
Deterministic sample records for every view.

Generation uses `random.Random(seed)` and an injected `now`, so the same
seed and clock always produce the same records. Counts: 125 payments, 125
receipts, 150 transactions, 100 activity entries and five user accounts.
"""

from __future__ import annotations

import json
import random
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from schooney.domain.grades import GRADE_ORDER, school_level_for_grade
from schooney.domain.models import (
    ActivityLogEntry,
    PaymentRecord,
    ReceiptRecord,
    TransactionRecord,
    UserAccount,
)
from schooney.errors import RecordFileError, UnknownViewError
from schooney.utils.logging import get_logger

log = get_logger(__name__)

PAYMENT_COUNT = 125
RECEIPT_COUNT = 125
TRANSACTION_COUNT = 150
ACTIVITY_COUNT = 100

ROOMS = ["A", "B", "C", "D", "E", "F", "G", "H"]
FIRST_NAMES = [
    "John", "Sarah", "Mike", "Lisa", "David", "Emma", "James", "Sophia", "William", "Olivia",
    "Benjamin", "Ava", "Lucas", "Isabella", "Henry", "Mia", "Alexander", "Charlotte", "Mason",
    "Amelia", "Ethan", "Harper", "Daniel", "Evelyn", "Matthew", "Abigail", "Jackson", "Emily",
]
LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez",
    "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas", "Taylor",
    "Moore", "Jackson", "Martin", "Lee", "Perez", "Thompson", "White", "Harris", "Clark",
]
PAYMENT_METHODS = ["Credit Card", "PromptPay", "Bank Counter", "Bank Transfer", "Cash"]
PAYMENT_CHANNELS = ["credit_card", "qr_payment", "counter_bank"]
PAYER_NAMES = [
    "Mr. John Smith", "Mrs. Sarah Johnson", "Mr. David Williams", "Ms. Emily Brown",
    "Mr. Michael Davis", "Mrs. Lisa Garcia", "Mr. James Wilson", "Ms. Maria Rodriguez",
]
PAYMENT_STATUSES = ["paid", "paid", "paid", "pending", "pending", "cancelled", "overdue"]
INVOICE_STATUSES = ["paid", "paid", "paid", "unpaid", "unpaid", "overdue", "cancelled"]
TRANSACTION_CHANNELS = ["Credit Card", "QR Payment", "Bank Counter", "Bank Transfer"]
CARD_BRANDS = ["Visa", "Mastercard", "American Express", "JCB"]
LOG_USERS = [("John Smith", "john.smith"), ("David Wilson", "david.wilson"), ("Sarah Johnson", "sarah.johnson")]
LOG_MODULES = [
    "Invoice", "Receipt", "Payment History", "User Management",
    "Semester Settings", "Debt Reminders", "Payment Transactions",
]
NON_DELETABLE_MODULES = {"Invoice", "Receipt", "Payment History", "Payment Transactions"}

_NOTES = {
    "cancelled": "Payment cancelled by parent request",
    "overdue": "Payment overdue - reminder sent",
    "pending": "Payment pending - awaiting confirmation",
    "paid": "Payment completed successfully",
}


def _padded(prefix: str, number: int, width: int = 6) -> str:
    return f"{prefix}{number:0{width}d}"


def _email_outcome(rng: random.Random, synced_at: datetime) -> tuple[str, Optional[datetime]]:
    """30% not sent, 10% pending, 5% failed, 55% sent (matches the live mix)."""
    roll = rng.random()
    if roll > 0.7:
        return "not_sent", None
    if roll > 0.6:
        return "pending", None
    sent_at = synced_at + timedelta(days=rng.randint(1, 7))
    if roll > 0.55:
        return "failed", sent_at
    return "sent", sent_at


def _student(rng: random.Random, grades: List[str]) -> Dict[str, Any]:
    grade = rng.choice(grades)
    return {
        "student_name": f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
        "student_grade": grade,
        "student_room": rng.choice(ROOMS),
        "school_level": school_level_for_grade(grade),
    }


def _payer(rng: random.Random) -> Dict[str, str]:
    payer = rng.choice(PAYER_NAMES)
    return {"payer_name": payer, "parent_email": f"{payer.split(' ')[1].lower()}@example.com"}


def generate_payments(seed: int, now: datetime, count: int = PAYMENT_COUNT) -> List[PaymentRecord]:
    """Payment history; only paid invoices are NAV-synced and carry an e-mail status."""
    rng = random.Random(seed)
    payments: List[PaymentRecord] = []
    for i in range(1, count + 1):
        student = _student(rng, GRADE_ORDER)
        payment_type = "yearly" if rng.random() > 0.6 else "termly"
        status = rng.choice(PAYMENT_STATUSES)
        transaction_date = now - timedelta(days=rng.randint(0, 89), minutes=rng.randint(0, 1439))

        extra: Dict[str, Any] = {}
        if status == "paid":
            synced_at = transaction_date + timedelta(hours=rng.randint(1, 24))
            email_status, sent_at = _email_outcome(rng, synced_at)
            extra.update(
                nav_sync_status="synced",
                nav_sync_date=synced_at,
                email_status=email_status,
                last_email_sent_date=sent_at,
            )
            if rng.random() > 0.8:
                extra.update(
                    credit_note_used=True,
                    credit_note_number=_padded("CN-2025-", rng.randint(0, 999)),
                    credit_note_amount=Decimal(rng.randint(1000, 11000)),
                )

        payments.append(
            PaymentRecord(
                id=str(i),
                invoice_number=_padded("INV-2025-", i),
                student_id=_padded("ST", i),
                **student,
                amount=Decimal(125000 if payment_type == "yearly" else 42000),
                payment_type=payment_type,
                payment_method=rng.choice(PAYMENT_METHODS),
                payment_channel=rng.choice(PAYMENT_CHANNELS),
                **_payer(rng),
                status=status,
                invoice_status=rng.choice(INVOICE_STATUSES),
                transaction_date=transaction_date,
                parent_type="external" if rng.random() > 0.7 else "internal",
                reference_number=_padded("REF-", rng.randint(0, 9999), 4),
                payment_description=(
                    "Annual tuition fee payment for academic year 2025-2026"
                    if payment_type == "yearly"
                    else "Term 1 tuition fee payment"
                ),
                due_date=(transaction_date + timedelta(days=15)).date(),
                notes=_NOTES[status],
                **extra,
            )
        )
    return payments


def generate_receipts(seed: int, now: datetime, count: int = RECEIPT_COUNT) -> List[ReceiptRecord]:
    """Receipts; 80% synced (with a receipt number), 15% pending, 5% failed."""
    rng = random.Random(seed + 1)
    receipts: List[ReceiptRecord] = []
    for i in range(1, count + 1):
        student = _student(rng, GRADE_ORDER)
        payment_type = "yearly" if rng.random() > 0.6 else "termly"
        transaction_date = now - timedelta(days=rng.randint(0, 89), minutes=rng.randint(0, 1439))

        roll = rng.random()
        extra: Dict[str, Any] = {}
        if roll > 0.2:
            synced_at = transaction_date + timedelta(hours=rng.randint(1, 24))
            email_status, sent_at = _email_outcome(rng, synced_at)
            extra.update(
                receipt_number=_padded("RCP-2025-", i),
                nav_sync_status="synced",
                nav_sync_date=synced_at,
                email_status=email_status,
                last_email_sent_date=sent_at,
            )
        else:
            extra.update(
                receipt_number="-",
                nav_sync_status="pending" if roll > 0.05 else "failed",
                email_status="not_sent",
            )

        receipts.append(
            ReceiptRecord(
                id=str(i),
                invoice_number=_padded("INV-2025-", i),
                student_id=_padded("ST", i),
                **student,
                amount=Decimal(125000 if payment_type == "yearly" else 42000),
                payment_type=payment_type,
                payment_method=rng.choice(PAYMENT_METHODS),
                payment_channel=rng.choice(PAYMENT_CHANNELS),
                **_payer(rng),
                transaction_date=transaction_date,
                parent_type="external" if rng.random() > 0.7 else "internal",
                reference_number=_padded("REF-", rng.randint(0, 9999), 4),
                **extra,
            )
        )
    return receipts


def _transaction_status(roll: float) -> str:
    # 85% success, 8% pending, 5% failed, 2% refunded
    if roll > 0.15:
        return "success"
    if roll > 0.07:
        return "pending"
    if roll > 0.02:
        return "failed"
    return "refunded"


def generate_transactions(
    seed: int, now: datetime, count: int = TRANSACTION_COUNT
) -> List[TransactionRecord]:
    """Gateway transactions, newest first. Card fee 3%, QR fee 1.5%."""
    rng = random.Random(seed + 2)
    grades = GRADE_ORDER[2:15]  # Reception .. Year 12
    transactions: List[TransactionRecord] = []
    for i in range(1, count + 1):
        first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
        channel = rng.choice(TRANSACTION_CHANNELS)
        amount = Decimal(125000 if rng.random() > 0.6 else 42000)
        if channel == "Credit Card":
            fee = amount * Decimal("0.03")
        elif channel == "QR Payment":
            fee = amount * Decimal("0.015")
        else:
            fee = Decimal("0")
        is_card = channel == "Credit Card"
        transactions.append(
            TransactionRecord(
                id=str(i),
                invoice_number=_padded("INV-2025-", i),
                student_name=f"{first} {last}",
                student_id=_padded("ST", i),
                student_grade=rng.choice(grades),
                parent_email=f"{first.lower()}.{last.lower()}@example.com",
                payment_channel=channel,
                payment_status=_transaction_status(rng.random()),
                amount=amount,
                fee=fee,
                total_amount=amount + fee,
                transaction_date=now - timedelta(days=rng.randint(0, 89), minutes=rng.randint(0, 1439)),
                card_brand=rng.choice(CARD_BRANDS) if is_card else None,
                card_last_four=f"{rng.randint(0, 9998):04d}" if is_card else None,
                payment_method=channel,
                reference_number=_padded("REF-", rng.randint(0, 99999)),
            )
        )
    transactions.sort(key=lambda t: t.transaction_date, reverse=True)
    return transactions


def _activity_target(module: str, action: str, i: int) -> tuple[str, str, str]:
    """(target, target_id, details) for one log entry."""
    if action == "send_email":
        target_id = _padded("INV-2025-", i)
        return f"Invoice {target_id}", target_id, "Sent invoice email to parent@example.com"
    if action == "download":
        target_id = _padded("RCP-2025-", i)
        return f"Receipt {target_id}", target_id, "Downloaded receipt PDF"

    verb = {"create": "Created", "update": "Updated", "delete": "Deleted"}[action]
    if module == "Invoice":
        target_id = _padded("INV-2025-", i)
        return f"Invoice {target_id}", target_id, f"{verb} invoice {target_id} for student {_padded('ST', i)}"
    if module == "Receipt":
        target_id = _padded("RCP-2025-", i)
        return f"Receipt {target_id}", target_id, f"{verb} receipt {target_id} for invoice {_padded('INV-2025-', i)}"
    if module == "Payment History":
        target_id = _padded("PAY-2025-", i)
        return f"Payment record {target_id}", target_id, f"{verb} payment record {target_id}"
    if module == "Payment Transactions":
        target_id = _padded("TXN-2025-", i)
        return f"Transaction {target_id}", target_id, f"{verb} transaction {target_id}"
    if module == "User Management":
        target_id = f"user-{i}"
        return "User account", target_id, f"{verb} user account {target_id}"
    if module == "Debt Reminders":
        target_id = _padded("REMINDER-", i, 4)
        return "Reminder template", target_id, f"{verb} reminder template {target_id}"
    return "Term settings", "", f"{verb} term settings"


def generate_activity(seed: int, now: datetime, count: int = ACTIVITY_COUNT) -> List[ActivityLogEntry]:
    """Audit entries, newest first. Documents that cannot be deleted log an update instead."""
    rng = random.Random(seed + 3)
    actions = ["create", "update", "delete", "send_email", "download"]
    entries: List[ActivityLogEntry] = []
    for i in range(1, count + 1):
        user, user_id = rng.choice(LOG_USERS)
        module = rng.choice(LOG_MODULES)
        action = rng.choice(actions)
        if action == "delete" and module in NON_DELETABLE_MODULES:
            action = "update"
        target, target_id, details = _activity_target(module, action, i)
        entries.append(
            ActivityLogEntry(
                id=str(i),
                timestamp=now - timedelta(minutes=rng.randint(0, 9999)),
                user=user,
                user_id=user_id,
                action=action,
                module=module,
                target=target,
                target_id=target_id,
                details=details,
                ip_address=f"192.168.1.{rng.randint(0, 254)}",
            )
        )
    entries.sort(key=lambda e: e.timestamp, reverse=True)
    return entries


def seed_users() -> List[UserAccount]:
    """The five accounts the user directory starts with."""
    rows = [
        ("1", "John", "Smith", "+66 81 234 5678", "admin", "active", datetime(2024, 1, 15), datetime(2025, 10, 14, 9, 30)),
        ("2", "Sarah", "Johnson", "+66 82 345 6789", "manager", "active", datetime(2024, 2, 20), datetime(2025, 10, 13, 14, 20)),
        ("3", "Michael", "Chen", "+66 83 456 7890", "staff", "active", datetime(2024, 3, 10), datetime(2025, 10, 14, 8, 15)),
        ("4", "Emily", "Davis", "+66 84 567 8901", "staff", "inactive", datetime(2024, 4, 5), datetime(2025, 9, 28, 16, 45)),
        ("5", "David", "Wilson", "+66 85 678 9012", "viewer", "active", datetime(2024, 5, 12), None),
    ]
    return [
        UserAccount(
            id=user_id,
            first_name=first,
            last_name=last,
            email=f"{first.lower()}.{last.lower()}@rugby.ac.th",
            phone=phone,
            username=f"{first.lower()}.{last.lower()}",
            role=role,
            status=status,
            created_at=created_at,
            last_login=last_login,
        )
        for user_id, first, last, phone, role, status, created_at, last_login in rows
    ]


def _generators() -> Dict[str, Callable[[int, datetime], List[Any]]]:
    return {
        "payments": generate_payments,
        "receipts": generate_receipts,
        "transactions": generate_transactions,
        "activity": generate_activity,
        "users": lambda seed, now: seed_users(),
    }


def generate_records(view_name: str, seed: int, now: datetime) -> List[Any]:
    generators = _generators()
    if view_name not in generators:
        raise UnknownViewError(f"No sample data for view '{view_name}'")
    records = generators[view_name](seed, now)
    log.debug("Sample records generated", extra={"view": view_name, "records": len(records)})
    return records


def dump_records(records: List[Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump([record.model_dump(mode="json") for record in records], f, indent=2)


def load_records(record_type: Any, path: Path) -> List[Any]:
    """
    Read records written by `dump_records` back into `record_type` models.

    Raises
    ------
    RecordFileError
        If the file is not JSON or an entry does not validate.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        return [record_type.model_validate(item) for item in raw]
    except json.JSONDecodeError as exc:
        raise RecordFileError(f"Records file is not valid JSON: {path} ({exc})") from exc
    except ValidationError as exc:
        raise RecordFileError(
            f"Records file does not hold {record_type.__name__} records: {path} "
            f"({exc.error_count()} validation errors)"
        ) from exc


__all__ = [
    "ACTIVITY_COUNT",
    "PAYMENT_COUNT",
    "RECEIPT_COUNT",
    "TRANSACTION_COUNT",
    "dump_records",
    "generate_activity",
    "generate_payments",
    "generate_receipts",
    "generate_records",
    "generate_transactions",
    "load_records",
    "seed_users",
]
