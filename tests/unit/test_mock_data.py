from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from schooney.domain.models import PaymentRecord, UserAccount
from schooney.errors import RecordFileError, UnknownViewError
from schooney.mock_data import (
    ACTIVITY_COUNT,
    NON_DELETABLE_MODULES,
    PAYMENT_COUNT,
    RECEIPT_COUNT,
    TRANSACTION_COUNT,
    dump_records,
    generate_activity,
    generate_payments,
    generate_receipts,
    generate_records,
    generate_transactions,
    load_records,
)

NOW = datetime(2026, 10, 19, 12, 0, 0)
SEED = 42
OTHER_SEED = 7


@pytest.mark.parametrize(
    "view_name, expected",
    [
        ("payments", PAYMENT_COUNT),
        ("receipts", RECEIPT_COUNT),
        ("transactions", TRANSACTION_COUNT),
        ("activity", ACTIVITY_COUNT),
        ("users", 5),
    ],
)
def test_record_counts(view_name, expected):
    records = generate_records(view_name, SEED, NOW)

    assert len(records) == expected
    assert len({r.id for r in records}) == expected


def test_generation_is_deterministic():
    assert generate_payments(SEED, NOW) == generate_payments(SEED, NOW)
    assert generate_payments(SEED, NOW) != generate_payments(OTHER_SEED, NOW)


def test_unknown_view_raises():
    with pytest.raises(UnknownViewError):
        generate_records("invoices", SEED, NOW)


def test_only_paid_payments_are_synced():
    for payment in generate_payments(SEED, NOW):
        if payment.status == "paid":
            assert payment.nav_sync_status == "synced"
            assert payment.email_status is not None
        else:
            assert payment.nav_sync_status is None
            assert payment.email_status is None
        assert payment.amount in (Decimal("125000"), Decimal("42000"))
        assert payment.transaction_date <= NOW


def test_unsynced_receipts_have_no_number():
    for receipt in generate_receipts(SEED, NOW):
        if receipt.nav_sync_status == "synced":
            assert receipt.receipt_number.startswith("RCP-2025-")
        else:
            assert receipt.receipt_number == "-"
            assert receipt.email_status == "not_sent"


def test_transactions_newest_first_with_channel_fees():
    transactions = generate_transactions(SEED, NOW)

    dates = [t.transaction_date for t in transactions]
    assert dates == sorted(dates, reverse=True)
    for t in transactions:
        assert t.total_amount == t.amount + t.fee
        if t.payment_channel == "Credit Card":
            assert t.fee == t.amount * Decimal("0.03")
            assert t.card_brand is not None
        elif t.payment_channel == "QR Payment":
            assert t.fee == t.amount * Decimal("0.015")
        else:
            assert t.fee == 0
            assert t.card_brand is None


def test_activity_never_deletes_documents():
    entries = generate_activity(SEED, NOW)

    stamps = [e.timestamp for e in entries]
    assert stamps == sorted(stamps, reverse=True)
    assert not [e for e in entries if e.action == "delete" and e.module in NON_DELETABLE_MODULES]


def test_dump_and_load(tmp_path):
    records = generate_payments(SEED, NOW, count=3)
    path = tmp_path / "data" / "payments.json"

    dump_records(records, path)

    assert load_records(PaymentRecord, path) == records


def test_load_rejects_invalid_json(tmp_path):
    path = tmp_path / "payments.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(RecordFileError, match="not valid JSON"):
        load_records(PaymentRecord, path)


def test_load_rejects_records_of_another_type(tmp_path):
    path = tmp_path / "payments.json"
    dump_records(generate_payments(SEED, NOW, count=2), path)

    with pytest.raises(RecordFileError, match="does not hold UserAccount records"):
        load_records(UserAccount, path)
