"""
Pytest configuration for the Schooney record console.

Provides fixtures for:
- Hand-built records with controlled field values
- Deterministic sample data
- Settings override pointing state and exports at a temporary directory
- Restoring root logging after CLI runs reconfigure it
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Generator, List

import pytest

from schooney.config import Settings, get_settings
from schooney.domain.models import PaymentRecord
from schooney.mock_data import generate_payments
from schooney.notify import RecordingNotifier
from schooney.storage import StateStore
from schooney.views.payments import PaymentHistoryView

NOW = datetime(2026, 10, 19, 12, 0, 0)
TODAY = NOW.date()
SEED = 42


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """
    CLI commands call `configure_logging`, which installs a handler bound to
    the runner's captured stream; put the original handlers back afterwards.
    """
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_payment() -> Callable[..., PaymentRecord]:
    """
    Factory for payment records that are paid, NAV-synced and e-mailable
    unless overridden. The transaction date is `id` days before NOW.
    """

    def factory(record_id: str, **overrides: Any) -> PaymentRecord:
        number = int(record_id)
        fields = {
            "id": record_id,
            "invoice_number": f"INV-2025-{number:06d}",
            "student_name": f"Student {number}",
            "student_id": f"ST{number:06d}",
            "student_grade": "Year 3",
            "student_room": "A",
            "school_level": "prep",
            "amount": Decimal("42000"),
            "payment_type": "termly",
            "payment_method": "Credit Card",
            "payment_channel": "credit_card",
            "payer_name": "Mr. John Smith",
            "parent_email": "smith@example.com",
            "status": "paid",
            "invoice_status": "paid",
            "transaction_date": NOW - timedelta(days=number),
            "email_status": "not_sent",
            "nav_sync_status": "synced",
        }
        fields.update(overrides)
        return PaymentRecord(**fields)

    return factory


@pytest.fixture
def payment_records(make_payment) -> List[PaymentRecord]:
    """25 payments; every fifth invoice (5, 10, ...) is overdue."""
    return [
        make_payment(str(i), invoice_status="overdue" if i % 5 == 0 else "paid")
        for i in range(1, 26)
    ]


@pytest.fixture(scope="session")
def sample_payments() -> List[PaymentRecord]:
    return generate_payments(SEED, NOW)


@pytest.fixture
def payments_view() -> PaymentHistoryView:
    return PaymentHistoryView()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def state_store(tmp_path: Path) -> StateStore:
    return StateStore(tmp_path / "state" / "state.json")


@pytest.fixture
def test_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """
    Settings with state and exports under tmp_path.

    Environment variables are patched (rather than building Settings directly)
    so code calling `get_settings()` sees the same values.
    """
    monkeypatch.setenv("STATE_FILE", str(tmp_path / "state.json"))
    monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("MOCK_SEED", str(SEED))
    monkeypatch.delenv("DAILY_EMAIL_LIMIT", raising=False)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
