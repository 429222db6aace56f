"""
Views package for the Schooney record console.

This module re-exports the view interfaces and the concrete views so
downstream code can import from `schooney.views` directly.
"""

from schooney.views.abstract import (
    AbstractRecordView,
    ChoiceFilter,
    ExportColumn,
    RecordView,
)
from schooney.views.activity import ActivityLogView
from schooney.views.payments import PaymentHistoryView
from schooney.views.receipts import ReceiptsView
from schooney.views.transactions import TransactionsView
from schooney.views.users import UsersView

__all__ = [
    # Abstracts
    "AbstractRecordView",
    "ChoiceFilter",
    "ExportColumn",
    "RecordView",
    # Concrete views
    "ActivityLogView",
    "PaymentHistoryView",
    "ReceiptsView",
    "TransactionsView",
    "UsersView",
]
