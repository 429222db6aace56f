"""
Domain package for the Schooney record console.

Exports the record models, grade helpers and the id-keyed record collection.
Keep this package focused on data definitions and validation concerns.
"""

from schooney.domain.collection import RecordCollection
from schooney.domain.grades import GRADE_ORDER, grade_rank, school_level_for_grade
from schooney.domain.models import (
    ActivityLogEntry,
    FieldKind,
    PaymentRecord,
    ReceiptRecord,
    TransactionRecord,
    UserAccount,
)

__all__ = [
    "ActivityLogEntry",
    "FieldKind",
    "PaymentRecord",
    "ReceiptRecord",
    "TransactionRecord",
    "UserAccount",
    "RecordCollection",
    "GRADE_ORDER",
    "grade_rank",
    "school_level_for_grade",
]
