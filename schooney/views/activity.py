"""
Activity log view: audit trail of back-office actions, newest first by
default in the generated data, 20 entries per page.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from schooney.domain.models import ActivityLogEntry, FieldKind
from schooney.utils.formatting import format_datetime
from schooney.views.abstract import AbstractRecordView, ChoiceFilter, ExportColumn

ACTIVITY_MODULES = (
    "Invoice",
    "Receipt",
    "Payment History",
    "User Management",
    "Semester Settings",
    "Debt Reminders",
    "Payment Transactions",
)

ACTION_LABELS = {
    "create": "Create",
    "update": "Update",
    "delete": "Delete",
    "send_email": "Send Email",
    "download": "Download",
}


def _action_label(value: str) -> str:
    return ACTION_LABELS.get(value, value)


def _as_is(value: str) -> str:
    return value


class ActivityLogView(AbstractRecordView):
    name = "activity"
    title = "Activity Log"
    noun = "activities"
    record_type = ActivityLogEntry
    search_fields = ("user", "target", "details", "target_id")
    filters: Dict[str, ChoiceFilter] = {
        # options come from the data: one entry per user id present in the log
        "user": ChoiceFilter(field="user_id", label="User", all_label="All Users", display=_as_is),
        "action": ChoiceFilter(
            field="action",
            label="Action",
            all_label="All Actions",
            options=tuple(ACTION_LABELS),
            display=_action_label,
        ),
        "module": ChoiceFilter(
            field="module",
            label="Module",
            all_label="All Modules",
            options=ACTIVITY_MODULES,
            display=_as_is,
        ),
    }
    date_field = "timestamp"
    sort_fields = {
        "timestamp": FieldKind.TIMESTAMP,
        "user": FieldKind.TEXT,
        "action": FieldKind.TEXT,
        "module": FieldKind.TEXT,
    }
    filename_slug = "activity-log"
    filename_filters = ("user", "action", "module")
    default_page_size = 20

    def columns(self) -> List[ExportColumn]:
        return [
            ExportColumn("Timestamp", lambda e: format_datetime(e.timestamp)),
            ExportColumn("User", lambda e: e.user),
            ExportColumn("User ID", lambda e: e.user_id),
            ExportColumn("Action", lambda e: _action_label(e.action)),
            ExportColumn("Module", lambda e: e.module),
            ExportColumn("Target", lambda e: e.target),
            ExportColumn("Target ID", lambda e: e.target_id),
            ExportColumn("Details", lambda e: e.details),
            ExportColumn("IP Address", lambda e: e.ip_address),
        ]

    def aggregate(self, records: Sequence[ActivityLogEntry]) -> Optional[str]:
        return f"Distinct Users: {len({entry.user_id for entry in records})}"

    def describe_record(self, record: ActivityLogEntry) -> str:
        return f"activity {record.id}"


__all__ = ["ACTION_LABELS", "ACTIVITY_MODULES", "ActivityLogView"]
