"""
User directory view plus the create/update/delete helpers of the user
management screen.

Accounts are held in a `RecordCollection`; edits replace the stored record
by id. Passwords never reach the directory (credential handling belongs to
the authentication service).
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from schooney.domain.collection import RecordCollection
from schooney.domain.models import ROLE_LABELS, FieldKind, UserAccount, UserRole, UserStatus
from schooney.errors import RecordCollectionError
from schooney.utils.formatting import format_datetime
from schooney.utils.logging import get_logger
from schooney.views.abstract import AbstractRecordView, ChoiceFilter, ExportColumn, capitalize_first

logger = get_logger(__name__)


def _role_label(value: str) -> str:
    return ROLE_LABELS.get(value, value)


class UserDraft(BaseModel):
    """Form data for creating or editing an account."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = ""
    username: str = Field(..., min_length=1)
    role: UserRole = "staff"
    status: UserStatus = "active"

    model_config = {"frozen": True}


class UserSummary(BaseModel):
    total_users: int
    active_users: int
    admins: int
    managers: int
    staff: int

    model_config = {"frozen": True}


class UsersView(AbstractRecordView):
    name = "users"
    title = "User Management"
    noun = "users"
    record_type = UserAccount
    search_fields = ("first_name", "last_name", "email")
    filters: Dict[str, ChoiceFilter] = {
        "role": ChoiceFilter(
            field="role",
            label="Role",
            all_label="All Roles",
            options=tuple(ROLE_LABELS),
            display=_role_label,
        ),
        "status": ChoiceFilter(
            field="status",
            label="Status",
            all_label="All Status",
            options=("active", "inactive"),
        ),
    }
    date_field = "created_at"
    date_label = "Created Date"
    sort_fields = {
        "first_name": FieldKind.TEXT,
        "last_name": FieldKind.TEXT,
        "email": FieldKind.TEXT,
        "role": FieldKind.TEXT,
        "status": FieldKind.TEXT,
        "created_at": FieldKind.TIMESTAMP,
    }
    filename_slug = "users"
    filename_filters = ("role", "status")

    def columns(self) -> List[ExportColumn]:
        return [
            ExportColumn("First Name", lambda u: u.first_name),
            ExportColumn("Last Name", lambda u: u.last_name),
            ExportColumn("Email", lambda u: u.email),
            ExportColumn("Phone", lambda u: u.phone),
            ExportColumn("Username", lambda u: u.username),
            ExportColumn("Role", lambda u: _role_label(u.role)),
            ExportColumn("Status", lambda u: capitalize_first(u.status)),
            ExportColumn("Created At", lambda u: format_datetime(u.created_at)),
            ExportColumn("Last Login", lambda u: format_datetime(u.last_login)),
        ]

    def aggregate(self, records: Sequence[UserAccount]) -> Optional[str]:
        active = sum(1 for user in records if user.status == "active")
        return f"Active Users: {active}"

    def describe_record(self, record: UserAccount) -> str:
        return f"user {record.full_name}"


def create_user(
    collection: RecordCollection[UserAccount],
    draft: UserDraft,
    created_at: datetime,
) -> UserAccount:
    """Append a new account with the next numeric id."""
    user = UserAccount(id=collection.next_id(), created_at=created_at, **draft.model_dump())
    collection.append(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return user


def update_user(
    collection: RecordCollection[UserAccount],
    user_id: str,
    draft: UserDraft,
) -> UserAccount:
    """Replace the editable fields of an account; id and timestamps are kept."""
    current = collection.get(user_id)
    if current is None:
        raise RecordCollectionError(f"Unknown record id '{user_id}'")
    updated = current.model_copy(update=draft.model_dump())
    collection.replace(updated)
    logger.info("User updated", extra={"user_id": user_id})
    return updated


def delete_user(collection: RecordCollection[UserAccount], user_id: str) -> UserAccount:
    removed = collection.remove(user_id)
    logger.info("User deleted", extra={"user_id": user_id})
    return removed


def summarize_users(users: Sequence[UserAccount]) -> UserSummary:
    return UserSummary(
        total_users=len(users),
        active_users=sum(1 for u in users if u.status == "active"),
        admins=sum(1 for u in users if u.role == "admin"),
        managers=sum(1 for u in users if u.role == "manager"),
        staff=sum(1 for u in users if u.role == "staff"),
    )


__all__ = [
    "UserDraft",
    "UserSummary",
    "UsersView",
    "create_user",
    "delete_user",
    "summarize_users",
    "update_user",
]
