"""
Debt reminder templates.

Messages are HTML fragments held as plain strings. Formatting is a pure
transform over a `[start, end)` character range, and the preview fills the
template placeholders with sample values.

Placeholders: {parent_name}, {student_name}, {amount}, {due_date},
{reminder_date}.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import List, Literal, Optional

from pydantic import BaseModel

from schooney.errors import TemplateRangeError

ReminderMethod = Literal["email", "sms", "both"]

PLACEHOLDERS = ("parent_name", "student_name", "amount", "due_date", "reminder_date")

_EMPTY_MARKUP = (
    re.compile(r"<br\s*/?>", re.IGNORECASE),
    re.compile(r"&nbsp;", re.IGNORECASE),
    re.compile(r"<div>\s*</div>", re.IGNORECASE),
    re.compile(r"<p>\s*</p>", re.IGNORECASE),
    re.compile(r"<[^>]+>"),
)


class ReminderConfig(BaseModel):
    id: str
    name: str
    reminder_date: Optional[date] = None
    method: ReminderMethod = "email"
    enabled: bool = True
    subject: str
    message: str

    model_config = {"frozen": True}


class PreviewValues(BaseModel):
    """Sample values substituted into a preview."""

    parent_name: str = "Mr. John Smith"
    student_name: str = "Emma Smith"
    amount: str = "฿45,000"
    due_date: str = "November 15, 2025"

    model_config = {"frozen": True}


def default_reminders(today: date) -> List[ReminderConfig]:
    """The three stock reminders, dated relative to `today`."""
    return [
        ReminderConfig(
            id="1",
            name="First Reminder",
            reminder_date=today + timedelta(days=30),
            method="email",
            subject="Tuition Payment Reminder - 30 Days",
            message=(
                "<p>Dear Parent,</p><p>This is a friendly reminder that your child's tuition "
                "payment is due in 30 days. Please make your payment to avoid any late fees.</p>"
            ),
        ),
        ReminderConfig(
            id="2",
            name="Second Reminder",
            reminder_date=today + timedelta(days=14),
            method="both",
            subject="Urgent: Tuition Payment Due in 14 Days",
            message=(
                "<p>Dear Parent,</p><p>Your child's tuition payment is due in 14 days. Please "
                "complete your payment as soon as possible to ensure continuous enrollment.</p>"
            ),
        ),
        ReminderConfig(
            id="3",
            name="Overdue Notice",
            reminder_date=None,
            method="both",
            subject="OVERDUE: Tuition Payment Past Due",
            message=(
                "<p>Dear Parent,</p><p>Your child's tuition payment is now overdue. Please "
                "contact our office immediately to arrange payment.</p>"
            ),
        ),
    ]


def _wrap(html: str, start: int, end: int, tag: str) -> str:
    if not 0 <= start <= end <= len(html):
        raise TemplateRangeError(f"Range [{start}, {end}) outside message of length {len(html)}")
    if start == end:
        return html
    return f"{html[:start]}<{tag}>{html[start:end]}</{tag}>{html[end:]}"


def apply_bold(html: str, start: int, end: int) -> str:
    return _wrap(html, start, end, "b")


def apply_italic(html: str, start: int, end: int) -> str:
    return _wrap(html, start, end, "i")


def apply_underline(html: str, start: int, end: int) -> str:
    return _wrap(html, start, end, "u")


def is_html_empty(html: str) -> bool:
    """True when the fragment has no visible text (only tags, breaks, &nbsp;)."""
    if not html:
        return True
    stripped = html
    for pattern in _EMPTY_MARKUP:
        stripped = pattern.sub("", stripped)
    return not stripped.strip()


def format_reminder_date(value: Optional[date]) -> str:
    return value.strftime("%d %B %Y") if value is not None else "Not set"


def render_preview(
    template: str,
    reminder: ReminderConfig,
    values: Optional[PreviewValues] = None,
) -> str:
    """Substitute every placeholder occurrence; unknown braces are left alone."""
    values = values or PreviewValues()
    substitutions = {
        **values.model_dump(),
        "reminder_date": format_reminder_date(reminder.reminder_date),
    }
    rendered = template
    for name in PLACEHOLDERS:
        rendered = rendered.replace("{" + name + "}", substitutions[name])
    return rendered


__all__ = [
    "PLACEHOLDERS",
    "PreviewValues",
    "ReminderConfig",
    "ReminderMethod",
    "apply_bold",
    "apply_italic",
    "apply_underline",
    "default_reminders",
    "format_reminder_date",
    "is_html_empty",
    "render_preview",
]
