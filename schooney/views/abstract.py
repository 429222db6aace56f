"""
View interfaces for the record query engine.

A view parameterizes the engine over one record kind: which fields the
search box looks at, which dropdown filters exist, how fields compare when
sorted, which columns the CSV export carries and whether records can be
e-mailed. Concrete views (payments, receipts, transactions, activity log,
users) subclass `AbstractRecordView` and are registered in
`schooney.views`.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Type,
    runtime_checkable,
)

from pydantic import BaseModel

from schooney.domain.models import FieldKind


def capitalize_first(value: str) -> str:
    """'overdue' -> 'Overdue', 'not_sent' -> 'Not_sent' (as shown in exports)."""
    return value[:1].upper() + value[1:] if value else value


@dataclass(frozen=True)
class ChoiceFilter:
    """
    A dropdown filter: exact match of `field` against the selected value.

    Attributes
    ----------
    field : str
        Record attribute compared against the selection.
    label : str
        Human label used in the export metadata ("Invoice Status").
    all_label : str
        Text shown when the filter is at "all" ("All Statuses").
    options : tuple[str, ...]
        Known values; empty means the options are derived from the data.
    filename_all : str
        Filename fragment used when the filter is at "all".
    display : callable
        Formats a selected value for the export metadata.
    """

    field: str
    label: str
    all_label: str
    options: Tuple[str, ...] = ()
    filename_all: str = "all"
    display: Callable[[str], str] = capitalize_first


@dataclass(frozen=True)
class ExportColumn:
    """One CSV column: header text and a function rendering a record cell."""

    header: str
    render: Callable[[Any], Any]


@runtime_checkable
class RecordView(Protocol):
    """
    Common interface all record views implement.

    Attributes
    ----------
    name : str
        Machine-friendly identifier ("payments").
    title : str
        Document title used in exports.
    noun : str
        Plural noun used in user messages ("payment records").
    """

    name: str
    title: str
    noun: str
    record_type: Type[BaseModel]
    search_fields: Tuple[str, ...]
    filters: Dict[str, ChoiceFilter]
    date_field: str
    date_label: str
    sort_fields: Dict[str, FieldKind]
    filename_slug: str
    filename_filters: Tuple[str, ...]
    default_page_size: int
    item_label: str
    supports_email: bool

    def baseline(self, record: Any) -> bool:
        ...

    def columns(self) -> List[ExportColumn]:
        ...

    def aggregate(self, records: Sequence[Any]) -> Optional[str]:
        ...

    def report_lines(self) -> List[str]:
        ...

    def filename_context(self) -> Optional[str]:
        ...

    def email_eligibility(self, record: Any) -> Optional[str]:
        ...

    def mark_emailed(self, record: Any, sent_at: datetime) -> Any:
        ...

    def download_eligibility(self, record: Any) -> Optional[str]:
        ...

    def describe_record(self, record: Any) -> str:
        ...


class AbstractRecordView(abc.ABC):
    """
    ABC helper for class-based views with sensible defaults.

    Subclasses set the class attributes and implement `columns`.
    """

    name: ClassVar[str]
    title: ClassVar[str]
    noun: ClassVar[str]
    record_type: ClassVar[Type[BaseModel]]
    search_fields: ClassVar[Tuple[str, ...]] = ()
    filters: ClassVar[Dict[str, ChoiceFilter]] = {}
    date_field: ClassVar[str]
    date_label: ClassVar[str] = "Date Range"
    sort_fields: ClassVar[Dict[str, FieldKind]] = {}
    filename_slug: ClassVar[str]
    filename_filters: ClassVar[Tuple[str, ...]] = ()
    default_page_size: ClassVar[int] = 10
    supports_email: ClassVar[bool] = False
    item_label: ClassVar[str] = "record"

    def baseline(self, record: Any) -> bool:
        """Fixed predicate applied before any user criteria."""
        return True

    @abc.abstractmethod
    def columns(self) -> List[ExportColumn]:  # pragma: no cover - interface only
        """Export columns in their fixed order."""
        raise NotImplementedError

    def aggregate(self, records: Sequence[Any]) -> Optional[str]:
        return None

    def report_lines(self) -> List[str]:
        """Extra metadata lines placed after the export date."""
        return []

    def filename_context(self) -> Optional[str]:
        return None

    def email_eligibility(self, record: Any) -> Optional[str]:
        return "E-mail is not available for this view."

    def mark_emailed(self, record: Any, sent_at: datetime) -> Any:
        raise NotImplementedError(f"View '{self.name}' does not send e-mail")

    def download_eligibility(self, record: Any) -> Optional[str]:
        return None

    def describe_record(self, record: Any) -> str:
        """Short label used in user messages ("invoice INV-2025-000001")."""
        return f"record {record.id}"


def total_amount(records: Sequence[Any], field_name: str = "amount") -> Decimal:
    """Sum a Decimal amount field over records."""
    return sum((getattr(record, field_name) for record in records), Decimal("0"))


def nav_synced_email_eligibility(record: Any) -> Optional[str]:
    """
    Reminder e-mails and document downloads require a NAV-synced record with
    a recipient address.
    """
    if getattr(record, "nav_sync_status", None) != "synced":
        return "Cannot send email. Record must be synced to NAV first."
    if not getattr(record, "parent_email", ""):
        return "Cannot send email. No parent email address on record."
    return None


def mark_email_sent(record: Any, sent_at: datetime) -> Any:
    return record.model_copy(update={"email_status": "sent", "last_email_sent_date": sent_at})


__all__ = [
    "AbstractRecordView",
    "ChoiceFilter",
    "ExportColumn",
    "RecordView",
    "capitalize_first",
    "mark_email_sent",
    "nav_synced_email_eligibility",
    "total_amount",
]
