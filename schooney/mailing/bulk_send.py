"""
Rate-limited reminder sending.

States of the bulk flow::

    IDLE -> SENDING (n remaining) -> DONE | LIMIT_REACHED -> IDLE

Records are processed one at a time. Before each record the quota is
rolled over if the calendar day changed; when it is exhausted the flow
stops with LIMIT_REACHED and reports how many of the batch went out. The
counter is incremented strictly after a successful delivery, and a sent
record leaves the selection, so nothing is sent twice. Reaching the limit
is an outcome, not an error.
"""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from schooney.errors import SendValidationError
from schooney.mailing.mailer import Mailer
from schooney.mailing.quota import SendQuota, maybe_reset
from schooney.query.selection import Selection
from schooney.utils.logging import get_logger
from schooney.views.abstract import RecordView

log = get_logger(__name__)

ProgressCallback = Callable[["BulkSendState", int], None]


class BulkSendState(str, enum.Enum):
    IDLE = "idle"
    SENDING = "sending"
    DONE = "done"
    LIMIT_REACHED = "limit_reached"
    EMPTY_SELECTION = "empty_selection"
    NO_MATCHING_RECORDS = "no_matching_records"


class BulkSendResult(BaseModel):
    """
    Outcome of one bulk send.

    `updated_records` holds the replaced (sent) records for the caller to
    write back into its collection; `selection` is what stays selected.
    """

    state: BulkSendState
    message: str
    batch_size: int = 0
    sent_ids: Tuple[str, ...] = ()
    failed_ids: Tuple[str, ...] = ()
    updated_records: Tuple[Any, ...] = ()
    quota: SendQuota
    selection: Selection = frozenset()

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def sent_count(self) -> int:
        return len(self.sent_ids)

    @property
    def is_error(self) -> bool:
        return self.state is not BulkSendState.DONE or bool(self.failed_ids)


class SingleSendResult(BaseModel):
    sent: bool
    message: str
    record: Any
    quota: SendQuota

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


def _plural(word: str, count: int) -> str:
    return word if count == 1 else f"{word}s"


def limit_message(quota: SendQuota) -> str:
    return (
        f"Daily email limit reached ({quota.limit_per_day} emails). "
        "Please try again tomorrow."
    )


def reminder_subject(view: RecordView, record: Any) -> str:
    return f"Payment reminder for {view.describe_record(record)}"


def validate_batch(view: RecordView, records: Sequence[Any]) -> None:
    """
    Check every record before anything is sent.

    Raises
    ------
    SendValidationError
        For the first ineligible record; no record has been touched.
    """
    for record in records:
        reason = view.email_eligibility(record)
        if reason:
            raise SendValidationError(record.id, reason)


def _deliver(
    view: RecordView,
    record: Any,
    quota: SendQuota,
    now: datetime,
    mailer: Mailer,
) -> Tuple[bool, Any, SendQuota]:
    delivered = mailer.deliver(record.id, record.parent_email, reminder_subject(view, record), now)
    if not delivered:
        return False, record, quota
    return True, view.mark_emailed(record, now), quota.record_send()


def send_bulk(
    view: RecordView,
    visible: Sequence[Any],
    selection: Selection,
    quota: SendQuota,
    today: date,
    now: datetime,
    mailer: Mailer,
    on_progress: Optional[ProgressCallback] = None,
) -> BulkSendResult:
    """
    Send reminders for the selected records that are currently visible.

    Parameters
    ----------
    view : RecordView
        View of the records; decides eligibility and how a record is marked.
    visible : Sequence
        Current filtered set; selected ids outside it are never reached.
    selection : Selection
        Selected record ids.
    quota : SendQuota
        Quota before the send.
    today : date
        Calendar day used for the rollover check.
    now : datetime
        Timestamp written to `last_email_sent_date`.
    mailer : Mailer
        Delivery collaborator.
    on_progress : callable, optional
        Called with (SENDING, remaining) before each record.

    Raises
    ------
    SendValidationError
        If any record of the batch is not eligible (nothing is sent).
    """
    if not selection:
        return BulkSendResult(
            state=BulkSendState.EMPTY_SELECTION,
            message=f"Please select at least one {view.item_label} to send reminder emails.",
            quota=quota,
            selection=selection,
        )

    batch = [record for record in visible if record.id in selection]
    if not batch:
        return BulkSendResult(
            state=BulkSendState.NO_MATCHING_RECORDS,
            message=(
                f"Selected {_plural(view.item_label, 2)} are not available "
                "with the current filters."
            ),
            quota=quota,
            selection=selection,
        )

    validate_batch(view, batch)

    remaining_selection = set(selection)
    sent: List[str] = []
    failed: List[str] = []
    updated: List[Any] = []
    state = BulkSendState.DONE

    log.info("Bulk send started", extra={"view": view.name, "batch_size": len(batch)})
    for position, record in enumerate(batch):
        if on_progress is not None:
            on_progress(BulkSendState.SENDING, len(batch) - position)
        quota = maybe_reset(quota, today)
        if quota.is_exhausted:
            state = BulkSendState.LIMIT_REACHED
            break
        delivered, record, quota = _deliver(view, record, quota, now, mailer)
        if not delivered:
            failed.append(record.id)
            continue
        sent.append(record.id)
        updated.append(record)
        remaining_selection.discard(record.id)

    if state is BulkSendState.LIMIT_REACHED:
        if sent:
            message = (
                f"Daily email limit reached. Sent {len(sent)} of {len(batch)} "
                f"selected {_plural(view.item_label, len(batch))}."
            )
        else:
            message = limit_message(quota)
    else:
        message = f"Email reminders sent to {len(sent)} {_plural(view.item_label, len(sent))}."
        if failed:
            message += f" {len(failed)} could not be delivered."

    log.info(
        "Bulk send finished",
        extra={
            "view": view.name,
            "state": state.value,
            "sent": len(sent),
            "failed": len(failed),
            "batch_size": len(batch),
            "quota_count": quota.count,
        },
    )
    return BulkSendResult(
        state=state,
        message=message,
        batch_size=len(batch),
        sent_ids=tuple(sent),
        failed_ids=tuple(failed),
        updated_records=tuple(updated),
        quota=quota,
        selection=frozenset(remaining_selection),
    )


def send_single(
    view: RecordView,
    record: Any,
    quota: SendQuota,
    today: date,
    now: datetime,
    mailer: Mailer,
) -> SingleSendResult:
    """
    Send one reminder under the same gating and quota as the bulk flow.

    Raises
    ------
    SendValidationError
        If the record is not eligible.
    """
    validate_batch(view, [record])
    quota = maybe_reset(quota, today)
    if quota.is_exhausted:
        log.info("Single send refused, quota exhausted", extra={"view": view.name})
        return SingleSendResult(sent=False, message=limit_message(quota), record=record, quota=quota)

    delivered, updated, quota = _deliver(view, record, quota, now, mailer)
    if not delivered:
        return SingleSendResult(
            sent=False,
            message=f"Email to {record.parent_email} could not be delivered.",
            record=record,
            quota=quota,
        )
    log.info("Single send finished", extra={"view": view.name, "record_id": record.id})
    return SingleSendResult(
        sent=True,
        message=f"Email sent to {record.parent_email}",
        record=updated,
        quota=quota,
    )


__all__ = [
    "BulkSendResult",
    "BulkSendState",
    "SingleSendResult",
    "limit_message",
    "reminder_subject",
    "send_bulk",
    "send_single",
    "validate_batch",
]
