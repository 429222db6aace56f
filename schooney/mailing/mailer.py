"""
Mail delivery collaborators.

No real e-mail is sent by this project; `SimulatedMailer` logs each
delivery and keeps it for inspection.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Protocol, runtime_checkable

from pydantic import BaseModel

from schooney.utils.logging import get_logger

log = get_logger(__name__)


class Delivery(BaseModel):
    record_id: str
    recipient: str
    subject: str
    sent_at: datetime

    model_config = {"frozen": True}


@runtime_checkable
class Mailer(Protocol):
    """Delivers one reminder; returns False when delivery failed."""

    def deliver(self, record_id: str, recipient: str, subject: str, sent_at: datetime) -> bool:
        ...


class SimulatedMailer:
    """
    Records deliveries instead of sending them.

    Parameters
    ----------
    fail_for : iterable[str]
        Record ids whose delivery should report failure.
    """

    def __init__(self, fail_for: tuple[str, ...] = ()) -> None:
        self.fail_for = frozenset(fail_for)
        self.deliveries: List[Delivery] = []

    def deliver(self, record_id: str, recipient: str, subject: str, sent_at: datetime) -> bool:
        if record_id in self.fail_for:
            log.warning("Simulated delivery failed", extra={"record_id": record_id})
            return False
        self.deliveries.append(
            Delivery(record_id=record_id, recipient=recipient, subject=subject, sent_at=sent_at)
        )
        log.info("Simulated delivery", extra={"record_id": record_id, "recipient": recipient})
        return True


__all__ = ["Delivery", "Mailer", "SimulatedMailer"]
