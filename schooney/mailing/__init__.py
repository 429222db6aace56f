"""
Mailing package: daily quota, delivery collaborators and the rate-limited
reminder flow.
"""

from schooney.mailing.bulk_send import (
    BulkSendResult,
    BulkSendState,
    SingleSendResult,
    send_bulk,
    send_single,
)
from schooney.mailing.mailer import Delivery, Mailer, SimulatedMailer
from schooney.mailing.quota import SendQuota, fresh_quota, maybe_reset

__all__ = [
    "BulkSendResult",
    "BulkSendState",
    "SingleSendResult",
    "send_bulk",
    "send_single",
    "Delivery",
    "Mailer",
    "SimulatedMailer",
    "SendQuota",
    "fresh_quota",
    "maybe_reset",
]
