"""
Daily e-mail quota.

The quota is a value object passed into and returned from every send
operation rather than ambient mutable state. Day rollover is the pure
function `maybe_reset`, so tests inject "today" instead of patching the
clock.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

DEFAULT_DAILY_LIMIT = 500


class SendQuota(BaseModel):
    """
    Count of e-mails sent on `last_reset_day` against a fixed daily limit.

    Attributes
    ----------
    count : int
        E-mails sent since the last reset.
    limit_per_day : int
        Maximum e-mails per calendar day.
    last_reset_day : date
        Calendar day the counter belongs to.
    """

    count: int = Field(0, ge=0)
    limit_per_day: int = Field(DEFAULT_DAILY_LIMIT, gt=0)
    last_reset_day: date

    model_config = {"frozen": True}

    @property
    def remaining(self) -> int:
        return max(self.limit_per_day - self.count, 0)

    @property
    def usage_percent(self) -> float:
        return min(self.count / self.limit_per_day * 100, 100.0)

    @property
    def is_exhausted(self) -> bool:
        return self.count >= self.limit_per_day

    def record_send(self) -> "SendQuota":
        """Quota after one successful delivery."""
        return self.model_copy(update={"count": self.count + 1})


def maybe_reset(quota: SendQuota, today: date) -> SendQuota:
    """Zero the counter exactly once when the calendar day changed."""
    if quota.last_reset_day == today:
        return quota
    return quota.model_copy(update={"count": 0, "last_reset_day": today})


def fresh_quota(today: date, limit_per_day: int = DEFAULT_DAILY_LIMIT) -> SendQuota:
    return SendQuota(count=0, limit_per_day=limit_per_day, last_reset_day=today)


__all__ = ["DEFAULT_DAILY_LIMIT", "SendQuota", "fresh_quota", "maybe_reset"]
