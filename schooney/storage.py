"""
Persistent client state kept in a small JSON file.

Keys
----
isAuthenticated : bool
    Session flag written by `login` and removed by `logout`.
tuitionTerms : list
    Tuition term settings (billing start, term start and end dates).
emailQuota : dict
    Serialized `SendQuota`, so the daily counter survives between commands.

A missing or unreadable file behaves like an empty store; the problem is
logged and the next write replaces the file.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from schooney.mailing.quota import SendQuota, fresh_quota, maybe_reset
from schooney.utils.logging import get_logger

log = get_logger(__name__)

AUTH_KEY = "isAuthenticated"
TERMS_KEY = "tuitionTerms"
QUOTA_KEY = "emailQuota"


class StateStore:
    """
    JSON key/value file.

    Parameters
    ----------
    path : Path | str
        Location of the state file; parent directories are created on write.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            log.warning(
                "State file unreadable, using defaults",
                extra={"path": str(self.path), "error": str(exc)},
            )
            return {}
        if not isinstance(data, dict):
            log.warning(
                "State file is not an object, using defaults", extra={"path": str(self.path)}
            )
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        tmp_path.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


# --- authentication -------------------------------------------------------


@runtime_checkable
class AuthProvider(Protocol):
    def is_authenticated(self) -> bool:
        ...


class StoredAuthProvider:
    """Session flag persisted in the state store."""

    def __init__(self, store: StateStore) -> None:
        self.store = store

    def is_authenticated(self) -> bool:
        return self.store.get(AUTH_KEY) is True

    def login(self) -> None:
        self.store.set(AUTH_KEY, True)
        log.info("Session started")

    def logout(self) -> None:
        self.store.remove(AUTH_KEY)
        log.info("Session ended")


# --- tuition terms --------------------------------------------------------


class TuitionTerm(BaseModel):
    id: str
    name: str
    billing_start_date: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


DEFAULT_TERMS: List[TuitionTerm] = [
    TuitionTerm(
        id="1",
        name="Term 1",
        billing_start_date=date(2025, 7, 15),
        start_date=date(2025, 8, 15),
        end_date=date(2025, 12, 20),
    ),
    TuitionTerm(
        id="2",
        name="Term 2",
        billing_start_date=date(2025, 12, 1),
        start_date=date(2026, 1, 8),
        end_date=date(2026, 3, 20),
    ),
    TuitionTerm(
        id="3",
        name="Term 3",
        billing_start_date=date(2026, 3, 1),
        start_date=date(2026, 4, 1),
        end_date=date(2026, 6, 15),
    ),
]


def load_terms(store: StateStore) -> List[TuitionTerm]:
    raw = store.get(TERMS_KEY)
    if raw is None:
        return list(DEFAULT_TERMS)
    try:
        return [TuitionTerm.model_validate(item) for item in raw]
    except (ValidationError, TypeError) as exc:
        log.warning("Stored terms invalid, using defaults", extra={"error": str(exc)})
        return list(DEFAULT_TERMS)


def save_terms(store: StateStore, terms: List[TuitionTerm]) -> None:
    store.set(TERMS_KEY, [term.model_dump(mode="json", by_alias=True) for term in terms])
    log.info("Terms saved", extra={"terms": len(terms)})


def new_term(term_id: str, name: str = "New Term") -> TuitionTerm:
    """Blank term as added from the settings screen."""
    return TuitionTerm(id=term_id, name=name)


# --- e-mail quota ---------------------------------------------------------


def load_quota(store: StateStore, today: date, limit_per_day: int) -> SendQuota:
    """
    Stored quota rolled over to `today`; the configured limit always wins
    over the stored one.
    """
    raw = store.get(QUOTA_KEY)
    if raw is None:
        return fresh_quota(today, limit_per_day)
    try:
        quota = SendQuota.model_validate(raw)
    except ValidationError as exc:
        log.warning("Stored quota invalid, starting fresh", extra={"error": str(exc)})
        return fresh_quota(today, limit_per_day)
    if quota.limit_per_day != limit_per_day:
        quota = quota.model_copy(update={"limit_per_day": limit_per_day})
    reset = maybe_reset(quota, today)
    if reset is not quota:
        log.info("Email quota reset for new day", extra={"day": today.isoformat()})
    return reset


def save_quota(store: StateStore, quota: SendQuota) -> None:
    store.set(QUOTA_KEY, quota.model_dump(mode="json"))


__all__ = [
    "AUTH_KEY",
    "AuthProvider",
    "DEFAULT_TERMS",
    "QUOTA_KEY",
    "StateStore",
    "StoredAuthProvider",
    "TERMS_KEY",
    "TuitionTerm",
    "load_quota",
    "load_terms",
    "new_term",
    "save_quota",
    "save_terms",
]
