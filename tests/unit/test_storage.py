from __future__ import annotations

import json
from datetime import date, timedelta

from schooney.storage import (
    AUTH_KEY,
    DEFAULT_TERMS,
    QUOTA_KEY,
    TERMS_KEY,
    StateStore,
    StoredAuthProvider,
    load_quota,
    load_terms,
    new_term,
    save_quota,
    save_terms,
)

TODAY = date(2026, 10, 19)
DAILY_LIMIT = 500


def test_store_get_set_remove(state_store):
    assert state_store.get("missing", "fallback") == "fallback"

    state_store.set("answer", 42)
    assert state_store.get("answer") == 42
    assert state_store.path.exists()

    state_store.remove("answer")
    assert state_store.get("answer") is None


def test_corrupt_state_file_behaves_like_empty(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    store = StateStore(path)

    assert store.get(AUTH_KEY) is None
    store.set("key", "value")
    assert json.loads(path.read_text(encoding="utf-8")) == {"key": "value"}


def test_non_object_state_file_behaves_like_empty(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert StateStore(path).get("anything", "default") == "default"


class TestAuth:
    def test_login_logout(self, state_store):
        auth = StoredAuthProvider(state_store)
        assert not auth.is_authenticated()

        auth.login()
        assert auth.is_authenticated()

        auth.logout()
        assert not auth.is_authenticated()
        assert AUTH_KEY not in json.loads(state_store.path.read_text(encoding="utf-8"))

    def test_only_a_true_flag_counts(self, state_store):
        state_store.set(AUTH_KEY, "true")

        assert not StoredAuthProvider(state_store).is_authenticated()


class TestTerms:
    def test_defaults_when_missing(self, state_store):
        assert load_terms(state_store) == DEFAULT_TERMS

    def test_saved_terms_use_camel_case_keys(self, state_store):
        terms = [*DEFAULT_TERMS, new_term("4")]

        save_terms(state_store, terms)

        raw = state_store.get(TERMS_KEY)
        assert raw[0]["billingStartDate"] == "2025-07-15"
        assert raw[3] == {
            "id": "4",
            "name": "New Term",
            "billingStartDate": None,
            "startDate": None,
            "endDate": None,
        }
        assert load_terms(state_store) == terms

    def test_invalid_terms_fall_back_to_defaults(self, state_store):
        state_store.set(TERMS_KEY, [{"name": "missing id"}])

        assert load_terms(state_store) == DEFAULT_TERMS


class TestQuota:
    def test_fresh_when_missing(self, state_store):
        quota = load_quota(state_store, TODAY, DAILY_LIMIT)

        assert (quota.count, quota.limit_per_day, quota.last_reset_day) == (0, DAILY_LIMIT, TODAY)

    def test_saved_quota_survives_the_same_day(self, state_store):
        save_quota(state_store, load_quota(state_store, TODAY, DAILY_LIMIT).record_send())

        assert load_quota(state_store, TODAY, DAILY_LIMIT).count == 1

    def test_quota_rolls_over_on_a_new_day(self, state_store):
        save_quota(state_store, load_quota(state_store, TODAY, DAILY_LIMIT).record_send())

        quota = load_quota(state_store, TODAY + timedelta(days=1), DAILY_LIMIT)

        assert quota.count == 0
        assert quota.last_reset_day == TODAY + timedelta(days=1)

    def test_configured_limit_wins(self, state_store):
        save_quota(state_store, load_quota(state_store, TODAY, DAILY_LIMIT))

        assert load_quota(state_store, TODAY, 25).limit_per_day == 25

    def test_invalid_quota_starts_fresh(self, state_store):
        state_store.set(QUOTA_KEY, {"count": -4, "last_reset_day": "yesterday"})

        assert load_quota(state_store, TODAY, DAILY_LIMIT).count == 0
