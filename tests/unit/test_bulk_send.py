from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from schooney.errors import SendValidationError
from schooney.mailing.bulk_send import BulkSendState, send_bulk, send_single
from schooney.mailing.mailer import SimulatedMailer
from schooney.mailing.quota import SendQuota, fresh_quota, maybe_reset

NOW = datetime(2026, 10, 19, 12, 0, 0)
TODAY = NOW.date()

DAILY_LIMIT = 500
YESTERDAY = TODAY - timedelta(days=1)


def _quota(count, day=TODAY):
    return SendQuota(count=count, limit_per_day=DAILY_LIMIT, last_reset_day=day)


def _send(view, records, selection, quota, mailer, **kwargs):
    return send_bulk(
        view,
        records,
        frozenset(selection),
        quota,
        today=TODAY,
        now=NOW,
        mailer=mailer,
        **kwargs,
    )


class TestSendQuota:
    def test_maybe_reset_same_day_is_unchanged(self):
        quota = _quota(12)
        assert maybe_reset(quota, TODAY) is quota

    def test_maybe_reset_new_day_zeroes_once(self):
        reset = maybe_reset(_quota(500, YESTERDAY), TODAY)

        assert (reset.count, reset.last_reset_day) == (0, TODAY)
        assert maybe_reset(reset, TODAY) is reset

    def test_counters(self):
        quota = _quota(400)

        assert quota.remaining == 100
        assert quota.usage_percent == pytest.approx(80.0)
        assert not quota.is_exhausted
        assert _quota(500).is_exhausted
        assert quota.record_send().count == 401

    def test_negative_count_is_rejected(self):
        with pytest.raises(ValidationError):
            SendQuota(count=-1, last_reset_day=TODAY)

    def test_fresh_quota(self):
        quota = fresh_quota(TODAY, 25)
        assert (quota.count, quota.limit_per_day, quota.last_reset_day) == (0, 25, TODAY)


class TestSendBulk:
    def test_limit_boundary_sends_exactly_one_of_three(self, make_payment, payments_view):
        records = [make_payment(str(i)) for i in range(1, 4)]
        mailer = SimulatedMailer()

        result = _send(payments_view, records, {"1", "2", "3"}, _quota(499), mailer)

        assert result.state is BulkSendState.LIMIT_REACHED
        assert result.sent_ids == ("1",)
        assert result.message == "Daily email limit reached. Sent 1 of 3 selected invoices."
        assert result.quota.count == DAILY_LIMIT
        assert result.selection == frozenset({"2", "3"})
        assert [d.record_id for d in mailer.deliveries] == ["1"]
        assert result.is_error

    def test_sent_records_are_marked(self, make_payment, payments_view):
        records = [make_payment("1"), make_payment("2")]

        result = _send(payments_view, records, {"1", "2"}, _quota(0), SimulatedMailer())

        assert result.state is BulkSendState.DONE
        assert result.message == "Email reminders sent to 2 invoices."
        assert result.selection == frozenset()
        for record in result.updated_records:
            assert record.email_status == "sent"
            assert record.last_email_sent_date == NOW
        # originals are untouched values
        assert records[0].email_status == "not_sent"
        assert not result.is_error

    def test_single_record_message(self, make_payment, payments_view):
        result = _send(payments_view, [make_payment("1")], {"1"}, _quota(0), SimulatedMailer())

        assert result.message == "Email reminders sent to 1 invoice."

    def test_rollover_happens_before_the_limit_check(self, make_payment, payments_view):
        records = [make_payment(str(i)) for i in range(1, 4)]

        result = _send(payments_view, records, {"1", "2", "3"}, _quota(500, YESTERDAY), SimulatedMailer())

        assert result.state is BulkSendState.DONE
        assert result.sent_count == 3
        assert (result.quota.count, result.quota.last_reset_day) == (3, TODAY)

    def test_exhausted_quota_sends_nothing(self, make_payment, payments_view):
        mailer = SimulatedMailer()

        result = _send(payments_view, [make_payment("1")], {"1"}, _quota(500), mailer)

        assert result.state is BulkSendState.LIMIT_REACHED
        assert result.message == "Daily email limit reached (500 emails). Please try again tomorrow."
        assert result.sent_count == 0
        assert mailer.deliveries == []

    def test_empty_selection(self, payment_records, payments_view):
        quota = _quota(10)

        result = _send(payments_view, payment_records, set(), quota, SimulatedMailer())

        assert result.state is BulkSendState.EMPTY_SELECTION
        assert result.message == "Please select at least one invoice to send reminder emails."
        assert result.quota is quota

    def test_selection_outside_visible_records(self, payment_records, payments_view):
        result = _send(payments_view, payment_records, {"999"}, _quota(10), SimulatedMailer())

        assert result.state is BulkSendState.NO_MATCHING_RECORDS
        assert result.message == "Selected invoices are not available with the current filters."
        assert result.selection == frozenset({"999"})

    def test_hidden_selected_ids_are_never_sent(self, payment_records, payments_view):
        visible = payment_records[:2]
        mailer = SimulatedMailer()

        result = _send(payments_view, visible, {"1", "20"}, _quota(0), mailer)

        assert result.sent_ids == ("1",)
        assert [d.record_id for d in mailer.deliveries] == ["1"]

    def test_ineligible_record_aborts_before_sending(self, make_payment, payments_view):
        records = [make_payment("1"), make_payment("2", nav_sync_status="pending")]
        mailer = SimulatedMailer()

        with pytest.raises(SendValidationError) as excinfo:
            _send(payments_view, records, {"1", "2"}, _quota(0), mailer)

        assert excinfo.value.record_id == "2"
        assert "synced to NAV" in excinfo.value.reason
        assert mailer.deliveries == []

    def test_missing_email_is_ineligible(self, make_payment, payments_view):
        with pytest.raises(SendValidationError):
            _send(payments_view, [make_payment("1", parent_email="")], {"1"}, _quota(0), SimulatedMailer())

    def test_failed_delivery_is_not_counted(self, make_payment, payments_view):
        records = [make_payment(str(i)) for i in range(1, 4)]

        result = _send(payments_view, records, {"1", "2", "3"}, _quota(0), SimulatedMailer(fail_for=("2",)))

        assert result.state is BulkSendState.DONE
        assert result.sent_ids == ("1", "3")
        assert result.failed_ids == ("2",)
        assert result.quota.count == 2
        assert result.selection == frozenset({"2"})
        assert result.message == "Email reminders sent to 2 invoices. 1 could not be delivered."
        assert result.is_error

    def test_progress_callback(self, make_payment, payments_view):
        records = [make_payment(str(i)) for i in range(1, 4)]
        seen = []

        _send(
            payments_view,
            records,
            {"1", "2", "3"},
            _quota(0),
            SimulatedMailer(),
            on_progress=lambda state, remaining: seen.append((state, remaining)),
        )

        assert seen == [(BulkSendState.SENDING, 3), (BulkSendState.SENDING, 2), (BulkSendState.SENDING, 1)]


class TestSendSingle:
    def test_success(self, make_payment, payments_view):
        result = send_single(payments_view, make_payment("1"), _quota(0), TODAY, NOW, SimulatedMailer())

        assert result.sent
        assert result.message == "Email sent to smith@example.com"
        assert result.record.email_status == "sent"
        assert result.quota.count == 1

    def test_exhausted(self, make_payment, payments_view):
        record = make_payment("1")

        result = send_single(payments_view, record, _quota(500), TODAY, NOW, SimulatedMailer())

        assert not result.sent
        assert result.record is record
        assert "Daily email limit reached" in result.message

    def test_ineligible(self, make_payment, payments_view):
        with pytest.raises(SendValidationError):
            send_single(
                payments_view,
                make_payment("1", nav_sync_status="failed"),
                _quota(0),
                TODAY,
                NOW,
                SimulatedMailer(),
            )
