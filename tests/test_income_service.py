"""
Tests for the income actions: validation, persistence, reminder
rescheduling and confirmations.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from repositories.document_store import MemoryDocumentStore, StoreError
from repositories.income_repo import INCOMES_KEY, IncomeRepository
from repositories.settings_repo import SettingsRepository
from services.income_service import STORE_FAILURE, IncomeService
from services.notification_service import NotificationService
from services.reminder_policy import DAILY_CHECK_TITLE, TITHE_REMINDER_TITLE
from tests.conftest import NOW, run


class FailingWriteStore(MemoryDocumentStore):
    """Memory store whose ledger writes always fail."""

    def set(self, key, value):
        if key == INCOMES_KEY:
            raise StoreError("disk full")
        return super().set(key, value)


class TestAddIncome:
    """Adding income records."""

    @pytest.mark.parametrize("amount", ["", "   ", "abc", "0", "-5", "NaN", "Infinity"])
    def test_invalid_amount_writes_nothing(self, income_service, store, notifier, amount):
        result = run(income_service.add_income(amount))
        assert result["success"] is False
        assert "valid positive amount" in result["message"]
        assert store.get_document(INCOMES_KEY) is None
        assert notifier.shown == []
        assert notifier.cancel_all_calls == 0

    def test_invalid_date_writes_nothing(self, income_service, store):
        result = run(income_service.add_income("100", when="not-a-date"))
        assert result["success"] is False
        assert store.get_document(INCOMES_KEY) is None

    def test_new_record_is_pending(self, income_service, income_repo):
        result = run(income_service.add_income("1,500", "  Salary  "))
        assert result["success"] is True

        records = income_repo.get_all()
        assert len(records) == 1
        record = records[0]
        assert record.amount == Decimal("1500")
        assert record.tithe == Decimal("150.0")
        assert record.status == "pending"
        assert record.description == "Salary"
        assert record.date == NOW
        assert record.id == int(NOW.timestamp() * 1000)

    @pytest.mark.parametrize("description", [None, "", "   "])
    def test_missing_description_is_stored_as_placeholder(self, income_service, income_repo,
                                                           store, description):
        run(income_service.add_income("10", description))
        assert store.get(INCOMES_KEY)[0]["description"] == "No description"
        assert income_repo.get_all()[0].label == "No description"

    @pytest.mark.parametrize("when", ["0001-01-01", "1969-12-31"])
    def test_dates_before_1970_are_rejected(self, income_service, store, notifier, when):
        result = run(income_service.add_income("100", when=when))
        assert result["success"] is False
        assert "between 1970 and 9999" in result["message"]
        assert store.get_document(INCOMES_KEY) is None
        assert notifier.cancel_all_calls == 0

    def test_ids_are_unique_within_the_same_millisecond(self, income_service, income_repo):
        run(income_service.add_income("10"))
        run(income_service.add_income("20"))
        ids = [r.id for r in income_repo.get_all()]
        assert ids[1] == ids[0] + 1

    def test_confirmation_bypasses_push_switch(self, income_service, notifier, settings_repo):
        """Push is off by default, yet the confirmation is still shown."""
        run(income_service.add_income("100"))
        assert settings_repo.get_reminder_settings().push_enabled is False
        assert notifier.titles_shown() == ["Income Added"]
        assert notifier.scheduled == []
        assert "ETB 100.00" in notifier.shown[0]["body"]
        assert "ETB 10.00" in notifier.shown[0]["body"]

    def test_future_income_announces_reminder(self, income_service, notifier, push_settings):
        when = (NOW + timedelta(days=5)).date().isoformat()
        run(income_service.add_income("300", "Bonus", when=when))
        assert notifier.titles_shown() == ["Income Added", "Reminder Scheduled"]
        assert TITHE_REMINDER_TITLE in notifier.titles_scheduled()
        assert DAILY_CHECK_TITLE in notifier.titles_scheduled()

    def test_iso_date_with_timezone_is_accepted(self, income_service, income_repo):
        result = run(income_service.add_income("100", when="2026-11-01T06:00:00.000Z"))
        assert result["success"] is True
        assert income_repo.get_all()[0].date.tzinfo is None

    def test_store_failure_is_reported(self, notifier, clock):
        store = FailingWriteStore()
        service = IncomeService(
            IncomeRepository(store), SettingsRepository(store),
            NotificationService(notifier, clock=clock), clock=clock,
        )
        result = run(service.add_income("100"))
        assert result == {"success": False, "message": STORE_FAILURE}
        assert notifier.shown == []


class TestMarkDone:
    """Marking tithes as submitted."""

    def test_mark_done_changes_only_status(self, income_service, income_repo):
        run(income_service.add_income("100", "Salary", when="2026-10-01"))
        before = income_repo.get_all()[0]

        result = run(income_service.mark_done(before.id))
        assert result["success"] is True

        after = income_repo.get_by_id(before.id)
        assert after.status == "done"
        assert (after.id, after.amount, after.date, after.description) == (
            before.id, before.amount, before.date, before.description,
        )

    def test_mark_done_is_idempotent(self, income_service, income_repo, store, notifier):
        run(income_service.add_income("100"))
        record_id = income_repo.get_all()[0].id
        run(income_service.mark_done(record_id))
        version = store.get_document(INCOMES_KEY).version
        shown = len(notifier.shown)

        result = run(income_service.mark_done(record_id))
        assert result["success"] is True
        assert "already done" in result["message"]
        assert store.get_document(INCOMES_KEY).version == version
        assert len(notifier.shown) == shown
        assert income_repo.get_by_id(record_id).status == "done"

    def test_mark_done_unknown_id(self, income_service):
        result = run(income_service.mark_done(42))
        assert result["success"] is False
        assert "not found" in result["message"]

    def test_mark_done_removes_tithe_reminder(self, income_service, income_repo, notifier, push_settings):
        when = (NOW + timedelta(days=5)).isoformat()
        run(income_service.add_income("100", when=when))
        assert TITHE_REMINDER_TITLE in notifier.titles_scheduled()

        run(income_service.mark_done(income_repo.get_all()[0].id))
        assert TITHE_REMINDER_TITLE not in notifier.titles_scheduled()
        assert notifier.titles_shown()[-1] == "Tithe Marked as Done"
        assert notifier.shown[-1]["body"] == "ETB 10.00 tithe marked as completed"


class TestDelete:
    """Deleting records."""

    def test_delete_removes_exactly_one(self, income_service, income_repo):
        for amount in ("10", "20", "30"):
            run(income_service.add_income(amount))
        first, middle, last = income_repo.get_all()

        result = run(income_service.delete_income(middle.id))
        assert result["success"] is True
        assert income_repo.get_all() == [first, last]

    def test_delete_unknown_id_keeps_ledger(self, income_service, income_repo, store):
        run(income_service.add_income("10"))
        version = store.get_document(INCOMES_KEY).version
        result = run(income_service.delete_income(1))
        assert result["success"] is False
        assert store.get_document(INCOMES_KEY).version == version
        assert len(income_repo.get_all()) == 1


class TestNotifierFailures:
    """A broken notifier never fails the action."""

    def test_confirmation_failure_keeps_record(self, income_service, income_repo, notifier):
        notifier.fail_show = True
        result = run(income_service.add_income("100"))
        assert result["success"] is True
        assert len(income_repo.get_all()) == 1

    def test_cancel_failure_skips_reschedule(self, income_service, income_repo, notifier, push_settings):
        notifier.fail_cancel = True
        result = run(income_service.add_income("100", when=(NOW + timedelta(days=5)).isoformat()))
        assert result["success"] is True
        assert notifier.scheduled == []
        assert notifier.titles_shown() == ["Income Added"]
        assert len(income_repo.get_all()) == 1


class TestClearAndResync:
    def test_clear_all(self, income_service, income_repo, notifier, push_settings):
        run(income_service.add_income("100", when=(NOW + timedelta(days=5)).isoformat()))
        result = run(income_service.clear_all())
        assert result["success"] is True
        assert income_repo.get_all() == []
        assert notifier.titles_scheduled() == [DAILY_CHECK_TITLE]
        assert notifier.titles_shown()[-1] == "Data Cleared"

    def test_resync_counts_scheduled(self, income_service, income_repo, notifier, push_settings):
        income_repo.add(Decimal("100"), datetime(2026, 10, 25), created_at=NOW)
        assert run(income_service.resync()) == 3
        assert notifier.shown == []

    def test_stored_income_near_datetime_min_does_not_break_actions(
            self, income_service, income_repo, store, notifier, push_settings):
        store.set(INCOMES_KEY, [{
            "id": 1, "amount": 100, "description": "Legacy",
            "date": "0001-01-01T00:00:00", "status": "pending",
        }])

        assert run(income_service.resync()) == 1
        assert notifier.titles_scheduled() == [DAILY_CHECK_TITLE]

        result = run(income_service.add_income("50", when=(NOW + timedelta(days=5)).isoformat()))
        assert result["success"] is True
        assert TITHE_REMINDER_TITLE in notifier.titles_scheduled()

        assert run(income_service.mark_done(1))["success"] is True
        assert run(income_service.delete_income(1))["success"] is True
        assert [r.description for r in income_repo.get_all()] == ["No description"]
