"""
services/income_service.py
--------------------------
Business logic for the income ledger.

Every action is one sequential chain:
    1. Validate input (nothing is written on a validation error).
    2. Mutate the ledger through the repository.
    3. Re-derive and reschedule all reminders (full replace).
    4. Show a confirmation notification.
Steps 3 and 4 never fail the action.
"""

from datetime import datetime
from typing import Callable, Optional

from models.notification import KIND_FUTURE_INCOME
from repositories.document_store import StoreError
from repositories.income_repo import IncomeRepository
from repositories.settings_repo import SettingsRepository
from services.notification_service import NotificationService
from utils.formatting import currency, format_date
from utils.logger import get_logger
from utils.validation import ValidationError, parse_income_date, parse_positive_amount

logger = get_logger(__name__)

STORE_FAILURE = "❌ Something went wrong while saving. Please try again."


class IncomeService:
    """
    Handles all business logic related to income records and their tithes.

    Args:
        income_repo: Ledger repository.
        settings_repo: Settings repository (reminder settings are read per action).
        notifications: Reminder/confirmation bridge.
        clock: Returns the current naive local time.
    """

    def __init__(self, income_repo: IncomeRepository, settings_repo: SettingsRepository,
                 notifications: NotificationService,
                 clock: Callable[[], datetime] = datetime.now):
        self.income_repo = income_repo
        self.settings_repo = settings_repo
        self.notifications = notifications
        self.clock = clock

    async def add_income(self, amount_text, description: Optional[str] = None,
                         when=None) -> dict:
        """
        Validate and record a new pending income.

        Args:
            amount_text: User-entered amount, e.g. "1500".
            description: Optional label.
            when: Income date (ISO string or datetime); defaults to now.

        Returns:
            Dict with 'success' and 'message'.
        """
        now = self.clock()
        try:
            amount = parse_positive_amount(amount_text)
            income_date = parse_income_date(when) if when else now
        except ValidationError as e:
            return {"success": False, "message": f"⚠️ {e}"}

        try:
            record = self.income_repo.add(amount, income_date, description, created_at=now)
            settings = self.settings_repo.get_reminder_settings()
            incomes = self.income_repo.get_all()
        except StoreError as e:
            logger.error(f"Failed to add income: {e}")
            return {"success": False, "message": STORE_FAILURE}

        scheduled = await self.notifications.reconcile(incomes, settings)
        await self.notifications.confirm(
            "Income Added",
            f"{currency(record.amount)} added for {format_date(record.date)}. "
            f"Tithe: {currency(record.tithe)}",
            settings,
        )
        if any(s.kind == KIND_FUTURE_INCOME and s.record_id == record.id for s in scheduled):
            await self.notifications.confirm(
                "Reminder Scheduled",
                f"Reminder set for {format_date(record.date)} income",
                settings,
            )

        msg = (
            f"💰 Income recorded:\n"
            f"  💶 Amount: {currency(record.amount)}\n"
            f"  🙏 Tithe: {currency(record.tithe)}\n"
            f"  📅 Date: {format_date(record.date)}\n"
            f"  📝 {record.label}\n"
            f"  🔖 ID: #{record.id}"
        )
        return {"success": True, "message": msg, "record": record}

    async def mark_done(self, income_id: int) -> dict:
        """
        Mark the tithe of an income as submitted.

        Marking an already-done record is a no-op that still succeeds.
        """
        try:
            existing = self.income_repo.get_by_id(income_id)
            if existing is None:
                return {"success": False, "message": f"⚠️ Income #{income_id} not found."}
            if existing.is_done():
                return {"success": True, "message": f"ℹ️ Tithe for #{income_id} is already done."}
            record = self.income_repo.mark_done(income_id)
            settings = self.settings_repo.get_reminder_settings()
            incomes = self.income_repo.get_all()
        except StoreError as e:
            logger.error(f"Failed to mark income #{income_id} done: {e}")
            return {"success": False, "message": STORE_FAILURE}

        await self.notifications.reconcile(incomes, settings)
        await self.notifications.confirm(
            "Tithe Marked as Done",
            f"{currency(record.tithe)} tithe marked as completed",
            settings,
        )
        return {"success": True, "message": f"✅ Tithe for #{income_id} marked as done!"}

    async def delete_income(self, income_id: int) -> dict:
        """Remove one income; its reminders disappear with the next reschedule."""
        try:
            removed = self.income_repo.delete(income_id)
            if removed is None:
                return {"success": False, "message": f"⚠️ Income #{income_id} not found."}
            settings = self.settings_repo.get_reminder_settings()
            incomes = self.income_repo.get_all()
        except StoreError as e:
            logger.error(f"Failed to delete income #{income_id}: {e}")
            return {"success": False, "message": STORE_FAILURE}

        await self.notifications.reconcile(incomes, settings)
        await self.notifications.confirm(
            "Income Deleted", "Income record has been removed", settings
        )
        return {"success": True, "message": f"🗑️ Income #{income_id} deleted."}

    async def clear_all(self) -> dict:
        """Remove every income record."""
        try:
            self.income_repo.clear()
            settings = self.settings_repo.get_reminder_settings()
        except StoreError as e:
            logger.error(f"Failed to clear incomes: {e}")
            return {"success": False, "message": STORE_FAILURE}

        await self.notifications.reconcile([], settings)
        await self.notifications.confirm(
            "Data Cleared", "All income records have been removed", settings
        )
        return {"success": True, "message": "🧹 All data has been cleared!"}

    async def resync(self) -> int:
        """
        Re-derive reminders from the stored state (start-up and daily job).

        Returns:
            Number of reminders scheduled.
        """
        try:
            settings = self.settings_repo.get_reminder_settings()
            incomes = self.income_repo.get_all()
        except StoreError as e:
            logger.error(f"Reminder resync skipped: {e}")
            return 0
        scheduled = await self.notifications.reconcile(incomes, settings)
        return len(scheduled)
