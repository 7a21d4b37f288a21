"""
services/settings_service.py
----------------------------
Business logic for reminder settings and the monthly giving goal.
"""

from dataclasses import replace

from models.settings import ReminderSettings
from repositories.document_store import StoreError
from repositories.income_repo import IncomeRepository
from repositories.settings_repo import SettingsRepository
from services.income_service import STORE_FAILURE
from services.notification_service import NotificationService
from utils.formatting import currency
from utils.logger import get_logger
from utils.validation import ValidationError, parse_positive_amount

logger = get_logger(__name__)

# Settings fields a user may change; everything else is derived.
EDITABLE_FIELDS = ("push_enabled", "recurring", "days_before", "time", "sound_enabled")


class SettingsService:
    """Manages reminder settings and the monthly goal."""

    def __init__(self, settings_repo: SettingsRepository, income_repo: IncomeRepository,
                 notifications: NotificationService):
        self.settings_repo = settings_repo
        self.income_repo = income_repo
        self.notifications = notifications

    def get_reminder_settings(self) -> ReminderSettings:
        return self.settings_repo.get_reminder_settings()

    def describe_settings(self) -> str:
        """Human-readable summary of the current reminder settings."""
        s = self.settings_repo.get_reminder_settings()
        on_off = {True: "on ✅", False: "off ❌"}
        return (
            "🔔 Reminder Settings\n\n"
            f"  Push notifications: {on_off[s.push_enabled]}\n"
            f"  Recurring reminders: {on_off[s.recurring]}\n"
            f"  Days before: {s.days_before}\n"
            f"  Reminder time: {s.time}\n"
            f"  Sound: {on_off[s.sound_enabled]}\n\n"
            f"• Reminders fire {s.days_before} day(s) before each tithe date\n"
            f"• The daily check is sent at {s.time}"
        )

    async def save_reminder_settings(self, **changes) -> dict:
        """
        Apply changes to the stored settings and save them wholesale.

        Args:
            **changes: Any of push_enabled, recurring, days_before, time, sound_enabled.

        Returns:
            Dict with 'success' and 'message'.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            return {"success": False, "message": f"⚠️ Unknown setting(s): {', '.join(sorted(unknown))}"}

        try:
            current = self.settings_repo.get_reminder_settings()
            updated = replace(current, **changes)
        except ValidationError as e:
            return {"success": False, "message": f"⚠️ {e}"}
        except StoreError as e:
            logger.error(f"Failed to load reminder settings: {e}")
            return {"success": False, "message": STORE_FAILURE}

        try:
            self.settings_repo.save_reminder_settings(updated)
            incomes = self.income_repo.get_all()
        except StoreError as e:
            logger.error(f"Failed to save reminder settings: {e}")
            return {"success": False, "message": STORE_FAILURE}

        await self.notifications.reconcile(incomes, updated)
        await self.notifications.confirm(
            "Settings Updated", "Reminder settings have been saved successfully", updated
        )
        return {"success": True, "message": "✅ Reminder settings saved successfully!"}

    async def set_goal(self, amount_text) -> dict:
        """Validate and save the monthly income goal."""
        try:
            goal = parse_positive_amount(amount_text, field="goal")
        except ValidationError as e:
            return {"success": False, "message": f"⚠️ {e}"}

        try:
            self.settings_repo.set_monthly_goal(goal)
            settings = self.settings_repo.get_reminder_settings()
        except StoreError as e:
            logger.error(f"Failed to save goal: {e}")
            return {"success": False, "message": STORE_FAILURE}

        await self.notifications.confirm(
            "Goal Updated", f"Monthly goal set to {currency(goal)}", settings
        )
        return {"success": True, "message": f"🎯 Monthly goal saved: {currency(goal)}"}

    async def clear_goal(self) -> dict:
        try:
            removed = self.settings_repo.clear_monthly_goal()
            settings = self.settings_repo.get_reminder_settings()
        except StoreError as e:
            logger.error(f"Failed to clear goal: {e}")
            return {"success": False, "message": STORE_FAILURE}
        if not removed:
            return {"success": False, "message": "⚠️ No monthly goal is set."}

        await self.notifications.confirm(
            "Goal Cleared", "Monthly goal has been removed", settings
        )
        return {"success": True, "message": "🗑️ Monthly goal cleared!"}
