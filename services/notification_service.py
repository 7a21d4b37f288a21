"""
services/notification_service.py
--------------------------------
Applies derived reminders to the notifier and sends action confirmations.

Reconciliation is full-replace: there is no mapping from income record to
scheduled handle, so every pass cancels all scheduled reminders and then
schedules the freshly derived set. Notifier failures are logged and
swallowed here; they never fail the action that triggered them.
"""

from datetime import datetime
from typing import Callable, Iterable

from adapters.base import Notifier
from models.income import IncomeRecord
from models.notification import DesiredNotification
from models.settings import ReminderSettings
from services.reminder_policy import derive_desired_notifications
from utils.logger import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Bridges the reminder policy and the notifier.

    Args:
        notifier: Delivery platform.
        clock: Returns the current naive local time.
    """

    def __init__(self, notifier: Notifier, clock: Callable[[], datetime] = datetime.now):
        self.notifier = notifier
        self.clock = clock

    async def request_permissions(self) -> bool:
        try:
            granted = await self.notifier.request_permissions()
        except Exception as e:
            logger.error(f"Permission request failed: {e}")
            return False
        if not granted:
            logger.warning("Notification permission not granted; reminders will not be delivered.")
        return granted

    async def confirm(self, title: str, body: str, settings: ReminderSettings) -> bool:
        """
        Show an action confirmation immediately.

        Confirmations ignore the push switch; only the sound setting applies.

        Returns:
            True if the notifier accepted it.
        """
        try:
            await self.notifier.show_now(title, body, sound=settings.sound_enabled)
            return True
        except Exception as e:
            logger.error(f"Error showing confirmation '{title}': {e}")
            return False

    async def reconcile(self, incomes: Iterable[IncomeRecord],
                        settings: ReminderSettings) -> list[DesiredNotification]:
        """
        Cancel every scheduled reminder and schedule the derived set again.

        If cancelling fails nothing new is scheduled, so a broken notifier
        never ends up with duplicate reminders.

        Returns:
            The reminders that were scheduled successfully.
        """
        try:
            await self.notifier.cancel_all()
        except Exception as e:
            logger.error(f"Error cancelling scheduled reminders, skipping reschedule: {e}")
            return []

        try:
            desired = derive_desired_notifications(incomes, settings, self.clock())
        except (ValueError, OverflowError) as e:
            logger.error(f"Error deriving reminders, nothing rescheduled: {e}")
            return []

        scheduled = []
        for item in desired:
            try:
                await self.notifier.schedule_at(
                    item.title, item.body, item.fire_at, sound=settings.sound_enabled
                )
                scheduled.append(item)
            except Exception as e:
                logger.error(f"Error scheduling {item}: {e}")

        logger.info(f"Rescheduled {len(scheduled)}/{len(desired)} reminders")
        return scheduled
