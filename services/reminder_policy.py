"""
services/reminder_policy.py
---------------------------
Derives the complete set of reminders that should be live for a ledger.

Everything here is a pure function of (incomes, settings, now): no store,
no scheduler, no clock. Records whose reminder time cannot be computed are
skipped with a warning. Applying the result is NotificationService's job.

Rules:
    - Push notifications off → nothing at all.
    - Push on → one "Daily Tithe Check" for tomorrow at the reminder time.
    - Push and recurring on → one "Tithe Reminder" per pending income and one
      "Future Income Reminder" per income dated after today, each fired
      `days_before` days ahead of the income date at the reminder time.
    - Reminders whose fire time is not strictly after `now` are dropped.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from models.income import IncomeRecord
from models.notification import (
    KIND_DAILY_CHECK,
    KIND_FUTURE_INCOME,
    KIND_TITHE,
    DesiredNotification,
)
from models.settings import ReminderSettings
from utils.formatting import currency, format_date
from utils.logger import get_logger

logger = get_logger(__name__)

TITHE_REMINDER_TITLE = "Tithe Reminder"
DAILY_CHECK_TITLE = "Daily Tithe Check"
FUTURE_INCOME_TITLE = "Future Income Reminder"

DAILY_CHECK_BODY = "Check your tithe status and add any new income received today"


def reminder_time_for(income_date: datetime, settings: ReminderSettings) -> datetime:
    """Income date minus `days_before` days, at the configured time of day."""
    shifted = income_date - timedelta(days=settings.days_before)
    return shifted.replace(hour=settings.hour, minute=settings.minute, second=0, microsecond=0)


def _fire_time(income: IncomeRecord, settings: ReminderSettings) -> Optional[datetime]:
    """reminder_time_for, or None when the income date is too close to datetime.min."""
    try:
        return reminder_time_for(income.date, settings)
    except OverflowError:
        logger.warning(f"Skipping reminder for income #{income.id}: date {income.date} out of range")
        return None


def daily_check(settings: ReminderSettings, now: datetime) -> Optional[DesiredNotification]:
    """The daily check for tomorrow, or None when push notifications are off."""
    if not settings.push_enabled:
        return None
    tomorrow = (now + timedelta(days=1)).replace(
        hour=settings.hour, minute=settings.minute, second=0, microsecond=0
    )
    return DesiredNotification(
        kind=KIND_DAILY_CHECK,
        title=DAILY_CHECK_TITLE,
        body=DAILY_CHECK_BODY,
        fire_at=tomorrow,
    )


def tithe_reminders(incomes: Iterable[IncomeRecord], settings: ReminderSettings,
                    now: datetime) -> list[DesiredNotification]:
    """One reminder per pending income whose reminder time is still ahead."""
    if not (settings.push_enabled and settings.recurring):
        return []
    reminders = []
    for income in incomes:
        if not income.is_pending():
            continue
        fire_at = _fire_time(income, settings)
        if fire_at is None or fire_at <= now:
            continue
        reminders.append(DesiredNotification(
            kind=KIND_TITHE,
            title=TITHE_REMINDER_TITLE,
            body=(
                f"Don't forget to submit your tithe of {currency(income.tithe)} "
                f"for income received on {format_date(income.date)}"
            ),
            fire_at=fire_at,
            record_id=income.id,
        ))
    return reminders


def future_income_reminders(incomes: Iterable[IncomeRecord], settings: ReminderSettings,
                            now: datetime) -> list[DesiredNotification]:
    """One reminder per income dated after today, regardless of its status."""
    if not (settings.push_enabled and settings.recurring):
        return []
    today = now.date()
    reminders = []
    for income in incomes:
        if income.date.date() <= today:
            continue
        fire_at = _fire_time(income, settings)
        if fire_at is None or fire_at <= now:
            continue
        reminders.append(DesiredNotification(
            kind=KIND_FUTURE_INCOME,
            title=FUTURE_INCOME_TITLE,
            body=(
                f"Don't forget to add your income of {currency(income.amount)} "
                f"expected on {format_date(income.date)}: {income.label}"
            ),
            fire_at=fire_at,
            record_id=income.id,
        ))
    return reminders


def derive_desired_notifications(incomes: Iterable[IncomeRecord],
                                 settings: ReminderSettings,
                                 now: datetime) -> list[DesiredNotification]:
    """
    Compute every reminder that should currently be scheduled.

    The same income may yield both a tithe and a future-income reminder;
    they are not deduplicated.

    Args:
        incomes: The full ledger.
        settings: Current reminder settings.
        now: Reference time; only reminders strictly after it are kept.

    Returns:
        Daily check first, then tithe reminders, then future-income
        reminders, each group in ledger order.
    """
    if not settings.push_enabled:
        return []
    incomes = list(incomes)
    desired = []
    check = daily_check(settings, now)
    if check is not None:
        desired.append(check)
    desired.extend(tithe_reminders(incomes, settings, now))
    desired.extend(future_income_reminders(incomes, settings, now))
    return desired
