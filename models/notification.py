"""
models/notification.py
----------------------
Domain model for a reminder that should be live at the scheduler.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

KIND_TITHE = "tithe"
KIND_DAILY_CHECK = "daily_check"
KIND_FUTURE_INCOME = "future_income"


@dataclass(frozen=True)
class DesiredNotification:
    """
    A reminder derived from the ledger and settings.

    Attributes:
        kind: 'tithe', 'daily_check' or 'future_income'.
        title: Notification title.
        body: Notification text.
        fire_at: Naive local datetime at which the scheduler should fire it.
        record_id: Income record the reminder was derived from, if any.
    """
    kind: str
    title: str
    body: str
    fire_at: datetime
    record_id: Optional[int] = None

    def __str__(self) -> str:
        return f"[{self.kind}] {self.title} @ {self.fire_at:%Y-%m-%d %H:%M}"
