"""
models/settings.py
------------------
Domain model for the user's reminder configuration.
"""

from dataclasses import dataclass, field

from config import (
    DEFAULT_DAYS_BEFORE,
    DEFAULT_PUSH_ENABLED,
    DEFAULT_RECURRING,
    DEFAULT_REMINDER_TIME,
    DEFAULT_SOUND_ENABLED,
)
from utils.validation import parse_days_before, parse_reminder_time


@dataclass
class ReminderSettings:
    """
    Singleton reminder configuration.

    Attributes:
        push_enabled: Master switch; when off no reminder is ever scheduled.
        recurring: Whether per-income reminders are scheduled in bulk.
        days_before: Offset in days subtracted from the income date (1, 2, 3, 5 or 7).
        time: Time of day ("HH:MM", 24h) applied to every reminder.
        sound_enabled: Whether notifications play a sound.
    """
    push_enabled: bool = DEFAULT_PUSH_ENABLED
    recurring: bool = DEFAULT_RECURRING
    days_before: int = DEFAULT_DAYS_BEFORE
    time: str = DEFAULT_REMINDER_TIME
    sound_enabled: bool = DEFAULT_SOUND_ENABLED
    _hour_minute: tuple[int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.days_before = parse_days_before(self.days_before)
        self._hour_minute = parse_reminder_time(self.time)
        self.time = f"{self._hour_minute[0]:02d}:{self._hour_minute[1]:02d}"

    @property
    def hour(self) -> int:
        return self._hour_minute[0]

    @property
    def minute(self) -> int:
        return self._hour_minute[1]

    def to_dict(self) -> dict:
        """Serialize to the JSON shape kept in the `reminderSettings` document."""
        return {
            "pushEnabled": self.push_enabled,
            "recurring": self.recurring,
            "daysBefore": self.days_before,
            "time": self.time,
            "soundEnabled": self.sound_enabled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReminderSettings":
        """Build settings from the stored document; missing keys fall back to defaults."""
        defaults = cls()
        return cls(
            push_enabled=bool(data.get("pushEnabled", defaults.push_enabled)),
            recurring=bool(data.get("recurring", defaults.recurring)),
            days_before=data.get("daysBefore", defaults.days_before),
            time=data.get("time", defaults.time),
            sound_enabled=bool(data.get("soundEnabled", defaults.sound_enabled)),
        )
