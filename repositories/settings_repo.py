"""
repositories/settings_repo.py
-----------------------------
Data access layer for singleton documents: reminder settings,
the monthly goal and the chat that receives notifications.
"""

from decimal import Decimal
from typing import Optional

from models.settings import ReminderSettings
from repositories.document_store import DocumentStore
from utils.logger import get_logger
from utils.validation import ValidationError, parse_positive_amount

logger = get_logger(__name__)

SETTINGS_KEY = "reminderSettings"
GOAL_KEY = "monthlyGoal"
OWNER_CHAT_KEY = "ownerChatId"


class SettingsRepository:
    """Repository for the settings, goal and owner documents."""

    def __init__(self, store: DocumentStore):
        self.store = store

    # ── Reminder settings ─────────────────────────────────

    def get_reminder_settings(self) -> ReminderSettings:
        """
        Load reminder settings, creating and persisting defaults on first read.
        A stored document that no longer validates is replaced with defaults.
        """
        raw = self.store.get(SETTINGS_KEY)
        if raw is None:
            settings = ReminderSettings()
            self.store.set(SETTINGS_KEY, settings.to_dict())
            logger.info("Created default reminder settings")
            return settings
        try:
            return ReminderSettings.from_dict(raw)
        except ValidationError as e:
            logger.warning(f"Stored reminder settings are invalid ({e}); resetting to defaults")
            settings = ReminderSettings()
            self.store.set(SETTINGS_KEY, settings.to_dict())
            return settings

    def save_reminder_settings(self, settings: ReminderSettings) -> None:
        """Overwrite the settings document wholesale."""
        self.store.set(SETTINGS_KEY, settings.to_dict())
        logger.info(f"Saved reminder settings: {settings.to_dict()}")

    # ── Monthly goal ──────────────────────────────────────

    def get_monthly_goal(self) -> Optional[Decimal]:
        """Return the saved goal, or None when no (valid) goal is stored."""
        raw = self.store.get(GOAL_KEY)
        if raw is None:
            return None
        try:
            return parse_positive_amount(raw, field="goal")
        except ValidationError:
            logger.warning(f"Ignoring invalid stored monthly goal {raw!r}")
            return None

    def set_monthly_goal(self, goal: Decimal) -> None:
        self.store.set(GOAL_KEY, str(goal))
        logger.info(f"Monthly goal set to {goal}")

    def clear_monthly_goal(self) -> bool:
        return self.store.remove(GOAL_KEY)

    # ── Owner chat ────────────────────────────────────────

    def get_owner_chat_id(self) -> Optional[int]:
        raw = self.store.get(OWNER_CHAT_KEY)
        return int(raw) if raw is not None else None

    def set_owner_chat_id(self, chat_id: int) -> None:
        self.store.set(OWNER_CHAT_KEY, chat_id)
        logger.info(f"Registered owner chat {chat_id}")
