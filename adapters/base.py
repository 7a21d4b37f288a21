"""
adapters/base.py
----------------
Base notifier interface for any delivery platform.

A notifier can show a notification now, schedule one for later and cancel
scheduled ones. It knows nothing about incomes or settings.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class NotifierError(Exception):
    """Raised when the delivery platform rejects or cannot perform a request."""


class Notifier(ABC):
    """Capability the services use to reach the user."""

    @abstractmethod
    async def request_permissions(self) -> bool:
        """Return True if notifications can currently be delivered."""

    @abstractmethod
    async def show_now(self, title: str, body: str, sound: bool = True) -> str:
        """Deliver a notification immediately. Returns a handle."""

    @abstractmethod
    async def schedule_at(self, title: str, body: str, fire_at: datetime,
                          sound: bool = True) -> str:
        """
        Schedule a notification.

        Args:
            title: Notification title.
            body: Notification text.
            fire_at: Naive local datetime at which to deliver it.
            sound: Whether delivery should make a sound.

        Returns:
            A handle usable with `cancel`.
        """

    @abstractmethod
    async def cancel(self, handle: str) -> bool:
        """Cancel one scheduled notification. Returns True if it existed."""

    @abstractmethod
    async def cancel_all(self) -> int:
        """Cancel every scheduled notification. Returns how many were cancelled."""
