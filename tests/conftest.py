"""
Shared pytest fixtures for Tithe Tracker tests.

No Telegram or PostgreSQL is needed: services run against the in-memory
document store, a recording notifier and a fixed clock.
"""

import asyncio
from datetime import datetime
from decimal import Decimal

import pytest

from adapters.base import Notifier, NotifierError
from models.income import IncomeRecord
from models.settings import ReminderSettings
from repositories.document_store import MemoryDocumentStore
from repositories.income_repo import IncomeRepository
from repositories.settings_repo import SettingsRepository
from services.analytics_service import AnalyticsService
from services.export_service import ExportService
from services.income_service import IncomeService
from services.notification_service import NotificationService
from services.settings_service import SettingsService

NOW = datetime(2026, 10, 18, 12, 0)


def run(coro):
    """Drive a coroutine to completion from a synchronous test."""
    return asyncio.run(coro)


def make_income(id=1, amount="100", date=NOW, status="pending", description=None):
    return IncomeRecord(
        id=id, amount=Decimal(amount), date=date, description=description, status=status,
    )


class RecordingNotifier(Notifier):
    """Notifier that remembers every call instead of delivering anything."""

    def __init__(self):
        self.shown = []
        self.scheduled = []
        self.cancel_all_calls = 0
        self.fail_show = False
        self.fail_schedule = False
        self.fail_cancel = False
        self.granted = True

    async def request_permissions(self) -> bool:
        return self.granted

    async def show_now(self, title, body, sound=True):
        if self.fail_show:
            raise NotifierError("permission denied")
        self.shown.append({"title": title, "body": body, "sound": sound})
        return str(len(self.shown))

    async def schedule_at(self, title, body, fire_at, sound=True):
        if self.fail_schedule:
            raise NotifierError("platform error")
        self.scheduled.append({"title": title, "body": body, "fire_at": fire_at, "sound": sound})
        return f"reminder:{len(self.scheduled)}"

    async def cancel(self, handle):
        return False

    async def cancel_all(self):
        if self.fail_cancel:
            raise NotifierError("platform error")
        self.cancel_all_calls += 1
        cancelled = len(self.scheduled)
        self.scheduled = []
        return cancelled

    def titles_shown(self):
        return [n["title"] for n in self.shown]

    def titles_scheduled(self):
        return [n["title"] for n in self.scheduled]


@pytest.fixture
def store():
    return MemoryDocumentStore()


@pytest.fixture
def income_repo(store):
    return IncomeRepository(store)


@pytest.fixture
def settings_repo(store):
    return SettingsRepository(store)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def notifications(notifier, clock):
    return NotificationService(notifier, clock=clock)


@pytest.fixture
def income_service(income_repo, settings_repo, notifications, clock):
    return IncomeService(income_repo, settings_repo, notifications, clock=clock)


@pytest.fixture
def settings_service(settings_repo, income_repo, notifications):
    return SettingsService(settings_repo, income_repo, notifications)


@pytest.fixture
def analytics_service(income_repo, settings_repo, clock):
    return AnalyticsService(income_repo, settings_repo, clock=clock)


@pytest.fixture
def export_service(income_repo, settings_repo, notifications, clock):
    return ExportService(income_repo, settings_repo, notifications, clock=clock)


@pytest.fixture
def push_settings(settings_repo):
    """Push and recurring reminders on, one day ahead at 09:00."""
    settings = ReminderSettings(
        push_enabled=True, recurring=True, days_before=1, time="09:00", sound_enabled=True,
    )
    settings_repo.save_reminder_settings(settings)
    return settings
