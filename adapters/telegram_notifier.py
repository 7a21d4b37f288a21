"""
adapters/telegram_notifier.py
-----------------------------
Notifier that delivers to the owner's Telegram chat.

Immediate notifications are plain bot messages; scheduled ones are one-shot
jobs on python-telegram-bot's JobQueue. Silent delivery uses Telegram's
`disable_notification` flag.
"""

import uuid
from datetime import datetime
from typing import Callable, Optional

from telegram import Bot
from telegram.error import TelegramError
from telegram.ext import ContextTypes, JobQueue

from adapters.base import Notifier, NotifierError
from utils.logger import get_logger

logger = get_logger(__name__)

# Only jobs with this prefix are touched by cancel_all.
JOB_PREFIX = "reminder:"


def _render(title: str, body: str) -> str:
    return f"🔔 {title}\n{body}"


async def _deliver_scheduled(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Job callback: send the stored reminder to its chat."""
    job = context.job
    data = job.data
    try:
        await context.bot.send_message(
            chat_id=job.chat_id,
            text=_render(data["title"], data["body"]),
            disable_notification=not data["sound"],
        )
        logger.info(f"Delivered scheduled reminder '{data['title']}' ({job.name})")
    except TelegramError as e:
        logger.error(f"Failed to deliver reminder {job.name}: {e}")


class TelegramNotifier(Notifier):
    """
    Telegram-backed notifier.

    Args:
        bot: The application's Bot.
        job_queue: The application's JobQueue.
        chat_id_provider: Returns the chat to deliver to, or None if the
            owner has not registered yet.
    """

    def __init__(self, bot: Bot, job_queue: Optional[JobQueue],
                 chat_id_provider: Callable[[], Optional[int]]):
        self.bot = bot
        self.job_queue = job_queue
        self.chat_id_provider = chat_id_provider

    def _chat_id(self) -> int:
        chat_id = self.chat_id_provider()
        if chat_id is None:
            raise NotifierError("No owner chat registered yet; send /start to the bot.")
        return chat_id

    def _queue(self) -> JobQueue:
        if self.job_queue is None:
            raise NotifierError("JobQueue unavailable; install python-telegram-bot[job-queue].")
        return self.job_queue

    async def request_permissions(self) -> bool:
        try:
            await self.bot.get_chat(self._chat_id())
            return True
        except (NotifierError, TelegramError) as e:
            logger.warning(f"Notifications unavailable: {e}")
            return False

    async def show_now(self, title: str, body: str, sound: bool = True) -> str:
        try:
            message = await self.bot.send_message(
                chat_id=self._chat_id(),
                text=_render(title, body),
                disable_notification=not sound,
            )
        except TelegramError as e:
            raise NotifierError(f"Telegram rejected notification '{title}': {e}") from e
        return str(message.message_id)

    async def schedule_at(self, title: str, body: str, fire_at: datetime,
                          sound: bool = True) -> str:
        handle = f"{JOB_PREFIX}{uuid.uuid4().hex}"
        # Naive datetimes are local; the JobQueue would read them as UTC.
        when = fire_at.astimezone() if fire_at.tzinfo is None else fire_at
        self._queue().run_once(
            _deliver_scheduled,
            when=when,
            name=handle,
            chat_id=self._chat_id(),
            data={"title": title, "body": body, "sound": sound},
        )
        logger.debug(f"Scheduled '{title}' for {when.isoformat()} as {handle}")
        return handle

    async def cancel(self, handle: str) -> bool:
        jobs = self._queue().get_jobs_by_name(handle)
        for job in jobs:
            job.schedule_removal()
        return bool(jobs)

    async def cancel_all(self) -> int:
        cancelled = 0
        for job in self._queue().jobs():
            if job.name and job.name.startswith(JOB_PREFIX):
                job.schedule_removal()
                cancelled += 1
        logger.info(f"Cancelled {cancelled} scheduled reminders")
        return cancelled
