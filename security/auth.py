"""
security/auth.py
-----------------
Authentication middleware for the Telegram bot.
The tracker is single-user: anyone not in the whitelist is turned away.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from config import ALLOWED_USER_IDS
from utils.logger import get_logger

logger = get_logger(__name__)


def authorized_only(func: Callable):
    """
    Decorator that restricts a handler to whitelisted users only.

    Usage:
        @authorized_only
        async def my_handler(update, context):
            ...

    Behavior:
        - If ALLOWED_USER_IDS is empty, every user is allowed (dev mode).
        - Otherwise only those users reach the handler; others are logged
          and get a short refusal.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if ALLOWED_USER_IDS and user.id not in ALLOWED_USER_IDS:
            logger.warning(
                f"Unauthorized access attempt: user_id={user.id}, username={user.username}"
            )
            await update.message.reply_text("⛔ Sorry, this tithe tracker is private.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
