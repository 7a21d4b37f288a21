"""
handlers/reminder_handler.py
-----------------------------
Handles /reminders: show or change reminder settings.
Every change is saved wholesale and reschedules all reminders; a new
reminder time also moves the daily resync job.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.jobs import schedule_daily_resync
from security.auth import authorized_only
from utils.logger import get_logger

logger = get_logger(__name__)

_TOGGLES = {"push": "push_enabled", "recurring": "recurring", "sound": "sound_enabled"}
_BOOL_WORDS = {"on": True, "off": False, "true": True, "false": False, "yes": True, "no": False}

USAGE = (
    "⚠️ Usage:\n"
    "/reminders push on|off\n"
    "/reminders recurring on|off\n"
    "/reminders sound on|off\n"
    "/reminders days 1|2|3|5|7\n"
    "/reminders time HH:MM"
)


def _parse_change(args: list[str]) -> dict | None:
    """Translate `/reminders <setting> <value>` into a settings change, or None."""
    if len(args) < 2:
        return None
    name, value = args[0].lower(), args[1].lower()
    if name in _TOGGLES:
        if value not in _BOOL_WORDS:
            return None
        return {_TOGGLES[name]: _BOOL_WORDS[value]}
    if name == "days":
        return {"days_before": value}
    if name == "time":
        return {"time": value}
    return None


@authorized_only
async def reminders_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /reminders [setting value]."""
    settings_service = context.bot_data["settings_service"]
    if not context.args:
        await update.message.reply_text(settings_service.describe_settings())
        return

    change = _parse_change(context.args)
    if change is None:
        await update.message.reply_text(USAGE)
        return

    result = await settings_service.save_reminder_settings(**change)
    if result["success"] and "time" in change:
        schedule_daily_resync(context.job_queue, settings_service.get_reminder_settings())
    await update.message.reply_text(result["message"])
