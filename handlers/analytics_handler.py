"""
handlers/analytics_handler.py
------------------------------
Handles /dashboard, /analytics and /goal.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from utils.logger import get_logger

logger = get_logger(__name__)


@authorized_only
async def dashboard_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /dashboard - total income, total tithe and paid count."""
    await update.message.reply_text(context.bot_data["analytics_service"].dashboard())


@authorized_only
async def analytics_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /analytics - income sources and monthly breakdown."""
    await update.message.reply_text(context.bot_data["analytics_service"].analytics())


@authorized_only
async def goal_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /goal - manage the monthly income goal.

    Usage:
        /goal          → show progress for this month
        /goal 5000     → set the goal
        /goal clear    → remove the goal
    """
    if not context.args:
        await update.message.reply_text(context.bot_data["analytics_service"].goal_status())
        return

    settings_service = context.bot_data["settings_service"]
    if context.args[0].lower() == "clear":
        result = await settings_service.clear_goal()
    else:
        result = await settings_service.set_goal(context.args[0])
    await update.message.reply_text(result["message"])
