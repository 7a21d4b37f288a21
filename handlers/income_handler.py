"""
handlers/income_handler.py
--------------------------
Handles income ledger commands: add, list, mark done, delete, future, clear.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import authorized_only
from utils.logger import get_logger
from utils.validation import ValidationError, parse_local_datetime

logger = get_logger(__name__)


def _parse_add_args(args: list[str]) -> tuple[str, str | None, str | None]:
    """
    Split /add arguments into (amount, date, description).

    The second argument is taken as the date only if it parses as one,
    so both `/add 500 Gift` and `/add 500 2026-11-01 Gift` work.
    """
    amount = args[0]
    rest = args[1:]
    when = None
    if rest:
        try:
            parse_local_datetime(rest[0])
            when, rest = rest[0], rest[1:]
        except ValidationError:
            pass
    description = " ".join(rest) or None
    return amount, when, description


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


@authorized_only
async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add - record income.

    Usage:
        /add 1500
        /add 1500 Salary
        /add 800 2026-11-01 Freelance project
    """
    if not context.args:
        await update.message.reply_text(
            "📝 Usage: /add <amount> [YYYY-MM-DD] [description]\n"
            "Example: /add 1500 2026-11-01 Salary"
        )
        return

    amount, when, description = _parse_add_args(context.args)
    result = await context.bot_data["income_service"].add_income(amount, description, when)
    await update.message.reply_text(result["message"])


@authorized_only
async def status_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /status [all|pending|done] - list records, newest first."""
    status = context.args[0].lower() if context.args else "all"
    try:
        msg = context.bot_data["analytics_service"].status_list(status)
    except ValueError:
        msg = "⚠️ Usage: /status [all|pending|done]"
    await update.message.reply_text(msg)


@authorized_only
async def done_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /done <id> - mark a tithe as submitted."""
    income_id = _parse_id(context.args)
    if income_id is None:
        await update.message.reply_text("⚠️ Usage: /done <id>\nExample: /done 1760774400000")
        return
    result = await context.bot_data["income_service"].mark_done(income_id)
    await update.message.reply_text(result["message"])


@authorized_only
async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete <id> - delete an income record."""
    income_id = _parse_id(context.args)
    if income_id is None:
        await update.message.reply_text("⚠️ Usage: /delete <id>\nExample: /delete 1760774400000")
        return
    result = await context.bot_data["income_service"].delete_income(income_id)
    await update.message.reply_text(result["message"])


@authorized_only
async def future_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /future - list incomes dated today or later."""
    await update.message.reply_text(context.bot_data["analytics_service"].future_list())


@authorized_only
async def clear_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /clear yes - remove every income record."""
    if not context.args or context.args[0].lower() != "yes":
        await update.message.reply_text(
            "⚠️ This deletes all income records and cannot be undone.\n"
            "Send /clear yes to confirm."
        )
        return
    result = await context.bot_data["income_service"].clear_all()
    await update.message.reply_text(result["message"])
