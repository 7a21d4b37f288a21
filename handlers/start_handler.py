"""
handlers/start_handler.py
--------------------------
Handles /start and /help commands.
/start registers the chat that receives reminders and confirmations.
"""

from telegram import Update
from telegram.ext import ContextTypes

from repositories.document_store import StoreError
from security.auth import authorized_only
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🙏 Tithe Tracker
Record your income and keep track of the 10% tithe on each entry.

📝 Income
/add <amount> [YYYY-MM-DD] [description] - record income
/status [all|pending|done] - list records
/done <id> - mark a tithe as submitted
/delete <id> - delete a record
/future - incomes dated today or later

📊 Insights
/dashboard - totals at a glance
/analytics - income sources and monthly totals
/goal [amount|clear] - monthly goal progress

🔔 Reminders
/reminders - show reminder settings
/reminders push on|off
/reminders recurring on|off
/reminders sound on|off
/reminders days 1|2|3|5|7
/reminders time HH:MM

📤 Data
/export - text report
/export_csv - CSV file
/export_excel - Excel file
/clear yes - delete all income records
"""


@authorized_only
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start - register this chat for notifications and show the welcome text."""
    user = update.effective_user
    chat_id = update.effective_chat.id
    settings_repo = context.bot_data["settings_repo"]
    try:
        settings_repo.set_owner_chat_id(chat_id)
    except StoreError as e:
        logger.error(f"Failed to register owner chat {chat_id}: {e}")
        await update.message.reply_text("❌ Could not register this chat. Please try /start again.")
        return
    logger.info(f"User {user.id} ({user.first_name}) registered chat {chat_id}.")

    scheduled = await context.bot_data["income_service"].resync()
    await update.message.reply_text(
        f"Welcome {user.first_name}! 👋\n"
        f"Reminders and confirmations will be sent to this chat "
        f"({scheduled} reminder(s) scheduled).\n\n"
        f"Type /help to see every command."
    )


@authorized_only
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT)
