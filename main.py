"""
main.py
-------
Entry point for the Tithe Tracker Telegram bot.

Responsibilities:
    - Open the record store (PostgreSQL documents table or in-memory).
    - Wire repositories, services and the Telegram notifier together.
    - Register command handlers.
    - Re-derive reminders on start-up and once a day, just after the daily
      check fires, since the JobQueue does not survive restarts.
"""

from telegram import BotCommand, Update
from telegram.ext import Application, CommandHandler, ContextTypes

from adapters.telegram_notifier import TelegramNotifier
from config import LOG_LEVEL, OWNER_CHAT_ID, STORE_BACKEND, TELEGRAM_BOT_TOKEN
from db.connection import close_pool, init_pool
from db.init_db import create_tables
from handlers.analytics_handler import analytics_command, dashboard_command, goal_command
from handlers.export_handler import export_command, export_csv_command, export_excel_command
from handlers.income_handler import (
    add_command,
    clear_command,
    delete_command,
    done_command,
    future_command,
    status_command,
)
from handlers.jobs import schedule_daily_resync
from handlers.reminder_handler import reminders_command
from handlers.start_handler import help_command, start_command
from models.settings import ReminderSettings
from repositories.document_store import DocumentStore, StoreError, create_store
from repositories.income_repo import IncomeRepository
from repositories.settings_repo import SettingsRepository
from services.analytics_service import AnalyticsService
from services.export_service import ExportService
from services.income_service import IncomeService
from services.notification_service import NotificationService
from services.settings_service import SettingsService
from utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def build_services(store: DocumentStore, notifier) -> dict:
    """Create repositories and services sharing one store and one notifier."""
    income_repo = IncomeRepository(store)
    settings_repo = SettingsRepository(store)
    notifications = NotificationService(notifier)
    return {
        "settings_repo": settings_repo,
        "notification_service": notifications,
        "income_service": IncomeService(income_repo, settings_repo, notifications),
        "settings_service": SettingsService(settings_repo, income_repo, notifications),
        "analytics_service": AnalyticsService(income_repo, settings_repo),
        "export_service": ExportService(income_repo, settings_repo, notifications),
    }


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log unhandled handler errors and tell the user the action failed."""
    logger.error(f"Unhandled error while processing update: {context.error}", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text("❌ Something went wrong. Please try again.")


async def post_init(application: Application) -> None:
    """Register the command menu, check delivery and schedule reminders."""
    commands = [
        BotCommand("start", "🚀 Register this chat"),
        BotCommand("help", "📖 Show help"),
        BotCommand("add", "💰 Add income"),
        BotCommand("status", "📋 List income records"),
        BotCommand("done", "✅ Mark tithe as done"),
        BotCommand("delete", "🗑️ Delete a record"),
        BotCommand("future", "📅 Future incomes"),
        BotCommand("dashboard", "📊 Totals"),
        BotCommand("analytics", "📈 Sources and months"),
        BotCommand("goal", "🎯 Monthly goal"),
        BotCommand("reminders", "🔔 Reminder settings"),
        BotCommand("export", "📤 Text report"),
        BotCommand("export_csv", "📄 Export CSV"),
        BotCommand("export_excel", "📊 Export Excel"),
        BotCommand("clear", "🧹 Clear all data"),
    ]
    await application.bot.set_my_commands(commands)

    await application.bot_data["notification_service"].request_permissions()
    count = await application.bot_data["income_service"].resync()
    logger.info(f"Start-up: scheduled {count} reminders")

    try:
        settings = application.bot_data["settings_service"].get_reminder_settings()
    except StoreError as e:
        logger.error(f"Could not load reminder settings, using defaults for the resync job: {e}")
        settings = ReminderSettings()
    schedule_daily_resync(application.job_queue, settings)


async def post_shutdown(application: Application) -> None:
    if STORE_BACKEND == "postgres":
        close_pool()
    logger.info("Tithe Tracker stopped.")


def main() -> None:
    """Initialize and run the bot."""
    configure_logging(LOG_LEVEL)

    # ── 1. Record store ───────────────────────────────────
    logger.info(f"Opening {STORE_BACKEND} record store...")
    if STORE_BACKEND == "postgres":
        init_pool()
        create_tables()
    store = create_store(STORE_BACKEND)

    # ── 2. Build the Telegram application ─────────────────
    app = (
        Application.builder()
        .token(TELEGRAM_BOT_TOKEN)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    # ── 3. Wire services ──────────────────────────────────
    settings_lookup = SettingsRepository(store)
    notifier = TelegramNotifier(
        app.bot,
        app.job_queue,
        chat_id_provider=lambda: OWNER_CHAT_ID or settings_lookup.get_owner_chat_id(),
    )
    app.bot_data.update(build_services(store, notifier))

    # ── 4. Register command handlers ──────────────────────
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("add", add_command))
    app.add_handler(CommandHandler("status", status_command))
    app.add_handler(CommandHandler("done", done_command))
    app.add_handler(CommandHandler("delete", delete_command))
    app.add_handler(CommandHandler("future", future_command))
    app.add_handler(CommandHandler("dashboard", dashboard_command))
    app.add_handler(CommandHandler("analytics", analytics_command))
    app.add_handler(CommandHandler("goal", goal_command))
    app.add_handler(CommandHandler("reminders", reminders_command))
    app.add_handler(CommandHandler("export", export_command))
    app.add_handler(CommandHandler("export_csv", export_csv_command))
    app.add_handler(CommandHandler("export_excel", export_excel_command))
    app.add_handler(CommandHandler("clear", clear_command))
    app.add_error_handler(on_error)

    # ── 5. Start polling ──────────────────────────────────
    logger.info("🚀 Tithe Tracker is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])


if __name__ == "__main__":
    main()
