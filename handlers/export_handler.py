"""
handlers/export_handler.py
---------------------------
Handles data export commands (text, CSV, Excel).
Delegates to ExportService.
"""

from datetime import date

from telegram import Update
from telegram.ext import ContextTypes

from repositories.document_store import StoreError
from security.auth import authorized_only
from utils.logger import get_logger

logger = get_logger(__name__)

EXPORT_FAILURE = "❌ Failed to export data. Please try again."


@authorized_only
async def export_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export - send the plain-text report."""
    try:
        report = await context.bot_data["export_service"].export_text()
    except StoreError as e:
        logger.error(f"Text export failed: {e}")
        await update.message.reply_text(EXPORT_FAILURE)
        return
    await update.message.reply_text(report)


@authorized_only
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_csv - send the ledger as a CSV file."""
    await update.message.reply_text("📄 Preparing CSV file...")
    try:
        buffer = await context.bot_data["export_service"].export_csv()
    except StoreError as e:
        logger.error(f"CSV export failed: {e}")
        await update.message.reply_text(EXPORT_FAILURE)
        return
    await update.message.reply_document(
        document=buffer,
        filename=f"tithe_export_{date.today():%Y_%m_%d}.csv",
        caption="📊 Tithe Tracker data - CSV",
    )


@authorized_only
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /export_excel - send the ledger as an Excel file."""
    await update.message.reply_text("📊 Preparing Excel file...")
    try:
        buffer = await context.bot_data["export_service"].export_excel()
    except StoreError as e:
        logger.error(f"Excel export failed: {e}")
        await update.message.reply_text(EXPORT_FAILURE)
        return
    await update.message.reply_document(
        document=buffer,
        filename=f"tithe_export_{date.today():%Y_%m_%d}.xlsx",
        caption="📊 Tithe Tracker data - Excel",
    )
