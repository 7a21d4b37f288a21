"""
services/export_service.py
---------------------------
Generates exports of the income ledger: the plain-text report shared from
the bot, plus CSV and Excel files.
"""

import io
from datetime import datetime
from typing import Callable

import pandas as pd

from config import CURRENCY
from models.income import STATUS_DONE, STATUS_PENDING, IncomeRecord
from repositories.income_repo import IncomeRepository
from repositories.settings_repo import SettingsRepository
from services.analytics_service import status_counts, totals
from services.notification_service import NotificationService
from utils.formatting import currency, format_date, format_datetime, money
from utils.logger import get_logger

logger = get_logger(__name__)

REPORT_TITLE = "Tithe Tracker Data Export"


def build_text_report(incomes: list[IncomeRecord], exported_at: datetime) -> str:
    """Render the plain-text export: summary block, one line per record, timestamp."""
    t = totals(incomes)
    counts = status_counts(incomes)
    lines = [
        REPORT_TITLE,
        "=" * len(REPORT_TITLE),
        "",
        f"Total Records: {len(incomes)}",
        f"Total Income: {currency(t['total_income'])}",
        f"Total Tithe: {currency(t['total_tithe'])}",
        f"Tithes Paid: {counts[STATUS_DONE]}",
        f"Tithes Pending: {counts[STATUS_PENDING]}",
        "",
        "Detailed Records:",
    ]
    lines.extend(
        f"- {format_date(i.date)}: {currency(i.amount)} ({i.status}) - {i.label}"
        for i in incomes
    )
    lines.extend(["", f"Exported on: {format_datetime(exported_at)}"])
    return "\n".join(lines)


def _to_frame(incomes: list[IncomeRecord]) -> pd.DataFrame:
    data = [
        {
            "ID": i.id,
            "Date": format_date(i.date),
            "Description": i.label,
            f"Amount ({CURRENCY})": float(money(i.amount)),
            f"Tithe ({CURRENCY})": float(money(i.tithe)),
            "Status": i.status,
        }
        for i in incomes
    ]
    return pd.DataFrame(data, columns=[
        "ID", "Date", "Description", f"Amount ({CURRENCY})", f"Tithe ({CURRENCY})", "Status",
    ])


class ExportService:
    """Generates downloadable ledger reports and confirms each export."""

    def __init__(self, income_repo: IncomeRepository, settings_repo: SettingsRepository,
                 notifications: NotificationService,
                 clock: Callable[[], datetime] = datetime.now):
        self.income_repo = income_repo
        self.settings_repo = settings_repo
        self.notifications = notifications
        self.clock = clock

    async def export_text(self) -> str:
        """Return the plain-text report for the whole ledger."""
        incomes = self.income_repo.get_all()
        report = build_text_report(incomes, self.clock())
        logger.info(f"Exported {len(incomes)} records as text")
        await self._confirm()
        return report

    async def export_csv(self) -> io.BytesIO:
        """
        Export the ledger as a CSV file.

        Returns:
            A BytesIO buffer containing the CSV data.
        """
        incomes = self.income_repo.get_all()
        buffer = io.BytesIO()
        _to_frame(incomes).to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(incomes)} records as CSV")
        await self._confirm()
        return buffer

    async def export_excel(self) -> io.BytesIO:
        """
        Export the ledger as an Excel (.xlsx) file with a monthly summary sheet.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        incomes = self.income_repo.get_all()
        df = _to_frame(incomes)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Incomes", index=False)

            if not df.empty:
                summary = (
                    df.assign(Month=df["Date"].str[:7])
                    .groupby("Month", sort=False)[[f"Amount ({CURRENCY})", f"Tithe ({CURRENCY})"]]
                    .sum()
                    .reset_index()
                )
                summary.to_excel(writer, sheet_name="Monthly", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(incomes)} records as Excel")
        await self._confirm()
        return buffer

    async def _confirm(self) -> None:
        settings = self.settings_repo.get_reminder_settings()
        await self.notifications.confirm(
            "Data Exported", "Your data has been exported successfully", settings
        )
