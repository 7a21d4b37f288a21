"""
services/analytics_service.py
-----------------------------
Aggregations over the income ledger and the text summaries built on them.

The module-level functions are pure reducers, re-run on every request:
nothing is cached and amounts keep full Decimal precision until formatting.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from config import TITHE_RATE
from models.income import STATUS_DONE, STATUS_PENDING, IncomeRecord
from repositories.income_repo import IncomeRepository
from repositories.settings_repo import SettingsRepository
from utils.formatting import currency, format_date, progress_bar
from utils.logger import get_logger

logger = get_logger(__name__)

TOP_SOURCES = 5
STATUS_FILTERS = ("all", STATUS_PENDING, STATUS_DONE)


# ── Pure reducers ─────────────────────────────────────────

def totals(incomes: Iterable[IncomeRecord]) -> dict:
    """Total income over every record (any status) and the tithe on it."""
    total_income = sum((i.amount for i in incomes), Decimal("0"))
    return {"total_income": total_income, "total_tithe": total_income * TITHE_RATE}


def status_counts(incomes: Iterable[IncomeRecord]) -> dict:
    counts = {STATUS_DONE: 0, STATUS_PENDING: 0}
    for income in incomes:
        counts[income.status] += 1
    return counts


def income_sources(incomes: Iterable[IncomeRecord], limit: int = TOP_SOURCES) -> list[dict]:
    """
    Sum amounts per description.

    Groups keep first-encountered order and the list is cut to the first
    `limit` groups; it is not sorted by amount.
    """
    sources: dict[str, Decimal] = {}
    for income in incomes:
        sources[income.label] = sources.get(income.label, Decimal("0")) + income.amount
    return [{"source": s, "total": t} for s, t in sources.items()][:limit]


def monthly_totals(incomes: Iterable[IncomeRecord]) -> list[dict]:
    """Sum amounts per ``YYYY-MM`` of the income date, in first-encountered order."""
    months: dict[str, Decimal] = {}
    for income in incomes:
        key = f"{income.date.year}-{income.date.month:02d}"
        months[key] = months.get(key, Decimal("0")) + income.amount
    return [{"month": m, "total": t} for m, t in months.items()]


def goal_progress(incomes: Iterable[IncomeRecord], goal: Optional[Decimal],
                  today: date) -> Optional[dict]:
    """
    Progress of this calendar month's income towards the monthly goal.

    Returns:
        None when no goal is set, otherwise a dict with 'goal',
        'month_total', 'percentage' (capped at 100) and 'reached'.
    """
    if not goal:
        return None
    month_total = sum(
        (i.amount for i in incomes
         if i.date.year == today.year and i.date.month == today.month),
        Decimal("0"),
    )
    percentage = min(Decimal("100"), month_total / goal * 100)
    return {
        "goal": goal,
        "month_total": month_total,
        "percentage": float(percentage),
        "reached": month_total >= goal,
    }


def future_incomes(incomes: Iterable[IncomeRecord], today: date) -> list[IncomeRecord]:
    """Incomes dated today or later, soonest first."""
    upcoming = [i for i in incomes if i.date.date() >= today]
    return sorted(upcoming, key=lambda i: i.date)


def filter_by_status(incomes: Iterable[IncomeRecord], status: str = "all") -> list[IncomeRecord]:
    """
    Incomes with the given status ('all', 'pending' or 'done'), newest first.

    Raises:
        ValueError: For an unknown status filter.
    """
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter '{status}'")
    selected = [i for i in incomes if status == "all" or i.status == status]
    return sorted(selected, key=lambda i: i.date, reverse=True)


# ── Summaries ─────────────────────────────────────────────

class AnalyticsService:
    """Builds dashboard, analytics and goal summaries from the stored ledger."""

    def __init__(self, income_repo: IncomeRepository, settings_repo: SettingsRepository,
                 clock: Callable[[], datetime] = datetime.now):
        self.income_repo = income_repo
        self.settings_repo = settings_repo
        self.clock = clock

    def dashboard(self) -> str:
        """Total income, tithe owed overall and the number of paid tithes."""
        incomes = self.income_repo.get_all()
        t = totals(incomes)
        counts = status_counts(incomes)
        lines = ["📊 Tithe Tracker Dashboard\n"]
        lines.append(f"💰 Total Income: {currency(t['total_income'])}")
        lines.append(f"🙏 Total Tithe: {currency(t['total_tithe'])}")
        lines.append(f"✅ Tithes Paid: {counts[STATUS_DONE]}")
        lines.append(f"⏳ Tithes Pending: {counts[STATUS_PENDING]}")
        return "\n".join(lines)

    def analytics(self) -> str:
        """Totals, top income sources and the monthly breakdown."""
        incomes = self.income_repo.get_all()
        if not incomes:
            return "📭 No income recorded yet."

        t = totals(incomes)
        counts = status_counts(incomes)
        lines = ["📈 Financial Analytics\n"]
        lines.append(f"💰 Total Income: {currency(t['total_income'])}")
        lines.append(f"🙏 Total Tithe: {currency(t['total_tithe'])}")
        lines.append(f"✅ Paid: {counts[STATUS_DONE]} | ⏳ Pending: {counts[STATUS_PENDING]}\n")

        lines.append("📂 Income Sources:")
        for src in income_sources(incomes):
            lines.append(f"  • {src['source']}: {currency(src['total'])}")

        lines.append("\n📅 Monthly Income:")
        for month in monthly_totals(incomes):
            lines.append(f"  • {month['month']}: {currency(month['total'])}")
        return "\n".join(lines)

    def goal_status(self) -> str:
        """This month's progress towards the saved goal."""
        goal = self.settings_repo.get_monthly_goal()
        progress = goal_progress(self.income_repo.get_all(), goal, self.clock().date())
        if progress is None:
            return (
                "🎯 No monthly goal set.\n"
                "Use /goal <amount> to set one."
            )
        lines = ["🎯 Monthly Goal\n"]
        lines.append(f"Current: {currency(progress['month_total'])}")
        lines.append(f"Goal: {currency(progress['goal'])}")
        lines.append(f"{progress_bar(progress['percentage'])} {progress['percentage']:.1f}%")
        if progress["reached"]:
            lines.append("\n🎉 Congratulations! You've reached your monthly goal!")
        return "\n".join(lines)

    def status_list(self, status: str = "all") -> str:
        """Records matching a status filter, newest first, with their ids."""
        incomes = self.income_repo.get_all()
        selected = filter_by_status(incomes, status)
        if not selected:
            if not incomes:
                return "📭 No income records found. Add your first income with /add."
            return f"📭 No {status} records found."

        lines = [f"📋 Showing {len(selected)} of {len(incomes)} records\n"]
        for i in selected:
            icon = "✅" if i.is_done() else "⏳"
            lines.append(
                f"{icon} #{i.id} | {format_date(i.date)} | {currency(i.amount)} "
                f"(tithe {currency(i.tithe)}) | {i.label}"
            )
        return "\n".join(lines)

    def future_list(self) -> str:
        """Upcoming incomes, soonest first."""
        upcoming = future_incomes(self.income_repo.get_all(), self.clock().date())
        if not upcoming:
            return "📭 No future incomes scheduled.\nAdd one with /add <amount> <YYYY-MM-DD>."
        lines = ["📅 Future Incomes\n"]
        for i in upcoming:
            lines.append(f"  #{i.id} | {format_date(i.date)} | {currency(i.amount)} | {i.label}")
        return "\n".join(lines)
