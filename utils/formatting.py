"""
utils/formatting.py
-------------------
Presentation helpers shared by notification bodies, summaries and exports.
Rounding to two decimals happens here and nowhere else.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from config import CURRENCY

_CENT = Decimal("0.01")


def money(amount: Decimal) -> str:
    """Format an amount with exactly two decimals, e.g. ``10.00``."""
    return str(Decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP))


def currency(amount: Decimal) -> str:
    """Format an amount with the configured currency, e.g. ``ETB 10.00``."""
    return f"{CURRENCY} {money(amount)}"


def format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def format_datetime(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def progress_bar(pct: float, length: int = 15) -> str:
    """Generate a text progress bar."""
    filled = int(min(pct, 100) / 100 * length)
    return "█" * filled + "░" * (length - filled)
