"""
utils/validation.py
-------------------
Input validation for user-entered values (amounts, goals, dates, times).
Every parser raises ValidationError before anything is written to the store.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation

from dateutil.parser import isoparse

ALLOWED_DAYS_BEFORE: tuple[int, ...] = (1, 2, 3, 5, 7)

# Accepted range for income dates.
MIN_YEAR = 1970
MAX_YEAR = 9999


class ValidationError(ValueError):
    """Raised when user input is rejected."""


def parse_positive_amount(raw, field: str = "amount") -> Decimal:
    """
    Parse a strictly positive decimal from text or a number.

    Args:
        raw: User input, e.g. "1500", "99.90" or 250.
        field: Name used in the error message.

    Returns:
        The value as a Decimal.

    Raises:
        ValidationError: If the input is empty, not numeric, not finite or <= 0.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError(f"Please enter a valid positive {field}")
    try:
        value = Decimal(str(raw).strip().replace(",", ""))
    except InvalidOperation:
        raise ValidationError(f"Please enter a valid positive {field}") from None
    if not value.is_finite() or value <= 0:
        raise ValidationError(f"Please enter a valid positive {field}")
    return value


def parse_reminder_time(raw: str) -> tuple[int, int]:
    """
    Parse a 24h ``HH:MM`` string.

    Returns:
        (hour, minute)

    Raises:
        ValidationError: If the string is not a valid 24h time.
    """
    parts = str(raw).strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValidationError(f"Invalid reminder time '{raw}', expected HH:MM")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValidationError(f"Invalid reminder time '{raw}', expected HH:MM")
    return hour, minute


def parse_days_before(raw) -> int:
    """Parse the reminder offset; only the values offered by the app are accepted."""
    try:
        days = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Days before must be one of {ALLOWED_DAYS_BEFORE}") from None
    if days not in ALLOWED_DAYS_BEFORE:
        raise ValidationError(f"Days before must be one of {ALLOWED_DAYS_BEFORE}")
    return days


def parse_local_datetime(raw) -> datetime:
    """
    Parse an ISO-8601 date or datetime into a naive local datetime.

    Timezone-aware values (e.g. ``2026-10-18T06:00:00.000Z``) are converted to
    the local timezone first; naive values are taken as local already.

    Raises:
        ValidationError: If the value cannot be parsed.
    """
    if isinstance(raw, datetime):
        value = raw
    else:
        try:
            value = isoparse(str(raw).strip())
        except (ValueError, OverflowError):
            raise ValidationError(f"Invalid date '{raw}', expected YYYY-MM-DD") from None
    if value.tzinfo is not None:
        try:
            value = value.astimezone().replace(tzinfo=None)
        except (ValueError, OverflowError):
            raise ValidationError(f"Invalid date '{raw}', expected YYYY-MM-DD") from None
    return value


def parse_income_date(raw) -> datetime:
    """
    Parse a user-entered income date (see parse_local_datetime).

    Raises:
        ValidationError: If the value cannot be parsed or its year is
            outside MIN_YEAR..MAX_YEAR.
    """
    value = parse_local_datetime(raw)
    if not MIN_YEAR <= value.year <= MAX_YEAR:
        raise ValidationError(f"Date must be between {MIN_YEAR} and {MAX_YEAR}")
    return value
