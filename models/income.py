"""
models/income.py
----------------
Domain model for income records and their derived tithe.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from config import TITHE_RATE
from utils.validation import ValidationError, parse_local_datetime

NO_DESCRIPTION = "No description"

STATUS_PENDING = "pending"
STATUS_DONE = "done"
STATUSES = (STATUS_PENDING, STATUS_DONE)


@dataclass
class IncomeRecord:
    """
    Represents a single income entry in the ledger.

    Attributes:
        id: Primary key, derived from the creation timestamp in milliseconds.
        amount: Positive income amount (currency-agnostic).
        date: Effective or expected date of the income (naive, local time).
        description: Label such as "Salary" or "Gift"; new records store
            "No description" when none is given.
        status: 'pending' until the tithe is submitted, then 'done'.
    """
    id: int
    amount: Decimal
    date: datetime
    description: str | None = None
    status: str = STATUS_PENDING

    @property
    def tithe(self) -> Decimal:
        """The tithe owed on this income. Always derived, never stored."""
        return self.amount * TITHE_RATE

    @property
    def label(self) -> str:
        """Description with blanks replaced by the 'No description' placeholder."""
        if self.description and self.description.strip():
            return self.description
        return NO_DESCRIPTION

    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING

    def is_done(self) -> bool:
        return self.status == STATUS_DONE

    def to_dict(self) -> dict:
        """Serialize to the JSON shape kept in the `incomes` document."""
        return {
            "id": self.id,
            "amount": float(self.amount),
            "description": self.description,
            "date": self.date.isoformat(),
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "IncomeRecord":
        """
        Build a record from its stored JSON form.

        Raises:
            ValidationError: If a required field is missing or malformed.
        """
        try:
            status = data.get("status", STATUS_PENDING)
            if status not in STATUSES:
                raise ValidationError(f"Unknown status '{status}'")
            return cls(
                id=int(data["id"]),
                amount=Decimal(str(data["amount"])),
                date=parse_local_datetime(data["date"]),
                description=data.get("description") or None,
                status=status,
            )
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise ValidationError(f"Malformed income record {data!r}: {e}") from e

    def __str__(self) -> str:
        return f"#{self.id} {self.amount:.2f} | {self.label} | {self.date:%Y-%m-%d} | {self.status}"
