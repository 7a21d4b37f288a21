"""
repositories/income_repo.py
---------------------------
Data access layer for the income ledger.
The whole ledger lives in the `incomes` document as an ordered JSON list.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from models.income import NO_DESCRIPTION, STATUS_DONE, STATUS_PENDING, IncomeRecord
from repositories.document_store import DocumentStore, StoreError
from utils.logger import get_logger
from utils.validation import ValidationError

logger = get_logger(__name__)

INCOMES_KEY = "incomes"


class IncomeRepository:
    """Repository for the income ledger document."""

    def __init__(self, store: DocumentStore):
        self.store = store

    # ── READ ──────────────────────────────────────────────

    def get_all(self) -> list[IncomeRecord]:
        """
        Load the ledger in insertion order (empty if never saved).

        Raises:
            StoreError: If the store fails or the document is malformed.
        """
        raw = self.store.get(INCOMES_KEY, default=[]) or []
        try:
            return [IncomeRecord.from_dict(item) for item in raw]
        except ValidationError as e:
            logger.error(f"Ledger document is corrupt: {e}")
            raise StoreError("Income ledger could not be read") from e

    def get_by_id(self, income_id: int) -> Optional[IncomeRecord]:
        return next((r for r in self.get_all() if r.id == income_id), None)

    # ── CREATE ────────────────────────────────────────────

    def add(self, amount: Decimal, when: datetime,
            description: Optional[str] = None,
            created_at: Optional[datetime] = None) -> IncomeRecord:
        """
        Append a new pending income to the ledger.

        Args:
            amount: Validated positive amount.
            when: Effective/expected date of the income.
            description: Optional label; blank or missing is stored as "No description".
            created_at: Creation time the id is derived from (defaults to now).

        Returns:
            The persisted IncomeRecord.
        """
        incomes = self.get_all()
        record = IncomeRecord(
            id=self._next_id(incomes, created_at or datetime.now()),
            amount=amount,
            date=when,
            description=description.strip() if description and description.strip() else NO_DESCRIPTION,
            status=STATUS_PENDING,
        )
        incomes.append(record)
        self._save(incomes)
        logger.info(f"Added income #{record.id} ({record.amount}) for {record.date:%Y-%m-%d}")
        return record

    # ── UPDATE ────────────────────────────────────────────

    def mark_done(self, income_id: int) -> Optional[IncomeRecord]:
        """
        Set a record's status to 'done'. Only the status field changes.

        Returns:
            The updated record, or None if no record has that id.
        """
        incomes = self.get_all()
        target = next((r for r in incomes if r.id == income_id), None)
        if target is None:
            return None
        if target.is_done():
            return target
        target.status = STATUS_DONE
        self._save(incomes)
        logger.info(f"Marked tithe for income #{income_id} as done")
        return target

    # ── DELETE ────────────────────────────────────────────

    def delete(self, income_id: int) -> Optional[IncomeRecord]:
        """
        Remove exactly the record with `income_id`.

        Returns:
            The removed record, or None if it did not exist.
        """
        incomes = self.get_all()
        removed = next((r for r in incomes if r.id == income_id), None)
        if removed is None:
            return None
        self._save([r for r in incomes if r.id != income_id])
        logger.info(f"Deleted income #{income_id}")
        return removed

    def clear(self) -> bool:
        """Drop the whole ledger document."""
        cleared = self.store.remove(INCOMES_KEY)
        logger.info("Cleared all income records")
        return cleared

    # ── HELPERS ───────────────────────────────────────────

    def _save(self, incomes: list[IncomeRecord]) -> None:
        version = self.store.set(INCOMES_KEY, [r.to_dict() for r in incomes])
        logger.debug(f"Ledger saved with {len(incomes)} records (v{version})")

    @staticmethod
    def _next_id(incomes: list[IncomeRecord], created_at: datetime) -> int:
        """Millisecond timestamp id, bumped past the largest existing id if needed."""
        candidate = int(created_at.timestamp() * 1000)
        highest = max((r.id for r in incomes), default=0)
        return candidate if candidate > highest else highest + 1
