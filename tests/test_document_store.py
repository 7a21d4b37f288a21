"""
Tests for the key-value document store and the ledger repository on top of it.
"""

from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from repositories.document_store import (
    MemoryDocumentStore,
    PostgresDocumentStore,
    StoreError,
    create_store,
)
from repositories.income_repo import INCOMES_KEY, IncomeRepository
from tests.conftest import NOW


class TestMemoryDocumentStore:
    def test_missing_key(self, store):
        assert store.get_document("nope") is None
        assert store.get("nope", default=[]) == []

    def test_versions_increase_per_write(self, store):
        assert store.set("k", {"a": 1}) == 1
        assert store.set("k", {"a": 2}) == 2
        assert store.get_document("k").version == 2
        assert store.get("k") == {"a": 2}

    def test_remove(self, store):
        store.set("k", 1)
        assert store.remove("k") is True
        assert store.remove("k") is False
        assert store.get("k") is None

    def test_reads_are_copies(self, store):
        store.set("k", [{"a": 1}])
        snapshot = store.get("k")
        snapshot[0]["a"] = 99
        assert store.get("k") == [{"a": 1}]

    def test_unserializable_value_raises(self, store):
        with pytest.raises(StoreError):
            store.set("k", {"when": datetime(2026, 1, 1)})
        assert store.get_document("k") is None

    def test_last_writer_wins(self, store):
        """Two writers on the same snapshot: the earlier write is silently lost."""
        store.set(INCOMES_KEY, [{"id": 1, "status": "pending"}])

        writer_a = store.get(INCOMES_KEY)
        writer_b = store.get(INCOMES_KEY)

        writer_a.append({"id": 2, "status": "pending"})
        store.set(INCOMES_KEY, writer_a)

        writer_b[0]["status"] = "done"
        store.set(INCOMES_KEY, writer_b)

        doc = store.get_document(INCOMES_KEY)
        assert doc.version == 3
        assert doc.value == [{"id": 1, "status": "done"}]


class TestCreateStore:
    def test_memory_backend(self):
        assert isinstance(create_store("memory"), MemoryDocumentStore)

    def test_postgres_backend(self):
        assert isinstance(create_store("postgres"), PostgresDocumentStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_store("sqlite")


class TestPostgresDocumentStore:
    """SQL paths with the connection pool mocked out."""

    def _patched(self, cursor):
        transaction = MagicMock()
        transaction.return_value.__enter__.return_value = cursor
        return patch("repositories.document_store.transaction", transaction)

    def test_set_returns_new_version(self):
        cursor = MagicMock()
        cursor.fetchone.return_value = (4,)
        with self._patched(cursor):
            assert PostgresDocumentStore().set("incomes", []) == 4
        sql, params = cursor.execute.call_args[0]
        assert "ON CONFLICT" in sql
        assert params[0] == "incomes"

    def test_get_document(self):
        cursor = MagicMock()
        cursor.fetchone.return_value = ([{"id": 1}], 2)
        with self._patched(cursor):
            doc = PostgresDocumentStore().get_document("incomes")
        assert doc.value == [{"id": 1}]
        assert doc.version == 2

    def test_database_error_becomes_store_error(self):
        cursor = MagicMock()
        cursor.execute.side_effect = psycopg2.OperationalError("connection lost")
        with self._patched(cursor):
            with pytest.raises(StoreError):
                PostgresDocumentStore().get_document("incomes")


class TestIncomeRepository:
    def test_empty_ledger(self, income_repo):
        assert income_repo.get_all() == []

    def test_insertion_order_is_kept(self, income_repo):
        later = income_repo.add(Decimal("1"), datetime(2027, 1, 1), created_at=NOW)
        earlier = income_repo.add(Decimal("2"), datetime(2020, 1, 1), created_at=NOW)
        assert [r.id for r in income_repo.get_all()] == [later.id, earlier.id]

    def test_stored_shape(self, income_repo, store):
        income_repo.add(Decimal("99.5"), datetime(2026, 10, 1, 8, 30), "Gift", created_at=NOW)
        assert store.get(INCOMES_KEY) == [{
            "id": int(NOW.timestamp() * 1000),
            "amount": 99.5,
            "description": "Gift",
            "date": "2026-10-01T08:30:00",
            "status": "pending",
        }]

    def test_corrupt_ledger_raises_store_error(self, income_repo, store):
        store.set(INCOMES_KEY, [{"id": 1, "amount": "lots", "date": "2026-01-01"}])
        with pytest.raises(StoreError):
            income_repo.get_all()

    def test_non_numeric_id_raises_store_error(self, income_repo, store):
        store.set(INCOMES_KEY, [{"id": "abc", "amount": 10, "date": "2026-01-01"}])
        with pytest.raises(StoreError):
            income_repo.get_all()

    def test_clear(self, income_repo):
        income_repo.add(Decimal("1"), NOW, created_at=NOW)
        assert income_repo.clear() is True
        assert income_repo.get_all() == []

    def test_mark_done_missing(self, income_repo):
        assert income_repo.mark_done(123) is None

    def test_repository_snapshots_race(self, store):
        """Two repositories interleaving read and write lose one update."""
        repo = IncomeRepository(store)
        record = repo.add(Decimal("100"), NOW, created_at=NOW)
        stale = repo.get_all()

        repo.mark_done(record.id)
        repo._save(stale)

        assert repo.get_by_id(record.id).status == "pending"
        assert store.get_document(INCOMES_KEY).version == 3
