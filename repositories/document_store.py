"""
repositories/document_store.py
------------------------------
Key-value record store holding whole JSON documents.

Every write replaces the full document and bumps a per-key version counter.
There is no compare-and-set: two writers that read the same version both
succeed and the last one wins. The version is exposed so callers and tests
can observe that.
"""

import copy
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import psycopg2
from psycopg2.extras import Json

from db.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Raised when the record store cannot be read or written."""


@dataclass(frozen=True)
class Document:
    """A stored JSON value together with its write counter."""
    value: Any
    version: int


class DocumentStore(ABC):
    """Abstract get/set/remove-by-key store for JSON-serializable values."""

    @abstractmethod
    def get_document(self, key: str) -> Optional[Document]:
        """Return the document stored under `key`, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> int:
        """
        Replace the document stored under `key`.

        Returns:
            The new version of the document (1 for a fresh key).

        Raises:
            StoreError: If the value cannot be serialized or written.
        """

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Delete the document. Returns True if something was removed."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return only the stored value, or `default` if the key is absent."""
        doc = self.get_document(key)
        return default if doc is None else doc.value


class PostgresDocumentStore(DocumentStore):
    """Document store backed by the `documents` table (JSONB values)."""

    def get_document(self, key: str) -> Optional[Document]:
        sql = "SELECT value, version FROM documents WHERE key = %s;"
        try:
            with transaction() as cur:
                cur.execute(sql, (key,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Failed to read document '{key}': {e}")
            raise StoreError(f"Could not read '{key}'") from e
        return Document(value=row[0], version=row[1]) if row else None

    def set(self, key: str, value: Any) -> int:
        sql = """
            INSERT INTO documents (key, value)
            VALUES (%s, %s)
            ON CONFLICT (key)
            DO UPDATE SET value = EXCLUDED.value,
                          version = documents.version + 1,
                          updated_at = NOW()
            RETURNING version;
        """
        try:
            with transaction() as cur:
                cur.execute(sql, (key, Json(value)))
                version = cur.fetchone()[0]
        except (psycopg2.Error, TypeError) as e:
            logger.error(f"Failed to write document '{key}': {e}")
            raise StoreError(f"Could not save '{key}'") from e
        logger.debug(f"Saved document '{key}' v{version}")
        return version

    def remove(self, key: str) -> bool:
        sql = "DELETE FROM documents WHERE key = %s;"
        try:
            with transaction() as cur:
                cur.execute(sql, (key,))
                deleted = cur.rowcount > 0
        except psycopg2.Error as e:
            logger.error(f"Failed to remove document '{key}': {e}")
            raise StoreError(f"Could not remove '{key}'") from e
        if deleted:
            logger.info(f"Removed document '{key}'")
        return deleted


class MemoryDocumentStore(DocumentStore):
    """
    In-process document store.

    Values are passed through a JSON round trip on write so that callers
    get the same serialization guarantees as with PostgreSQL, and copies on
    read so that snapshots never alias the stored document.
    """

    def __init__(self):
        self._docs: dict[str, Document] = {}

    def get_document(self, key: str) -> Optional[Document]:
        doc = self._docs.get(key)
        if doc is None:
            return None
        return Document(value=copy.deepcopy(doc.value), version=doc.version)

    def set(self, key: str, value: Any) -> int:
        try:
            stored = json.loads(json.dumps(value))
        except (TypeError, ValueError) as e:
            raise StoreError(f"Could not save '{key}': {e}") from e
        previous = self._docs.get(key)
        version = previous.version + 1 if previous else 1
        self._docs[key] = Document(value=stored, version=version)
        return version

    def remove(self, key: str) -> bool:
        return self._docs.pop(key, None) is not None


def create_store(backend: str) -> DocumentStore:
    """
    Build the store selected by the STORE_BACKEND setting.

    Raises:
        ValueError: For an unknown backend name.
    """
    if backend == "postgres":
        return PostgresDocumentStore()
    if backend == "memory":
        logger.warning("Using in-memory record store; data is lost on restart.")
        return MemoryDocumentStore()
    raise ValueError(f"Unknown STORE_BACKEND '{backend}'")
