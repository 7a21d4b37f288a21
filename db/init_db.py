"""
db/init_db.py
-------------
Creates the record store schema if it does not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Documents table: one JSON document per key (incomes, reminderSettings, ...)
CREATE TABLE IF NOT EXISTS documents (
    key             VARCHAR(64) PRIMARY KEY,
    value           JSONB NOT NULL,
    version         INT NOT NULL DEFAULT 1,
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create the documents table.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        with transaction() as cur:
            cur.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
