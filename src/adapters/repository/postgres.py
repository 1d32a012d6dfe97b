"""
PostgreSQL key-value adapter - Implements KeyValueStore protocol.

This module provides the PostgreSQL implementation of the domain's
durable store port using psycopg3 with raw SQL.

Atomicity Design:
-----------------
The registry stages every write of one operation and flushes them through
set_many(). Here set_many() runs on a single connection inside one
transaction, so an operation's writes either all commit or all roll back,
including on a crash mid-flush.

Concurrency Design:
-------------------
Several workers may share one database. set_many() receives the values the
operation read and re-checks them inside its transaction:
- A key the operation saw absent and now creates is claimed with
  INSERT ... ON CONFLICT DO NOTHING. The primary key lets exactly one
  concurrent claim insert the row; the others see rowcount 0.
- A key the operation saw present is locked with SELECT ... FOR UPDATE (FOR
  SHARE when it is only read) and compared, so a stale transfer cannot
  overwrite a newer owner.
Any mismatch raises Conflict and rolls the whole batch back. Keys are
visited in sorted order so concurrent batches lock rows in the same order.

Ordering:
---------
Keys are BYTEA. PostgreSQL compares BYTEA bytewise, so ORDER BY key gives
the same ascending byte order the domain expects from range().
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from psycopg_pool import ConnectionPool

from src.domain.exceptions import Conflict

logger = logging.getLogger(__name__)

_UPSERT_SQL = """
    INSERT INTO kv_store (key, value)
    VALUES (%s, %s)
    ON CONFLICT (key) DO UPDATE
    SET value = EXCLUDED.value
"""

_CLAIM_SQL = """
    INSERT INTO kv_store (key, value)
    VALUES (%s, %s)
    ON CONFLICT (key) DO NOTHING
"""

_LOCK_SQL = "SELECT value FROM kv_store WHERE key = %s FOR UPDATE"

# Keys only read by the batch need to stay put, not to be exclusive
_SHARE_SQL = "SELECT value FROM kv_store WHERE key = %s FOR SHARE"


class PostgresKeyValueStore:
    """
    Implements KeyValueStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def get(self, key: bytes) -> bytes | None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT value FROM kv_store WHERE key = %s", (key,))
            row = cursor.fetchone()
        if row is None:
            return None
        return bytes(row[0])

    def set(self, key: bytes, value: bytes) -> None:
        self.set_many([(key, value)])

    def set_many(
        self,
        items: Iterable[tuple[bytes, bytes]],
        expected: Mapping[bytes, bytes | None] | None = None,
    ) -> None:
        """
        Apply every item in one transaction.

        Args:
            items: (key, value) pairs; later pairs win on duplicate keys
            expected: Values each key must still hold (None means absent)

        Raises:
            Conflict: A key no longer holds its expected value; nothing is written
        """
        pending = dict(items)
        if not pending:
            return
        count = len(pending)

        with self._pool.connection() as conn:
            with conn.transaction(), conn.cursor() as cursor:
                for key in sorted(expected or {}):
                    want = expected[key]
                    if want is None and key in pending:
                        cursor.execute(_CLAIM_SQL, (key, pending.pop(key)))
                        if cursor.rowcount != 1:
                            logger.info("Lost claim on key %r", key)
                            raise Conflict()
                        continue

                    cursor.execute(_LOCK_SQL if key in pending else _SHARE_SQL, (key,))
                    row = cursor.fetchone()
                    current = None if row is None else bytes(row[0])
                    if current != want:
                        logger.info("Stale read on key %r", key)
                        raise Conflict()

                if pending:
                    cursor.executemany(_UPSERT_SQL, sorted(pending.items()))
        logger.debug("Committed batch of %d key(s)", count)

    def range(self, start: bytes | None = None, end: bytes | None = None) -> Iterator[tuple[bytes, bytes]]:
        """
        Iterate keys in ascending order between exclusive bounds.

        Rows are fetched eagerly so the connection returns to the pool
        before the caller starts consuming results.
        """
        clauses = []
        params: list[bytes] = []
        if start is not None:
            clauses.append("key > %s")
            params.append(start)
        if end is not None:
            clauses.append("key < %s")
            params.append(end)

        sql = "SELECT key, value FROM kv_store"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY key ASC"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            rows = cursor.fetchall()

        for key, value in rows:
            yield bytes(key), bytes(value)


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
