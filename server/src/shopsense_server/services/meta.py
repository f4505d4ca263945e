"""Entity metadata persisted in Postgres."""

from typing import Any

from psycopg_pool import ConnectionPool

from shopsense.tracking.storage import MetaScope

SCHEMA = """
CREATE TABLE IF NOT EXISTS entity_meta (
    scope TEXT NOT NULL,
    entity_id TEXT NOT NULL,
    meta_key TEXT NOT NULL,
    meta_value TEXT NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    PRIMARY KEY (scope, entity_id, meta_key)
)
"""


class PostgresMetaStore:
    """``MetaStore`` backed by the ``entity_meta`` table."""

    def __init__(self, pool: ConnectionPool[Any]) -> None:
        self.pool = pool

    def ensure_schema(self) -> None:
        """Create the ``entity_meta`` table if it does not exist."""
        with self.pool.connection() as conn:
            conn.execute(SCHEMA)

    def get_meta(self, scope: MetaScope, entity_id: str, key: str) -> str | None:
        with self.pool.connection() as conn:
            row = conn.execute(
                """
                SELECT meta_value FROM entity_meta
                WHERE scope = %s AND entity_id = %s AND meta_key = %s
                """,
                (scope, str(entity_id), key),
            ).fetchone()
        return row[0] if row else None

    def update_meta(self, scope: MetaScope, entity_id: str, key: str, value: str) -> None:
        with self.pool.connection() as conn:
            conn.execute(
                """
                INSERT INTO entity_meta (scope, entity_id, meta_key, meta_value)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (scope, entity_id, meta_key)
                DO UPDATE SET meta_value = EXCLUDED.meta_value, updated_at = now()
                """,
                (scope, str(entity_id), key, value),
            )
