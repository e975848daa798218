"""PostgreSQL-backed gamification store (one JSONB document per user)"""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

import psycopg
from psycopg.types.json import Jsonb

from fitquest.db.connection import Database
from fitquest.db.store import GamificationStore, RecordTransaction
from fitquest.exceptions import wrap_store_exception

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS gamification_records (
    user_id TEXT PRIMARY KEY,
    data JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


class PostgresGamificationStore(GamificationStore):
    """
    Gamification documents in the `gamification_records` table.

    Transactions lock the user's row with SELECT ... FOR UPDATE, so recorder
    calls for the same user run one after another across processes.
    """

    def __init__(self, database: Database):
        self.db = database

    async def ensure_schema(self) -> None:
        """Create the records table if it does not exist"""
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(SCHEMA_SQL)
                await conn.commit()
            logger.info("Gamification schema ready")
        except psycopg.Error as e:
            raise wrap_store_exception(e, operation="ensure_schema")

    async def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        SELECT data
                        FROM gamification_records
                        WHERE user_id = %s
                        """,
                        (user_id,)
                    )
                    row = await cur.fetchone()
                    return row["data"] if row else None
        except psycopg.Error as e:
            raise wrap_store_exception(e, operation="get_gamification", user_id=user_id)

    async def create_if_absent(self, user_id: str, document: Dict[str, Any]) -> bool:
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        """
                        INSERT INTO gamification_records (user_id, data)
                        VALUES (%s, %s)
                        ON CONFLICT (user_id) DO NOTHING
                        RETURNING user_id
                        """,
                        (user_id, Jsonb(document))
                    )
                    row = await cur.fetchone()
                await conn.commit()
        except psycopg.Error as e:
            raise wrap_store_exception(e, operation="create_gamification", user_id=user_id)

        if row:
            logger.info(f"Created gamification record for user {user_id}")
        return row is not None

    @asynccontextmanager
    async def transaction(self, user_id: str) -> AsyncIterator[RecordTransaction]:
        try:
            async with self.db.connection() as conn:
                async with conn.transaction():
                    async with conn.cursor() as cur:
                        await cur.execute(
                            """
                            SELECT data
                            FROM gamification_records
                            WHERE user_id = %s
                            FOR UPDATE
                            """,
                            (user_id,)
                        )
                        row = await cur.fetchone()
                        txn = RecordTransaction(user_id, row["data"] if row else None)

                        yield txn

                        if txn.pending is not None:
                            await cur.execute(
                                """
                                INSERT INTO gamification_records (user_id, data)
                                VALUES (%s, %s)
                                ON CONFLICT (user_id) DO UPDATE
                                SET data = EXCLUDED.data,
                                    updated_at = CURRENT_TIMESTAMP
                                """,
                                (user_id, Jsonb(txn.pending))
                            )
        except psycopg.Error as e:
            raise wrap_store_exception(e, operation="update_gamification", user_id=user_id)

    async def close(self) -> None:
        await self.db.close_pool()
