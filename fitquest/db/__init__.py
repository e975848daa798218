"""
Gamification record stores.

- GamificationStore: interface consumed by the gamification engine
- InMemoryGamificationStore: in-process store for development and tests
- PostgresGamificationStore: one JSONB document per user in PostgreSQL
"""

from fitquest.db.store import GamificationStore, RecordTransaction, InMemoryGamificationStore
from fitquest.db.postgres_store import PostgresGamificationStore

__all__ = [
    "GamificationStore",
    "RecordTransaction",
    "InMemoryGamificationStore",
    "PostgresGamificationStore",
]
