"""Gamification store interface and in-memory implementation"""
import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

logger = logging.getLogger(__name__)


class RecordTransaction:
    """
    A user's document read under lock.

    `document` is the stored document (None if the user has no record).
    Call save() with the new document; it is written when the transaction
    block exits without an exception.
    """

    def __init__(self, user_id: str, document: Optional[Dict[str, Any]]):
        self.user_id = user_id
        self.document = document
        self.pending: Optional[Dict[str, Any]] = None

    def save(self, document: Dict[str, Any]) -> None:
        self.pending = document


class GamificationStore(ABC):
    """Key-value document store holding one gamification document per user"""

    @abstractmethod
    async def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return the user's document, or None"""

    @abstractmethod
    async def create_if_absent(self, user_id: str, document: Dict[str, Any]) -> bool:
        """Store `document` unless the user already has one; True if created"""

    @abstractmethod
    def transaction(self, user_id: str) -> "AsyncIterator[RecordTransaction]":
        """
        Async context manager for a read-modify-write of one user's document.

        Concurrent transactions for the same user are serialized.
        """

    async def close(self) -> None:
        """Release store resources"""


class InMemoryGamificationStore(GamificationStore):
    """In-process store; documents are lost when the process exits"""

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}
        # Per-user locks live only while some task holds or waits on them
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    @asynccontextmanager
    async def _lock(self, user_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._locks[user_id]

    async def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        document = self._documents.get(user_id)
        return copy.deepcopy(document) if document is not None else None

    async def create_if_absent(self, user_id: str, document: Dict[str, Any]) -> bool:
        async with self._lock(user_id):
            if user_id in self._documents:
                return False
            self._documents[user_id] = copy.deepcopy(document)
            logger.debug(f"Created gamification document for user {user_id} (in memory)")
            return True

    @asynccontextmanager
    async def transaction(self, user_id: str) -> AsyncIterator[RecordTransaction]:
        async with self._lock(user_id):
            txn = RecordTransaction(user_id, await self.get(user_id))
            yield txn
            if txn.pending is not None:
                self._documents[user_id] = copy.deepcopy(txn.pending)
