"""
Service Container - Dependency Injection Container

Simple DI container for managing service instances and their dependencies.
Uses lazy loading to only instantiate services when first accessed.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from fitquest import config
from fitquest.db.store import GamificationStore, InMemoryGamificationStore
from fitquest.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    The store is injected.
    """

    store: GamificationStore

    _gamification_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def gamification_service(self):
        """Get GamificationService instance (lazy-loaded)"""
        if self._gamification_service is None:
            from fitquest.services.gamification_service import GamificationService
            self._gamification_service = GamificationService(self.store)
            logger.debug("GamificationService instantiated")
        return self._gamification_service


async def create_store(backend: Optional[str] = None) -> GamificationStore:
    """
    Build the store selected by STORE_BACKEND.

    The postgres backend opens its connection pool and creates the schema.
    """
    backend = (backend or config.STORE_BACKEND).lower()

    if backend == "memory":
        logger.warning("Using in-memory gamification store - records are NOT persisted")
        return InMemoryGamificationStore()

    if backend == "postgres":
        from fitquest.db.connection import Database
        from fitquest.db.postgres_store import PostgresGamificationStore

        database = Database(config.DATABASE_URL)
        await database.init_pool()
        store = PostgresGamificationStore(database)
        await store.ensure_schema()
        return store

    raise ConfigurationError(f"Unknown store backend: {backend}", config_key="STORE_BACKEND")


# Global container instance (initialized by the API lifespan)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() before using services."
        )
    return _container


def init_container(store: GamificationStore) -> ServiceContainer:
    """
    Initialize the global service container.

    Should be called once at startup after the store is built.
    """
    global _container

    _container = ServiceContainer(store=store)

    logger.info("Service container initialized")
    return _container


def reset_container() -> None:
    """Drop the global container (shutdown and tests)"""
    global _container
    _container = None
