"""
Service Layer Package

Business logic services sitting between the presentation layer (HTTP API,
activity-logging code) and the gamification store.

- GamificationService: activity recorders, read accessors, badge/level views
- ServiceContainer: lazily wires services to the configured store
"""

from fitquest.services.container import ServiceContainer, create_store, get_container, init_container
from fitquest.services.gamification_service import GamificationService

__all__ = [
    "ServiceContainer",
    "create_store",
    "get_container",
    "init_container",
    "GamificationService",
]
