"""Saved-game storage abstraction layer.

Provides a pluggable key/value backend for saved games.

Configuration:
    GAME_STORE_BACKEND=memory (default) | sqlite | redis
    SQLITE_PATH=data/werewolf_games.db (backend=sqlite)
    REDIS_URL=redis://localhost:6379/0 (required when backend=redis)
"""

import logging
from typing import Optional

from werewolf_moderator.core.config import Settings, settings as default_settings
from werewolf_moderator.storage.backend import GameStoreBackend
from werewolf_moderator.storage.memory import InMemoryBackend
from werewolf_moderator.storage.sqlite_backend import SqliteBackend

logger = logging.getLogger(__name__)

__all__ = ["GameStoreBackend", "InMemoryBackend", "SqliteBackend", "create_backend"]


def create_backend(config: Optional[Settings] = None) -> GameStoreBackend:
    """Create a storage backend based on configuration.

    Reads GAME_STORE_BACKEND:
    - "memory" (default): in-memory dict storage
    - "sqlite": SQLite file at SQLITE_PATH
    - "redis": Redis-backed storage (requires REDIS_URL)

    Any backend that cannot be set up falls back to memory.
    """
    config = config or default_settings
    backend_type = config.GAME_STORE_BACKEND

    if backend_type == "sqlite":
        logger.info("Game store backend: SQLite (%s)", config.SQLITE_PATH)
        return SqliteBackend(config.SQLITE_PATH)

    if backend_type == "redis":
        redis_url = config.REDIS_URL.strip()
        if not redis_url:
            logger.warning(
                "GAME_STORE_BACKEND=redis but REDIS_URL not set, falling back to memory"
            )
            return InMemoryBackend()
        try:
            from werewolf_moderator.storage.redis_backend import RedisBackend
            rb = RedisBackend(redis_url)
            if rb.ping():
                logger.info("Game store backend: Redis (%s)", redis_url.split("@")[-1])
                return rb
            else:
                logger.warning("Redis ping failed, falling back to memory backend")
                return InMemoryBackend()
        except Exception as e:
            logger.warning("Failed to initialize Redis backend: %s, falling back to memory", e)
            return InMemoryBackend()

    return InMemoryBackend()
