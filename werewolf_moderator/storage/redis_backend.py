"""Redis storage backend.

Lets several moderator processes share saved games.

Requires:
- redis>=5.0
- REDIS_URL (e.g. redis://localhost:6379/0)
"""

import logging
from typing import Optional

from werewolf_moderator.core.exceptions import StorageError

logger = logging.getLogger(__name__)

# Key prefix for stored documents
_KEY_PREFIX = "werewolf_moderator:"


class RedisBackend:
    """Redis-backed key/value storage.

    Key schema:
        werewolf_moderator:{key} -> JSON text
    """

    def __init__(self, redis_url: str, key_prefix: str = _KEY_PREFIX):
        import redis as redis_lib
        self._client = redis_lib.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        self._key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            return self._client.get(self._key(key))
        except Exception as e:
            logger.error(f"Redis GET failed for {key}: {e}")
            raise StorageError(f"Failed to read {key}", operation="get") from e

    def put(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except Exception as e:
            logger.error(f"Redis SET failed for {key}: {e}")
            raise StorageError(f"Failed to write {key}", operation="put") from e

    def delete(self, key: str) -> bool:
        try:
            return self._client.delete(self._key(key)) > 0
        except Exception as e:
            logger.error(f"Redis DELETE failed for {key}: {e}")
            raise StorageError(f"Failed to delete {key}", operation="delete") from e

    def exists(self, key: str) -> bool:
        try:
            return bool(self._client.exists(self._key(key)))
        except Exception as e:
            logger.error(f"Redis EXISTS failed for {key}: {e}")
            raise StorageError(f"Failed to check {key}", operation="exists") from e

    def all_keys(self) -> list[str]:
        try:
            keys = self._client.keys(f"{self._key_prefix}*")
        except Exception as e:
            logger.error(f"Redis KEYS failed: {e}")
            raise StorageError("Failed to list keys", operation="all_keys") from e
        prefix_len = len(self._key_prefix)
        return [k[prefix_len:] for k in keys]

    def ping(self) -> bool:
        """Health check: verify Redis connectivity."""
        try:
            return self._client.ping()
        except Exception:
            return False
