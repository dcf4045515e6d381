"""Storage backend protocol for saved games.

Backends are plain key/value stores of JSON text. GameStorage decides the
keys and the document shapes; a backend only moves strings.
"""

from typing import Optional, Protocol


class GameStoreBackend(Protocol):
    """Protocol defining the storage backend interface.

    Implementations:
    - InMemoryBackend: dict-based storage (default)
    - SqliteBackend: single-file SQLite table
    - RedisBackend: Redis strings under a key prefix
    """

    def get(self, key: str) -> Optional[str]:
        """Retrieve a value by key. Returns None if not found."""
        ...

    def put(self, key: str, value: str) -> None:
        """Store or replace a value."""
        ...

    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if the key existed."""
        ...

    def exists(self, key: str) -> bool:
        """Check if a key exists."""
        ...

    def all_keys(self) -> list[str]:
        """Return all stored keys."""
        ...
