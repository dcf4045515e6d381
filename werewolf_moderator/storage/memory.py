"""In-memory storage backend.

Default backend; contents live only as long as the process.
"""

from typing import Optional


class InMemoryBackend:
    """Dict-based key/value storage."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        return key in self._data

    def all_keys(self) -> list[str]:
        return list(self._data.keys())
