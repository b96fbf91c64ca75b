"""In-memory cache implementation.

A plain dictionary behind the Cache protocol. It has no expiration; the
owner decides when entries become invalid and calls ``clear``.
"""

from typing import TypeVar

from lingohub.domain.protocols import Cache

K = TypeVar("K")
V = TypeVar("V")


class MemoryCache(Cache[K, V]):
    """Simple in-memory cache implementation.

    Example:
        >>> cache = MemoryCache[str, int]()
        >>> cache.set("key1", 42)
        >>> cache.get("key1")
        42
        >>> "key2" in cache
        False
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory cache."""
        self._data: dict[K, V] = {}

    def get(self, key: K) -> V | None:
        return self._data.get(key)

    def set(self, key: K, value: V) -> None:
        self._data[key] = value

    def clear(self, key: K | None = None) -> None:
        """Clear cache entries.

        Args:
            key: If provided, clear only this key. If None, clear all entries.
        """
        if key is None:
            self._data.clear()
        else:
            self._data.pop(key, None)

    def keys(self) -> list[K]:
        """Snapshot of the cached keys."""
        return list(self._data)

    def __len__(self) -> int:
        """Return the number of cached entries."""
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        """Check if a key exists in the cache."""
        return key in self._data
