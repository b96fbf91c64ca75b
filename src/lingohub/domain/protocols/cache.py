"""Cache protocol."""

from typing import Protocol, TypeVar

__all__ = ["Cache", "K", "V"]

# Invariant type variables: a cache both reads and writes them
K = TypeVar("K")
V = TypeVar("V")


class Cache(Protocol[K, V]):
    """Protocol for caching implementations.

    Type Parameters:
        K: The key type
        V: The value type
    """

    def get(self, key: K) -> V | None:
        """Get a value from the cache.

        Returns:
            The cached value if found, None otherwise
        """
        ...

    def set(self, key: K, value: V) -> None:
        """Set a value in the cache."""
        ...

    def clear(self, key: K | None = None) -> None:
        """Clear cache entries.

        Args:
            key: If provided, clear only this key. If None, clear all entries.
        """
        ...

    def __contains__(self, key: object) -> bool:
        """Check whether a key has an entry, even an empty one."""
        ...

    def __len__(self) -> int:
        ...
