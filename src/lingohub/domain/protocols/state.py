"""Preferences protocol for the small amount of state the SDK persists.

The SDK stores a handful of strings (installed release id, installed app
version, last check time, language override). Reads happen on the lookup
path, so the interface is synchronous.
"""

from typing import Protocol

__all__ = ["PreferencesStore"]


class PreferencesStore(Protocol):
    """Protocol for string key/value persistence.

    Example implementations:
    - InMemoryPreferences: dict-based storage for tests
    - FilePreferences: one JSON document on disk
    """

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is unset."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value.

        Raises:
            IOError: If the backing storage cannot be written
        """
        ...

    def remove(self, key: str) -> None:
        """Remove a key. Silently succeeds if the key is unset (idempotent)."""
        ...

    def clear(self) -> None:
        """Remove every key."""
        ...
