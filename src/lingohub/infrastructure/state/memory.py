"""In-memory preferences implementation.

Values are lost when the process exits. Used by tests and by hosts that
do not want the SDK to touch the filesystem for its bookkeeping.
"""

import threading

from lingohub.logger import get_logger

logger = get_logger(__name__)


class InMemoryPreferences:
    """Dict-backed preferences store.

    Example:
        >>> prefs = InMemoryPreferences()
        >>> prefs.set("LingohubAppVersion", "1.0.0")
        >>> prefs.get("LingohubAppVersion")
        '1.0.0'
        >>> prefs.remove("LingohubAppVersion")
        >>> assert prefs.get("LingohubAppVersion") is None
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()
        logger.debug("InMemoryPreferences initialized (state will not persist)")

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
        logger.debug(f"Saved preference: key='{key}'")

    def remove(self, key: str) -> None:
        with self._lock:
            removed = self._data.pop(key, None) is not None
        if not removed:
            logger.debug(f"Remove called on unset preference: key='{key}' (no-op)")

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
        logger.debug("Cleared all preferences")

    def snapshot(self) -> dict[str, str]:
        """Copy of all stored values."""
        with self._lock:
            return dict(self._data)
