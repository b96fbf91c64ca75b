"""File-based preferences implementation.

All values live in one JSON document. The document is read once at startup
and rewritten on every change with an atomic write (temp file, then rename)
so a crash never leaves a truncated file behind.
"""

import json
import os
import threading
from pathlib import Path

from lingohub.logger import get_logger

logger = get_logger(__name__)


class FilePreferences:
    """JSON file preferences store for local persistence.

    Example:
        >>> prefs = FilePreferences("~/.lingohub/preferences.json")
        >>> prefs.set("LingohubDistributionVersion", "release-42")
        >>> # Creates/updates ~/.lingohub/preferences.json
    """

    def __init__(self, path: str | Path = "~/.lingohub/preferences.json"):
        """Initialize file-based preferences.

        Args:
            path: Location of the JSON document. Supports ~ expansion.
                  Parent directories are created if needed.
        """
        self.path = Path(path).expanduser().resolve()
        self._lock = threading.Lock()
        self._ensure_directory_exists()
        self._data: dict[str, str] = self._load()
        logger.debug(f"FilePreferences initialized: path={self.path}, keys={len(self._data)}")

    def _ensure_directory_exists(self) -> None:
        """Create the parent directory if it doesn't exist."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory {self.path.parent}: {e}")
            raise IOError(f"Cannot create preferences directory: {e}") from e

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupted preferences file '{self.path}', ignoring it: {e}")
            return {}
        except OSError as e:
            logger.error(f"Failed to read preferences file '{self.path}': {e}")
            raise IOError(f"Cannot read preferences file: {e}") from e

        if not isinstance(data, dict):
            logger.warning(f"Preferences file '{self.path}' does not hold an object, ignoring it")
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _write(self, data: dict[str, str]) -> None:
        """Persist the whole document atomically."""
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, sort_keys=True)
            os.replace(temp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write preferences file '{self.path}': {e}")
            if temp_path.exists():
                temp_path.unlink()
            raise IOError(f"Cannot write preferences file: {e}") from e

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            updated = {**self._data, key: value}
            self._write(updated)
            self._data = updated
        logger.debug(f"Saved preference: key='{key}', path={self.path}")

    def remove(self, key: str) -> None:
        with self._lock:
            if key not in self._data:
                logger.debug(f"Remove called on unset preference: key='{key}' (no-op)")
                return
            updated = {k: v for k, v in self._data.items() if k != key}
            self._write(updated)
            self._data = updated
        logger.debug(f"Removed preference: key='{key}'")

    def clear(self) -> None:
        with self._lock:
            self._write({})
            self._data = {}
        logger.debug(f"Cleared all preferences in {self.path}")
