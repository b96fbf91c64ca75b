"""Layered cache of strings loaded from the installed artifact.

Entries are keyed by (language, table) and hold the whole parsed table.
An empty table is a negative marker: the combination was already looked up
and produced nothing, so the disk is not consulted again until the cache
is cleared.
"""

import threading
from typing import Callable, Mapping, Optional

from lingohub.domain.protocols import Cache
from lingohub.infrastructure.cache.memory import MemoryCache
from lingohub.infrastructure.cache.tables import load_table
from lingohub.infrastructure.storage import ArtifactStore
from lingohub.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TABLE = "Localizable"
DEFAULT_LANGUAGE = "en"

TableKey = tuple[str, str]


class StringCache:
    """Resolves (language, table, key) against the installed artifact.

    Thread safety:
        Every read and ``clear`` runs under ``lock``. The coordinator holds the
        same lock while it swaps artifacts so a reader never sees strings from
        a superseded artifact.
    """

    def __init__(
        self,
        store: ArtifactStore,
        artifact_in_use: Optional[Callable[[], bool]] = None,
        language_provider: Optional[Callable[[], Optional[str]]] = None,
        default_table: str = DEFAULT_TABLE,
        default_language: str = DEFAULT_LANGUAGE,
        cache: Optional[Cache[TableKey, Mapping[str, str]]] = None,
    ) -> None:
        """
        Args:
            store: Artifact store the tables are read from
            artifact_in_use: Predicate telling whether the installed artifact may be
                used (defaults to ``store.exists``)
            language_provider: Returns the active language when a lookup omits one
            default_table: Table used when a lookup omits one
            default_language: Last-resort language
            cache: Backing cache (a fresh MemoryCache by default)
        """
        self._store = store
        self._artifact_in_use = artifact_in_use or store.exists
        self._language_provider = language_provider
        self.default_table = default_table
        self.default_language = default_language
        self._tables: Cache[TableKey, Mapping[str, str]] = cache if cache is not None else MemoryCache()
        self.lock = threading.RLock()

    def effective_language(self, language: Optional[str] = None) -> str:
        if language:
            return language
        if self._language_provider is not None:
            provided = self._language_provider()
            if provided:
                return provided
        return self.default_language

    def get(self, key: str, table_name: Optional[str] = None, language: Optional[str] = None) -> Optional[str]:
        """Look up a key, loading the table from the artifact on first use.

        Returns:
            The translated string, or None if the artifact does not have it
        """
        language = self.effective_language(language)
        table_name = table_name or self.default_table
        entry: TableKey = (language, table_name)

        with self.lock:
            if entry in self._tables:
                table = self._tables.get(entry) or {}
                value = table.get(key)
                if value is None:
                    logger.debug(f"Table '{table_name}' lang '{language}' loaded previously, key '{key}' missing")
                return value

            logger.debug(f"Miss for table '{table_name}' lang '{language}', attempting to load")
            table = self._load(language, table_name)
            self._tables.set(entry, table)

        value = table.get(key)
        if value is None:
            logger.debug(f"Key '{key}' not found in table '{table_name}' lang '{language}'")
        return value

    def _load(self, language: str, table_name: str) -> Mapping[str, str]:
        """Read one table from the artifact; any failure yields an empty marker."""
        if not self._artifact_in_use():
            logger.debug("Update artifact not in use, caching negative marker")
            return {}

        path = self._store.table_path(language, table_name)
        if path is None:
            logger.debug(f"No table '{table_name}' for lang '{language}' in artifact")
            return {}

        try:
            table = load_table(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load or parse table {path}: {e}")
            return {}

        logger.debug(f"Loaded {len(table)} strings for table '{table_name}' lang '{language}'")
        return table

    def is_loaded(self, table_name: str, language: str) -> bool:
        """True if the (language, table) pair has an entry, including a negative marker."""
        with self.lock:
            return (language, table_name) in self._tables

    def clear(self) -> None:
        """Drop every cached table and negative marker."""
        with self.lock:
            self._tables.clear()
        logger.debug("Internal localization cache cleared")

    def __len__(self) -> int:
        with self.lock:
            return len(self._tables)
