"""Caching implementations for the SDK.

``MemoryCache`` is the generic dictionary cache; ``StringCache`` layers the
language/table/key lookup with negative markers on top of it.
"""

from lingohub.domain.protocols import Cache
from lingohub.infrastructure.cache.memory import MemoryCache
from lingohub.infrastructure.cache.strings import DEFAULT_LANGUAGE, DEFAULT_TABLE, StringCache
from lingohub.infrastructure.cache.tables import load_table, parse_table

__all__ = [
    "Cache",
    "MemoryCache",
    "StringCache",
    "DEFAULT_LANGUAGE",
    "DEFAULT_TABLE",
    "load_table",
    "parse_table",
]
