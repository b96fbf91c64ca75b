"""Resolution chain consulted by the host's string lookup hook.

For a lookup coming from an intercepted source the chain tries, in order:

1. the string cache backed by the installed artifact,
2. the host's native lookup run against the artifact's language directory
   (content the cache does not parse, such as plural rules),
3. the source's own original lookup.

The last step is always available, so ``resolve`` always returns a string.
"""

from typing import Callable, Optional

from lingohub.domain.protocols import LocalizationSource, NativeLookup
from lingohub.domain.types import LookupRequest
from lingohub.infrastructure.cache import StringCache
from lingohub.infrastructure.storage import ArtifactStore
from lingohub.logger import get_logger

logger = get_logger(__name__)


class ResolutionChain:
    """Ordered fallback lookup over cache, native lookup and original source."""

    def __init__(
        self,
        cache: StringCache,
        store: ArtifactStore,
        artifact_in_use: Callable[[], bool],
        is_intercepted: Callable[[LocalizationSource], bool],
        native_lookup: Optional[NativeLookup] = None,
    ) -> None:
        self._cache = cache
        self._store = store
        self._artifact_in_use = artifact_in_use
        self._is_intercepted = is_intercepted
        self.native_lookup = native_lookup

    def resolve(
        self,
        key: str,
        table_name: Optional[str] = None,
        language: Optional[str] = None,
        *,
        source: LocalizationSource,
        default: Optional[str] = None,
    ) -> str:
        return self.resolve_request(
            LookupRequest(key=key, table_name=table_name, language=language, default=default),
            source,
        )

    def resolve_request(self, request: LookupRequest, source: LocalizationSource) -> str:
        table_name = request.table_name or self._cache.default_table
        language = self._cache.effective_language(request.language)

        if self._is_intercepted(source) and self._artifact_in_use():
            cached = self._cache.get(request.key, table_name, language)
            if cached is not None:
                logger.debug(f"Found key '{request.key}' in cache")
                return cached

            native = self._native(request, table_name, language)
            if native is not None:
                return native
        else:
            logger.debug(f"Source {source.identifier} not routed through the update artifact")

        return self._original(request, table_name, source)

    def _native(self, request: LookupRequest, table_name: str, language: str) -> Optional[str]:
        if self.native_lookup is None:
            return None

        directory = self._store.language_directory(language) or self._store.installed_directory()
        try:
            result = self.native_lookup(request.key, table_name, directory, request.default)
        except Exception as e:
            logger.opt(exception=True).warning(f"Native lookup failed for key '{request.key}': {e}")
            return None

        # Platform lookups echo the key back when they find nothing
        if result != request.key or request.default:
            logger.debug(f"Found '{request.key}' via native lookup in {directory}")
            return result
        logger.debug(f"Key '{request.key}' not found by native lookup (result matches key)")
        return None

    def _original(self, request: LookupRequest, table_name: str, source: LocalizationSource) -> str:
        try:
            return source.localized_string(request.key, request.default, table_name)
        except Exception as e:
            logger.opt(exception=True).error(f"Original lookup failed for key '{request.key}': {e}")
            return request.default or request.key
