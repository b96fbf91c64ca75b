"""The Lingohub SDK context object.

``LingohubSDK`` wires the store, cache, client, coordinator and resolution
chain together and holds the host's configuration. Hosts create one
instance, keep it for the lifetime of the application and call ``close``
when done; nothing is global.

Example:
    ```python
    sdk = LingohubSDK(storage_dir="~/.myapp/lingohub")
    sdk.configure(api_key="...", app_version="2.3.0")
    sdk.intercept(bundle)              # route bundle lookups through the SDK
    sdk.subscribe(lambda event: refresh_ui())

    result = await sdk.update()
    text = sdk.resolve("welcome.title", source=bundle)
    ```
"""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from lingohub import __version__
from lingohub.application.config import LingohubConfig
from lingohub.application.coordinator import UpdateCoordinator
from lingohub.application.resolution import ResolutionChain
from lingohub.application.throttle import UpdateThrottle
from lingohub.domain.errors import StorageError
from lingohub.domain.events import ArtifactPurged, EventBus, LocalizationUpdated
from lingohub.domain.protocols import LocalizationSource, NativeLookup, PreferencesStore, UpdateClient
from lingohub.domain.types import Environment, InstalledVersion, UpdateResult
from lingohub.infrastructure.api import BASE_URL, DEFAULT_TIMEOUT, APIClient
from lingohub.infrastructure.cache import DEFAULT_LANGUAGE, DEFAULT_TABLE, StringCache
from lingohub.infrastructure.state import LANGUAGE_KEY, FilePreferences
from lingohub.infrastructure.storage import ArtifactStore
from lingohub.logger import LogLevel, get_logger, setup_logger
from lingohub.utils import default_storage_dir, generate_device_id, system_language

logger = get_logger(__name__)

Resolver = Callable[..., str]


class LingohubSDK:
    """Update-and-resolution engine for over-the-air localization."""

    def __init__(
        self,
        storage_dir: str | Path | None = None,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        preferences: Optional[PreferencesStore] = None,
        client: Optional[UpdateClient] = None,
        native_lookup: Optional[NativeLookup] = None,
        events: Optional[EventBus] = None,
        default_table: str = DEFAULT_TABLE,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        """
        Args:
            storage_dir: Root for the installed artifact and preferences (~/.lingohub)
            base_url: Base URL of the distribution API
            timeout: Per-request transport timeout in seconds
            preferences: Preferences store (a JSON file under storage_dir by default)
            client: Update client (an APIClient by default)
            native_lookup: Host lookup used for content the cache does not parse
            events: Event bus shared with the host (a new one by default)
            default_table: Table used when a lookup names none
            default_language: Language used when neither an override nor the system provides one
        """
        self.storage_dir = Path(storage_dir).expanduser() if storage_dir else default_storage_dir()
        self.base_url = base_url
        self.timeout = timeout
        self.default_table = default_table
        self.default_language = default_language

        self.events = events or EventBus()
        self.preferences: PreferencesStore = preferences or FilePreferences(self.storage_dir / "preferences.json")
        self.store = ArtifactStore(self.storage_dir)
        self.client: UpdateClient = client or APIClient(base_url=base_url, timeout=timeout)
        self.cache = StringCache(
            self.store,
            artifact_in_use=self.is_updated_bundle_used,
            language_provider=lambda: self.language,
            default_table=default_table,
            default_language=default_language,
        )
        self.coordinator = UpdateCoordinator(self.client, self.store, self.cache, self.preferences, self.events)
        self.throttle = UpdateThrottle(self.preferences)
        self.chain = ResolutionChain(
            self.cache,
            self.store,
            artifact_in_use=self.is_updated_bundle_used,
            is_intercepted=self.is_intercepted,
            native_lookup=native_lookup,
        )

        self.config = self._blank_config()
        self._intercepted: list[str] = []

    @classmethod
    def from_config(cls, config: LingohubConfig, **kwargs: Any) -> "LingohubSDK":
        """Build an SDK from a LingohubConfig and configure it in one step."""
        sdk = cls(
            storage_dir=config.storage_dir,
            base_url=config.base_url,
            timeout=config.request_timeout,
            default_table=config.default_table,
            default_language=config.default_language,
            **kwargs,
        )
        sdk.configure(
            api_key=config.api_key or "",
            app_version=config.app_version,
            environment=config.environment,
            log_level=config.log_level,
            device_id=config.device_id,
        )
        return sdk

    def _blank_config(self) -> LingohubConfig:
        return LingohubConfig(
            sdk_version=None,
            base_url=self.base_url,
            request_timeout=self.timeout,
            storage_dir=self.storage_dir,
            default_table=self.default_table,
            default_language=self.default_language,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(
        self,
        api_key: str,
        app_version: Optional[str] = None,
        environment: Environment = Environment.PRODUCTION,
        log_level: LogLevel = LogLevel.NONE,
        device_id: Optional[str] = None,
    ) -> None:
        """Configure the SDK. Call this before any other method.

        Args:
            api_key: Your Lingohub API key
            app_version: Version of the host application
            environment: Distribution environment to request
            log_level: LogLevel.FULL enables SDK debug logging
            device_id: Stable device identifier; a random one is generated when omitted
        """
        setup_logger(log_level)
        self.config = self.config.model_copy(
            update={
                "api_key": api_key or None,
                "app_version": app_version or None,
                "sdk_version": __version__,
                "environment": Environment(environment),
                "device_id": device_id or generate_device_id(),
                "log_level": LogLevel(log_level),
            }
        )
        logger.debug(f"Environment set to: {self.config.environment.value}")

        if not app_version:
            logger.error("No app version provided; update checks will fail until one is configured")
            return

        # Artifacts installed for another app version are never consulted
        try:
            self.coordinator.invalidate_stale(app_version)
        except StorageError as e:
            # The next update retries the purge before checking
            logger.warning(f"Could not remove stale artifact: {e.description}")

    @property
    def environment(self) -> Environment:
        return self.config.environment

    @property
    def is_configured(self) -> bool:
        return self.config.missing_field() is None

    # ------------------------------------------------------------------
    # Language
    # ------------------------------------------------------------------

    @property
    def language(self) -> Optional[str]:
        """Language override if set, otherwise the system language."""
        return self.preferences.get(LANGUAGE_KEY) or system_language()

    def set_language(self, language: str) -> None:
        """Override the system language with an ISO 639-1 code such as 'en' or 'de'."""
        self.preferences.set(LANGUAGE_KEY, language)

    def set_system_language(self) -> None:
        """Go back to following the system language."""
        self.preferences.remove(LANGUAGE_KEY)

    # ------------------------------------------------------------------
    # Installed artifact
    # ------------------------------------------------------------------

    @property
    def installed_version(self) -> Optional[InstalledVersion]:
        return self.coordinator.installed_version()

    def is_updated_bundle_used(self) -> bool:
        """True if an artifact is recorded as installed and present on disk."""
        return self.installed_version is not None and self.store.exists()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def localized_string(self, key: str, table_name: Optional[str] = None) -> Optional[str]:
        """Updated string for ``key`` in the active language, or None."""
        if not self.is_updated_bundle_used():
            return None
        return self.cache.get(key, table_name, self.language)

    def intercept(self, source: LocalizationSource) -> None:
        """Route lookups of ``source`` through the SDK."""
        if source.identifier not in self._intercepted:
            self._intercepted.append(source.identifier)
            logger.debug(f"Intercepting lookups of {source.identifier}")

    def release(self, source: LocalizationSource) -> None:
        """Stop routing lookups of ``source`` through the SDK."""
        if source.identifier in self._intercepted:
            self._intercepted.remove(source.identifier)

    def is_intercepted(self, source: LocalizationSource) -> bool:
        return source.identifier in self._intercepted

    @property
    def intercepted_sources(self) -> list[str]:
        return list(self._intercepted)

    def resolve(
        self,
        key: str,
        table_name: Optional[str] = None,
        language: Optional[str] = None,
        *,
        source: LocalizationSource,
        default: Optional[str] = None,
    ) -> str:
        """Resolve a lookup through the cache, native lookup and original source."""
        return self.chain.resolve(key, table_name, language, source=source, default=default)

    def resolver_for(self, source: LocalizationSource) -> Resolver:
        """Function the host's interception hook calls instead of the original lookup.

        Registers ``source`` for interception as a side effect.
        """
        self.intercept(source)

        def resolver(
            key: str,
            table_name: Optional[str] = None,
            language: Optional[str] = None,
            default: Optional[str] = None,
        ) -> str:
            return self.chain.resolve(key, table_name, language, source=source, default=default)

        return resolver

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def update(self) -> UpdateResult:
        """Check for, download and install a newer distribution.

        Also publishes LocalizationUpdated to subscribers when content changed.
        """
        return await self.coordinator.run(self.config)

    async def update_if_due(self, now: Optional[datetime] = None) -> Optional[UpdateResult]:
        """Run ``update`` unless a check already happened within the throttle interval.

        Returns:
            The update result, or None if the check was skipped
        """
        if not self.throttle.should_check(now):
            logger.debug("Skipping update check, last check is recent")
            return None
        result = await self.update()
        if result.succeeded:
            self.throttle.record_check(now)
        return result

    def update_blocking(self) -> UpdateResult:
        """Synchronous wrapper around ``update`` for hosts without an event loop."""
        return asyncio.run(self.update())

    def subscribe(self, handler: Callable[[LocalizationUpdated], None]) -> None:
        """Get notified whenever a new distribution has been installed."""
        self.events.subscribe(LocalizationUpdated, handler)

    def unsubscribe(self, handler: Callable[[LocalizationUpdated], None]) -> None:
        self.events.unsubscribe(LocalizationUpdated, handler)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Remove the artifact and every persisted value, and forget the configuration.

        Raises:
            StorageError: An update is in progress, or the artifact could not be removed
        """

        def wipe() -> None:
            with self.cache.lock:
                self.preferences.clear()
                self.cache.clear()
                self.store.purge()

        self.coordinator.run_exclusive(wipe)
        self._intercepted.clear()
        self.config = self._blank_config()
        self.events.publish(ArtifactPurged(reason="reset"))
        logger.info("SDK reset")

    def status(self) -> dict[str, Any]:
        installed = self.installed_version
        return {
            "configured": self.is_configured,
            "environment": self.config.environment.value,
            "language": self.language,
            "sdk_version": __version__,
            "app_version": self.config.app_version,
            "installed_release": installed.artifact_id if installed else None,
            "installed_app_version": installed.app_version if installed else None,
            "artifact_present": self.store.exists(),
            "last_check": self.throttle.last_check(),
        }

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "LingohubSDK":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
