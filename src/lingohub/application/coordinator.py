"""Update workflow: check, download, install, invalidate, notify.

State machine::

    IDLE -> CHECKING -> NO_UPDATE_FOUND
                     -> DOWNLOADING -> INSTALLING -> DONE
    CHECKING / DOWNLOADING / INSTALLING -> FAILED

Only one cycle runs at a time, across threads and event loops. Network
and filesystem work happens in worker threads; the steps that change what
readers can see (swapping the artifact, writing the installed version,
clearing the cache) run together under the string cache lock.
"""

import asyncio
import concurrent.futures
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from lingohub.application.config import LingohubConfig
from lingohub.domain.errors import ConfigurationError, LingohubError, StorageError
from lingohub.domain.events import ArtifactPurged, EventBus, LocalizationUpdated, UpdateStateChanged
from lingohub.domain.protocols import PreferencesStore, UpdateClient
from lingohub.domain.types import (
    TRANSITIONS,
    ArtifactDescriptor,
    InstalledVersion,
    UpdateResult,
    UpdateState,
)
from lingohub.infrastructure.cache import StringCache
from lingohub.infrastructure.state import APP_VERSION_KEY, DISTRIBUTION_VERSION_KEY
from lingohub.infrastructure.storage import ArtifactStore
from lingohub.logger import get_logger

logger = get_logger(__name__)


class UpdateCoordinator:
    """Drives one update cycle at a time and reports it as an UpdateResult."""

    def __init__(
        self,
        client: UpdateClient,
        store: ArtifactStore,
        cache: StringCache,
        preferences: PreferencesStore,
        events: EventBus,
    ) -> None:
        self._client = client
        self._store = store
        self._cache = cache
        self._preferences = preferences
        self._events = events
        self._state = UpdateState.IDLE
        # Result of the running cycle, shared with joiners on any thread or loop
        self._inflight: Optional[concurrent.futures.Future[UpdateResult]] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> UpdateState:
        return self._state

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._inflight is not None

    def run_exclusive(self, action: Callable[[], None]) -> None:
        """Run ``action`` while no update cycle is running, blocking new ones until it returns.

        Raises:
            StorageError: An update cycle is in flight
        """
        with self._lock:
            if self._inflight is not None:
                raise StorageError("Cannot change installed data while an update is in progress")
            action()

    # ------------------------------------------------------------------
    # Installed version bookkeeping
    # ------------------------------------------------------------------

    def installed_version(self) -> Optional[InstalledVersion]:
        artifact_id = self._preferences.get(DISTRIBUTION_VERSION_KEY)
        app_version = self._preferences.get(APP_VERSION_KEY)
        if not artifact_id or not app_version:
            return None
        return InstalledVersion(artifact_id=artifact_id, app_version=app_version)

    def discard_installed(self, reason: str) -> None:
        """Forget the installed version and delete the artifact.

        The version keys go first so that, even if deleting the files fails,
        nothing treats the leftover directory as usable.

        Raises:
            StorageError: The artifact folder could not be removed
        """
        logger.info(f"Discarding installed artifact: {reason}")
        with self._cache.lock:
            try:
                self._preferences.remove(DISTRIBUTION_VERSION_KEY)
                self._preferences.remove(APP_VERSION_KEY)
            except OSError as e:
                raise StorageError(f"Cannot clear installed version: {e}") from e
            finally:
                self._cache.clear()
            self._store.purge()
        self._events.publish(ArtifactPurged(reason=reason))

    def invalidate_stale(self, app_version: str) -> bool:
        """Purge the artifact if it was installed for a different app version.

        Returns:
            True if something was purged
        """
        installed_app_version = self._preferences.get(APP_VERSION_KEY)
        if installed_app_version is None or installed_app_version == app_version:
            return False
        self.discard_installed(
            f"app version changed from {installed_app_version} to {app_version}"
        )
        return True

    # ------------------------------------------------------------------
    # Update cycle
    # ------------------------------------------------------------------

    async def run(self, config: LingohubConfig) -> UpdateResult:
        """Run one update cycle, or join the one already in flight.

        Callers on other threads or event loops join the same cycle. Never
        raises; failures come back as ``UpdateResult.failed``.
        """
        with self._lock:
            shared = self._inflight
            owner = shared is None
            if owner:
                shared = self._inflight = concurrent.futures.Future()

        if not owner:
            logger.debug("Update already in flight, joining it")
            return await asyncio.shield(asyncio.wrap_future(shared))

        task = asyncio.ensure_future(self._run(config))
        task.add_done_callback(lambda done: self._settle(shared, done))
        return await asyncio.shield(task)

    def _settle(
        self, shared: "concurrent.futures.Future[UpdateResult]", task: "asyncio.Task[UpdateResult]"
    ) -> None:
        if task.cancelled():
            result = UpdateResult.failed(LingohubError("The update was cancelled"))
        elif task.exception() is not None:
            result = UpdateResult.failed(LingohubError(f"Unexpected error during update: {task.exception()}"))
        else:
            result = task.result()
        with self._lock:
            if self._inflight is shared:
                self._inflight = None
        shared.set_result(result)

    async def _run(self, config: LingohubConfig) -> UpdateResult:
        if self._state.is_terminal:
            self._transition(UpdateState.IDLE)
        elif self._state is not UpdateState.IDLE:
            logger.warning(f"Previous update stopped in {self._state.name}, starting over")
            self._set_state(UpdateState.IDLE)

        try:
            return await self._cycle(config)
        except Exception as e:
            logger.exception(f"Unexpected error during update: {e}")
            return self._fail(LingohubError(f"Unexpected error during update: {e}"))

    async def _cycle(self, config: LingohubConfig) -> UpdateResult:
        missing = config.missing_field()
        if missing is not None:
            logger.error(f"Cannot check for updates: {missing} is missing")
            return self._fail(ConfigurationError(missing))

        try:
            await asyncio.to_thread(self.invalidate_stale, config.app_version)
        except StorageError as e:
            return self._fail(e)

        self._transition(UpdateState.CHECKING)
        installed = self.installed_version()
        logger.debug(
            f"Checking for update: app={config.app_version}, sdk={config.sdk_version}, "
            f"release={installed.artifact_id if installed else None}, env={config.environment.value}"
        )
        try:
            descriptor = await asyncio.to_thread(
                self._client.check_for_update,
                config.api_key,
                config.app_version,
                config.sdk_version,
                installed.artifact_id if installed else None,
                config.environment,
                config.device_id,
                self._cache.effective_language(),
            )
        except LingohubError as e:
            return self._fail(e)

        if descriptor is None or not descriptor.has_download:
            logger.info("No newer distribution available")
            self._transition(UpdateState.NO_UPDATE_FOUND)
            return UpdateResult.no_update()

        self._transition(UpdateState.DOWNLOADING)
        try:
            archive = await asyncio.to_thread(self._client.download, descriptor.files_url)
        except LingohubError as e:
            return self._fail(e)

        self._transition(UpdateState.INSTALLING)
        try:
            await self._install(archive, descriptor, config.app_version)
        except LingohubError as e:
            return self._fail(e)

        self._transition(UpdateState.DONE)
        self._events.publish(LocalizationUpdated(artifact_id=descriptor.id, app_version=config.app_version))
        return UpdateResult.installed(descriptor.id)

    async def _install(self, archive: Path, descriptor: ArtifactDescriptor, app_version: str) -> None:
        try:
            staging = await asyncio.to_thread(self._store.stage, archive)
        finally:
            _remove_file(archive)
        await asyncio.to_thread(self._commit, staging, descriptor.id, app_version)

    def _commit(self, staging: Path, artifact_id: str, app_version: str) -> None:
        """Make a staged artifact current, record it and drop stale strings."""
        with self._cache.lock:
            self._store.promote(staging)
            try:
                self._preferences.set(DISTRIBUTION_VERSION_KEY, artifact_id)
                self._preferences.set(APP_VERSION_KEY, app_version)
            except OSError as e:
                # A half-written record must not mark the artifact as usable
                self._forget_installed_version()
                raise StorageError(f"Cannot record installed version: {e}") from e
            finally:
                self._cache.clear()
        logger.info(f"Installed distribution {artifact_id} for app version {app_version}")

    def _forget_installed_version(self) -> None:
        for key in (DISTRIBUTION_VERSION_KEY, APP_VERSION_KEY):
            try:
                self._preferences.remove(key)
            except OSError as e:
                logger.error(f"Could not remove preference {key}: {e}")

    def _fail(self, error: LingohubError) -> UpdateResult:
        logger.warning(f"Update failed: {type(error).__name__}: {error.description}")
        if UpdateState.FAILED in TRANSITIONS[self._state]:
            self._transition(UpdateState.FAILED)
        else:
            self._set_state(UpdateState.FAILED)
        return UpdateResult.failed(error)

    def _transition(self, new_state: UpdateState) -> None:
        if new_state not in TRANSITIONS[self._state]:
            raise RuntimeError(f"Illegal update state transition {self._state.name} -> {new_state.name}")
        self._set_state(new_state)

    def _set_state(self, new_state: UpdateState) -> None:
        previous = self._state
        self._state = new_state
        logger.debug(f"Update state {previous.name} -> {new_state.name}")
        self._events.publish(UpdateStateChanged(previous=previous, current=new_state))


def _remove_file(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove downloaded archive {path}: {e}")
