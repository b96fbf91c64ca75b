"""Filesystem representation of the currently installed distribution.

Layout under the storage root::

    <root>/Lingohub/update.bundle/        installed artifact
    <root>/Lingohub/.staging-<id>/        extraction in progress
    <root>/Lingohub/.previous-<id>/       old artifact during a swap

Readers only ever look at ``update.bundle``. A new archive is extracted
into a staging directory first and renamed into place, so the install
directory is either the complete old artifact, the complete new one, or
absent.
"""

import os
import shutil
import uuid
from pathlib import Path
from typing import Optional

from lingohub.domain.errors import StorageError
from lingohub.infrastructure.storage.archive import extract_archive
from lingohub.logger import get_logger

logger = get_logger(__name__)

FOLDER_NAME = "Lingohub"
BUNDLE_NAME = "update.bundle"
_STAGING_PREFIX = ".staging-"
_PREVIOUS_PREFIX = ".previous-"


class ArtifactStore:
    """Owns the single install directory of the downloaded artifact."""

    def __init__(self, root: str | Path, folder_name: str = FOLDER_NAME, bundle_name: str = BUNDLE_NAME):
        """
        Args:
            root: Storage root (e.g. the SDK storage directory)
            folder_name: Folder under ``root`` that holds everything the store writes
            bundle_name: Name of the install directory inside that folder
        """
        self.folder = Path(root).expanduser() / folder_name
        self._install_dir = self.folder / bundle_name

    def installed_directory(self) -> Path:
        """Path of the install directory, whether or not it exists."""
        return self._install_dir

    def exists(self) -> bool:
        """True if a complete artifact is installed (directory present and non-empty)."""
        try:
            return self._install_dir.is_dir() and any(self._install_dir.iterdir())
        except OSError:
            return False

    def install(self, archive: Path) -> None:
        """Extract ``archive`` and make it the installed artifact.

        Raises:
            StorageError: The store is left exactly as it was before the call
        """
        self.promote(self.stage(archive))

    def stage(self, archive: Path) -> Path:
        """Extract an archive next to the install directory without touching it.

        Returns:
            The staging directory, ready for ``promote``
        """
        self._sweep_leftovers()
        staging = self.folder / f"{_STAGING_PREFIX}{uuid.uuid4().hex}"
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
            written = extract_archive(Path(archive), staging)
            if written == 0:
                raise StorageError(f"Archive {archive} contains no files")
        except OSError as e:
            self._remove_tree(staging)
            raise StorageError(f"Cannot prepare staging directory: {e}") from e
        except StorageError:
            self._remove_tree(staging)
            raise

        logger.debug(f"Staged artifact at {staging}")
        return staging

    def promote(self, staging: Path) -> None:
        """Swap a staged directory into the install location.

        The previous artifact is moved aside first and restored if the swap
        fails, then deleted.
        """
        previous: Optional[Path] = None
        try:
            if self._install_dir.exists():
                previous = self.folder / f"{_PREVIOUS_PREFIX}{uuid.uuid4().hex}"
                os.replace(self._install_dir, previous)
            os.replace(staging, self._install_dir)
        except OSError as e:
            logger.error(f"Could not move staged artifact into place: {e}")
            if previous is not None and not self._install_dir.exists():
                try:
                    os.replace(previous, self._install_dir)
                    previous = None
                except OSError as restore_error:
                    logger.error(f"Could not restore previous artifact: {restore_error}")
            self._remove_tree(staging)
            if previous is not None:
                self._remove_tree(previous)
            raise StorageError(f"Cannot install artifact: {e}") from e

        if previous is not None:
            self._remove_tree(previous)
        logger.info(f"Installed artifact at {self._install_dir}")

    def purge(self) -> None:
        """Remove everything the store has written. Idempotent."""
        if not self.folder.exists():
            logger.debug(f"Purge called on absent folder {self.folder} (no-op)")
            return
        try:
            shutil.rmtree(self.folder)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to purge {self.folder}: {e}")
            raise StorageError(f"Cannot purge artifact folder: {e}") from e
        logger.info(f"Purged artifact folder {self.folder}")

    def language_directory(self, language: str) -> Optional[Path]:
        """Directory holding the tables of ``language`` in the installed artifact."""
        for name in (f"{language}.lproj", language):
            candidate = self._install_dir / name
            if candidate.is_dir():
                return candidate
        return None

    def table_path(self, language: str, table_name: str) -> Optional[Path]:
        """Path of a table file for ``language``, or None if the artifact has none."""
        language_dir = self.language_directory(language)
        if language_dir is None:
            return None
        for name in (f"{table_name}.strings", f"{table_name}.json", table_name):
            candidate = language_dir / name
            if candidate.is_file():
                return candidate
        return None

    def _sweep_leftovers(self) -> None:
        """Delete staging/previous directories left behind by an interrupted process."""
        if not self.folder.is_dir():
            return
        for entry in self.folder.iterdir():
            if entry.name.startswith((_STAGING_PREFIX, _PREVIOUS_PREFIX)):
                logger.debug(f"Removing leftover directory {entry}")
                self._remove_tree(entry)

    @staticmethod
    def _remove_tree(path: Path) -> None:
        if path.exists():
            shutil.rmtree(path, ignore_errors=True)
