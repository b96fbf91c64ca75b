"""Update client protocol."""

from pathlib import Path
from typing import Optional, Protocol

from lingohub.domain.types import ArtifactDescriptor, Environment

__all__ = ["UpdateClient"]


class UpdateClient(Protocol):
    """Talks to the distribution service.

    Both calls block; the coordinator runs them in a worker thread.
    """

    def check_for_update(
        self,
        api_key: str,
        app_version: str,
        sdk_version: str,
        installed_artifact_id: Optional[str],
        environment: Environment,
        device_id: Optional[str],
        language: Optional[str] = None,
    ) -> Optional[ArtifactDescriptor]:
        """Ask for a newer distribution.

        Returns:
            The descriptor, or None when the server has nothing new

        Raises:
            TransportError, ApiError, DecodingError
        """
        ...

    def download(self, url: str) -> Path:
        """Download an archive to a caller-owned temporary file.

        Raises:
            TransportError, ApiError, StorageError
        """
        ...
