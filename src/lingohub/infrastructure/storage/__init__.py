"""Local storage of the installed distribution artifact."""

from lingohub.infrastructure.storage.archive import extract_archive
from lingohub.infrastructure.storage.artifact_store import BUNDLE_NAME, FOLDER_NAME, ArtifactStore

__all__ = [
    "ArtifactStore",
    "BUNDLE_NAME",
    "FOLDER_NAME",
    "extract_archive",
]
