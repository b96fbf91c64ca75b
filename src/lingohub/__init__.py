"""Lingohub SDK: update your localized strings without an application update."""

__version__ = "1.0.0"

from lingohub.application import LingohubConfig, LingohubSDK  # noqa: E402
from lingohub.domain.errors import (  # noqa: E402
    ApiError,
    ConfigurationError,
    DecodingError,
    LingohubError,
    NoContentError,
    StorageError,
    TransportError,
)
from lingohub.domain.events import ArtifactPurged, LocalizationUpdated, UpdateStateChanged  # noqa: E402
from lingohub.domain.types import Environment, UpdateOutcome, UpdateResult, UpdateState  # noqa: E402
from lingohub.logger import LogLevel  # noqa: E402

__all__ = [
    "__version__",
    "LingohubSDK",
    "LingohubConfig",
    "Environment",
    "LogLevel",
    "UpdateOutcome",
    "UpdateResult",
    "UpdateState",
    "LocalizationUpdated",
    "ArtifactPurged",
    "UpdateStateChanged",
    "LingohubError",
    "ConfigurationError",
    "TransportError",
    "ApiError",
    "NoContentError",
    "StorageError",
    "DecodingError",
]
