"""Types describing remote distributions and the locally installed artifact."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lingohub.logger import get_logger

logger = get_logger(__name__)


class Environment(str, Enum):
    """Distribution environment requested from the server."""

    TEST = "TEST"
    STAGING = "STAGING"
    DEVELOPMENT = "DEVELOPMENT"
    PRODUCTION = "PRODUCTION"


class ArtifactDescriptor(BaseModel):
    """Result of a successful distribution check.

    Only lives for the duration of one check/download cycle. A descriptor
    without ``files_url`` means the server has nothing newer to offer.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="distributionReleaseId", description="Distribution release identifier")
    name: str = Field(..., description="Display name of the release")
    files_url: Optional[str] = Field(None, alias="filesUrl", description="Archive download URL")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
        description="Creation time of the release",
    )

    @field_validator("files_url", mode="before")
    @classmethod
    def _blank_url_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, value: Any) -> datetime:
        # e.g. "2025-03-13T13:55:22.028+00:00"; unparseable values fall back to now
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                logger.debug(f"Could not parse date string: {value}")
        else:
            logger.debug(f"Could not decode createdAt field as string: {value!r}")
        return datetime.now(timezone.utc)

    @property
    def has_download(self) -> bool:
        return self.files_url is not None


class InstalledVersion(BaseModel):
    """Persisted record of the artifact currently on disk."""

    model_config = ConfigDict(frozen=True)

    artifact_id: str = Field(..., min_length=1)
    app_version: str = Field(..., min_length=1)


class LookupRequest(BaseModel):
    """A single string lookup coming from the host.

    ``table_name`` and ``language`` are resolved against SDK defaults by the
    resolution chain when omitted.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    table_name: Optional[str] = None
    language: Optional[str] = None
    default: Optional[str] = None
