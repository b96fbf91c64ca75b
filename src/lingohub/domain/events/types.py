"""Event types published by the SDK."""

from dataclasses import dataclass, field
from datetime import datetime

from lingohub.domain.types import UpdateState
from lingohub.utils import utc_now


@dataclass(frozen=True)
class Event:
    """Base class for all SDK events."""


@dataclass(frozen=True)
class LocalizationUpdated(Event):
    """A new artifact was installed; previously resolved strings may be stale.

    Hosts listen for this to re-run lookups they have already displayed.
    """

    artifact_id: str
    app_version: str
    installed_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class ArtifactPurged(Event):
    """The installed artifact was removed (app version changed or reset)."""

    reason: str


@dataclass(frozen=True)
class UpdateStateChanged(Event):
    """The update coordinator moved from one state to another."""

    previous: UpdateState
    current: UpdateState
