"""Domain types for distributions, lookups and the update workflow."""

from lingohub.domain.types.distribution import (
    ArtifactDescriptor,
    Environment,
    InstalledVersion,
    LookupRequest,
)
from lingohub.domain.types.update import (
    TRANSITIONS,
    UpdateOutcome,
    UpdateResult,
    UpdateState,
)

__all__ = [
    "ArtifactDescriptor",
    "Environment",
    "InstalledVersion",
    "LookupRequest",
    "TRANSITIONS",
    "UpdateOutcome",
    "UpdateResult",
    "UpdateState",
]
