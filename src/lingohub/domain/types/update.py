"""Types describing the update workflow and its outcome."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from lingohub.domain.errors import LingohubError


class UpdateState(Enum):
    """States of the update coordinator."""

    IDLE = "idle"
    CHECKING = "checking"
    NO_UPDATE_FOUND = "no_update_found"
    DOWNLOADING = "downloading"
    INSTALLING = "installing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UpdateState.NO_UPDATE_FOUND, UpdateState.DONE, UpdateState.FAILED)


# Allowed transitions; FAILED is reachable from every working state
TRANSITIONS: dict[UpdateState, frozenset[UpdateState]] = {
    UpdateState.IDLE: frozenset({UpdateState.CHECKING, UpdateState.FAILED}),
    UpdateState.CHECKING: frozenset(
        {UpdateState.NO_UPDATE_FOUND, UpdateState.DOWNLOADING, UpdateState.FAILED}
    ),
    UpdateState.DOWNLOADING: frozenset({UpdateState.INSTALLING, UpdateState.FAILED}),
    UpdateState.INSTALLING: frozenset({UpdateState.DONE, UpdateState.FAILED}),
    UpdateState.NO_UPDATE_FOUND: frozenset({UpdateState.IDLE}),
    UpdateState.DONE: frozenset({UpdateState.IDLE}),
    UpdateState.FAILED: frozenset({UpdateState.IDLE}),
}


class UpdateOutcome(Enum):
    """Overall result of one update cycle."""

    NO_UPDATE = "no_update"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass(frozen=True)
class UpdateResult:
    """Single result value returned to the caller of an update cycle."""

    outcome: UpdateOutcome
    artifact_id: Optional[str] = None
    error: Optional[LingohubError] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is not UpdateOutcome.FAILED

    @property
    def updated(self) -> bool:
        return self.outcome is UpdateOutcome.UPDATED

    @classmethod
    def no_update(cls) -> "UpdateResult":
        return cls(UpdateOutcome.NO_UPDATE)

    @classmethod
    def installed(cls, artifact_id: str) -> "UpdateResult":
        return cls(UpdateOutcome.UPDATED, artifact_id=artifact_id)

    @classmethod
    def failed(cls, error: LingohubError) -> "UpdateResult":
        return cls(UpdateOutcome.FAILED, error=error)
