"""Event system for notifying the host about localization changes.

Example:
    ```python
    from lingohub.domain.events import EventBus, LocalizationUpdated

    bus = EventBus()
    bus.subscribe(LocalizationUpdated, lambda event: print(event.artifact_id))
    ```
"""

from .bus import EventBus, EventHandler
from .types import (
    ArtifactPurged,
    Event,
    LocalizationUpdated,
    UpdateStateChanged,
)

__all__ = [
    "EventBus",
    "EventHandler",
    "Event",
    "ArtifactPurged",
    "LocalizationUpdated",
    "UpdateStateChanged",
]
