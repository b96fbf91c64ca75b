"""Application layer: configuration, update workflow, resolution and the SDK context."""

from lingohub.application.config import LingohubConfig
from lingohub.application.coordinator import UpdateCoordinator
from lingohub.application.resolution import ResolutionChain
from lingohub.application.sdk import LingohubSDK
from lingohub.application.throttle import UpdateThrottle

__all__ = [
    "LingohubConfig",
    "LingohubSDK",
    "ResolutionChain",
    "UpdateCoordinator",
    "UpdateThrottle",
]
