"""Domain protocols - interfaces for all implementations.

Protocols describe the seams between the SDK and its collaborators so that
tests can substitute fakes and hosts can plug in their own machinery.
"""

from lingohub.domain.protocols.cache import Cache, K, V
from lingohub.domain.protocols.client import UpdateClient
from lingohub.domain.protocols.localization import LocalizationSource, NativeLookup
from lingohub.domain.protocols.state import PreferencesStore

__all__ = [
    "Cache",
    "K",
    "V",
    "UpdateClient",
    "LocalizationSource",
    "NativeLookup",
    "PreferencesStore",
]
