"""Preferences persistence infrastructure.

Concrete implementations of the PreferencesStore protocol plus the keys the
SDK stores under.
"""

from lingohub.infrastructure.state.file import FilePreferences
from lingohub.infrastructure.state.memory import InMemoryPreferences

# Key names match the ones used by the other Lingohub SDKs
DISTRIBUTION_VERSION_KEY = "LingohubDistributionVersion"
APP_VERSION_KEY = "LingohubAppVersion"
LAST_CHECK_KEY = "LingohubLastCheck"
LANGUAGE_KEY = "LingohubLanguage"

__all__ = [
    "FilePreferences",
    "InMemoryPreferences",
    "DISTRIBUTION_VERSION_KEY",
    "APP_VERSION_KEY",
    "LAST_CHECK_KEY",
    "LANGUAGE_KEY",
]
