"""Protocols for the host-side localization collaborators.

The host owns the original strings (its bundled resources) and, optionally,
a native lookup that understands artifact content this SDK does not parse
itself, such as plural rules.
"""

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

__all__ = ["LocalizationSource", "NativeLookup"]


@runtime_checkable
class LocalizationSource(Protocol):
    """A source of bundled strings the host wants to route through the SDK."""

    @property
    def identifier(self) -> str:
        """Stable identifier of the source (e.g. the resource bundle path)."""
        ...

    def localized_string(self, key: str, default: Optional[str], table: str) -> str:
        """Original lookup. Always returns something displayable, usually the key when missing."""
        ...


class NativeLookup(Protocol):
    """Lookup performed by the host's own localization machinery on an artifact directory.

    Implementations return the key itself when they find nothing, the same
    way the platform lookup does.
    """

    def __call__(self, key: str, table: str, directory: Path, default: Optional[str]) -> str:
        ...
