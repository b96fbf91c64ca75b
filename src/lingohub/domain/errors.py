"""Error types surfaced by the Lingohub SDK.

Every failure that reaches the host is a ``LingohubError`` subclass. The
coordinator never raises them to its caller; it reports them inside an
``UpdateResult`` instead.
"""

from typing import Optional

__all__ = [
    "LingohubError",
    "ConfigurationError",
    "TransportError",
    "ApiError",
    "NoContentError",
    "StorageError",
    "DecodingError",
]


class LingohubError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description

    @property
    def recovery_suggestion(self) -> Optional[str]:
        """Hint for the host on how to recover, if there is one."""
        return None

    @property
    def error_code(self) -> int:
        """Numeric code for the error (-1 unless the server provided one)."""
        return -1


class ConfigurationError(LingohubError):
    """A required configuration value is missing.

    Raised before any network call. The host must call ``configure`` again
    with the missing value.
    """

    _DESCRIPTIONS = {
        "api_key": "The apiKey is missing.",
        "app_version": "The appVersion is missing.",
        "sdk_version": "The sdkVersion is missing.",
    }

    def __init__(self, missing_field: str) -> None:
        super().__init__(self._DESCRIPTIONS.get(missing_field, f"The {missing_field} is missing."))
        self.missing_field = missing_field

    @property
    def recovery_suggestion(self) -> Optional[str]:
        return "Use the configure method to provide the missing data"


class TransportError(LingohubError):
    """Network failure, invalid URL or unusable response.

    Retryable by the caller; the SDK does not retry on its own.
    """


class ApiError(LingohubError):
    """The check endpoint answered with an unexpected status code."""

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        super().__init__(message if message else f'API-Error with code "{status_code}" occured')
        self.status_code = status_code
        self.message = message

    @property
    def error_code(self) -> int:
        return self.status_code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return (self.status_code, self.message) == (other.status_code, other.message)

    def __hash__(self) -> int:
        return hash((self.status_code, self.message))

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"


class NoContentError(LingohubError):
    """The server has nothing new for this client (HTTP 204).

    Not a real failure: the coordinator maps it to a "no update" outcome.
    """

    def __init__(self) -> None:
        super().__init__("No content available")


class StorageError(LingohubError):
    """Filesystem failure while installing or purging an artifact."""


class DecodingError(LingohubError):
    """A response body could not be decoded.

    Attributes:
        path: Dotted path of the offending field ("" for the document root)
    """

    def __init__(self, message: str, path: str = "") -> None:
        where = f" at path '{path}'" if path else ""
        super().__init__(f"Decoding failed{where}: {message}")
        self.message = message
        self.path = path
