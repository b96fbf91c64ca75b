"""HTTP client for the Lingohub distribution service.

The client performs exactly one network call per operation and never
retries; every failure is translated into a ``LingohubError`` subclass and
handed back to the caller, which owns the retry policy.
"""

import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Optional

import requests

from lingohub.domain.errors import ApiError, NoContentError, StorageError, TransportError
from lingohub.domain.types import ArtifactDescriptor, Environment
from lingohub.infrastructure.api.endpoints import Endpoint, HTTPMethod, Response, check_endpoint
from lingohub.logger import get_logger
from lingohub.utils import file_size

logger = get_logger(__name__)

BASE_URL = "https://cdn.lingohub.com/"
DEFAULT_TIMEOUT = 30.0
_CHUNK_SIZE = 64 * 1024
# Longest response body preview written to the debug log
_PREVIEW_LENGTH = 1000


class APIClient:
    """Blocking client for the distribution check and archive download.

    Example:
        >>> client = APIClient()
        >>> descriptor = client.check_for_update(
        ...     api_key="key", app_version="1.0.0", sdk_version="1.0.0",
        ...     installed_artifact_id=None, environment=Environment.PRODUCTION,
        ...     device_id="device-1",
        ... )
        >>> if descriptor and descriptor.files_url:
        ...     archive = client.download(descriptor.files_url)
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        download_dir: Optional[Path] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL that relative endpoint paths are joined to
            session: Optional pre-built session (tests inject fakes here)
            timeout: Per-request timeout handed to the transport
            download_dir: Where downloaded archives are written (system temp dir by default)
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.download_dir = Path(download_dir) if download_dir else Path(tempfile.gettempdir())
        self._session = session or requests.Session()
        self._owns_session = session is None

    def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session:
            self._session.close()

    # ------------------------------------------------------------------
    # Generic request handling
    # ------------------------------------------------------------------

    def _url_for(self, path: str) -> str:
        if path.startswith("https://"):
            logger.debug(f"Using absolute path: {path}")
            return path
        url = self.base_url + path.lstrip("/")
        logger.debug(f"Using relative path: {url}")
        return url

    def request(self, endpoint: Endpoint[Response]) -> Response:
        """Send an endpoint request and decode the response.

        Returns:
            The decoded 200 body

        Raises:
            NoContentError: The server answered 204 or sent an empty body
            ApiError: Any other status code
            TransportError: Network failure or invalid URL
            DecodingError: The 200 body could not be decoded
        """
        url = self._url_for(endpoint.path)
        kwargs: dict[str, Any] = {"headers": dict(endpoint.headers), "timeout": self.timeout}
        if endpoint.parameters:
            if endpoint.method is HTTPMethod.GET:
                kwargs["params"] = {k: str(v) for k, v in endpoint.parameters.items() if str(v) != ""}
            else:
                kwargs["json"] = endpoint.parameters

        logger.debug(f"Sending {endpoint.method.value} request to {url}")
        try:
            response = self._session.request(endpoint.method.value, url, **kwargs)
        except requests.RequestException as e:
            logger.warning(f"Network error for {url}: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

        status = response.status_code
        body = response.content or b""
        logger.debug(f"Response status code: {status}, size: {len(body)} bytes")
        if body:
            logger.debug(f"Response data: {body[:_PREVIEW_LENGTH].decode('utf-8', errors='replace')}")

        if status == 200:
            if not body.strip():
                logger.debug("Successful response without a body, treating as no content")
                raise NoContentError()
            decoded = endpoint.decode(body)
            logger.debug("Successfully decoded response")
            return decoded
        if status == 204:
            logger.debug("No content response (204)")
            raise NoContentError()

        message = _error_message(body, "error_message")
        logger.warning(f"Error response ({status}): {message or 'no message'}")
        raise ApiError(status, message)

    # ------------------------------------------------------------------
    # Distribution API
    # ------------------------------------------------------------------

    def check_for_update(
        self,
        api_key: str,
        app_version: str,
        sdk_version: str,
        installed_artifact_id: Optional[str],
        environment: Environment,
        device_id: Optional[str],
        language: Optional[str] = None,
    ) -> Optional[ArtifactDescriptor]:
        """Ask the service whether a newer distribution exists.

        Returns:
            The descriptor of the newer distribution, or None if there is none
        """
        endpoint = check_endpoint(
            api_key=api_key,
            app_version=app_version,
            sdk_version=sdk_version,
            installed_artifact_id=installed_artifact_id,
            environment=environment,
            device_id=device_id,
            language=language,
        )
        logger.debug(f"API request parameters: {endpoint.parameters}")

        try:
            descriptor = self.request(endpoint)
        except NoContentError:
            logger.info("No content available for update")
            return None

        logger.info(
            f"Distribution available: id={descriptor.id}, name={descriptor.name}, "
            f"filesUrl={descriptor.files_url}"
        )
        return descriptor

    def download(self, url: str) -> Path:
        """Download an archive into a file owned by the caller.

        The payload is streamed straight into a uniquely named file under
        ``download_dir``; the caller is responsible for deleting it.

        Returns:
            Path of the downloaded archive

        Raises:
            TransportError: Network failure or invalid URL
            ApiError: Non-200 status code
            StorageError: The local copy could not be written
        """
        logger.debug(f"Starting download from URL: {url}")
        try:
            response = self._session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Download error for {url}: {e}")
            raise TransportError(f"Download from {url} failed: {e}") from e

        try:
            status = response.status_code
            logger.debug(f"Download completed with status code: {status}")
            if status != 200:
                body = response.content or b""
                message = _error_message(body, "message")
                logger.warning(f"Download failed with status code: {status}, message: {message or 'None'}")
                raise ApiError(status, message)

            destination = self.download_dir / f"{uuid.uuid4().hex}.zip"
            self._write_payload(response, destination)
        finally:
            response.close()

        if not destination.exists():
            raise StorageError(f"Downloaded file does not exist at {destination}")

        size = file_size(destination)
        logger.debug(f"Destination file size: {size} bytes")
        if size == 0:
            logger.warning(f"Downloaded file has zero size: {destination}")
        return destination

    def _write_payload(self, response: requests.Response, destination: Path) -> None:
        try:
            self.download_dir.mkdir(parents=True, exist_ok=True)
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except requests.RequestException as e:
            _discard(destination)
            raise TransportError(f"Download interrupted: {e}") from e
        except OSError as e:
            _discard(destination)
            logger.error(f"Could not write downloaded file {destination}: {e}")
            raise StorageError(f"Cannot write downloaded file: {e}") from e


def _error_message(body: bytes, field: str) -> Optional[str]:
    """Pull a server-provided message out of a JSON error body, if any."""
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if isinstance(payload, dict) and isinstance(payload.get(field), str):
        return payload[field]
    return None


def _discard(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.debug(f"Could not remove partial download {path}: {e}")
