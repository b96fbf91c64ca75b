"""Shared fixtures and fakes for SDK tests."""

import json
import struct
import threading
import zipfile
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from lingohub.domain.errors import LingohubError
from lingohub.domain.events import EventBus
from lingohub.domain.types import ArtifactDescriptor, Environment
from lingohub.infrastructure.cache import StringCache
from lingohub.infrastructure.state import InMemoryPreferences
from lingohub.infrastructure.storage import ArtifactStore

DOWNLOAD_URL = "https://s3.amazon.de/update.zip"

UPDATE_200 = {
    "distributionReleaseId": "test-bundle-id",
    "name": "Test Bundle",
    "filesUrl": DOWNLOAD_URL,
    "createdAt": "2025-03-13T13:55:22.028+00:00",
}

UPDATE_401 = {"error_message": "Unauthorized access"}


def strings_file(entries: dict[str, str]) -> str:
    """Render a dict as a .strings file."""
    return "\n".join(f'"{k}" = "{v}";' for k, v in entries.items()) + "\n"


def rewrite_zip_headers(archive: Path, method: Optional[int] = None, flag_bits: int = 0) -> Path:
    """Overwrite the compression method and OR in flag bits on every member header."""
    data = bytearray(archive.read_bytes())
    # (signature, flag bits offset, compression method offset) for local and central headers
    for signature, flags_at, method_at in ((b"PK\x03\x04", 6, 8), (b"PK\x01\x02", 8, 10)):
        start = data.find(signature)
        while start != -1:
            flags = struct.unpack_from("<H", data, start + flags_at)[0]
            struct.pack_into("<H", data, start + flags_at, flags | flag_bits)
            if method is not None:
                struct.pack_into("<H", data, start + method_at, method)
            start = data.find(signature, start + 4)
    archive.write_bytes(bytes(data))
    return archive


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, content: bytes | dict | list | None = b""):
        self.status_code = status_code
        if isinstance(content, (dict, list)):
            content = json.dumps(content).encode("utf-8")
        self.content = content or b""
        self.closed = False

    def iter_content(self, chunk_size: int = 1024):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Records requests and replays queued responses (or raises queued errors)."""

    def __init__(self, *responses: FakeResponse | Exception):
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def _next(self):
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def request(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        return self._next()

    def get(self, url: str, **kwargs):
        self.calls.append({"method": "GET", "url": url, **kwargs})
        return self._next()

    def close(self) -> None:
        self.closed = True


class FakeUpdateClient:
    """UpdateClient double driven by a descriptor and an archive factory."""

    def __init__(
        self,
        descriptor: Optional[ArtifactDescriptor] = None,
        archive_factory: Optional[Callable[[], Path]] = None,
        check_error: Optional[LingohubError] = None,
        download_error: Optional[LingohubError] = None,
    ):
        self.descriptor = descriptor
        self.archive_factory = archive_factory
        self.check_error = check_error
        self.download_error = download_error
        self.check_calls: list[dict[str, Any]] = []
        self.download_calls: list[str] = []

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
        self.check_calls.append(
            {
                "api_key": api_key,
                "app_version": app_version,
                "sdk_version": sdk_version,
                "installed_artifact_id": installed_artifact_id,
                "environment": environment,
                "device_id": device_id,
                "language": language,
            }
        )
        if self.check_error is not None:
            raise self.check_error
        return self.descriptor

    def download(self, url: str) -> Path:
        self.download_calls.append(url)
        if self.download_error is not None:
            raise self.download_error
        assert self.archive_factory is not None
        return self.archive_factory()


class GatedUpdateClient(FakeUpdateClient):
    """FakeUpdateClient whose check blocks until ``release`` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.started = threading.Event()
        self.release = threading.Event()

    def check_for_update(self, *args, **kwargs) -> Optional[ArtifactDescriptor]:
        self.started.set()
        self.release.wait(5)
        return super().check_for_update(*args, **kwargs)


class EchoSource:
    """Host bundle double: knows a few strings, echoes the key otherwise."""

    def __init__(self, strings: Optional[dict[str, str]] = None, identifier: str = "main-bundle"):
        self.strings = strings or {}
        self.identifier = identifier
        self.calls: list[tuple[str, Optional[str], str]] = []

    def localized_string(self, key: str, default: Optional[str], table: str) -> str:
        self.calls.append((key, default, table))
        return self.strings.get(key, default or key)


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Build a zip archive from a {member path: content} mapping."""
    counter = {"n": 0}

    def _make(files: dict[str, str | bytes], name: Optional[str] = None) -> Path:
        counter["n"] += 1
        archive = tmp_path / (name or f"archive-{counter['n']}.zip")
        with zipfile.ZipFile(archive, "w") as zf:
            for member, content in files.items():
                zf.writestr(member, content)
        return archive

    return _make


@pytest.fixture
def english_archive(make_archive) -> Callable[[], Path]:
    """Factory for a fresh archive with English and German Localizable tables."""

    def _factory() -> Path:
        return make_archive(
            {
                "en.lproj/Localizable.strings": strings_file({"k": "value from artifact", "hello": "Hello"}),
                "de.lproj/Localizable.strings": strings_file({"hello": "Hallo"}),
                "en.lproj/T.strings": strings_file({"k": "T value"}),
            }
        )

    return _factory


@pytest.fixture
def descriptor() -> ArtifactDescriptor:
    return ArtifactDescriptor.model_validate(UPDATE_200)


@pytest.fixture
def store(tmp_path: Path) -> ArtifactStore:
    return ArtifactStore(tmp_path / "storage")


@pytest.fixture
def preferences() -> InMemoryPreferences:
    return InMemoryPreferences()


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def cache(store: ArtifactStore) -> StringCache:
    return StringCache(store, language_provider=lambda: "en")


@pytest.fixture(params=["deflate64", "encrypted"])
def undecodable_archive(request, english_archive) -> Callable[[], Path]:
    """Factory for archives that open as zip files but whose members cannot be read."""

    def _factory() -> Path:
        archive = english_archive()
        if request.param == "deflate64":
            return rewrite_zip_headers(archive, method=9)
        return rewrite_zip_headers(archive, flag_bits=0x1)

    return _factory
