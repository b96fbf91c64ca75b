"""Tests for the command line interface."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from lingohub.application import LingohubSDK
from lingohub.domain.errors import ApiError
from lingohub.infrastructure.state import InMemoryPreferences
from lingohub.main import cli

from tests.conftest import FakeUpdateClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the host environment and any .env file out of CLI tests."""
    for name in ("LINGOHUB_API_KEY", "LINGOHUB_APP_VERSION", "LINGOHUB_STORAGE_DIR", "LINGOHUB_ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("lingohub.application.config.load_dotenv", lambda: None)


@pytest.fixture
def fake_sdk(tmp_path):
    """Route _build_sdk to an SDK with a fake client and in-memory preferences."""

    def _install(client: FakeUpdateClient, api_key: str = "key-1"):
        prefs = InMemoryPreferences({"LingohubLanguage": "en"})
        sdk = LingohubSDK(storage_dir=tmp_path / "sdk", preferences=prefs, client=client)

        def build(app_version, storage_dir, debug):
            sdk.configure(api_key=api_key, app_version=app_version or "1.0.0")
            return sdk

        return patch("lingohub.main._build_sdk", side_effect=build), sdk

    return _install


class TestUpdateCommand:
    """Test the update command."""

    def test_installs_update(self, fake_sdk, descriptor, english_archive):
        """Test a successful update reports the installed release."""
        patcher, sdk = fake_sdk(FakeUpdateClient(descriptor=descriptor, archive_factory=english_archive))

        with patcher:
            result = runner.invoke(cli, ["update", "--force"])

        assert result.exit_code == 0
        assert "test-bundle-id" in result.stdout
        assert sdk.store.exists()

    def test_no_update(self, fake_sdk):
        """Test a 204 is reported as no update."""
        patcher, _ = fake_sdk(FakeUpdateClient(descriptor=None))

        with patcher:
            result = runner.invoke(cli, ["update", "--force"])

        assert result.exit_code == 0
        assert "No update available" in result.stdout

    def test_failure_exits_non_zero(self, fake_sdk):
        """Test a failed update exits with status 1 and prints the error."""
        patcher, _ = fake_sdk(FakeUpdateClient(check_error=ApiError(401, "Unauthorized access")))

        with patcher:
            result = runner.invoke(cli, ["update", "--force"])

        assert result.exit_code == 1
        assert "Unauthorized access" in result.stdout

    def test_configuration_error_shows_recovery(self, fake_sdk):
        """Test a missing API key prints the recovery suggestion."""
        patcher, _ = fake_sdk(FakeUpdateClient(), api_key="")

        with patcher:
            result = runner.invoke(cli, ["update", "--force"])

        assert result.exit_code == 1
        assert "The apiKey is missing." in result.stdout
        assert "configure" in result.stdout

    def test_throttled_without_force(self, fake_sdk):
        """Test a second run within a day is skipped."""
        client = FakeUpdateClient(descriptor=None)
        patcher, _ = fake_sdk(client)

        with patcher:
            runner.invoke(cli, ["update"])
            result = runner.invoke(cli, ["update"])

        assert result.exit_code == 0
        assert "Skipped" in result.stdout
        assert len(client.check_calls) == 1


class TestLookupCommand:
    """Test the lookup command."""

    def test_resolves_from_artifact(self, fake_sdk, descriptor, english_archive):
        """Test lookup prints the value from the installed artifact."""
        patcher, _ = fake_sdk(FakeUpdateClient(descriptor=descriptor, archive_factory=english_archive))

        with patcher:
            runner.invoke(cli, ["update", "--force"])
            result = runner.invoke(cli, ["lookup", "hello", "--language", "de"])

        assert result.exit_code == 0
        assert "Hallo" in result.stdout

    def test_unknown_key_echoed(self, fake_sdk):
        """Test an unknown key prints the key itself."""
        patcher, _ = fake_sdk(FakeUpdateClient())

        with patcher:
            result = runner.invoke(cli, ["lookup", "missing.key"])

        assert result.exit_code == 0
        assert "missing.key" in result.stdout


class TestStatusAndReset:
    """Test status and reset commands against a real storage directory."""

    def test_status(self, tmp_path):
        """Test status renders without an installed artifact."""
        result = runner.invoke(cli, ["status", "--storage-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "installed_release" in result.stdout

    def test_reset_requires_confirmation(self, tmp_path):
        """Test reset aborts when the user declines."""
        result = runner.invoke(cli, ["reset", "--storage-dir", str(tmp_path)], input="n\n")
        assert result.exit_code != 0

    def test_reset(self, tmp_path):
        """Test reset removes persisted state."""
        (tmp_path / "Lingohub" / "update.bundle" / "en").mkdir(parents=True)
        (tmp_path / "Lingohub" / "update.bundle" / "en" / "Localizable.strings").write_text('"a" = "b";')

        result = runner.invoke(cli, ["reset", "--storage-dir", str(tmp_path), "--yes"])

        assert result.exit_code == 0
        assert not (tmp_path / "Lingohub").exists()
