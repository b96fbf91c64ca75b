"""Tests for artifact extraction and the install directory."""

import os
import zipfile
from unittest.mock import patch

import pytest

from lingohub.domain.errors import StorageError
from lingohub.infrastructure.storage import ArtifactStore, extract_archive

from tests.conftest import strings_file


class TestExtractArchive:
    """Test zip extraction."""

    def test_extracts_files(self, make_archive, tmp_path):
        """Test every member is written below the destination."""
        archive = make_archive({"en.lproj/Localizable.strings": '"a" = "b";', "de/T.json": "{}"})
        target = tmp_path / "out"

        assert extract_archive(archive, target) == 2
        assert (target / "en.lproj" / "Localizable.strings").read_text() == '"a" = "b";'
        assert (target / "de" / "T.json").exists()

    def test_skips_macos_metadata(self, make_archive, tmp_path):
        """Test __MACOSX entries are not extracted."""
        archive = make_archive({"en/Localizable.strings": "", "__MACOSX/en/._Localizable.strings": "x"})
        target = tmp_path / "out"

        assert extract_archive(archive, target) == 1
        assert not (target / "__MACOSX").exists()

    def test_rejects_path_traversal(self, make_archive, tmp_path):
        """Test members escaping the destination are refused."""
        archive = make_archive({"../evil.txt": "boom"})

        with pytest.raises(StorageError):
            extract_archive(archive, tmp_path / "out")
        assert not (tmp_path / "evil.txt").exists()

    def test_not_a_zip(self, tmp_path):
        """Test arbitrary bytes raise StorageError."""
        archive = tmp_path / "bogus.zip"
        archive.write_bytes(b"this is not a zip file")

        with pytest.raises(StorageError):
            extract_archive(archive, tmp_path / "out")

    def test_zero_byte_file(self, tmp_path):
        """Test an empty download raises StorageError."""
        archive = tmp_path / "empty.zip"
        archive.write_bytes(b"")

        with pytest.raises(StorageError):
            extract_archive(archive, tmp_path / "out")

    def test_undecodable_members(self, undecodable_archive, tmp_path):
        """Test unsupported compression and encrypted members raise StorageError."""
        with pytest.raises(StorageError, match="cannot be decompressed"):
            extract_archive(undecodable_archive(), tmp_path / "out")

    def test_missing_file(self, tmp_path):
        """Test a missing archive raises StorageError."""
        with pytest.raises(StorageError):
            extract_archive(tmp_path / "missing.zip", tmp_path / "out")


class TestArtifactStore:
    """Test install, purge and lookup paths of the store."""

    def test_layout(self, tmp_path):
        """Test the install directory lives under the Lingohub folder."""
        store = ArtifactStore(tmp_path)
        assert store.folder == tmp_path / "Lingohub"
        assert store.installed_directory() == tmp_path / "Lingohub" / "update.bundle"

    def test_exists_false_initially(self, store):
        """Test a fresh store has no artifact."""
        assert store.exists() is False

    def test_exists_false_for_empty_directory(self, store):
        """Test an empty install directory does not count as an artifact."""
        store.installed_directory().mkdir(parents=True)
        assert store.exists() is False

    def test_install(self, store, english_archive):
        """Test install extracts the archive into the install directory."""
        store.install(english_archive())

        assert store.exists()
        assert (store.installed_directory() / "en.lproj" / "Localizable.strings").is_file()

    def test_install_leaves_no_staging_behind(self, store, english_archive):
        """Test only the install directory remains after install."""
        store.install(english_archive())
        assert [p.name for p in store.folder.iterdir()] == ["update.bundle"]

    def test_install_replaces_previous_artifact(self, store, make_archive):
        """Test a second install fully replaces the first."""
        store.install(make_archive({"en/Localizable.strings": strings_file({"k": "old"}), "en/Old.strings": ""}))
        store.install(make_archive({"en/Localizable.strings": strings_file({"k": "new"})}))

        language_dir = store.installed_directory() / "en"
        assert '"new"' in (language_dir / "Localizable.strings").read_text()
        assert not (language_dir / "Old.strings").exists()

    def test_install_is_idempotent(self, store, make_archive):
        """Test installing the same archive twice yields the same tree."""
        archive = make_archive({"en/Localizable.strings": strings_file({"k": "v"}), "de/Localizable.strings": ""})

        store.install(archive)
        first = sorted(p.relative_to(store.installed_directory()) for p in store.installed_directory().rglob("*"))
        store.install(archive)
        second = sorted(p.relative_to(store.installed_directory()) for p in store.installed_directory().rglob("*"))

        assert first == second

    def test_corrupt_archive_keeps_previous_artifact(self, store, english_archive, tmp_path):
        """Test a failed install leaves the old artifact untouched."""
        store.install(english_archive())
        bogus = tmp_path / "bogus.zip"
        bogus.write_bytes(b"garbage")

        with pytest.raises(StorageError):
            store.install(bogus)

        assert store.exists()
        assert (store.installed_directory() / "en.lproj" / "Localizable.strings").is_file()
        assert [p.name for p in store.folder.iterdir()] == ["update.bundle"]

    def test_undecodable_archive_keeps_previous_artifact(self, store, make_archive, undecodable_archive):
        """Test a zip whose members cannot be decompressed fails cleanly and keeps the old artifact."""
        store.install(make_archive({"en.lproj/Localizable.strings": strings_file({"k": "old"})}))

        with pytest.raises(StorageError):
            store.install(undecodable_archive())

        assert store.exists()
        assert '"old"' in (store.installed_directory() / "en.lproj" / "Localizable.strings").read_text()
        assert [p.name for p in store.folder.iterdir()] == ["update.bundle"]

    def test_corrupt_archive_without_previous_artifact(self, store, tmp_path):
        """Test a failed first install leaves no artifact."""
        bogus = tmp_path / "bogus.zip"
        bogus.write_bytes(b"garbage")

        with pytest.raises(StorageError):
            store.install(bogus)

        assert store.exists() is False

    def test_empty_archive_rejected(self, store, tmp_path):
        """Test an archive without files is not installed."""
        archive = tmp_path / "empty.zip"
        with zipfile.ZipFile(archive, "w"):
            pass

        with pytest.raises(StorageError):
            store.install(archive)
        assert store.exists() is False

    def test_failed_swap_restores_previous_artifact(self, store, english_archive, make_archive):
        """Test the old artifact is put back when the final rename fails."""
        store.install(english_archive())
        staging = store.stage(make_archive({"en.lproj/Localizable.strings": strings_file({"k": "new"})}))

        real_replace = os.replace

        def failing_replace(src, dst):
            if str(src) == str(staging):
                raise OSError("disk full")
            return real_replace(src, dst)

        with patch("lingohub.infrastructure.storage.artifact_store.os.replace", side_effect=failing_replace):
            with pytest.raises(StorageError):
                store.promote(staging)

        content = (store.installed_directory() / "en.lproj" / "Localizable.strings").read_text()
        assert "value from artifact" in content
        assert not staging.exists()

    def test_stage_sweeps_leftovers(self, store, english_archive):
        """Test staging directories from an interrupted run are removed."""
        leftover = store.folder / ".staging-deadbeef"
        leftover.mkdir(parents=True)

        staging = store.stage(english_archive())

        assert not leftover.exists()
        assert staging.exists()
        assert store.exists() is False

    def test_purge(self, store, english_archive):
        """Test purge removes everything the store wrote."""
        store.install(english_archive())
        store.purge()

        assert store.exists() is False
        assert not store.folder.exists()

    def test_purge_is_idempotent(self, store):
        """Test purging an absent folder is a no-op."""
        store.purge()
        store.purge()
        assert store.exists() is False

    def test_language_directory_candidates(self, store, make_archive):
        """Test both <lang>.lproj and plain <lang> directories are found."""
        store.install(make_archive({"en.lproj/Localizable.strings": "", "de/Localizable.json": "{}"}))

        assert store.language_directory("en") == store.installed_directory() / "en.lproj"
        assert store.language_directory("de") == store.installed_directory() / "de"
        assert store.language_directory("fr") is None

    def test_table_path(self, store, make_archive):
        """Test table files are found by name with either extension."""
        store.install(make_archive({"en.lproj/Localizable.strings": "", "en.lproj/Menu.json": "{}"}))

        assert store.table_path("en", "Localizable").name == "Localizable.strings"
        assert store.table_path("en", "Menu").name == "Menu.json"
        assert store.table_path("en", "Missing") is None
        assert store.table_path("fr", "Localizable") is None
