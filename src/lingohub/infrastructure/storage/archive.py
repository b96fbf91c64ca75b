"""Zip archive extraction for downloaded distributions."""

import zipfile
import zlib
from pathlib import Path, PurePosixPath

from lingohub.domain.errors import StorageError
from lingohub.logger import get_logger

logger = get_logger(__name__)

# Metadata folders added by macOS archivers
_IGNORED_PREFIXES = ("__MACOSX/",)


def _safe_member_path(destination: Path, name: str) -> Path:
    """Resolve an archive member below ``destination``, rejecting path traversal."""
    member = PurePosixPath(name)
    if member.is_absolute() or ".." in member.parts:
        raise StorageError(f"Archive member escapes the target directory: {name}")
    return destination.joinpath(*member.parts)


def extract_archive(archive: Path, destination: Path) -> int:
    """Extract a zip archive into ``destination``.

    Args:
        archive: Path of the zip file
        destination: Directory to extract into (created if needed)

    Returns:
        Number of files written

    Raises:
        StorageError: The archive is unreadable, corrupt, unsafe, uses an
            unsupported compression method or encryption, or I/O fails
    """
    logger.debug(f"Extracting {archive} into {destination}")
    written = 0
    try:
        with zipfile.ZipFile(archive) as zf:
            bad_member = zf.testzip()
            if bad_member is not None:
                raise StorageError(f"Archive member is corrupt: {bad_member}")

            destination.mkdir(parents=True, exist_ok=True)
            for info in zf.infolist():
                if info.filename.startswith(_IGNORED_PREFIXES):
                    continue
                target = _safe_member_path(destination, info.filename)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as dst:
                    while True:
                        chunk = src.read(64 * 1024)
                        if not chunk:
                            break
                        dst.write(chunk)
                written += 1
    except (zipfile.BadZipFile, zlib.error, EOFError) as e:
        raise StorageError(f"Archive is not a valid zip file: {e}") from e
    except (NotImplementedError, RuntimeError, ValueError) as e:
        # Unsupported compression method, encrypted member, bad header fields
        raise StorageError(f"Archive cannot be decompressed: {e}") from e
    except OSError as e:
        raise StorageError(f"Could not extract archive {archive}: {e}") from e

    logger.debug(f"Extracted {written} file(s) from {archive}")
    return written
