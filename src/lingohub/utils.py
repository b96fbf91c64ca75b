"""
Utility functions for the Lingohub SDK.
"""

import locale
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


def default_storage_dir() -> Path:
    """
    Get the default directory for persisted SDK data.

    Returns:
        ~/.lingohub, expanded
    """
    return Path("~/.lingohub").expanduser()


def system_language() -> Optional[str]:
    """
    Get the two letter language code of the current system locale.

    Looks at the process locale first, then the usual environment variables.

    Returns:
        Language code such as "en" or "de", or None if it cannot be determined
    """
    candidates = []
    try:
        candidates.append(locale.getlocale()[0])
    except ValueError:
        pass
    candidates.extend(os.environ.get(name) for name in ("LC_ALL", "LC_MESSAGES", "LANG"))

    for value in candidates:
        if not value or value in ("C", "POSIX") or value.startswith("C."):
            continue
        code = value.split(".")[0].replace("-", "_").split("_")[0].lower()
        if code:
            return code
    return None


def generate_device_id() -> str:
    """Generate an opaque device identifier for hosts that provide none."""
    return str(uuid.uuid4()).upper()


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Convert a datetime to aware UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def file_size(path: Path) -> Optional[int]:
    """
    Size of a file in bytes.

    Args:
        path: File to inspect

    Returns:
        Size in bytes, or None if the file is missing or unreadable
    """
    try:
        return path.stat().st_size
    except OSError:
        return None
