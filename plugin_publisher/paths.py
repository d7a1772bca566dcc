# plugin_publisher/paths.py
from __future__ import annotations
import os
from pathlib import Path

# ---- Publish directory layout ----
RELEASES_FILE_NAME: str = "RELEASES.txt"
ARCHIVE_EXT: str = ".zip"

# ---- Characters the host refuses in a file name ----
if os.name == "nt":
    INVALID_FILENAME_CHARS: frozenset[str] = frozenset(
        '"<>|:*?\\/' + "".join(chr(c) for c in range(32))
    )
else:
    INVALID_FILENAME_CHARS = frozenset("\0/")


def safe_file_name(name: str, invalid: frozenset[str] = INVALID_FILENAME_CHARS) -> str:
    """Replace every character that is invalid in a file name with '_'."""
    return "".join("_" if c in invalid else c for c in name)


def archive_name(safe_short_name: str, version: str) -> str:
    return f"{safe_short_name}-{version}{ARCHIVE_EXT}"


def archive_path(pub_dir: str | Path, safe_short_name: str, version: str) -> Path:
    return Path(pub_dir) / archive_name(safe_short_name, version)


def releases_path(pub_dir: str | Path) -> Path:
    return Path(pub_dir) / RELEASES_FILE_NAME


__all__ = [
    "RELEASES_FILE_NAME", "ARCHIVE_EXT", "INVALID_FILENAME_CHARS",
    "safe_file_name", "archive_name", "archive_path", "releases_path",
]
