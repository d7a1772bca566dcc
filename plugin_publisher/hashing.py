from __future__ import annotations
import hashlib
from pathlib import Path

_CHUNK = 1024 * 1024


def sha1_file(p: str | Path) -> str:
    """SHA-1 of a file's bytes as 40 uppercase hex characters."""
    h = hashlib.sha1()
    with Path(p).open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            h.update(chunk)
    return h.hexdigest().upper()
