"""
Read-reconcile-write cycle for the RELEASES manifest.

Each attempt opens the file without truncating it, takes a non-blocking
exclusive lock, reads it through the locked handle, reconciles the new
entry in memory, then truncates and rewrites it. Failing to get the lock
(another publisher is writing) or any other error abandons the attempt
and the loop tries again from a fresh read, up to ``max_attempts`` times.
"""
from __future__ import annotations
import os, random, time
from dataclasses import dataclass
from pathlib import Path

from .console import log
from .manifest import ManifestEntry, Reconciliation, reconcile_entries, split_lines

DEFAULT_MAX_ATTEMPTS = 10


@dataclass(frozen=True)
class PersistResult:
    ok: bool
    attempts: int
    error: str | None = None
    replaced: bool = False


def decode_manifest(data: bytes) -> list[str]:
    # utf-8-sig drops a BOM left by other tools; \r\n and \r fold into \n
    text = data.decode("utf-8-sig").replace("\r\n", "\n").replace("\r", "\n")
    return split_lines(text)


def read_manifest_lines(path: str | Path) -> list[str]:
    """All lines of the manifest, or [] when it does not exist yet."""
    p = Path(path)
    if not p.exists():
        return []
    return decode_manifest(p.read_bytes())


def _lock_exclusive(fp) -> None:
    if os.name == "nt":
        import msvcrt
        fp.seek(0)
        msvcrt.locking(fp.fileno(), msvcrt.LK_NBLCK, 1)
    else:
        import fcntl
        fcntl.flock(fp.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _unlock(fp) -> None:
    if os.name == "nt":
        import msvcrt
        fp.seek(0)
        msvcrt.locking(fp.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl
        fcntl.flock(fp.fileno(), fcntl.LOCK_UN)


def _write_attempt(path: Path, entry: ManifestEntry, identity_prefix: str,
                   keep_corrupt: bool) -> Reconciliation:
    # "a+b" creates the file when missing and never truncates on open
    with open(path, "a+b") as fp:
        _lock_exclusive(fp)
        try:
            fp.seek(0)
            lines = decode_manifest(fp.read())
            result = reconcile_entries(lines, entry, identity_prefix, keep_corrupt=keep_corrupt)
            payload = "".join(line + os.linesep for line in result.lines).encode("utf-8")
            fp.seek(0)
            fp.truncate(0)
            fp.write(payload)
            fp.flush()
        finally:
            _unlock(fp)
    return result


def persist(manifest_path: str | Path,
            entry: ManifestEntry,
            identity_prefix: str,
            max_attempts: int = DEFAULT_MAX_ATTEMPTS,
            retry_delay: float = 0.0,
            keep_corrupt: bool = False,
            sleep=time.sleep) -> PersistResult:
    """
    Register ``entry`` in the manifest at ``manifest_path``.

    Never raises for a failed attempt; returns PersistResult(ok=False) once
    ``max_attempts`` attempts have failed. Between attempts a random delay
    of up to ``retry_delay`` seconds is slept.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    path = Path(manifest_path)
    error: str | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            result = _write_attempt(path, entry, identity_prefix, keep_corrupt)
        except (OSError, ValueError) as e:
            error = str(e) or e.__class__.__name__
            log(f"ERROR: Could not amend RELEASES file (attempt {attempt}/{max_attempts}): {error}")
            if attempt < max_attempts and retry_delay > 0:
                sleep(random.uniform(0, retry_delay))
            continue

        if result.collapsed:
            log(f"WARNING: dropped {result.collapsed} duplicate entr{'y' if result.collapsed == 1 else 'ies'} "
                f"for {entry.display_name!r}")
        if result.corrupt:
            log(f"WARNING: kept corrupt manifest line(s) {', '.join(map(str, result.corrupt))} as-is")
        return PersistResult(True, attempt, None, result.replaced)

    return PersistResult(False, max_attempts, error)
