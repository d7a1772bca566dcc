from __future__ import annotations
from pathlib import Path

from tqdm import tqdm

from .console import tqdm_file, tqdm_disable
from .hashing import sha1_file
from .manifest import CorruptLineError, ManifestEntry, parse_line, parse_manifest
from .paths import releases_path
from .releases import read_manifest_lines


def verify_releases(pub_dir: str | Path, on_progress=None) -> list[str]:
    """
    Check every manifest entry against the archives in pub_dir.
    Returns a list of problems; raises FileNotFoundError when there is no
    manifest and CorruptLineError when a line cannot be parsed.
    """
    path = releases_path(pub_dir)
    if not path.exists():
        raise FileNotFoundError(f"manifest not found: {path}")
    entries = parse_manifest(read_manifest_lines(path))

    errors: list[str] = []
    total = len(entries)
    with tqdm(total=total, desc="Verifying", unit="pkg", file=tqdm_file(), disable=tqdm_disable()) as bar:
        for done, e in enumerate(entries, 1):
            p = Path(pub_dir) / e.archive_file_name
            if not p.is_file():
                errors.append(f"Missing: {e.archive_file_name} ({e.display_name})")
            elif sha1_file(p) != e.hash.upper():
                errors.append(f"Hash mismatch: {e.archive_file_name} ({e.display_name})")
            if on_progress:
                on_progress("verify:releases", done, total, f"checked {done}/{total}")
            bar.update(1)
    return errors


def verify_entry(manifest_path: str | Path, entry: ManifestEntry, identity_prefix: str) -> list[str]:
    """Confirm the manifest holds exactly one line for this package and that it is ``entry``."""
    matches: list[ManifestEntry] = []
    for n, line in enumerate(read_manifest_lines(manifest_path), 1):
        try:
            current = parse_line(line, n)
        except CorruptLineError:
            continue
        if current.matches(entry.display_name, identity_prefix):
            matches.append(current)

    if not matches:
        return [f"entry for {entry.display_name!r} not found in manifest"]
    errors: list[str] = []
    if len(matches) > 1:
        errors.append(f"{len(matches)} entries for {entry.display_name!r} in manifest")
    if entry not in matches:
        errors.append(f"manifest entry for {entry.display_name!r} does not match the published archive")
    return errors
