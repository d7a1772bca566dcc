from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from .archive import build_archive
from .config import PublishConfig
from .console import log
from .hashing import sha1_file
from .manifest import ManifestEntry
from .releases import PersistResult, persist
from .system import check_resources
from .verify import verify_entry

EXIT_OK = 0
EXIT_INVALID = 2
EXIT_EXHAUSTED = 3
EXIT_VERIFY = 4
EXIT_IO = 5


@dataclass(frozen=True)
class PublishResult:
    exit_code: int
    archive_path: Path
    entry: ManifestEntry
    persisted: PersistResult
    problems: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.exit_code == EXIT_OK


def publish(cfg: PublishConfig, on_progress=None) -> PublishResult:
    """Build the archive for cfg and register it in the publish directory's manifest."""
    cfg.pub_dir.mkdir(parents=True, exist_ok=True)
    check_resources(cfg.bin_dir, cfg.pub_dir)

    print(f"[publish] packing → {cfg.archive_path}")
    count = build_archive(cfg.bin_dir, cfg.archive_path, on_progress=on_progress)
    print(f"[publish] packed {count} file(s)")

    entry = ManifestEntry(sha1_file(cfg.archive_path), cfg.package_name, cfg.full_name)
    print(f"[publish] registering {entry.archive_file_name} ({entry.hash})")
    res = persist(
        cfg.releases_path, entry, cfg.safe_short_name,
        max_attempts=cfg.max_attempts,
        retry_delay=cfg.retry_delay,
        keep_corrupt=cfg.keep_corrupt,
    )
    if not res.ok:
        log(f"ERROR: Gave up on RELEASES file after {res.attempts} attempt(s): {res.error}")
        return PublishResult(EXIT_EXHAUSTED, cfg.archive_path, entry, res)

    action = "updated" if res.replaced else "added"
    print(f"[publish] {action} manifest entry → {cfg.releases_path}")

    if cfg.verify:
        problems = verify_entry(cfg.releases_path, entry, cfg.safe_short_name)
        if problems:
            for p in problems:
                log(f"ERROR: {p}")
            return PublishResult(EXIT_VERIFY, cfg.archive_path, entry, res, tuple(problems))
    return PublishResult(EXIT_OK, cfg.archive_path, entry, res)
