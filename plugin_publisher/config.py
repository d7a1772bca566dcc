from __future__ import annotations
import argparse
from dataclasses import dataclass
from pathlib import Path

from .paths import archive_name, releases_path, safe_file_name
from .paths import archive_path as _archive_path
from .releases import DEFAULT_MAX_ATTEMPTS
from .version import PluginVersion

DEFAULT_RETRY_DELAY = 0.25


class ConfigError(ValueError):
    """Invalid command line input; reported before anything is written."""


@dataclass(frozen=True)
class PublishConfig:
    bin_dir: Path
    pub_dir: Path
    short_name: str
    full_name: str
    version: PluginVersion
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY
    keep_corrupt: bool = False
    verify: bool = True

    @property
    def safe_short_name(self) -> str:
        return safe_file_name(self.short_name)

    @property
    def package_name(self) -> str:
        return archive_name(self.safe_short_name, str(self.version))

    @property
    def archive_path(self) -> Path:
        return _archive_path(self.pub_dir, self.safe_short_name, str(self.version))

    @property
    def releases_path(self) -> Path:
        return releases_path(self.pub_dir)

    @classmethod
    def build(cls, bin_dir: str | Path, pub_dir: str | Path, short_name: str, full_name: str,
              version: str, max_attempts: int = DEFAULT_MAX_ATTEMPTS,
              retry_delay: float = DEFAULT_RETRY_DELAY, keep_corrupt: bool = False,
              verify: bool = True) -> "PublishConfig":
        """Validate raw inputs; raises ConfigError with a user-facing message."""
        if not bin_dir or not Path(bin_dir).is_dir():
            raise ConfigError("Invalid binary directory specified.")
        if not pub_dir or (Path(pub_dir).exists() and not Path(pub_dir).is_dir()):
            raise ConfigError("Invalid publish directory specified.")
        if not short_name:
            raise ConfigError("Short name must not be empty.")
        # manifest lines are space-delimited up to the display name
        if any(c.isspace() for c in safe_file_name(short_name)):
            raise ConfigError("Short name must not contain whitespace.")
        if not full_name or "\n" in full_name or "\r" in full_name:
            raise ConfigError("Full name must be a non-empty single line.")
        try:
            parsed = PluginVersion.parse(version)
        except ValueError:
            raise ConfigError("Invalid version number.") from None
        if max_attempts < 1:
            raise ConfigError("Max attempts must be at least 1.")
        if retry_delay < 0:
            raise ConfigError("Retry delay must not be negative.")
        return cls(Path(bin_dir), Path(pub_dir), short_name, full_name, parsed,
                   max_attempts, retry_delay, keep_corrupt, verify)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "PublishConfig":
        return cls.build(
            args.bin_dir, args.pub_dir, args.short_name, args.full_name, args.version,
            max_attempts=args.max_attempts,
            retry_delay=args.retry_delay,
            keep_corrupt=args.keep_corrupt_lines,
            verify=not args.no_verify,
        )
