"""
RELEASES manifest model.

One entry per line: ``<hash> <archive file name> <display name>``.
The display name is everything after the second space, so it may itself
contain spaces. Line order is meaningful and survives every update.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable


class CorruptLineError(ValueError):
    """A manifest line that does not split into hash, file name and display name."""
    def __init__(self, line: str, lineno: int | None = None):
        self.line = line
        self.lineno = lineno
        where = f"line {lineno}" if lineno is not None else "line"
        super().__init__(f"corrupt manifest {where}: {line!r}")


@dataclass(frozen=True)
class ManifestEntry:
    hash: str
    archive_file_name: str
    display_name: str

    def format(self) -> str:
        return f"{self.hash} {self.archive_file_name} {self.display_name}"

    def matches(self, display_name: str, identity_prefix: str) -> bool:
        """Same logical package: identical display name and file name prefix."""
        return self.display_name == display_name and self.archive_file_name.startswith(identity_prefix)


def parse_line(line: str, lineno: int | None = None) -> ManifestEntry:
    parts = line.split(" ", 2)
    if len(parts) < 3:
        raise CorruptLineError(line, lineno)
    return ManifestEntry(*parts)


def parse_manifest(lines: Iterable[str]) -> list[ManifestEntry]:
    return [parse_line(line, n) for n, line in enumerate(lines, 1)]


def split_lines(text: str) -> list[str]:
    """Split text read with universal newlines; a trailing newline ends the last line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


@dataclass
class Reconciliation:
    lines: list[str]
    replaced: bool
    collapsed: int = 0                                   # extra matches dropped
    corrupt: list[int] = field(default_factory=list)     # kept verbatim (1-based)


def reconcile_entries(
    lines: Iterable[str],
    entry: ManifestEntry,
    identity_prefix: str,
    keep_corrupt: bool = False,
) -> Reconciliation:
    """
    Produce the new manifest lines for ``entry``.

    The first line with the same identity is replaced in place, later ones
    are dropped; when none matches the entry is appended. Every other line
    is passed through untouched and in order. A corrupt line raises
    CorruptLineError unless ``keep_corrupt`` is set, in which case it is
    kept verbatim and never treated as a match.
    """
    new_line = entry.format()
    out: list[str] = []
    replaced = False
    collapsed = 0
    corrupt: list[int] = []

    for lineno, line in enumerate(lines, 1):
        try:
            current = parse_line(line, lineno)
        except CorruptLineError:
            if not keep_corrupt:
                raise
            corrupt.append(lineno)
            out.append(line)
            continue

        if not current.matches(entry.display_name, identity_prefix):
            out.append(line)
        elif not replaced:
            out.append(new_line)
            replaced = True
        else:
            collapsed += 1

    if not replaced:
        out.append(new_line)
    return Reconciliation(out, replaced, collapsed, corrupt)


def reconcile(
    lines: Iterable[str],
    entry: ManifestEntry,
    identity_prefix: str,
    keep_corrupt: bool = False,
) -> list[str]:
    return reconcile_entries(lines, entry, identity_prefix, keep_corrupt=keep_corrupt).lines
