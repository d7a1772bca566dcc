from __future__ import annotations
import re
from dataclasses import dataclass

_COMPONENT = re.compile(r"\s*\+?(\d+)\s*")
_MAX_COMPONENT = 2**31 - 1


@dataclass(frozen=True)
class PluginVersion:
    """major.minor[.build[.revision]] with non-negative integer components."""
    parts: tuple[int, ...]

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.parts)

    @staticmethod
    def parse(text: str) -> "PluginVersion":
        """Parse a dotted version string; raises ValueError when it is not one."""
        if text is None:
            raise ValueError("version is missing")
        pieces = text.split(".")
        if not 2 <= len(pieces) <= 4:
            raise ValueError(f"expected 2 to 4 dotted components, got {text!r}")
        parts: list[int] = []
        for piece in pieces:
            m = _COMPONENT.fullmatch(piece)
            if not m:
                raise ValueError(f"invalid version component {piece!r} in {text!r}")
            value = int(m.group(1))
            if value > _MAX_COMPONENT:
                raise ValueError(f"version component {piece!r} out of range")
            parts.append(value)
        return PluginVersion(tuple(parts))
