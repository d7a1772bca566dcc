# plugin_publisher/main.py
from __future__ import annotations
import sys

from .cli import run_cli


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    raise SystemExit(run_cli(argv))


if __name__ == "__main__":
    main()
