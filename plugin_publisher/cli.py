from __future__ import annotations
import argparse

from .config import ConfigError, PublishConfig, DEFAULT_RETRY_DELAY
from .console import log
from .manifest import CorruptLineError
from .publish import EXIT_INVALID, EXIT_IO, EXIT_OK, EXIT_VERIFY, publish
from .releases import DEFAULT_MAX_ATTEMPTS
from .verify import verify_releases

BANNER = "Plugin Packaging Tool"


def _cmd_publish(args: argparse.Namespace) -> int:
    print(BANNER)
    print(f"-Plugin Binary Directory is {args.bin_dir}")
    print(f"-Publish Directory is {args.pub_dir}")
    print(f"-Plugin Version is {args.version}")

    try:
        cfg = PublishConfig.from_args(args)
    except ConfigError as e:
        log(f"ERROR: {e}")
        return EXIT_INVALID

    try:
        result = publish(cfg)
    except OSError as e:
        log(f"ERROR: Could not publish package: {e}")
        return EXIT_IO
    if result.ok:
        print("Done.")
    return result.exit_code


def _cmd_verify(args: argparse.Namespace) -> int:
    try:
        problems = verify_releases(args.pub_dir)
    except (OSError, CorruptLineError) as e:
        log(f"ERROR: {e}")
        return EXIT_INVALID

    if problems:
        print(f"[verify] {len(problems)} problem(s):")
        for p in problems:
            print("  -", p)
        return EXIT_VERIFY
    print("[verify] all packages OK")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="plugin-publisher", description="Package plugin binaries for release")
    sub = p.add_subparsers(dest="cmd", required=False)

    b = sub.add_parser("publish", help="Zip a plugin build and register it in RELEASES.txt")
    b.add_argument("--bin-dir", required=True, help="The output directory holding compiled plugin binaries.")
    b.add_argument("--pub-dir", required=True, help="The directory where the published package should be stored.")
    b.add_argument("--short-name", required=True, help="The plugin short name, used to name the output package.")
    b.add_argument("--full-name", required=True, help="The plugin full name, displayed in the repo browser.")
    b.add_argument("--version", required=True, help="The plugin version (major.minor[.build[.revision]]).")
    b.add_argument("--max-attempts", type=int, default=DEFAULT_MAX_ATTEMPTS,
                   help="Attempts at amending RELEASES.txt before giving up")
    b.add_argument("--retry-delay", type=float, default=DEFAULT_RETRY_DELAY,
                   help="Upper bound in seconds of the random pause between attempts")
    b.add_argument("--keep-corrupt-lines", action="store_true",
                   help="Keep unparsable RELEASES lines verbatim instead of failing")
    b.add_argument("--no-verify", action="store_true", help="Skip re-reading the manifest after writing")
    b.set_defaults(func=_cmd_publish)

    v = sub.add_parser("verify", help="Check RELEASES.txt entries against the archives")
    v.add_argument("--pub-dir", required=True, help="Publish directory holding RELEASES.txt")
    v.set_defaults(func=_cmd_verify)

    return p


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "cmd", None):
        parser.print_help()
        return EXIT_INVALID
    return args.func(args)
