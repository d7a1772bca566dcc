# plugin_publisher/console.py
from __future__ import annotations
import io, os, sys

from tqdm import tqdm

# Optional progress callback signature used across the package:
#   on_progress(phase: str, current: int, total: int, message: str)

TQDM_ENV = "PLUGIN_PUBLISHER_TQDM"


def log(msg: str) -> None:
    """
    Safe log function for diagnostics:
    - Prefer tqdm.write to stderr so an active progress bar is not torn.
    - Fall back to plain print, even if sys.stderr is None.
    """
    f = getattr(sys, "stderr", None)
    if f is None:
        print(msg)
        return
    try:
        tqdm.write(msg, file=f)
        return
    except Exception:
        pass
    print(msg, file=f)


def tqdm_file():
    """File-like object for tqdm; a sink when there is no real stderr."""
    f = getattr(sys, "stderr", None)
    return f if (f is not None and hasattr(f, "write")) else io.StringIO()


def tqdm_disable() -> bool:
    """
    Disable tqdm when there is no real stderr or when explicitly requested.
    Env override: PLUGIN_PUBLISHER_TQDM=0 forces enable, =1 forces disable.
    """
    env = os.environ.get(TQDM_ENV)
    if env == "0":
        return False
    if env == "1":
        return True
    f = getattr(sys, "stderr", None)
    return not (f is not None and hasattr(f, "write"))
