import os
from pathlib import Path

import psutil

from .console import log


def dir_size(root: str | Path) -> int:
    """Total bytes of the files directly inside root."""
    return sum(p.stat().st_size for p in Path(root).iterdir() if p.is_file())


def check_resources(bin_dir: str | Path, pub_dir: str | Path, margin_mb: int = 16) -> bool:
    # the archive is never larger than its inputs by more than zip overhead
    need = dir_size(bin_dir) + margin_mb * 1024**2
    free = psutil.disk_usage(os.fspath(pub_dir)).free
    if free < need:
        log(f"WARNING: Low disk space in {pub_dir} ({free / 1024**2:.1f} MB free, "
            f"~{need / 1024**2:.1f} MB needed)")
        return False
    return True
