from __future__ import annotations
import zipfile
from pathlib import Path

from tqdm import tqdm

from .console import tqdm_file, tqdm_disable


def list_binaries(bin_dir: str | Path) -> list[Path]:
    """Files directly inside bin_dir, sorted by name. Subdirectories are ignored."""
    return sorted((p for p in Path(bin_dir).iterdir() if p.is_file()), key=lambda p: p.name)


def build_archive(bin_dir: str | Path, out_path: str | Path, on_progress=None) -> int:
    """
    Pack every file directly inside bin_dir into a fresh zip at out_path,
    each stored under its base name. Returns the number of files packed.
    """
    out = Path(out_path)
    if out.exists():
        out.unlink()
    out.parent.mkdir(parents=True, exist_ok=True)

    files = list_binaries(bin_dir)
    total = len(files)
    with tqdm(total=total, desc="Packing", unit="file", file=tqdm_file(), disable=tqdm_disable()) as bar:
        with zipfile.ZipFile(out, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for done, f in enumerate(files, 1):
                zf.write(f, f.name)
                if on_progress:
                    on_progress("publish:archive", done, total, f"packed {f.name}")
                bar.update(1)
    return total
