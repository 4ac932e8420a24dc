"""Filesystem utilities."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterator
from pathlib import Path

_DIR_MODE = 0o755
_FILE_MODE = 0o644


def _walk(root: Path) -> Iterator[Path]:
    """Yield every path below ``root`` (not ``root`` itself), parents before children."""
    with os.scandir(root) as entries:
        ordered = sorted(entries, key=lambda entry: entry.name)
    for entry in ordered:
        path = Path(entry.path)
        yield path
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(path)


def copy_dir_all(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Copy a directory recursively.

    Directories in the target get mode 0o755 and files 0o644, so the copy is
    always readable and writable by the user.
    """
    src_path = Path(src)
    dst_path = Path(dst)
    for path in _walk(src_path):
        target = dst_path / path.relative_to(src_path)
        if path.is_dir() and not path.is_symlink():
            target.mkdir(parents=True, exist_ok=True)
            target.chmod(_DIR_MODE)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.parent.chmod(_DIR_MODE)
            shutil.copyfile(path, target)
            target.chmod(_FILE_MODE)


def find_paths(directory: str | os.PathLike) -> list[Path]:
    """Recursively list files and directories, relative to ``directory``."""
    root = Path(directory)
    return [path.relative_to(root) for path in _walk(root)]


def remove_all(path: str | os.PathLike) -> None:
    """Delete a file, or a directory with everything under it."""
    target = Path(path)
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        target.unlink()