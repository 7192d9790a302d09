"""Directory listing filtered by filename prefix and suffix."""

import os
from pathlib import Path

from loguru import logger

log = logger.bind(op="list")


def matches(name: str, prefix: str = "", suffix: str = "") -> bool:
    """True when name starts with prefix and ends with suffix (empty matches all)."""
    return name.startswith(prefix) and name.endswith(suffix)


def _sorted_entries(path: Path | str) -> list[os.DirEntry]:
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)


def list_files(path: Path | str, prefix: str = "", suffix: str = "") -> list[str]:
    """Names of the immediate children of path matching prefix/suffix.

    Directories are included alongside files. Raises OSError if path
    cannot be read.
    """
    log.debug(f"list_files(path={path}, prefix='{prefix}', suffix='{suffix}')")
    return [e.name for e in _sorted_entries(path) if matches(e.name, prefix, suffix)]


def walk_files(path: Path | str, prefix: str = "", suffix: str = "") -> list[str]:
    """Full paths of every entry under path (root included) matching prefix/suffix.

    Paths are joined onto path exactly as given, so a "./" or relative
    prefix is kept. Depth-first pre-order, lexical order within each
    directory. Symlinked directories are listed but not descended into.
    The first OSError (unreadable root or subdirectory) aborts the walk.
    """
    log.debug(f"walk_files(path={path}, prefix='{prefix}', suffix='{suffix}')")
    root = os.fspath(path)
    root_is_dir = os.path.isdir(root) and not os.path.islink(root)
    os.lstat(root)

    found: list[str] = []

    def _visit(current: str, name: str, is_dir: bool) -> None:
        if matches(name, prefix, suffix):
            found.append(current)
        if not is_dir:
            return
        for entry in _sorted_entries(current):
            _visit(
                os.path.join(current, entry.name),
                entry.name,
                entry.is_dir(follow_symlinks=False),
            )

    _visit(root, os.path.basename(os.path.normpath(root)), root_is_dir)
    log.debug(f"walk_files matched {len(found)} entries under {root}")
    return found
