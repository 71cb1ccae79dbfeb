# src/pipeline/fs_utils.py

from __future__ import annotations

import fnmatch
import logging
import shutil
from pathlib import Path
from typing import Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)


def safe_copy(src: Path, dest: Path) -> bool:
    """
    Copy a single file, overwriting `dest`.

    Failures are logged as warnings and reported via the return value;
    callers treat asset copies as best-effort.
    """
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)
    except OSError as exc:
        logger.warning("Failed to copy %s -> %s: %s", src, dest, exc)
        return False
    return True


def empty_dir(path: Path) -> None:
    """Ensure `path` exists and is empty."""
    if path.exists():
        for child in path.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    else:
        path.mkdir(parents=True, exist_ok=True)


def walk_files(root: Path, suffix: str) -> Iterator[Path]:
    """Files under `root` with the given suffix, in sorted traversal order."""
    if not root.is_dir():
        return
    for path in sorted(root.rglob(f"*{suffix}")):
        if path.is_file():
            yield path


def is_ignored(rel_path: str, patterns: Sequence[str]) -> bool:
    """True if a posix-style relative path matches any glob pattern (or its basename does)."""
    name = rel_path.rsplit("/", 1)[-1]
    return any(
        fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(name, pattern)
        for pattern in patterns
    )


def copy_tree(src: Path, dest: Path, ignored: Iterable[str] = ()) -> int:
    """
    Copy a directory tree, skipping files that match `ignored` patterns.

    Returns the number of files copied.
    """
    patterns = list(ignored)
    copied = 0
    for path in sorted(src.rglob("*")):
        if not path.is_file():
            continue
        rel = path.relative_to(src).as_posix()
        if patterns and is_ignored(rel, patterns):
            continue
        target = dest / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, target)
        copied += 1
    return copied
