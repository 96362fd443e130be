"""Filesystem helpers shared by the tests."""

from __future__ import annotations

import os
from pathlib import Path


def write_file(path: Path, content: str = "", *, mtime: int | None = None) -> Path:
    """Create ``path`` (and its parents) with ``content`` and an optional mtime."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    if mtime is not None:
        set_mtime(path, mtime)
    return path


def set_mtime(path: Path, mtime: int) -> None:
    os.utime(path, (mtime, mtime))


def published_files(root: Path) -> set[str]:
    """Return the relative POSIX paths of every file below ``root``."""

    return {candidate.relative_to(root).as_posix() for candidate in root.rglob("*") if candidate.is_file()}
