"""Naming of published directories.

The default name is the CRC32 of the source directory, the source's
modification time, the package version and the link-mode flag, rendered as
lowercase hex. Editing a source changes its mtime, so the next publish lands
in a new directory; old directories are left in place.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Final
import zlib

VERSION: Final[str] = "1.0.0"

HashCallback = Callable[[str], str]


@dataclass(slots=True)
class PathHasher:
    """Derive the published directory name for a source path."""

    link_assets: bool = False
    version: str = VERSION
    callback: HashCallback | None = None

    def hash(self, path: str | Path) -> str:
        path = str(path)
        if self.callback is not None:
            return self.callback(path)

        # Files share a directory with their siblings: hash the parent.
        base = os.path.dirname(path) if os.path.isfile(path) else path
        seed = f"{base}{int(os.path.getmtime(path))}"
        flag = "1" if self.link_assets else ""
        digest = zlib.crc32(f"{seed}{self.version}|{flag}".encode("utf-8"))
        return format(digest, "x")
