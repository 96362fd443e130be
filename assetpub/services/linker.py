"""Symlink-based publishing.

Several processes may publish the same asset at the same moment. Creating a
symlink is atomic but not idempotent, so a failed ``os.symlink`` is only an
error when the link target is still missing afterwards.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from assetpub.models.errors import LinkFailedError
from assetpub.services.copier import ensure_directory

logger = logging.getLogger(__name__)


def link_file(src: Path, dst: Path) -> None:
    """Create ``dst`` as a symlink to the file ``src`` unless it already exists."""

    if dst.is_file():
        return

    try:
        os.symlink(src, dst)
    except OSError as exc:
        if not dst.is_file():
            raise LinkFailedError(f"Unable to link {src} to {dst}: {exc}") from exc
        logger.debug("Symlink %s created concurrently", dst, extra={"event": "asset.link_race"})
        return

    logger.debug("Linked %s -> %s", dst, src, extra={"event": "asset.link"})


def link_directory(src: Path, dst: Path, *, dir_mode: int | None = None) -> None:
    """Create ``dst`` as a symlink to the directory ``src`` unless it already exists."""

    if dst.is_dir():
        return

    ensure_directory(dst.parent, dir_mode)
    try:
        os.symlink(src, dst, target_is_directory=True)
    except OSError as exc:
        if not dst.is_dir():
            raise LinkFailedError(f"Unable to link {src} to {dst}: {exc}") from exc
        logger.debug("Symlink %s created concurrently", dst, extra={"event": "asset.link_race"})
        return

    logger.debug("Linked %s -> %s", dst, src, extra={"event": "asset.link"})
