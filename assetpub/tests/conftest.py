"""Shared fixtures for the test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from assetpub.tests.helpers import write_file


@pytest.fixture()
def public_dir(tmp_path: Path) -> Path:
    """Writable directory acting as the published asset root."""

    directory = tmp_path / "public" / "assets"
    directory.mkdir(parents=True)
    return directory.resolve()


@pytest.fixture()
def source_dir(tmp_path: Path) -> Path:
    """Source directory with a small, mixed set of assets."""

    root = tmp_path / "src" / "vendor"
    write_file(root / "a.txt", "alpha", mtime=1_700_000_000)
    write_file(root / "b.log", "beta", mtime=1_700_000_000)
    write_file(root / ".hidden", "secret", mtime=1_700_000_000)
    write_file(root / "css" / "site.css", "body{}", mtime=1_700_000_000)
    write_file(root / "css" / "notes.txt", "notes", mtime=1_700_000_000)
    (root / "empty").mkdir()
    return root
