from __future__ import annotations

from pathlib import Path
import zlib

import pytest

from assetpub.services.hasher import VERSION, PathHasher
from assetpub.tests.helpers import set_mtime, write_file


def _expected(seed_dir: Path, mtime: int, flag: str) -> str:
    return format(zlib.crc32(f"{seed_dir}{mtime}{VERSION}|{flag}".encode("utf-8")), "x")


def test_file_hash_uses_parent_directory_and_file_mtime(tmp_path: Path) -> None:
    source = write_file(tmp_path / "css" / "app.css", "body{}", mtime=1_600_000_000)

    assert PathHasher().hash(source) == _expected(source.parent, 1_600_000_000, "")


def test_directory_hash_uses_directory_itself(tmp_path: Path) -> None:
    directory = tmp_path / "vendor"
    directory.mkdir()
    set_mtime(directory, 1_650_000_000)

    assert PathHasher().hash(directory) == _expected(directory, 1_650_000_000, "")


def test_link_mode_changes_the_hash(tmp_path: Path) -> None:
    source = write_file(tmp_path / "app.js", "1", mtime=1_600_000_000)

    copied = PathHasher(link_assets=False).hash(source)
    linked = PathHasher(link_assets=True).hash(source)

    assert linked == _expected(source.parent, 1_600_000_000, "1")
    assert copied != linked


def test_hash_is_stable_across_instances(tmp_path: Path) -> None:
    source = write_file(tmp_path / "app.js", "1", mtime=1_600_000_000)

    assert PathHasher().hash(source) == PathHasher().hash(str(source))


def test_touching_the_source_changes_the_hash(tmp_path: Path) -> None:
    source = write_file(tmp_path / "app.js", "1", mtime=1_600_000_000)
    before = PathHasher().hash(source)

    set_mtime(source, 1_600_000_100)

    assert PathHasher().hash(source) != before


def test_version_string_is_part_of_the_hash(tmp_path: Path) -> None:
    source = write_file(tmp_path / "app.js", "1", mtime=1_600_000_000)

    assert PathHasher(version="2.0.0").hash(source) != PathHasher().hash(source)


def test_hash_is_lowercase_hex(tmp_path: Path) -> None:
    source = write_file(tmp_path / "app.js", "1", mtime=1_600_000_000)

    digest = PathHasher().hash(source)

    assert digest == digest.lower()
    int(digest, 16)


def test_callback_result_is_used_verbatim(tmp_path: Path) -> None:
    calls: list[str] = []

    def callback(path: str) -> str:
        calls.append(path)
        return "Custom-Name"

    hasher = PathHasher(callback=callback)

    assert hasher.hash(tmp_path / "missing.css") == "Custom-Name"
    assert calls == [str(tmp_path / "missing.css")]


def test_callback_errors_propagate(tmp_path: Path) -> None:
    def callback(path: str) -> str:
        raise LookupError(path)

    with pytest.raises(LookupError):
        PathHasher(callback=callback).hash(tmp_path)
