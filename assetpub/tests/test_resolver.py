"""Tests for asset URL/path resolution and the override table."""

from __future__ import annotations

from pathlib import Path

from assetpub.models.bundle import AssetBundle
from assetpub.services.aliases import AliasResolver
from assetpub.services.resolver import AssetResolver
from assetpub.tests.helpers import write_file


def _bundle(tmp_path: Path, **overrides: object) -> AssetBundle:
    values: dict[str, object] = {
        "name": "app",
        "source_path": "lib",
        "base_path": tmp_path / "published" / "abc123",
        "base_url": "/assets/abc123",
    }
    values.update(overrides)
    return AssetBundle(**values)  # type: ignore[arg-type]


def _resolver(tmp_path: Path, **overrides: object) -> AssetResolver:
    values: dict[str, object] = {
        "base_path": tmp_path / "published",
        "base_url": "/assets",
        "web_root": tmp_path / "web",
        "web_url": "/app",
    }
    values.update(overrides)
    return AssetResolver(**values)  # type: ignore[arg-type]


def test_longest_matching_suffix_wins(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, asset_map={"jquery.js": "X", "dist/jquery.js": "Y"})

    assert resolver.find_override(_bundle(tmp_path), "dist/jquery.js") == "Y"
    assert resolver.resolve_asset_url(_bundle(tmp_path), "dist/jquery.js") == "/assets/Y"


def test_longest_match_does_not_depend_on_declaration_order(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, asset_map={"dist/jquery.js": "Y", "jquery.js": "X"})

    assert resolver.find_override(_bundle(tmp_path), "dist/jquery.js") == "Y"


def test_bundle_source_path_selects_between_directory_qualified_keys(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, asset_map={"a/app.js": "first", "b/app.js": "second", "/app.js": "short"})

    assert resolver.find_override(_bundle(tmp_path, source_path="x/a"), "app.js") == "first"
    assert resolver.find_override(_bundle(tmp_path, source_path="x/b"), "app.js") == "second"


def test_suffix_must_match_exactly(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, asset_map={"query.js": "X"})

    assert resolver.find_override(_bundle(tmp_path), "jquery.min.js") is None


def test_without_override_the_bundle_location_is_used(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, asset_map={"other.js": "X"})
    bundle = _bundle(tmp_path)

    assert resolver.resolve_asset_url(bundle, "js/app.js") == "/assets/abc123/js/app.js"
    assert resolver.resolve_asset_path(bundle, "js/app.js") == tmp_path / "published" / "abc123" / "js" / "app.js"


def test_bundle_without_source_path_matches_asset_as_given(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, asset_map={"lib/app.js": "X"})

    assert resolver.find_override(_bundle(tmp_path, source_path=None), "app.js") is None
    assert resolver.find_override(_bundle(tmp_path, source_path=None), "lib/app.js") == "X"


def test_web_alias_replacement_is_relative_to_web_root(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, asset_map={"jquery.js": "@web/js/jquery.js"})
    bundle = _bundle(tmp_path)

    assert resolver.resolve_asset_url(bundle, "jquery.js") == "/app/js/jquery.js"
    assert resolver.resolve_asset_path(bundle, "jquery.js") == tmp_path / "web" / "js" / "jquery.js"


def test_replacement_aliases_are_expanded(tmp_path: Path) -> None:
    aliases = AliasResolver(aliases={"@cdn": "https://cdn.example.com/libs"})
    resolver = _resolver(tmp_path, asset_map={"jquery.js": "@cdn/jquery.js"}, alias_resolver=aliases.resolve)

    assert resolver.resolve_asset_url(_bundle(tmp_path), "jquery.js") == "https://cdn.example.com/libs/jquery.js"
    assert resolver.resolve_asset_path(_bundle(tmp_path), "jquery.js") is None


def test_external_and_rooted_references_are_returned_unchanged(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)
    bundle = _bundle(tmp_path)

    for asset in ("https://cdn.example.com/app.js", "//cdn.example.com/app.js", "/static/app.js"):
        assert resolver.resolve_asset_url(bundle, asset) == asset
        assert resolver.resolve_asset_path(bundle, asset) is None


def test_override_to_external_url(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path, asset_map={"jquery.js": "https://code.jquery.com/jquery.js"})

    assert resolver.resolve_asset_url(_bundle(tmp_path), "jquery.js") == "https://code.jquery.com/jquery.js"


def test_timestamp_is_appended_when_enabled(tmp_path: Path) -> None:
    bundle = _bundle(tmp_path)
    write_file(bundle.base_path / "app.css", "body{}", mtime=1_700_000_123)  # type: ignore[operator]
    resolver = _resolver(tmp_path, append_timestamp=True)

    assert resolver.resolve_asset_url(bundle, "app.css") == "/assets/abc123/app.css?v=1700000123"
    assert resolver.resolve_asset_url(bundle, "missing.css") == "/assets/abc123/missing.css"
    assert _resolver(tmp_path).resolve_asset_url(bundle, "app.css") == "/assets/abc123/app.css"


def test_path_is_not_applicable_without_bundle_base_path(tmp_path: Path) -> None:
    resolver = _resolver(tmp_path)

    assert resolver.resolve_asset_path(_bundle(tmp_path, base_path=None), "app.js") is None
