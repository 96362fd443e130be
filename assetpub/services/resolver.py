"""Resolution of bundle asset references to public URLs and file paths."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path

from assetpub.models.bundle import AssetBundle
from assetpub.utils.urls import is_external_reference, is_relative_url

logger = logging.getLogger(__name__)


WEB_ALIAS_PREFIX = "@web/"


def _unchanged(path: str) -> str:
    return path


@dataclass(slots=True, frozen=True)
class _Target:
    """An asset reference together with the root it is relative to."""

    asset: str
    base_path: Path | None
    base_url: str


@dataclass(slots=True)
class AssetResolver:
    """Rewrite bundle assets through the ``asset_map`` override table.

    Keys of ``asset_map`` are matched as suffixes of the bundle-qualified
    asset name and the longest matching key wins; among keys of equal
    length the first declared one is used. Replacements starting with
    ``@web/`` are relative to the web root, other relative replacements to
    the manager's own ``base_path``/``base_url``.
    """

    base_path: Path
    base_url: str
    asset_map: Mapping[str, str] = field(default_factory=dict)
    web_root: Path | None = None
    web_url: str = ""
    append_timestamp: bool = False
    alias_resolver: Callable[[str], str] = _unchanged

    def find_override(self, bundle: AssetBundle, asset: str) -> str | None:
        """Return the replacement for ``asset`` or ``None`` when nothing matches."""

        candidate = asset
        if bundle.source_path is not None and is_relative_url(asset):
            candidate = f"{bundle.source_path}/{asset}"

        best_key: str | None = None
        for key in self.asset_map:
            if not key or not candidate.endswith(key):
                continue
            if best_key is None or len(key) > len(best_key):
                best_key = key

        return None if best_key is None else self.asset_map[best_key]

    def resolve_asset_url(self, bundle: AssetBundle, asset: str) -> str:
        """Return the URL a page should use for ``asset`` of ``bundle``."""

        target = self._target(bundle, asset)
        if is_external_reference(target.asset):
            return target.asset

        url = f"{target.base_url}/{target.asset}"
        if self.append_timestamp and target.base_path is not None:
            timestamp = _mtime(target.base_path / target.asset)
            if timestamp > 0:
                return f"{url}?v={timestamp}"
        return url

    def resolve_asset_path(self, bundle: AssetBundle, asset: str) -> Path | None:
        """Return the local file backing ``asset``; ``None`` for URLs and rooted paths."""

        target = self._target(bundle, asset)
        if is_external_reference(target.asset) or target.base_path is None:
            return None
        return target.base_path / target.asset

    def _target(self, bundle: AssetBundle, asset: str) -> _Target:
        replacement = self.find_override(bundle, asset)
        if replacement is None:
            return _Target(asset=asset, base_path=bundle.base_path, base_url=bundle.base_url)

        logger.debug("Asset %s of %s mapped to %s", asset, bundle.name, replacement)
        if replacement.startswith(WEB_ALIAS_PREFIX):
            return _Target(
                asset=replacement[len(WEB_ALIAS_PREFIX):],
                base_path=self.web_root,
                base_url=self.web_url,
            )
        return _Target(
            asset=self.alias_resolver(replacement),
            base_path=self.base_path,
            base_url=self.base_url,
        )


def _mtime(path: Path) -> int:
    try:
        return int(os.path.getmtime(path))
    except OSError:
        return 0
