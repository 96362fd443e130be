"""Facade combining publishing, asset resolution and bundle lookup."""

from __future__ import annotations

import logging
from pathlib import Path

from assetpub.models.bundle import AssetBundle, SupportsConversion
from assetpub.models.config import AssetManagerSettings
from assetpub.models.publisher import AfterCopyHook, BeforeCopyHook, CopyOptions, PublishRecord
from assetpub.services.aliases import AliasResolver
from assetpub.services.bundles import BundleFactory, BundleRegistry
from assetpub.services.hasher import HashCallback
from assetpub.services.publisher import AssetPublisher
from assetpub.services.resolver import AssetResolver

logger = logging.getLogger(__name__)


class AssetManager:
    """Entry point used by pages and bundles to publish and locate assets."""

    def __init__(
        self,
        settings: AssetManagerSettings,
        *,
        hash_callback: HashCallback | None = None,
        before_copy: BeforeCopyHook | None = None,
        after_copy: AfterCopyHook | None = None,
        converter: SupportsConversion | None = None,
        bundle_factories: dict[str, BundleFactory] | None = None,
        alias_resolver: AliasResolver | None = None,
    ) -> None:
        self.settings = settings
        self.aliases = alias_resolver or AliasResolver.from_settings(settings)
        self.converter = converter

        self.publisher = AssetPublisher(
            self.aliases.resolve(settings.base_path),
            self.aliases.resolve(settings.base_url),
            link_assets=settings.link_assets,
            force_copy=settings.force_copy,
            dir_mode=settings.dir_mode,
            file_mode=settings.file_mode,
            before_copy=before_copy,
            after_copy=after_copy,
            hash_callback=hash_callback,
            alias_resolver=self.aliases.resolve,
        )

        web_root = settings.web_root
        self.resolver = AssetResolver(
            base_path=self.publisher.base_path,
            base_url=self.publisher.base_url,
            asset_map=dict(settings.asset_map),
            web_root=Path(self.aliases.resolve(web_root)) if web_root is not None else None,
            web_url=self.aliases.resolve(settings.web_url),
            append_timestamp=settings.append_timestamp,
            alias_resolver=self.aliases.resolve,
        )

        self.bundles = BundleRegistry.from_settings(
            settings,
            resolve_alias=self.aliases.resolve,
            factories=bundle_factories,
        )
        self.allowed_roots = tuple(Path(self.aliases.resolve(root)).resolve() for root in settings.allowed_roots)
        self._loaded: dict[str, AssetBundle] = {}
        self._dummies: dict[str, AssetBundle] = {}

    @property
    def base_path(self) -> Path:
        return self.publisher.base_path

    @property
    def base_url(self) -> str:
        return self.publisher.base_url

    def publish(self, path: str | Path, options: CopyOptions | None = None) -> PublishRecord:
        return self.publisher.publish(path, options)

    def is_publishable(self, path: str | Path) -> bool:
        """Return ``True`` when ``path`` resolves inside one of the allowed roots.

        Symlinks are followed before the check. Unknown aliases raise
        :class:`ConfigError`.
        """

        try:
            candidate = Path(self.aliases.resolve(str(path))).resolve()
        except (OSError, RuntimeError):
            return False
        return any(candidate == root or root in candidate.parents for root in self.allowed_roots)

    def describe_published_path(self, path: str | Path) -> Path | None:
        return self.publisher.describe_published_path(path)

    def describe_published_url(self, path: str | Path) -> str | None:
        return self.publisher.describe_published_url(path)

    def resolve_asset_url(self, bundle: AssetBundle, asset: str) -> str:
        return self.resolver.resolve_asset_url(bundle, asset)

    def resolve_asset_path(self, bundle: AssetBundle, asset: str) -> Path | None:
        return self.resolver.resolve_asset_path(bundle, asset)

    def get_bundle(self, name: str, *, publish: bool = True) -> AssetBundle:
        """Return the named bundle, building and publishing it on first use.

        Disabled bundles come back as an empty bundle so pages depending on
        them still render. Unknown names raise :class:`ConfigError`.
        """

        if self.bundles.is_disabled(name):
            dummy = self._dummies.get(name)
            if dummy is None:
                dummy = self._dummies[name] = AssetBundle.dummy(name)
            return dummy

        bundle = self._loaded.get(name)
        if bundle is not None:
            return bundle

        bundle = self.bundles.create(name)
        if publish:
            bundle.publish(self)
        self._loaded[name] = bundle
        logger.debug("Loaded bundle %s", name, extra={"event": "asset.bundle_loaded"})
        return bundle
