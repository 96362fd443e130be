"""Asset bundle model consumed by the manager when resolving asset URLs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from assetpub.models.publisher import CopyOptions, PublishRecord
from assetpub.utils.urls import is_relative_url


class SupportsConversion(Protocol):
    """Converter turning a source asset (e.g. SCSS) into a servable one."""

    def convert(self, asset: str, base_path: Path) -> str:
        """Return the asset name to use after conversion."""


class SupportsBundlePublishing(Protocol):
    """Subset of :class:`AssetManager` used while a bundle is activated."""

    converter: SupportsConversion | None

    def publish(self, path: str | Path, options: CopyOptions | None = None) -> PublishRecord:
        """Publish ``path`` and return where it ended up."""


@dataclass(slots=True)
class AssetBundle:
    """A named group of JavaScript and CSS files sharing one source directory."""

    name: str
    source_path: str | None = None
    base_path: Path | None = None
    base_url: str = ""
    js: list[str] = field(default_factory=list)
    css: list[str] = field(default_factory=list)
    depends: list[str] = field(default_factory=list)
    publish_options: CopyOptions | None = None

    def publish(self, manager: SupportsBundlePublishing) -> None:
        """Publish the bundle's source directory and convert its assets."""

        if self.source_path is not None and self.base_path is None:
            record = manager.publish(self.source_path, self.publish_options)
            self.base_path = record.path
            self.base_url = record.url

        converter = manager.converter
        if self.base_path is None or converter is None:
            return

        self.js = [converter.convert(js, self.base_path) if is_relative_url(js) else js for js in self.js]
        self.css = [converter.convert(css, self.base_path) if is_relative_url(css) else css for css in self.css]

    @classmethod
    def dummy(cls, name: str) -> "AssetBundle":
        """Return an inert bundle used when ``name`` has been disabled."""

        return cls(name=name)
