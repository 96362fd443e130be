"""Registry mapping bundle names to the factories that build them."""

from __future__ import annotations

from collections.abc import Callable
import dataclasses
from pathlib import Path

from assetpub.models.bundle import AssetBundle
from assetpub.models.config import AssetManagerSettings, BundleSettings
from assetpub.models.errors import ConfigError


BundleFactory = Callable[[], AssetBundle]


class BundleRegistry:
    """Explicit name -> factory table resolved when configuration is loaded."""

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._factories: dict[str, BundleFactory] = {}
        self._disabled: set[str] = set()

    def register(self, name: str, factory: BundleFactory) -> None:
        self._factories[name] = factory

    def disable(self, name: str) -> None:
        self._disabled.add(name)

    def is_disabled(self, name: str) -> bool:
        return not self.enabled or name in self._disabled

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def create(self, name: str) -> AssetBundle:
        try:
            factory = self._factories[name]
        except KeyError as exc:
            raise ConfigError(f"Invalid asset bundle configuration: {name}") from exc
        return factory()

    @classmethod
    def from_settings(
        cls,
        settings: AssetManagerSettings,
        *,
        resolve_alias: Callable[[str], str],
        factories: dict[str, BundleFactory] | None = None,
    ) -> "BundleRegistry":
        """Combine code-registered factories with bundle definitions from settings.

        A configured entry for a code-registered name overrides only the
        fields it sets; ``False`` disables the bundle.
        """

        registry = cls(enabled=settings.bundles is not False)
        for name, factory in (factories or {}).items():
            registry.register(name, factory)
        if settings.bundles is False:
            return registry

        for name, definition in settings.bundles.items():
            if definition is False:
                registry.disable(name)
                continue
            base = factories.get(name) if factories else None
            registry.register(name, _configured_factory(name, definition, resolve_alias, base))

        return registry


def _configured_factory(
    name: str,
    definition: BundleSettings,
    resolve_alias: Callable[[str], str],
    base: BundleFactory | None,
) -> BundleFactory:
    overrides: dict[str, object] = {}
    for field_name in definition.model_fields_set:
        value = getattr(definition, field_name)
        if field_name in {"source_path", "base_url"} and value is not None:
            value = resolve_alias(value)
        elif field_name == "base_path" and value is not None:
            value = Path(resolve_alias(value))
        elif isinstance(value, list):
            value = list(value)
        overrides[field_name] = value

    if "base_url" in overrides and overrides["base_url"] is None:
        overrides["base_url"] = ""

    def factory() -> AssetBundle:
        bundle = base() if base is not None else AssetBundle(name=name)
        return dataclasses.replace(bundle, **overrides)

    return factory
