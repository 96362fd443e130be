"""Expansion of ``@alias`` prefixes used in paths and URLs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from assetpub.models.config import AssetManagerSettings
from assetpub.models.errors import ConfigError


@dataclass(slots=True)
class AliasResolver:
    """Expand ``@name`` and ``@name/rest`` using a fixed alias table."""

    aliases: dict[str, str] = field(default_factory=dict)

    def resolve(self, path: str) -> str:
        if not path.startswith("@"):
            return path

        name, separator, rest = path.partition("/")
        try:
            root = self.aliases[name]
        except KeyError as exc:
            raise ConfigError(f"Unknown path alias: {name}") from exc

        if not separator:
            return root
        return f"{root.rstrip('/')}/{rest}"

    def __call__(self, path: str) -> str:
        return self.resolve(path)

    @classmethod
    def from_settings(cls, settings: AssetManagerSettings, extra: Mapping[str, str] | None = None) -> "AliasResolver":
        """Build the table with ``@webroot`` and ``@web`` plus configured aliases."""

        aliases: dict[str, str] = {"@web": settings.web_url}
        if settings.web_root is not None:
            aliases["@webroot"] = settings.web_root
        aliases.update(settings.aliases)
        if extra:
            aliases.update(extra)
        return cls(aliases=aliases)
