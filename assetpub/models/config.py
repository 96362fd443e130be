"""Validated configuration for the asset manager."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


def _parse_mode(value: Any) -> Any:
    """Accept permission modes as integers or octal strings such as ``"0775"``."""

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text, 8)
        except ValueError as exc:
            raise ValueError(f"Invalid octal permission mode: {value!r}") from exc
    return value


class BundleSettings(BaseModel):
    """Bundle definition loaded from configuration."""

    source_path: str | None = None
    base_path: str | None = None
    base_url: str | None = None
    js: list[str] = Field(default_factory=list)
    css: list[str] = Field(default_factory=list)
    depends: list[str] = Field(default_factory=list)


class AssetManagerSettings(BaseModel):
    """Everything the manager needs to publish and resolve assets."""

    base_path: str = Field("@webroot/assets", description="Directory receiving published assets.")
    base_url: str = Field("@web/assets", description="URL under which ``base_path`` is served.")
    web_root: str | None = Field(None, description="Document root of the web server.")
    web_url: str = Field("", description="Base URL of the web application.")
    aliases: dict[str, str] = Field(default_factory=dict)
    allowed_roots: list[str] = Field(
        default_factory=list,
        description="Directories whose contents HTTP clients may publish; empty allows none.",
    )
    link_assets: bool = False
    file_mode: int | None = None
    dir_mode: int = 0o775
    force_copy: bool = False
    append_timestamp: bool = False
    asset_map: dict[str, str] = Field(default_factory=dict)
    bundles: dict[str, BundleSettings | Literal[False]] | Literal[False] = Field(default_factory=dict)

    @field_validator("file_mode", "dir_mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        return _parse_mode(value)

    @field_validator("web_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("aliases")
    @classmethod
    def _ensure_alias_prefix(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not name.startswith("@"):
                raise ValueError(f"Alias names must start with '@': {name!r}")
        return value
