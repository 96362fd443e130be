"""Load :class:`AssetManagerSettings` from YAML and environment overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError
import yaml

from assetpub.models.config import AssetManagerSettings
from assetpub.models.errors import ConfigError

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR: Final[str] = "ASSETPUB_CONFIG"

_STRING_ENV_VARS: Final[dict[str, str]] = {
    "ASSETPUB_BASE_PATH": "base_path",
    "ASSETPUB_BASE_URL": "base_url",
    "ASSETPUB_WEB_ROOT": "web_root",
    "ASSETPUB_WEB_URL": "web_url",
}
_BOOLEAN_ENV_VARS: Final[dict[str, str]] = {
    "ASSETPUB_LINK_ASSETS": "link_assets",
    "ASSETPUB_FORCE_COPY": "force_copy",
    "ASSETPUB_APPEND_TIMESTAMP": "append_timestamp",
}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read asset configuration {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in asset configuration {path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Asset configuration {path} must contain a mapping")
    return payload


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for variable_name, field_name in _STRING_ENV_VARS.items():
        raw_value = os.getenv(variable_name)
        if raw_value:
            overrides[field_name] = raw_value.strip()

    for variable_name, field_name in _BOOLEAN_ENV_VARS.items():
        raw_value = os.getenv(variable_name)
        if not raw_value:
            continue
        lowered = raw_value.strip().lower()
        if lowered in _TRUE_VALUES:
            overrides[field_name] = True
        elif lowered in _FALSE_VALUES:
            overrides[field_name] = False
        else:
            LOGGER.warning("Ignoring invalid boolean value in %s", variable_name)
    return overrides


def load_settings(path: str | Path | None = None) -> AssetManagerSettings:
    """Return validated settings from ``path`` (or ``ASSETPUB_CONFIG``) and the environment."""

    config_path = path or os.getenv(CONFIG_ENV_VAR)
    data: dict[str, Any] = _read_yaml(Path(config_path)) if config_path else {}
    data.update(_env_overrides())

    try:
        return AssetManagerSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid asset configuration: {exc}") from exc
