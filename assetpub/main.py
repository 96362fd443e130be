"""FastAPI application exposing the asset manager over HTTP"""

from __future__ import annotations

from functools import lru_cache
import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from assetpub.models.errors import ConfigError, InvalidDestinationError, PublishError, SourceNotFoundError
from assetpub.models.publisher import CopyOptions
from assetpub.services.config_loader import load_settings
from assetpub.services.manager import AssetManager

app = FastAPI(title="Asset Publisher")

logger = logging.getLogger(__name__)


def _build_debug_detail(exc: Exception) -> dict[str, str]:
    """Return a serialisable mapping describing ``exc`` for debugging."""

    message = str(exc).strip()
    return {
        "type": type(exc).__name__,
        "message": message or "No exception message provided.",
    }


@lru_cache(maxsize=1)
def _cached_asset_manager() -> AssetManager:
    """Create the process-wide manager from the environment configuration."""

    return AssetManager(load_settings())


def get_asset_manager() -> AssetManager:
    """FastAPI dependency returning the shared AssetManager instance."""

    try:
        return _cached_asset_manager()
    except ConfigError as exc:
        logger.exception("Asset manager initialisation failed", extra={"event": "asset.manager_init"})
        raise HTTPException(
            status_code=503,
            detail={
                "message": "Asset publishing is not configured",
                "debug": _build_debug_detail(exc),
            },
        ) from exc


class PublishRequest(BaseModel):
    """API payload naming a source to publish."""

    path: str = Field(..., description="File or directory to publish.")
    only: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    case_sensitive: bool = True
    force_copy: bool | None = None

    @field_validator("path")
    @classmethod
    def _ensure_path_not_empty(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Path must not be empty.")
        return cleaned


class PublishResponse(BaseModel):
    """Where a source has been (or would be) published."""

    path: str
    url: str


@app.get("/healthz")
def healthz():
    return {"ok": True}


def _invalid_path(exc: ConfigError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"message": "Invalid asset path", "debug": _build_debug_detail(exc)},
    )


def _ensure_publishable(manager: AssetManager, path: str) -> None:
    """Reject paths outside the configured ``allowed_roots``."""

    if not manager.is_publishable(path):
        logger.warning(
            "Rejected request for %s outside the allowed roots",
            path,
            extra={"event": "asset.path_rejected", "path": path},
        )
        raise HTTPException(status_code=403, detail="Path is outside the publishable roots")


@app.get("/api/published", response_model=PublishResponse)
async def describe_published(
    path: str,
    manager: AssetManager = Depends(get_asset_manager),
) -> PublishResponse:
    """Return the destination of ``path`` without publishing it."""

    try:
        _ensure_publishable(manager, path)
        published_path = manager.describe_published_path(path)
        published_url = manager.describe_published_url(path)
    except ConfigError as exc:
        raise _invalid_path(exc) from exc

    if published_path is None or published_url is None:
        raise HTTPException(status_code=404, detail="Source not found")
    return PublishResponse(path=str(published_path), url=published_url)


@app.post("/api/publish", response_model=PublishResponse)
async def publish_asset(
    payload: PublishRequest,
    manager: AssetManager = Depends(get_asset_manager),
) -> PublishResponse:
    """Publish the requested source and return its public location."""

    options = CopyOptions(
        only=tuple(payload.only),
        exclude=tuple(payload.exclude),
        case_sensitive=payload.case_sensitive,
        force_copy=payload.force_copy,
    )
    try:
        _ensure_publishable(manager, payload.path)
        record = manager.publish(payload.path, options)
    except ConfigError as exc:
        raise _invalid_path(exc) from exc
    except SourceNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Source not found") from exc
    except InvalidDestinationError as exc:
        raise HTTPException(
            status_code=400,
            detail={"message": "Source contains the publish directory", "debug": _build_debug_detail(exc)},
        ) from exc
    except PublishError as exc:
        logger.exception("Publishing failed", extra={"event": "asset.publish_error", "path": payload.path})
        raise HTTPException(
            status_code=500,
            detail={"message": "Publishing failed", "debug": _build_debug_detail(exc)},
        ) from exc

    return PublishResponse(path=str(record.path), url=record.url)


@app.get("/api/bundles/{name}", response_class=JSONResponse)
async def bundle_assets(
    name: str,
    manager: AssetManager = Depends(get_asset_manager),
) -> JSONResponse:
    """Return the resolved script and stylesheet URLs of a bundle."""

    if name not in manager.bundles and not manager.bundles.is_disabled(name):
        raise HTTPException(status_code=404, detail="Bundle not found")

    try:
        bundle = manager.get_bundle(name)
        js = [manager.resolve_asset_url(bundle, asset) for asset in bundle.js]
        css = [manager.resolve_asset_url(bundle, asset) for asset in bundle.css]
    except ConfigError as exc:
        logger.exception("Bundle configuration is invalid", extra={"event": "asset.bundle_error", "bundle": name})
        raise HTTPException(
            status_code=500,
            detail={"message": "Bundle configuration is invalid", "debug": _build_debug_detail(exc)},
        ) from exc
    except PublishError as exc:
        logger.exception("Bundle publishing failed", extra={"event": "asset.bundle_error", "bundle": name})
        raise HTTPException(
            status_code=500,
            detail={"message": "Bundle publishing failed", "debug": _build_debug_detail(exc)},
        ) from exc

    return JSONResponse(
        {
            "name": bundle.name,
            "base_url": bundle.base_url,
            "depends": list(bundle.depends),
            "js": js,
            "css": css,
        }
    )
