"""Helpers for classifying asset references."""
from __future__ import annotations


def is_relative_url(url: str) -> bool:
    """Return ``True`` when ``url`` has no scheme and is not protocol-relative.

    A root-relative reference such as ``/js/app.js`` counts as relative here;
    callers that need to treat it as external check the leading slash
    themselves.
    """

    return not url.startswith("//") and "://" not in url


def is_external_reference(asset: str) -> bool:
    """Return ``True`` for absolute URLs and root-relative paths."""

    return not is_relative_url(asset) or asset.startswith("/")


__all__ = ["is_external_reference", "is_relative_url"]
