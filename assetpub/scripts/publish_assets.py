"""Publish assets into the public directory from the command line.

Examples::

    assetpub publish ./vendor/jquery/dist --only '*.js' --exclude '*.map'
    assetpub describe ./resources/app.css

Settings come from the YAML file named by ``--config`` or ``ASSETPUB_CONFIG``
plus the ``ASSETPUB_*`` environment overrides. The result is printed as a
JSON object with ``path`` and ``url`` keys.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from assetpub.models.errors import ConfigError, PublishError
from assetpub.models.publisher import CopyOptions
from assetpub.services.config_loader import load_settings
from assetpub.services.manager import AssetManager

LOGGER = logging.getLogger("assetpub.cli")


def _configure_logging() -> None:
    level_name = os.getenv("ASSETPUB_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s", stream=sys.stderr)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish files and directories as web assets.")
    parser.add_argument(
        "--config",
        default=os.getenv("ASSETPUB_CONFIG"),
        help="Path to the YAML settings file (default from ASSETPUB_CONFIG).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    publish = commands.add_parser("publish", help="Copy or link a source into the public directory.")
    publish.add_argument("path", help="File or directory to publish.")
    publish.add_argument("--only", action="append", default=[], help="Pattern files must match; repeatable.")
    publish.add_argument("--exclude", action="append", default=[], help="Pattern to leave out; repeatable.")
    publish.add_argument(
        "--case-insensitive",
        action="store_true",
        help="Match --only/--exclude patterns ignoring case.",
    )
    publish.add_argument(
        "--force-copy",
        action="store_true",
        default=None,
        help="Copy a directory even if it has been published before.",
    )

    describe = commands.add_parser("describe", help="Show where a source would be published.")
    describe.add_argument("path", help="File or directory to look up.")
    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> int:
    _configure_logging()
    args = _parse_args(argv)

    try:
        manager = AssetManager(load_settings(args.config))
        if args.command == "publish":
            options = CopyOptions(
                only=tuple(args.only),
                exclude=tuple(args.exclude),
                case_sensitive=not args.case_insensitive,
                force_copy=args.force_copy,
            )
            record = manager.publish(args.path, options)
            payload = {"path": str(record.path), "url": record.url}
        else:
            path = manager.describe_published_path(args.path)
            if path is None:
                LOGGER.error("Source does not exist: %s", args.path)
                return 1
            payload = {"path": str(path), "url": manager.describe_published_url(args.path)}
    except (ConfigError, PublishError) as exc:
        LOGGER.error("%s", exc)
        return 1

    print(json.dumps(payload, ensure_ascii=False))
    return 0


def main() -> None:  # pragma: no cover - console script entry point
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
