"""Publishing of asset files and directories into the web-accessible base path."""

from __future__ import annotations

from collections.abc import Callable
import logging
import os
from pathlib import Path

from assetpub.models.errors import ConfigError, SourceNotFoundError
from assetpub.models.publisher import AfterCopyHook, BeforeCopyHook, CopyOptions, PublishRecord
from assetpub.services.cache import PublishCache
from assetpub.services.copier import FileTreeCopier, ensure_directory
from assetpub.services.hasher import HashCallback, PathHasher
from assetpub.services.linker import link_directory, link_file

logger = logging.getLogger(__name__)


AliasResolution = Callable[[str], str]


def _identity(path: str) -> str:
    return path


class AssetPublisher:
    """Copy or link sources under ``base_path`` exactly once per process.

    A file lands in ``base_path/<hash>/<name>`` and a directory in
    ``base_path/<hash>``; the matching URLs live under ``base_url``. Whether
    sources are copied or symlinked is fixed for the lifetime of the
    publisher.
    """

    def __init__(
        self,
        base_path: str | Path,
        base_url: str,
        *,
        link_assets: bool = False,
        force_copy: bool = False,
        dir_mode: int | None = 0o775,
        file_mode: int | None = None,
        before_copy: BeforeCopyHook | None = None,
        after_copy: AfterCopyHook | None = None,
        hash_callback: HashCallback | None = None,
        alias_resolver: AliasResolution | None = None,
        copier: FileTreeCopier | None = None,
        cache: PublishCache | None = None,
    ) -> None:
        base = Path(base_path)
        if not base.is_dir():
            raise ConfigError(f"The directory does not exist: {base}")
        if not os.access(base, os.W_OK):
            raise ConfigError(f"The directory is not writable: {base}")

        self.base_path = base.resolve()
        self.base_url = base_url.rstrip("/")
        self.link_assets = link_assets
        self.force_copy = force_copy
        self.dir_mode = dir_mode
        self.file_mode = file_mode
        self.before_copy = before_copy
        self.after_copy = after_copy
        self.hasher = PathHasher(link_assets=link_assets, callback=hash_callback)
        self.copier = copier or FileTreeCopier()
        self.cache = cache or PublishCache()
        self._resolve_alias = alias_resolver or _identity

    def publish(self, path: str | Path, options: CopyOptions | None = None) -> PublishRecord:
        """Publish a file or directory and return where it can be reached.

        Repeated calls with the same path return the cached record without
        touching the filesystem. ``options`` only affect directory copies.

        Raises:
            SourceNotFoundError: ``path`` does not exist.
            LinkFailedError: the symlink could not be created.
            PublishIOError: creating directories or copying files failed.
        """

        key = self._resolve_alias(str(path))
        record = self.cache.get(key)
        if record is not None:
            return record

        with self.cache.locked(key):
            record = self.cache.get(key)
            if record is not None:
                return record

            source = self._realpath(key)
            if source is None:
                raise SourceNotFoundError(f"The file or directory to be published does not exist: {key}")

            if source.is_file():
                record = self._publish_file(source)
            else:
                record = self._publish_directory(source, options or CopyOptions())

            self.cache.put(key, record)

        logger.info(
            "Published %s as %s",
            key,
            record.url,
            extra={"event": "asset.publish", "link": self.link_assets},
        )
        return record

    def describe_published_path(self, path: str | Path) -> Path | None:
        """Return where ``path`` is (or would be) published, without publishing it."""

        key = self._resolve_alias(str(path))
        record = self.cache.get(key)
        if record is not None:
            return record.path

        source = self._realpath(key)
        if source is None:
            return None
        destination = self.base_path / self.hasher.hash(source)
        return destination / source.name if source.is_file() else destination

    def describe_published_url(self, path: str | Path) -> str | None:
        """Return the URL ``path`` is (or would be) published under, without publishing it."""

        key = self._resolve_alias(str(path))
        record = self.cache.get(key)
        if record is not None:
            return record.url

        source = self._realpath(key)
        if source is None:
            return None
        url = f"{self.base_url}/{self.hasher.hash(source)}"
        return f"{url}/{source.name}" if source.is_file() else url

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _realpath(path: str) -> Path | None:
        try:
            return Path(path).resolve(strict=True)
        except (OSError, RuntimeError):
            return None

    def _publish_file(self, source: Path) -> PublishRecord:
        directory = self.hasher.hash(source)
        target_dir = self.base_path / directory
        target = target_dir / source.name

        ensure_directory(target_dir, self.dir_mode)

        if self.link_assets:
            link_file(source, target)
        else:
            self.copier.copy_file(source, target, file_mode=self.file_mode)

        return PublishRecord(path=target, url=f"{self.base_url}/{directory}/{source.name}")

    def _publish_directory(self, source: Path, options: CopyOptions) -> PublishRecord:
        directory = self.hasher.hash(source)
        target = self.base_path / directory

        if self.link_assets:
            link_directory(source, target, dir_mode=self.dir_mode)
        else:
            effective = options.merged_over(
                before_copy=self.before_copy,
                after_copy=self.after_copy,
                force_copy=self.force_copy,
                dir_mode=self.dir_mode,
                file_mode=self.file_mode,
            )
            self.copier.copy_directory(source, target, effective)

        return PublishRecord(path=target, url=f"{self.base_url}/{directory}")
