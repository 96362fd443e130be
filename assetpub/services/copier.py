"""Recursive copying of asset directories into the public area."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from fnmatch import fnmatchcase
import logging
import os
from pathlib import Path
import shutil

from assetpub.models.errors import InvalidDestinationError, PublishIOError
from assetpub.models.publisher import CopyOptions

logger = logging.getLogger(__name__)


def skip_hidden(source: Path, target: Path) -> bool:
    """Default ``before_copy`` hook: leave out dot-prefixed files and directories."""

    _ = target
    return not source.name.startswith(".")


def apply_mode(path: Path, mode: int) -> bool:
    """Change permissions of ``path`` if possible; failures are only logged."""

    try:
        os.chmod(path, mode)
    except OSError as exc:
        logger.debug(
            "Could not set mode %o on %s: %s",
            mode,
            path,
            exc,
            extra={"event": "asset.chmod_failed"},
        )
        return False
    return True


def ensure_directory(path: Path, mode: int | None = None) -> None:
    """Create ``path`` and its parents, applying ``mode`` to the leaf."""

    if path.is_dir():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PublishIOError(f"Unable to create directory {path}: {exc}", exc) from exc
    if mode is not None:
        apply_mode(path, mode)


@dataclass(slots=True, frozen=True)
class _Pattern:
    """A parsed ``only``/``exclude`` entry using gitignore-like syntax."""

    pattern: str
    negative: bool
    dir_only: bool
    base_name_only: bool

    @classmethod
    def parse(cls, raw: str) -> "_Pattern | None":
        text = raw.strip()
        negative = text.startswith("!")
        if negative:
            text = text[1:]
        dir_only = text.endswith("/")
        text = text.rstrip("/")
        base_name_only = "/" not in text
        text = text.lstrip("/")
        if not text:
            return None
        return cls(pattern=text, negative=negative, dir_only=dir_only, base_name_only=base_name_only)

    def matches(self, relative: str, *, is_dir: bool, case_sensitive: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        subject = relative.rsplit("/", 1)[-1] if self.base_name_only else relative
        pattern = self.pattern
        if not case_sensitive:
            subject = subject.lower()
            pattern = pattern.lower()
        # Wildcards never cross "/": compare path patterns segment by segment.
        subject_parts = subject.split("/")
        pattern_parts = pattern.split("/")
        if len(subject_parts) != len(pattern_parts):
            return False
        return all(fnmatchcase(part, glob) for part, glob in zip(subject_parts, pattern_parts))


def _last_match(
    patterns: Sequence[str], relative: str, *, is_dir: bool, case_sensitive: bool
) -> _Pattern | None:
    """Return the last pattern in ``patterns`` matching ``relative``."""

    for raw in reversed(patterns):
        parsed = _Pattern.parse(raw)
        if parsed is not None and parsed.matches(relative, is_dir=is_dir, case_sensitive=case_sensitive):
            return parsed
    return None


def passes_filters(relative: str, *, is_dir: bool, options: CopyOptions) -> bool:
    """Return ``True`` when the entry at ``relative`` should be copied.

    ``exclude`` applies to files and directories; ``only`` applies to files,
    so directories are always descended into.
    """

    if options.exclude:
        matched = _last_match(options.exclude, relative, is_dir=is_dir, case_sensitive=options.case_sensitive)
        if matched is not None:
            return matched.negative

    if options.only and not is_dir:
        matched = _last_match(options.only, relative, is_dir=is_dir, case_sensitive=options.case_sensitive)
        return matched is not None and not matched.negative

    return True


def _is_fresh(target: Path, source: Path) -> bool:
    """Return ``True`` when ``target`` is at least as new as ``source``."""

    try:
        return os.path.getmtime(target) >= os.path.getmtime(source)
    except OSError:
        return False


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


class FileTreeCopier:
    """Copy files and directory trees, honouring filters and hooks."""

    def copy_file(
        self,
        source: Path,
        target: Path,
        *,
        file_mode: int | None = None,
        force: bool = False,
    ) -> bool:
        """Copy ``source`` to ``target`` unless the target is already up to date.

        Returns ``True`` when bytes were copied.
        """

        if not force and _is_fresh(target, source):
            return False

        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            raise PublishIOError(f"Unable to copy {source} to {target}: {exc}", exc) from exc

        if file_mode is not None:
            apply_mode(target, file_mode)
        return True

    def copy_directory(self, source: Path, target: Path, options: CopyOptions | None = None) -> None:
        """Copy the tree under ``source`` into ``target``.

        An existing ``target`` is treated as already published unless
        ``options.force_copy`` is set. Empty directories are not created.
        """

        options = options or CopyOptions()
        source = Path(source)
        target = Path(target)

        if not options.force_copy and target.is_dir():
            logger.debug("Skipping copy into existing %s", target, extra={"event": "asset.copy_skipped"})
            return

        if _is_within(target.resolve(), source.resolve()):
            raise InvalidDestinationError(f"Cannot copy {source} into itself or one of its subdirectories: {target}")

        self._copy_tree(source, target, source, options)

    def _copy_tree(self, source: Path, target: Path, root: Path, options: CopyOptions) -> None:
        before_copy = options.before_copy or skip_hidden
        target_exists = target.is_dir()

        try:
            with os.scandir(source) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            raise PublishIOError(f"Unable to read directory {source}: {exc}", exc) from exc

        for entry in entries:
            entry_source = Path(entry.path)
            entry_target = target / entry.name
            is_dir = entry.is_dir()
            relative = entry_source.relative_to(root).as_posix()

            if not passes_filters(relative, is_dir=is_dir, options=options):
                continue
            if not before_copy(entry_source, entry_target):
                continue

            if is_dir:
                self._copy_tree(entry_source, entry_target, root, options)
                continue

            if not target_exists:
                ensure_directory(target, options.dir_mode)
                target_exists = True

            copied = self.copy_file(
                entry_source,
                entry_target,
                file_mode=options.file_mode,
                force=bool(options.force_copy),
            )
            if copied and options.after_copy is not None:
                options.after_copy(entry_source, entry_target)
