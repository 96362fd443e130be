"""Data structures describing published assets and copy behaviour."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path


BeforeCopyHook = Callable[[Path, Path], bool]
AfterCopyHook = Callable[[Path, Path], None]


@dataclass(slots=True, frozen=True)
class PublishRecord:
    """Location of a published asset on disk and on the web."""

    path: Path
    url: str


@dataclass(slots=True)
class CopyOptions:
    """Per-call options applied when a directory is copied into the public area.

    ``None`` means "not set": the publisher falls back to its own defaults
    for ``before_copy``, ``after_copy``, ``force_copy``, ``dir_mode`` and
    ``file_mode``.
    """

    only: Sequence[str] = field(default_factory=tuple)
    exclude: Sequence[str] = field(default_factory=tuple)
    case_sensitive: bool = True
    before_copy: BeforeCopyHook | None = None
    after_copy: AfterCopyHook | None = None
    force_copy: bool | None = None
    dir_mode: int | None = None
    file_mode: int | None = None

    def merged_over(
        self,
        *,
        before_copy: BeforeCopyHook | None,
        after_copy: AfterCopyHook | None,
        force_copy: bool,
        dir_mode: int | None,
        file_mode: int | None,
    ) -> "CopyOptions":
        """Return a copy where unset fields take the supplied defaults."""

        return CopyOptions(
            only=tuple(self.only),
            exclude=tuple(self.exclude),
            case_sensitive=self.case_sensitive,
            before_copy=self.before_copy if self.before_copy is not None else before_copy,
            after_copy=self.after_copy if self.after_copy is not None else after_copy,
            force_copy=self.force_copy if self.force_copy is not None else force_copy,
            dir_mode=self.dir_mode if self.dir_mode is not None else dir_mode,
            file_mode=self.file_mode if self.file_mode is not None else file_mode,
        )
