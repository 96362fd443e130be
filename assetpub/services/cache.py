"""In-memory record of what has been published during this process."""

from __future__ import annotations

from contextlib import contextmanager
import threading
from typing import Iterator

from assetpub.models.publisher import PublishRecord


class PublishCache:
    """Map of alias-resolved source paths to their publish records.

    Entries are never evicted and nothing is persisted: other processes keep
    their own cache and converge on the same destinations through the
    mtime-derived directory names instead.

    Keys are the caller's spelling of the path, not its realpath, so two
    spellings of one file are cached (and published) separately.
    """

    def __init__(self) -> None:
        self._records: dict[str, PublishRecord] = {}
        self._guard = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    def get(self, source: str) -> PublishRecord | None:
        return self._records.get(source)

    def put(self, source: str, record: PublishRecord) -> None:
        self._records[source] = record

    def __contains__(self, source: object) -> bool:
        return source in self._records

    def __len__(self) -> int:
        return len(self._records)

    @contextmanager
    def locked(self, source: str) -> Iterator[None]:
        """Serialise publishers working on the same ``source`` within this process."""

        with self._guard:
            lock = self._key_locks.setdefault(source, threading.Lock())
        with lock:
            yield
