"""Exception hierarchy raised by the asset publishing services."""

from __future__ import annotations


class ConfigError(ValueError):
    """Raised when the manager configuration cannot be used."""


class PublishError(RuntimeError):
    """Base class for failures while publishing an asset."""


class SourceNotFoundError(PublishError, FileNotFoundError):
    """The file or directory requested for publishing does not exist."""


class LinkFailedError(PublishError):
    """A symlink could not be created and the target is still missing."""


class PublishIOError(PublishError):
    """A filesystem operation failed while materialising a published asset."""

    def __init__(self, message: str, cause: OSError | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidDestinationError(PublishError, ValueError):
    """The destination of a directory copy lies inside its own source."""
