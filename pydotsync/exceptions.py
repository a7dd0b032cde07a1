"""Exceptions raised by pydotsync."""

from pathlib import Path
from typing import Optional, Union


class DotSyncError(Exception):
    """Base exception for all pydotsync errors."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None


class EntryNotFoundError(DotSyncError):
    """A path required by the operation does not exist."""


class EntryIOError(DotSyncError):
    """Reading or writing a path failed (permission denied, disk full, ...)."""


class ValidationError(DotSyncError):
    """The entry collection or a single entry is inconsistent."""


class DuplicateEntryError(ValidationError):
    """Two entries share the same name."""


class KindMismatchError(ValidationError):
    """An entry is a file on one side and a directory on the other."""


class RepositoryRootError(ValidationError):
    """The repository root (dotconfigs_path) is missing or not a directory."""


class ConfigFormatError(ValidationError):
    """The persisted entry file could not be parsed."""


class HashMismatchBootstrap(DotSyncError):
    """Signals that an entry has to be treated as never synced.

    This is not a failure: the sync engine catches it and copies the entry.
    """
