"""PyDotSync - keep a dotfiles repository and your home directory in sync."""

from .exceptions import (
    ConfigFormatError,
    DotSyncError,
    DuplicateEntryError,
    EntryIOError,
    EntryNotFoundError,
    HashMismatchBootstrap,
    KindMismatchError,
    RepositoryRootError,
    ValidationError,
)
from .models import Entry, EntryCollection, EntryKind
from .store import EntryStore, clear_metadata, find_broken, fix

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Entry",
    "EntryCollection",
    "EntryKind",
    "EntryStore",
    "clear_metadata",
    "find_broken",
    "fix",
    "DotSyncError",
    "EntryNotFoundError",
    "EntryIOError",
    "ValidationError",
    "DuplicateEntryError",
    "KindMismatchError",
    "RepositoryRootError",
    "ConfigFormatError",
    "HashMismatchBootstrap",
]
