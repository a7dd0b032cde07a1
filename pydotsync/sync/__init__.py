"""Sync engine for pydotsync - hashing, comparison and tree copies."""

from .comparator import EntryComparator, SyncAction, SyncDecision, resolve_kind
from .copier import TreeCopier
from .engine import SyncEngine
from .hasher import (
    EMPTY_FILE_HASH,
    EMPTY_TREE_HASH,
    hash_dir,
    hash_file,
    hash_path,
    list_tree_files,
)
from .modes import SyncMode
from .report import EntryOutcome, OutcomeStatus, SyncReport

__all__ = [
    "SyncEngine",
    "SyncMode",
    "SyncReport",
    "EntryOutcome",
    "OutcomeStatus",
    "EntryComparator",
    "SyncAction",
    "SyncDecision",
    "resolve_kind",
    "TreeCopier",
    "hash_file",
    "hash_dir",
    "hash_path",
    "list_tree_files",
    "EMPTY_FILE_HASH",
    "EMPTY_TREE_HASH",
]
