"""Entry comparison logic for sync operations."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..exceptions import (
    EntryNotFoundError,
    HashMismatchBootstrap,
    KindMismatchError,
    ValidationError,
)
from ..models import Entry, EntryKind
from .hasher import hash_path
from .modes import SyncMode

logger = logging.getLogger(__name__)


class SyncAction(str, Enum):
    """Actions that can be taken for an entry."""

    COPY_TO_LOCAL = "copy_to_local"
    """Copy repository copy over the local copy"""

    COPY_TO_REPOSITORY = "copy_to_repository"
    """Copy local copy over the repository copy"""

    SKIP = "skip"
    """Skip entry (no action needed)"""


@dataclass
class SyncDecision:
    """Represents a decision about how to sync an entry."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    entry: Entry
    """Entry the decision is about"""

    kind: EntryKind
    """Resolved kind of the entry"""

    source: Path
    """Path that is read when copying"""

    target: Path
    """Path that is written when copying"""

    @property
    def needs_copy(self) -> bool:
        return self.action != SyncAction.SKIP


def resolve_kind(entry: Entry) -> EntryKind:
    """Determine the kind of an entry from disk and its recorded kind.

    Args:
        entry: Entry to inspect

    Returns:
        The kind both sides agree on

    Raises:
        KindMismatchError: If the sides disagree, or disk disagrees with the
            recorded kind
        ValidationError: If a path is neither a file nor a directory
        EntryNotFoundError: If no kind is recorded and neither path exists
    """
    observed: dict[str, EntryKind] = {}
    for side, path in (("repository", entry.source), ("local", entry.dest)):
        if not path.exists():
            continue
        kind = EntryKind.of_path(path)
        if kind is None:
            raise ValidationError(
                f"{entry.name}: {path} is neither a file nor a directory", path=path
            )
        observed[side] = kind

    kinds = set(observed.values())
    if len(kinds) > 1:
        raise KindMismatchError(
            f"{entry.name}: repository copy is a {observed['repository'].value} "
            f"but local copy is a {observed['local'].value}"
        )

    if kinds:
        actual = kinds.pop()
        if entry.kind is not None and entry.kind != actual:
            raise KindMismatchError(
                f"{entry.name}: recorded as {entry.kind.value} "
                f"but found a {actual.value} on disk"
            )
        return actual

    if entry.kind is not None:
        return entry.kind

    raise EntryNotFoundError(
        f"{entry.name}: neither {entry.source} nor {entry.dest} exists",
        path=entry.dest,
    )


class EntryComparator:
    """Compares the current hash of an entry with its stored hash."""

    def __init__(self, sync_mode: SyncMode):
        """Initialize entry comparator.

        Args:
            sync_mode: Sync mode to use for comparison
        """
        self.sync_mode = sync_mode

    def decide(self, entry: Entry) -> SyncDecision:
        """Determine the sync action for an entry.

        Args:
            entry: Entry to compare

        Returns:
            SyncDecision for this entry

        Raises:
            ValidationError: If the entry kind is inconsistent
            EntryNotFoundError: If the entry exists on neither side
            EntryIOError: If the side to compare cannot be read
        """
        kind = resolve_kind(entry)

        if self.sync_mode.is_push:
            action = SyncAction.COPY_TO_LOCAL
            source, target = entry.source, entry.dest
        else:
            action = SyncAction.COPY_TO_REPOSITORY
            source, target = entry.dest, entry.source

        def decision(action: SyncAction, reason: str) -> SyncDecision:
            return SyncDecision(
                action=action,
                reason=reason,
                entry=entry,
                kind=kind,
                source=source,
                target=target,
            )

        if self.sync_mode.is_forced:
            return decision(action, "Forced copy")

        try:
            current_hash = self._current_hash(entry, source, kind)
        except HashMismatchBootstrap as e:
            return decision(action, str(e))

        if current_hash == entry.content_hash:
            return decision(SyncAction.SKIP, "Unchanged since last sync")

        return decision(action, "Content changed")

    def _current_hash(self, entry: Entry, path: Path, kind: EntryKind) -> str:
        """Hash the side that would be copied.

        Raises:
            HashMismatchBootstrap: If the entry was never synced or the path
                is missing, so it has to be copied without comparison
        """
        if entry.content_hash is None:
            raise HashMismatchBootstrap("No stored hash (first sync)")

        try:
            return hash_path(path, kind)
        except EntryNotFoundError as e:
            logger.debug(f"{entry.name}: {e}")
            raise HashMismatchBootstrap(f"Missing {path}, syncing anyway") from e
