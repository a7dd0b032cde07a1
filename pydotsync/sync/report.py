"""Per-entry outcomes and run summaries."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..models import Entry, EntryCollection
from .modes import SyncMode


class OutcomeStatus(str, Enum):
    """Result of processing a single entry."""

    SYNCED = "synced"
    """Entry was copied and its hash refreshed"""

    PLANNED = "planned"
    """Entry would be copied (dry run)"""

    SKIPPED = "skipped"
    """Entry was unchanged"""

    ERROR = "error"
    """Entry could not be processed"""


@dataclass
class EntryOutcome:
    """Outcome of one entry in a sync pass."""

    name: str
    """Entry name"""

    status: OutcomeStatus
    """What happened"""

    reason: str
    """Human-readable reason"""

    entry: Entry
    """Entry after processing (unchanged on error)"""

    error: Optional[Exception] = None
    """Exception that caused an ERROR outcome"""

    files_copied: int = 0
    """Number of files written"""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status.value,
            "reason": self.reason,
            "hash": self.entry.content_hash,
            "conf_type": self.entry.kind.value if self.entry.kind else None,
            "error_type": type(self.error).__name__ if self.error else None,
            "files_copied": self.files_copied,
        }


@dataclass
class SyncReport:
    """Summary of a sync pass over an entry collection."""

    mode: SyncMode
    """Mode the pass ran in"""

    outcomes: list[EntryOutcome] = field(default_factory=list)
    """Outcomes sorted by entry name"""

    collection: Optional[EntryCollection] = None
    """Collection with refreshed hashes and kinds, ready to persist"""

    dry_run: bool = False
    """Whether copies were only planned"""

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def synced(self) -> int:
        return self._count(OutcomeStatus.SYNCED)

    @property
    def planned(self) -> int:
        return self._count(OutcomeStatus.PLANNED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def errors(self) -> int:
        return self._count(OutcomeStatus.ERROR)

    @property
    def has_errors(self) -> bool:
        return self.errors > 0

    def get(self, name: str) -> Optional[EntryOutcome]:
        """Find the outcome for an entry."""
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None

    def to_dict(self) -> dict:
        """Convert report to a dictionary for JSON output."""
        return {
            "mode": self.mode.value,
            "dry_run": self.dry_run,
            "synced": self.synced,
            "planned": self.planned,
            "skipped": self.skipped,
            "errors": self.errors,
            "entries": [outcome.to_dict() for outcome in self.outcomes],
        }
