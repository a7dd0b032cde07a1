"""Data models for tracked configuration entries."""

import logging
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional

from .exceptions import (
    ConfigFormatError,
    DuplicateEntryError,
    RepositoryRootError,
    ValidationError,
)
from .utils import expand_path

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Whether a tracked entry is a single file or a directory tree."""

    FILE = "File"
    """A single regular file"""

    DIRECTORY = "Directory"
    """A directory tree"""

    @classmethod
    def from_string(cls, value: str) -> "EntryKind":
        """Parse a kind from its persisted name.

        Args:
            value: "File", "Directory" or the legacy "Dir"

        Returns:
            EntryKind

        Raises:
            ConfigFormatError: If the value is not a known kind

        Examples:
            >>> EntryKind.from_string("Dir")
            <EntryKind.DIRECTORY: 'Directory'>
        """
        aliases = {
            "file": cls.FILE,
            "directory": cls.DIRECTORY,
            "dir": cls.DIRECTORY,
        }
        kind = aliases.get(value.strip().lower()) if isinstance(value, str) else None
        if kind is None:
            raise ConfigFormatError(f"Unknown conf_type: {value!r}")
        return kind

    @classmethod
    def of_path(cls, path: Path) -> Optional["EntryKind"]:
        """Inspect a path on disk.

        Returns:
            FILE or DIRECTORY, or None if the path is something else
        """
        if path.is_dir():
            return cls.DIRECTORY
        if path.is_file():
            return cls.FILE
        return None


@dataclass(frozen=True)
class Entry:
    """One tracked configuration unit."""

    name: str
    """Unique human-readable identifier"""

    source_path: str
    """Path inside the repository tree"""

    dest_path: str
    """Path on the local system, may start with ~"""

    content_hash: Optional[str] = None
    """Hash recorded by the last sync, None if never synced"""

    kind: Optional[EntryKind] = None
    """File or Directory, None until inferred from disk"""

    @property
    def source(self) -> Path:
        """Expanded repository-side path."""
        return expand_path(self.source_path)

    @property
    def dest(self) -> Path:
        """Expanded local-side path."""
        return expand_path(self.dest_path)

    def to_dict(self) -> dict:
        """Convert entry to its persisted form.

        Absent fields are written as None so that round trips keep every key.
        """
        return {
            "name": self.name,
            "path": self.dest_path,
            "hash": self.content_hash,
            "conf_type": self.kind.value if self.kind else None,
        }

    @classmethod
    def from_dict(cls, data: Any, dotconfigs_path: str) -> "Entry":
        """Create an Entry from its persisted form.

        Args:
            data: Dictionary with name, path and optional hash/conf_type
            dotconfigs_path: Repository root used to derive the source path

        Raises:
            ConfigFormatError: If required keys are missing or malformed
        """
        if not isinstance(data, dict):
            raise ConfigFormatError(f"Config entry must be an object, got {data!r}")

        name = data.get("name")
        path = data.get("path")
        if not isinstance(name, str) or not is_valid_entry_name(name):
            raise ConfigFormatError(f"Config entry without a valid name: {data!r}")
        if not isinstance(path, str) or not path.strip():
            raise ConfigFormatError(f"Config entry {name!r} has no valid path")

        content_hash = data.get("hash")
        if content_hash is not None and not isinstance(content_hash, str):
            raise ConfigFormatError(f"Config entry {name!r} has an invalid hash")

        conf_type = data.get("conf_type")
        kind = EntryKind.from_string(conf_type) if conf_type is not None else None

        return cls(
            name=name,
            source_path=source_path_for(dotconfigs_path, name),
            dest_path=path,
            content_hash=content_hash,
            kind=kind,
        )

    def cleared(self) -> "Entry":
        """Return a copy without hash and kind."""
        return replace(self, content_hash=None, kind=None)


def is_valid_entry_name(name: str) -> bool:
    """Check that a name maps to exactly one item directly inside the repository.

    Examples:
        >>> is_valid_entry_name("nvim")
        True
        >>> is_valid_entry_name("..")
        False
    """
    if not isinstance(name, str) or not name.strip():
        return False
    if name in (".", ".."):
        return False
    separators = {"/", os.sep} | ({os.altsep} if os.altsep else set())
    return not any(sep in name for sep in separators)


def source_path_for(dotconfigs_path: str, name: str) -> str:
    """Derive the repository path of an entry.

    Examples:
        >>> source_path_for("~/dotconfigs", "nvim")
        '~/dotconfigs/nvim'
    """
    return f"{dotconfigs_path.rstrip('/')}/{name}"


@dataclass(frozen=True)
class EntryCollection:
    """All tracked entries plus the shared repository root."""

    dotconfigs_path: str
    """Repository root, may start with ~"""

    entries: tuple[Entry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.name in seen:
                raise DuplicateEntryError(f"Duplicate config name: {entry.name!r}")
            seen.add(entry.name)

    @property
    def root(self) -> Path:
        """Expanded repository root."""
        return expand_path(self.dotconfigs_path)

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def get(self, name: str) -> Optional[Entry]:
        """Find an entry by name."""
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def validate_root(self) -> None:
        """Ensure the repository root exists and is a directory.

        Raises:
            RepositoryRootError: If the root is missing or not a directory
        """
        root = self.root
        if not root.exists():
            raise RepositoryRootError(
                f"Repository directory does not exist: {root}", path=root
            )
        if not root.is_dir():
            raise RepositoryRootError(
                f"Repository path is not a directory: {root}", path=root
            )

    def validate_source(self, entry: Entry) -> None:
        """Ensure an entry's repository path lies strictly inside the root.

        Raises:
            ValidationError: If the path is the root itself or outside of it
        """
        root = self.root.resolve()
        source = entry.source.resolve()
        if root not in source.parents:
            raise ValidationError(
                f"{entry.name}: repository path {source} is not inside {root}",
                path=source,
            )

    def with_entries(self, entries: Iterable[Entry]) -> "EntryCollection":
        """Return a new collection with the given entries sorted by name."""
        return EntryCollection(
            dotconfigs_path=self.dotconfigs_path,
            entries=tuple(sorted(entries, key=lambda e: e.name)),
        )

    def merge(self, updated: Iterable[Entry]) -> "EntryCollection":
        """Replace entries by name with updated copies.

        Entries without an update are kept as they are. The result is
        sorted by name so that persisted output does not depend on the
        order in which workers finished.
        """
        by_name = {entry.name: entry for entry in self.entries}
        for entry in updated:
            if entry.name not in by_name:
                logger.debug(f"Ignoring update for unknown entry {entry.name}")
                continue
            by_name[entry.name] = entry
        return self.with_entries(by_name.values())

    def to_dict(self) -> dict:
        """Convert collection to its persisted form."""
        return {
            "dotconfigs_path": self.dotconfigs_path,
            "configs": [
                entry.to_dict()
                for entry in sorted(self.entries, key=lambda e: e.name)
            ],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "EntryCollection":
        """Create a collection from its persisted form.

        Raises:
            ConfigFormatError: If the document shape is invalid
            DuplicateEntryError: If two entries share a name
        """
        if not isinstance(data, dict):
            raise ConfigFormatError("Config document must be an object")

        dotconfigs_path = data.get("dotconfigs_path")
        if not isinstance(dotconfigs_path, str) or not dotconfigs_path.strip():
            raise ConfigFormatError("Config document has no valid dotconfigs_path")

        configs = data.get("configs", [])
        if configs is None:
            configs = []
        if not isinstance(configs, list):
            raise ConfigFormatError("'configs' must be a list")

        entries = tuple(Entry.from_dict(item, dotconfigs_path) for item in configs)
        return cls(dotconfigs_path=dotconfigs_path, entries=entries)
