"""Loading, saving and repairing the persisted entry collection.

The entry file is a JSON document::

    {
      "dotconfigs_path": "~/dotconfigs",
      "configs": [
        {"name": "nvim", "path": "~/.config/nvim", "hash": null, "conf_type": null}
      ]
    }
"""

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

from .exceptions import (
    ConfigFormatError,
    DuplicateEntryError,
    EntryIOError,
    EntryNotFoundError,
    ValidationError,
)
from .models import (
    Entry,
    EntryCollection,
    EntryKind,
    is_valid_entry_name,
    source_path_for,
)
from .utils import expand_path, reroot_home_path

logger = logging.getLogger(__name__)


class EntryStore:
    """Reads and writes the entry file."""

    def __init__(self, path: Union[str, Path]):
        """Initialize entry store.

        Args:
            path: Location of the JSON entry file
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self, check_root: bool = True) -> EntryCollection:
        """Load and validate the entry collection.

        Args:
            check_root: Also require the repository root to be a directory

        Returns:
            EntryCollection in file order

        Raises:
            EntryNotFoundError: If the entry file does not exist
            EntryIOError: If the entry file cannot be read
            ConfigFormatError: If the document is malformed
            DuplicateEntryError: If two entries share a name
            RepositoryRootError: If check_root is set and the root is missing
        """
        if not self.path.exists():
            raise EntryNotFoundError(
                f"Config file does not exist: {self.path}", path=self.path
            )

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFormatError(
                f"Failed to parse {self.path}: {e}", path=self.path
            ) from e
        except OSError as e:
            raise EntryIOError(f"Failed to read {self.path}: {e}", path=self.path) from e

        collection = EntryCollection.from_dict(data)
        logger.debug(f"Loaded {len(collection)} config(s) from {self.path}")

        if check_root:
            collection.validate_root()
        return collection

    def save(self, collection: EntryCollection) -> None:
        """Write the collection, entries sorted by name.

        Raises:
            EntryIOError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(collection.to_dict(), f, indent=2)
                f.write("\n")
        except OSError as e:
            raise EntryIOError(f"Failed to write {self.path}: {e}", path=self.path) from e
        logger.debug(f"Saved {len(collection)} config(s) to {self.path}")

    @staticmethod
    def template() -> dict:
        """Return a new entry document with a placeholder entry."""
        return EntryCollection(
            dotconfigs_path="/* Path to your dotconfigs folder or repository */",
            entries=(
                Entry(
                    name="/* Name of the config */",
                    source_path="",
                    dest_path="/* Path to the config */",
                ),
            ),
        ).to_dict()


@dataclass
class BrokenEntry:
    """An entry that cannot be synced as recorded."""

    entry: Entry
    """The broken entry"""

    reason: str
    """Why the entry is broken"""

    kind_mismatch: bool = False
    """Whether the recorded kind disagrees with the disk"""


def find_broken(collection: EntryCollection) -> list[BrokenEntry]:
    """Find entries whose recorded paths or kind no longer match the disk.

    An entry is broken if neither its repository nor its local path exists,
    or if an existing path is not of the recorded kind.

    Args:
        collection: Entries to check

    Returns:
        Broken entries in collection order
    """
    broken: list[BrokenEntry] = []
    for entry in collection:
        source_exists = entry.source.exists()
        dest_exists = entry.dest.exists()

        if not source_exists and not dest_exists:
            broken.append(
                BrokenEntry(entry, f"Neither {entry.source} nor {entry.dest} exists")
            )
            continue

        if entry.kind is None:
            continue

        for path, exists in ((entry.source, source_exists), (entry.dest, dest_exists)):
            actual = EntryKind.of_path(path) if exists else None
            if exists and actual != entry.kind:
                found = actual.value if actual else "special file"
                broken.append(
                    BrokenEntry(
                        entry,
                        f"Recorded as {entry.kind.value} but {path} is a {found}",
                        kind_mismatch=True,
                    )
                )
                break

    return broken


def fix(collection: EntryCollection) -> EntryCollection:
    """Repair broken entries by re-deriving their paths.

    - the repository path is derived again from dotconfigs_path and name
    - a local path under another user's /home is moved onto the current
      home if that makes it resolve
    - a mismatching recorded kind is dropped together with the hash so the
      next sync infers it again

    Args:
        collection: Entries to repair

    Returns:
        New collection with repaired entries
    """
    repaired: dict[str, Entry] = {}
    for item in find_broken(collection):
        entry = replace(
            item.entry,
            source_path=source_path_for(collection.dotconfigs_path, item.entry.name),
        )

        if not entry.dest.exists():
            rerooted = reroot_home_path(entry.dest_path)
            if rerooted and expand_path(rerooted).exists():
                logger.debug(f"{entry.name}: {entry.dest_path} -> {rerooted}")
                entry = replace(entry, dest_path=rerooted)

        if item.kind_mismatch:
            entry = entry.cleared()

        repaired[entry.name] = entry

    return collection.merge(repaired.values())


def clear_metadata(collection: EntryCollection) -> EntryCollection:
    """Drop the stored hash and kind of every entry."""
    return collection.with_entries(entry.cleared() for entry in collection)


def add_entry(
    collection: EntryCollection,
    name: str,
    path: str,
    kind: Optional[EntryKind] = None,
) -> EntryCollection:
    """Add a new entry.

    Raises:
        ValidationError: If the name is empty, ".", ".." or contains a path
            separator, or the path is empty
        DuplicateEntryError: If an entry with this name exists
    """
    name = name.strip()
    if not is_valid_entry_name(name):
        raise ValidationError(f"Invalid config name: {name!r}")
    if not path.strip():
        raise ValidationError(f"Invalid path for {name!r}")
    if collection.get(name) is not None:
        raise DuplicateEntryError(f"Config {name!r} already exists")

    entry = Entry(
        name=name,
        source_path=source_path_for(collection.dotconfigs_path, name),
        dest_path=path,
        kind=kind,
    )
    return collection.with_entries([*collection.entries, entry])


def remove_entry(collection: EntryCollection, name: str) -> EntryCollection:
    """Remove an entry by name.

    Raises:
        EntryNotFoundError: If no entry has this name
    """
    if collection.get(name) is None:
        raise EntryNotFoundError(f"No config named {name!r}")
    return collection.with_entries(e for e in collection if e.name != name)
