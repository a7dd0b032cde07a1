"""Unit tests for entries, entry collections and sync modes."""

from pathlib import Path

import pytest

from pydotsync.exceptions import (
    ConfigFormatError,
    DuplicateEntryError,
    RepositoryRootError,
    ValidationError,
)
from pydotsync.models import (
    Entry,
    EntryCollection,
    EntryKind,
    is_valid_entry_name,
    source_path_for,
)
from pydotsync.sync.modes import SyncMode


class TestEntryKind:
    """Tests for EntryKind."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("File", EntryKind.FILE),
            ("file", EntryKind.FILE),
            ("Directory", EntryKind.DIRECTORY),
            ("Dir", EntryKind.DIRECTORY),
        ],
    )
    def test_from_string(self, value, expected):
        assert EntryKind.from_string(value) == expected

    def test_from_string_invalid(self):
        with pytest.raises(ConfigFormatError):
            EntryKind.from_string("Symlink")

    def test_of_path(self, tmp_path):
        f = tmp_path / "f"
        f.write_text("x")

        assert EntryKind.of_path(tmp_path) == EntryKind.DIRECTORY
        assert EntryKind.of_path(f) == EntryKind.FILE
        assert EntryKind.of_path(tmp_path / "missing") is None


class TestEntry:
    """Tests for Entry."""

    def test_to_dict(self):
        entry = Entry("nvim", "~/dots/nvim", "~/.config/nvim", "abc", EntryKind.DIRECTORY)

        assert entry.to_dict() == {
            "name": "nvim",
            "path": "~/.config/nvim",
            "hash": "abc",
            "conf_type": "Directory",
        }

    def test_from_dict_derives_source(self):
        entry = Entry.from_dict({"name": "nvim", "path": "~/.config/nvim"}, "~/dots/")

        assert entry.source_path == "~/dots/nvim"
        assert entry.dest_path == "~/.config/nvim"

    def test_from_dict_not_an_object(self):
        with pytest.raises(ConfigFormatError):
            Entry.from_dict("nvim", "~/dots")

    def test_cleared(self):
        entry = Entry("a", "/r/a", "/a", "abc", EntryKind.FILE)

        cleared = entry.cleared()

        assert cleared.content_hash is None
        assert cleared.kind is None
        assert cleared.dest_path == "/a"
        assert entry.content_hash == "abc"

    def test_source_path_for(self):
        assert source_path_for("/r", "a") == "/r/a"
        assert source_path_for("/r/", "a") == "/r/a"

    @pytest.mark.parametrize("name", ["nvim", ".zshrc", "kitty.conf", "..hidden"])
    def test_valid_entry_names(self, name):
        assert is_valid_entry_name(name)

    @pytest.mark.parametrize("name", ["", "  ", ".", "..", "a/b", "a/../b", "../x"])
    def test_invalid_entry_names(self, name):
        assert not is_valid_entry_name(name)


class TestEntryCollection:
    """Tests for EntryCollection."""

    def test_duplicate_names_rejected(self):
        with pytest.raises(DuplicateEntryError):
            EntryCollection("/r", (Entry("a", "/r/a", "/a"), Entry("a", "/r/a", "/b")))

    def test_merge_replaces_by_name_and_sorts(self):
        collection = EntryCollection(
            "/r", (Entry("b", "/r/b", "/b"), Entry("a", "/r/a", "/a"))
        )

        merged = collection.merge([Entry("b", "/r/b", "/b", "hash")])

        assert merged.names == ["a", "b"]
        assert merged.get("b").content_hash == "hash"
        assert collection.get("b").content_hash is None

    def test_merge_ignores_unknown(self):
        collection = EntryCollection("/r", (Entry("a", "/r/a", "/a"),))

        assert collection.merge([Entry("z", "/r/z", "/z")]).names == ["a"]

    def test_to_dict_sorted(self):
        collection = EntryCollection(
            "/r", (Entry("b", "/r/b", "/b"), Entry("a", "/r/a", "/a"))
        )

        data = collection.to_dict()

        assert data["dotconfigs_path"] == "/r"
        assert [c["name"] for c in data["configs"]] == ["a", "b"]

    def test_from_dict_null_configs(self):
        collection = EntryCollection.from_dict({"dotconfigs_path": "/r", "configs": None})

        assert len(collection) == 0

    def test_validate_root(self, tmp_path):
        EntryCollection(str(tmp_path)).validate_root()

        with pytest.raises(RepositoryRootError):
            EntryCollection(str(tmp_path / "missing")).validate_root()

    def test_validate_source(self, tmp_path):
        collection = EntryCollection(str(tmp_path))

        collection.validate_source(Entry("a", f"{tmp_path}/a", "/a"))
        for name in (".", ".."):
            with pytest.raises(ValidationError):
                collection.validate_source(Entry(name, f"{tmp_path}/{name}", "/a"))

    def test_root_is_path(self):
        collection = EntryCollection("/r")

        assert collection.root == Path("/r")


class TestSyncMode:
    """Tests for SyncMode."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("push", SyncMode.PUSH),
            ("PULL", SyncMode.PULL),
            ("force_push", SyncMode.FORCE_PUSH),
            ("fpull", SyncMode.FORCE_PULL),
            ("U", SyncMode.PUSH),
            ("u", SyncMode.PULL),
            ("f", SyncMode.FORCE_PUSH),
            ("F", SyncMode.FORCE_PULL),
        ],
    )
    def test_from_string(self, value, expected):
        assert SyncMode.from_string(value) == expected

    def test_from_string_invalid(self):
        with pytest.raises(ValueError, match="Invalid sync mode"):
            SyncMode.from_string("two-way")

    def test_direction_properties(self):
        assert SyncMode.PUSH.is_push and not SyncMode.PUSH.is_forced
        assert SyncMode.FORCE_PULL.is_pull and SyncMode.FORCE_PULL.is_forced
        assert SyncMode.PULL.label == "local -> repository"
        assert SyncMode.FORCE_PUSH.label == "repository -> local"
