"""Tests for the TreeCopier class."""

import os
import tempfile
from pathlib import Path

import pytest

from pydotsync.exceptions import EntryIOError, EntryNotFoundError
from pydotsync.sync.copier import TreeCopier
from pydotsync.sync.hasher import hash_dir


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def copier():
    return TreeCopier()


class TestCopyFile:
    """Tests for copying single files."""

    def test_copy_creates_parents(self, copier, temp_dir):
        src = temp_dir / "repo" / "zshrc"
        src.parent.mkdir()
        src.write_text("export EDITOR=nvim")
        dst = temp_dir / "home" / "deep" / "nested" / ".zshrc"

        copied = copier.copy(src, dst)

        assert copied == 1
        assert dst.read_text() == "export EDITOR=nvim"

    def test_copy_overwrites(self, copier, temp_dir):
        src = temp_dir / "src"
        dst = temp_dir / "dst"
        src.write_text("new")
        dst.write_text("old contents")

        copier.copy(src, dst)

        assert dst.read_text() == "new"

    def test_missing_source(self, copier, temp_dir):
        with pytest.raises(EntryNotFoundError):
            copier.copy(temp_dir / "missing", temp_dir / "dst")

    @pytest.mark.skipif(
        hasattr(os, "geteuid") and os.geteuid() == 0,
        reason="root can write read-only directories",
    )
    def test_unwritable_destination(self, copier, temp_dir):
        src = temp_dir / "src"
        src.write_text("x")
        locked = temp_dir / "locked"
        locked.mkdir()
        locked.chmod(0o500)
        try:
            with pytest.raises(EntryIOError):
                copier.copy(src, locked / "dst")
        finally:
            locked.chmod(0o700)


class TestCopyTree:
    """Tests for copying directory trees."""

    def _make_tree(self, root: Path) -> Path:
        (root / "a").mkdir(parents=True)
        (root / "a" / "b.txt").write_text("b")
        (root / "top.txt").write_text("top")
        return root

    def test_preserves_structure(self, copier, temp_dir):
        src = self._make_tree(temp_dir / "src")
        dst = temp_dir / "dst"

        copied = copier.copy(src, dst)

        assert copied == 2
        assert (dst / "a" / "b.txt").read_text() == "b"
        assert (dst / "top.txt").read_text() == "top"
        assert hash_dir(src) == hash_dir(dst)

    def test_excludes_git(self, copier, temp_dir):
        src = self._make_tree(temp_dir / "src")
        (src / ".git" / "refs").mkdir(parents=True)
        (src / ".git" / "HEAD").write_text("ref")
        (src / "a" / ".git").mkdir()
        (src / "a" / ".git" / "config").write_text("[core]")
        dst = temp_dir / "dst"

        copier.copy(src, dst)

        assert not (dst / ".git").exists()
        assert not (dst / "a" / ".git").exists()
        assert (dst / "a" / "b.txt").exists()

    def test_keeps_destination_git(self, copier, temp_dir):
        src = self._make_tree(temp_dir / "src")
        dst = temp_dir / "dst"
        (dst / ".git").mkdir(parents=True)
        (dst / ".git" / "HEAD").write_text("mine")

        copier.copy(src, dst)

        assert (dst / ".git" / "HEAD").read_text() == "mine"
        assert hash_dir(src) == hash_dir(dst)

    def test_overwrites_existing_files(self, copier, temp_dir):
        src = self._make_tree(temp_dir / "src")
        dst = temp_dir / "dst"
        (dst / "a").mkdir(parents=True)
        (dst / "a" / "b.txt").write_text("stale")

        copier.copy(src, dst)

        assert (dst / "a" / "b.txt").read_text() == "b"

    def test_removes_stale_destination_items(self, copier, temp_dir):
        src = self._make_tree(temp_dir / "src")
        dst = temp_dir / "dst"
        (dst / "old" / "deeper").mkdir(parents=True)
        (dst / "old" / "deeper" / "x.txt").write_text("x")
        (dst / "stale.txt").write_text("stale")

        copier.copy(src, dst)

        assert not (dst / "old").exists()
        assert not (dst / "stale.txt").exists()
        assert hash_dir(src) == hash_dir(dst)

    def test_no_prune_keeps_extra_files(self, temp_dir):
        src = self._make_tree(temp_dir / "src")
        dst = temp_dir / "dst"
        dst.mkdir()
        (dst / "extra.txt").write_text("extra")

        TreeCopier(prune=False).copy(src, dst)

        assert (dst / "extra.txt").exists()

    def test_replaces_file_with_directory(self, copier, temp_dir):
        src = self._make_tree(temp_dir / "src")
        dst = temp_dir / "dst"
        dst.mkdir()
        (dst / "a").write_text("was a file")

        copier.copy(src, dst)

        assert (dst / "a" / "b.txt").read_text() == "b"

    def test_copy_is_idempotent(self, copier, temp_dir):
        src = self._make_tree(temp_dir / "src")
        dst = temp_dir / "dst"

        copier.copy(src, dst)
        first = hash_dir(dst)
        copier.copy(src, dst)

        assert hash_dir(dst) == first

    def test_skips_symlinks(self, copier, temp_dir):
        src = self._make_tree(temp_dir / "src")
        os.symlink(src / "top.txt", src / "link.txt")
        dst = temp_dir / "dst"

        copier.copy(src, dst)

        assert not (dst / "link.txt").exists()


class TestRemove:
    """Tests for TreeCopier.remove."""

    def test_remove_tree(self, copier, temp_dir):
        tree = temp_dir / "tree"
        (tree / "sub").mkdir(parents=True)
        (tree / "sub" / "f").write_text("x")

        assert copier.remove(tree) is True
        assert not tree.exists()

    def test_remove_file(self, copier, temp_dir):
        f = temp_dir / "f"
        f.write_text("x")

        assert copier.remove(f) is True
        assert not f.exists()

    def test_remove_missing(self, copier, temp_dir):
        assert copier.remove(temp_dir / "missing") is False
