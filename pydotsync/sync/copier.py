"""Copy files and directory trees between the repository and the local system."""

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Union

from ..exceptions import EntryIOError, EntryNotFoundError
from ..utils import VCS_DIR_NAME

logger = logging.getLogger(__name__)


class TreeCopier:
    """Copies a single file or a whole directory tree.

    Existing destination files are overwritten. Destination files that do
    not exist in the source are removed so that both sides hash the same.
    Directories named ``.git`` are never copied and never removed.

    Examples:
        >>> copier = TreeCopier()
        >>> copier.copy(Path("~/dotconfigs/nvim"), Path("~/.config/nvim"))
    """

    def __init__(self, exclude_dir: str = VCS_DIR_NAME, prune: bool = True):
        """Initialize tree copier.

        Args:
            exclude_dir: Directory name that is skipped on both sides
            prune: Whether to delete destination items missing from the source
        """
        self.exclude_dir = exclude_dir
        self.prune = prune

    def copy(self, src: Union[str, Path], dst: Union[str, Path]) -> int:
        """Copy src to dst.

        Args:
            src: Source file or directory
            dst: Destination path

        Returns:
            Number of files written

        Raises:
            EntryNotFoundError: If src does not exist
            EntryIOError: If reading src or writing dst fails. A directory
                copy may be left partially written.
        """
        src = Path(src)
        dst = Path(dst)

        if not src.exists():
            raise EntryNotFoundError(f"Source does not exist: {src}", path=src)

        try:
            if src.is_dir():
                return self._copy_tree(src, dst)
            self._copy_file(src, dst)
            return 1
        except OSError as e:
            raise EntryIOError(f"Failed to copy {src} to {dst}: {e}", path=dst) from e

    def _copy_file(self, src: Path, dst: Path) -> None:
        """Copy a single file, creating parent directories."""
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)
        logger.debug(f"Copied {src} -> {dst}")

    def _copy_tree(self, src: Path, dst: Path) -> int:
        """Copy a directory tree, keeping its relative structure."""
        dst.mkdir(parents=True, exist_ok=True)

        copied = 0
        kept_dirs: set[str] = {""}
        kept_files: set[str] = set()

        for dirpath, dirnames, filenames in os.walk(src, onerror=_raise):
            dirnames[:] = [d for d in dirnames if d != self.exclude_dir]
            current = Path(dirpath)
            relative_dir = current.relative_to(src)
            target_dir = dst / relative_dir
            if target_dir.is_file() or target_dir.is_symlink():
                _remove(target_dir)
            target_dir.mkdir(parents=True, exist_ok=True)

            for name in dirnames:
                kept_dirs.add((relative_dir / name).as_posix())

            for name in filenames:
                item = current / name
                if not stat.S_ISREG(os.lstat(item).st_mode):
                    logger.debug(f"Skipping non-regular file {item}")
                    continue
                target = target_dir / name
                if target.is_dir() and not target.is_symlink():
                    _remove(target)
                shutil.copy2(item, target)
                kept_files.add((relative_dir / name).as_posix())
                copied += 1

        if self.prune:
            self._prune(dst, kept_dirs, kept_files)

        logger.debug(f"Copied {copied} file(s) from {src} to {dst}")
        return copied

    def _prune(self, dst: Path, kept_dirs: set[str], kept_files: set[str]) -> None:
        """Remove destination items that are not part of the source."""
        for dirpath, dirnames, filenames in os.walk(dst, onerror=_raise):
            current = Path(dirpath)
            relative_dir = current.relative_to(dst)

            for name in list(dirnames):
                if name == self.exclude_dir or (current / name).is_symlink():
                    dirnames.remove(name)
                    continue
                relative = (relative_dir / name).as_posix()
                if relative not in kept_dirs:
                    _remove(current / name)
                    dirnames.remove(name)

            for name in filenames:
                relative = (relative_dir / name).as_posix()
                if relative in kept_files:
                    continue
                # Symlinks are not hashed, leave them alone
                item = current / name
                if not stat.S_ISREG(os.lstat(item).st_mode):
                    continue
                _remove(item)

    def remove(self, path: Union[str, Path]) -> bool:
        """Delete a file or directory tree.

        Args:
            path: Path to delete

        Returns:
            True if something was deleted, False if the path did not exist

        Raises:
            EntryIOError: If deletion fails
        """
        path = Path(path)
        if not os.path.lexists(path):
            return False
        try:
            _remove(path)
        except OSError as e:
            raise EntryIOError(f"Failed to remove {path}: {e}", path=path) from e
        return True


def _raise(error: OSError) -> None:
    raise error


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    logger.debug(f"Removed {path}")
